"""Main FastAPI application."""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from callflow.core.config import settings
from callflow.core.logging import setup_logging
from callflow.api import calls, health
from callflow.api.webhooks import callbacks
from callflow.services.telephony.commands import create_call_automation_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    app.state.call_automation_client = create_call_automation_client(settings)
    yield
    # Shutdown
    await app.state.call_automation_client.close()


app = FastAPI(
    title="Call Flow",
    description="Outbound call, greeting and transfer to a human agent",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(calls.router, tags=["calls"])
app.include_router(callbacks.router, tags=["callbacks"])


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
