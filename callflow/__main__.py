"""Run the service with ``python -m callflow``."""
from callflow.main import run

if __name__ == "__main__":
    run()
