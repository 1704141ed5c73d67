"""Prompts spoken during the call flow."""

GREETING_PROMPT = "We are connecting you to an agent."
TRANSFER_FAILED_PROMPT = "Seems we can't connect you right now."
