"""Phase transition logic for the call workflow."""
import logging
from typing import Optional

from callflow.services.telephony.events import CallEventType
from callflow.services.workflow.phases import OperationContext, WorkflowPhase

logger = logging.getLogger(__name__)

# (event type, operation context) -> next phase. A context of None matches
# events that carry no meaningful context.
_TRANSITIONS = {
    (CallEventType.CALL_CONNECTED, None): WorkflowPhase.GREETING,
    (CallEventType.PLAY_COMPLETED, OperationContext.GREETING): WorkflowPhase.TRANSFERRING,
    (CallEventType.PLAY_COMPLETED, OperationContext.TRANSFER_FAILED): WorkflowPhase.TERMINATED,
    (CallEventType.CALL_TRANSFER_ACCEPTED, None): WorkflowPhase.TRANSFERRED,
    (CallEventType.CALL_TRANSFER_FAILED, None): WorkflowPhase.TRANSFER_FAILED_PROMPT,
    (CallEventType.CALL_DISCONNECTED, None): WorkflowPhase.TERMINATED,
}

# Phases each transition is expected to start from. Anything else is still
# acted on, but logged as out of order.
_EXPECTED_FROM = {
    WorkflowPhase.GREETING: {WorkflowPhase.CONNECTING},
    WorkflowPhase.TRANSFERRING: {WorkflowPhase.GREETING},
    WorkflowPhase.TRANSFERRED: {WorkflowPhase.TRANSFERRING},
    WorkflowPhase.TRANSFER_FAILED_PROMPT: {WorkflowPhase.TRANSFERRING},
}


def next_phase(
    current: WorkflowPhase,
    event_type: Optional[CallEventType],
    context: Optional[OperationContext] = None,
) -> WorkflowPhase:
    """
    Compute the phase that follows an inbound event.

    Only PlayCompleted is keyed on the operation context; the other events
    ignore it. Unrecognized events and unknown PlayCompleted contexts leave
    the phase unchanged.
    """
    if event_type is None:
        return current
    key_context = context if event_type == CallEventType.PLAY_COMPLETED else None
    target = _TRANSITIONS.get((event_type, key_context))
    if target is None:
        return current
    return target


def is_expected_transition(current: WorkflowPhase, target: WorkflowPhase) -> bool:
    """Whether moving from current to target follows the normal flow."""
    if target == WorkflowPhase.TERMINATED:
        return True
    return current in _EXPECTED_FROM.get(target, set())


def log_transition(current: WorkflowPhase, target: WorkflowPhase) -> None:
    if current == target:
        return
    if not is_expected_transition(current, target):
        logger.warning(
            f"[PHASE TRANSITION] Out of order transition: {current.value} -> {target.value}"
        )
    else:
        logger.info(f"[PHASE TRANSITION] Phase changed: {current.value} -> {target.value}")
