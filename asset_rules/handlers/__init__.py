from .context import EventOutcome, HandlerContext, HandlerResult, RecordEvent
from .dispatch import POST_OPERATION, PRE_OPERATION, process_event

__all__ = [
    "EventOutcome",
    "HandlerContext",
    "HandlerResult",
    "RecordEvent",
    "POST_OPERATION",
    "PRE_OPERATION",
    "process_event",
]
