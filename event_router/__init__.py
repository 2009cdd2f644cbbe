from event_router.runtime import (
    BatchFailure,
    CompensationError,
    DispatchError,
    NotificationRecord,
    QueueRecord,
    Router,
    RouterBuilder,
    RouterError,
    RuleEvent,
    StreamRecord,
)
from event_router.app import create_handler

__version__ = "1.0.0"

__all__ = [
    "RouterBuilder",
    "Router",
    "create_handler",
    "NotificationRecord",
    "QueueRecord",
    "StreamRecord",
    "RuleEvent",
    "RouterError",
    "BatchFailure",
    "CompensationError",
    "DispatchError",
]
