# =============================================================================
# Runtime Package - Event Routing Core
# =============================================================================
# Classifies Lambda events (SNS, SQS, SQS FIFO, MSK, EventBridge), runs the
# bound handlers and reconciles partial batch failures with the source queue.
# =============================================================================

from event_router.runtime.records import (
    EventSource,
    NotificationRecord,
    QueueRecord,
    RuleEvent,
    SourceKind,
    StreamRecord,
)
from event_router.runtime.classify import detect_event_source
from event_router.runtime.errors import BatchFailure, CompensationError, DispatchError, RouterError
from event_router.runtime.strategies import BatchOutcome, run_concurrent, run_sequential
from event_router.runtime.compensation import SqsCompensator, parse_queue_arn
from event_router.runtime.deps import Deps, create_deps
from event_router.runtime.router import Binding, Router, RouterBuilder, Strategy

__all__ = [
    "EventSource",
    "SourceKind",
    "NotificationRecord",
    "QueueRecord",
    "StreamRecord",
    "RuleEvent",
    "detect_event_source",
    "RouterError",
    "BatchFailure",
    "CompensationError",
    "DispatchError",
    "BatchOutcome",
    "run_concurrent",
    "run_sequential",
    "SqsCompensator",
    "parse_queue_arn",
    "Deps",
    "create_deps",
    "Binding",
    "Router",
    "RouterBuilder",
    "Strategy",
]
