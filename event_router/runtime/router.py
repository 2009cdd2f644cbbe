# =============================================================================
# Router
# =============================================================================
# Holds the bindings of one function and dispatches each Lambda event to
# every binding whose source matches it.
#
#   builder = RouterBuilder()
#
#   @builder.sqs("arn:aws:sqs:us-east-1:123456789012:orders")
#   def process_order(record: QueueRecord) -> None:
#       ...
#
#   router = builder.build()
#   handler = router  # Lambda handler(event, context)
# =============================================================================

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from event_router.runtime.classify import (
    classify_notification,
    classify_queue,
    classify_rule,
    classify_stream,
    detect_event_source,
)
from event_router.runtime.deps import Deps, create_deps
from event_router.runtime.errors import DispatchError
from event_router.runtime.records import SourceKind
from event_router.runtime.strategies import run_concurrent, run_sequential

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Strategy(str, Enum):
    """How a binding runs its handler over the matched records."""
    SINGLE = "single"          # one invocation per event
    CONCURRENT = "concurrent"  # fan out, compensate on partial failure
    SEQUENTIAL = "sequential"  # in order, stop at first failure


@dataclass(frozen=True)
class Binding:
    kind: SourceKind
    identifier: str
    handler: Handler
    strategy: Strategy
    topic: Optional[str] = None

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))

    def describe(self) -> str:
        target = f"{self.identifier}#{self.topic}" if self.topic else self.identifier
        return f"{self.kind.value}:{target} -> {self.name}"


class Router:
    """
    Immutable set of bindings evaluated in registration order.

    Every matching binding runs, even after an earlier one has failed. One
    failure is re-raised unchanged; several are raised together as a
    DispatchError.
    """

    def __init__(self, bindings: Tuple[Binding, ...], deps: Deps):
        self._bindings = tuple(bindings)
        self.deps = deps

    @property
    def bindings(self) -> Tuple[Binding, ...]:
        return self._bindings

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        source = detect_event_source(event)
        logger.info(f"Detected event source: {source}")

        matched: List[str] = []
        errors: List[BaseException] = []

        for binding in self._bindings:
            try:
                if self._run(binding, event):
                    matched.append(binding.describe())
            except Exception as e:
                matched.append(binding.describe())
                logger.error(f"Binding {binding.describe()} failed: {e}")
                errors.append(e)

        logger.info(f"Matched {len(matched)} of {len(self._bindings)} bindings")

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise DispatchError(errors) from errors[0]

        return {"source": source, "matched": len(matched), "bindings": matched}

    def __call__(self, event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        return self.handle(event)

    def _run(self, binding: Binding, event: Dict[str, Any]) -> bool:
        """Run one binding. Returns False when the event is not for it."""
        kind = binding.kind

        if kind in (SourceKind.SCHEDULED_RULE, SourceKind.GENERIC_RULE):
            rule_event = classify_rule(event, binding.identifier)
            if rule_event is None:
                return False
            if kind == SourceKind.SCHEDULED_RULE:
                binding.handler()
            else:
                binding.handler(rule_event.detail)
            return True

        if kind == SourceKind.NOTIFICATION:
            records = classify_notification(event, binding.identifier)
        elif kind in (SourceKind.QUEUE, SourceKind.ORDERED_QUEUE):
            records = classify_queue(event, binding.identifier)
        elif kind == SourceKind.LOG_STREAM:
            records = classify_stream(event, binding.identifier, binding.topic)
        else:
            raise ValueError(f"Unsupported source kind: {kind}")

        if records is None:
            return False

        logger.info(f"Dispatching {len(records)} records to {binding.describe()}")

        compensate = None
        if kind in (SourceKind.QUEUE, SourceKind.ORDERED_QUEUE):
            compensate = self.deps.compensator.for_queue(binding.identifier)

        if binding.strategy == Strategy.CONCURRENT:
            run_concurrent(records, binding.handler, compensate, max_workers=self.deps.max_workers)
        elif binding.strategy == Strategy.SEQUENTIAL:
            label = "SQS FIFO batch failure" if compensate else "Kafka batch failure"
            run_sequential(records, binding.handler, compensate, label=label)
        else:
            for record in records:
                binding.handler(record)
        return True


class RouterBuilder:
    """
    Collects bindings and produces a Router.

    Each registration method takes the handler directly or, when called
    without one, returns a decorator.
    """

    def __init__(self):
        self._bindings: List[Binding] = []

    def _add(self, kind: SourceKind, identifier: str, handler: Optional[Handler],
             strategy: Strategy, topic: Optional[str] = None):
        def decorator(func: Handler) -> Handler:
            binding = Binding(kind=kind, identifier=identifier, handler=func, strategy=strategy, topic=topic)
            if not identifier:
                logger.warning(f"Binding {binding.describe()} has no identifier and will never run")
            self._bindings.append(binding)
            return func

        if handler is None:
            return decorator
        return decorator(handler)

    def sns(self, topic_arn: str, handler: Handler = None):
        """Handle the notification of an SNS topic; handler(NotificationRecord)."""
        return self._add(SourceKind.NOTIFICATION, topic_arn, handler, Strategy.SINGLE)

    def sqs(self, queue_arn: str, handler: Handler = None):
        """Handle a standard queue batch concurrently; handler(QueueRecord)."""
        return self._add(SourceKind.QUEUE, queue_arn, handler, Strategy.CONCURRENT)

    def sqs_fifo(self, queue_arn: str, handler: Handler = None):
        """Handle a FIFO queue batch in order; handler(QueueRecord)."""
        return self._add(SourceKind.ORDERED_QUEUE, queue_arn, handler, Strategy.SEQUENTIAL)

    def kafka(self, source_arn: str, topic: str, handler: Handler = None):
        """Handle records of one topic from an MSK cluster; handler(StreamRecord)."""
        return self._add(SourceKind.LOG_STREAM, source_arn, handler, Strategy.SEQUENTIAL, topic=topic)

    def schedule(self, rule_arn: str, handler: Handler = None):
        """Handle an EventBridge schedule; handler()."""
        return self._add(SourceKind.SCHEDULED_RULE, rule_arn, handler, Strategy.SINGLE)

    def event_rule(self, rule_arn: str, handler: Handler = None):
        """Handle an EventBridge pattern rule; handler(detail)."""
        return self._add(SourceKind.GENERIC_RULE, rule_arn, handler, Strategy.SINGLE)

    def build(self, deps: Deps = None) -> Router:
        return Router(tuple(self._bindings), deps or create_deps())
