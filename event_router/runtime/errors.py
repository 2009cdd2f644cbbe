# =============================================================================
# Router Errors
# =============================================================================
# Raising any of these from the Lambda handler makes the platform retry the
# event. Which records get redelivered depends on what was compensated.
# =============================================================================

from typing import Any, Dict, List, Sequence


class RouterError(Exception):
    """Base class for errors raised by the router."""


class BatchFailure(RouterError):
    """One or more records of a batch were not processed."""

    def __init__(self, label: str, failed: int, total: int, errors: Sequence[BaseException] = ()):
        self.label = label
        self.failed = failed
        self.total = total
        self.errors: List[BaseException] = list(errors)
        super().__init__(f"{label}: {failed} of {total} failed")

    @property
    def succeeded(self) -> int:
        return self.total - self.failed


class CompensationError(RouterError):
    """Deleting processed messages from the source queue failed."""

    def __init__(self, queue_arn: str, message: str, failed: List[Dict[str, Any]] = None):
        self.queue_arn = queue_arn
        self.failed = failed or []
        super().__init__(f"Compensation failed for {queue_arn}: {message}")


class DispatchError(RouterError):
    """Several bindings failed for the same event."""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors: List[BaseException] = list(errors)
        summary = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} bindings failed: {summary}")
