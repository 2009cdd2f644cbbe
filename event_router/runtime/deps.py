# =============================================================================
# Dependency Container
# =============================================================================
# Environment configuration and lazily created AWS collaborators for the
# router. Tests build their own Deps with fake clients.
# =============================================================================

import logging
import os
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Optional

from event_router.runtime.compensation import ClientFactory, SqsCompensator
from event_router.runtime.strategies import DEFAULT_MAX_WORKERS

logger = logging.getLogger(__name__)


def _get_env_int(key: str, default: int) -> int:
    raw = os.environ.get(key, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        logger.warning(f"Ignoring invalid {key}={raw!r}, using {default}")
        return default


@dataclass
class Deps:
    """
    Dependency container handed to the router.

    Usage:
        deps = create_deps()
        deps.compensator.compensate(queue_arn, entries)
    """
    max_workers: int = field(default_factory=lambda: _get_env_int("ROUTER_MAX_WORKERS", DEFAULT_MAX_WORKERS))
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper())
    client_factory: Optional[ClientFactory] = field(default=None, repr=False)

    @cached_property
    def compensator(self) -> SqsCompensator:
        """SQS compensation client."""
        return SqsCompensator(client_factory=self.client_factory)

    @cached_property
    def config(self) -> Dict[str, Any]:
        return {
            "ROUTER_MAX_WORKERS": self.max_workers,
            "LOG_LEVEL": self.log_level,
        }


def create_deps(client_factory: Optional[ClientFactory] = None) -> Deps:
    """
    Create a new Deps instance.

    SQS clients take their region from each queue ARN, so no region is
    configured here.
    """
    return Deps(client_factory=client_factory)
