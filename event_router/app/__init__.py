# =============================================================================
# Application Entry Points
# =============================================================================
# Thin adapter between the Lambda runtime and a built Router.
# =============================================================================

from event_router.app.handler import configure_logging, create_handler

__all__ = [
    "configure_logging",
    "create_handler",
]
