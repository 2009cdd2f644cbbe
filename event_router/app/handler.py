# =============================================================================
# Lambda Handler
# =============================================================================
# Entry point exposed to the Lambda runtime. Errors from the router are not
# caught here: raising is what tells the platform to retry the event.
# =============================================================================

import logging
from typing import Any, Callable, Dict

from event_router.runtime.router import Router

logger = logging.getLogger(__name__)

LambdaHandler = Callable[[Dict[str, Any], Any], Dict[str, Any]]


def configure_logging(level: str = "INFO") -> None:
    """
    Set the root log level.

    The Lambda runtime installs its own handler on the root logger; a
    stream handler is only added when running elsewhere.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def create_handler(router: Router) -> LambdaHandler:
    """
    Wrap a router as ``lambda_handler(event, context)``.

    Usage:
        router = builder.build()
        lambda_handler = create_handler(router)
    """
    configure_logging(router.deps.log_level)
    logger.info(f"Router ready with {len(router.bindings)} bindings, config={router.deps.config}")

    def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
        keys = list(event.keys()) if isinstance(event, dict) else type(event).__name__
        request_id = getattr(context, "aws_request_id", "")
        logger.info(f"LAMBDA_HANDLER requestId={request_id} event keys: {keys}")

        result = router.handle(event)
        return {
            "statusCode": 200,
            **result,
        }

    return lambda_handler
