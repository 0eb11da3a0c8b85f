"""Request ID middleware: binds X-Request-ID into the logging context."""

import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cashledger.core.logging import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)


class RequestIDMiddleware:
    """
    Bind a request ID for the lifetime of each HTTP request.

    An incoming X-Request-ID header is reused, otherwise a UUID is generated.
    The ID is echoed back on the response.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode() or str(uuid.uuid4())
        set_request_id(request_id)
        logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (b"x-request-id", request_id.encode()),
                ]
                logger.info("request.complete", status_code=message.get("status"))
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            clear_request_id()
