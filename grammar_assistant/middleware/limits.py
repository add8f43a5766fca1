from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from grammar_assistant.core.config import MAX_TEXT_BYTES


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects request bodies larger than ``max_bytes`` by Content-Length."""

    def __init__(self, app, max_bytes: int = MAX_TEXT_BYTES):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        try:
            if cl is not None and int(cl) > self.max_bytes:
                return JSONResponse({"detail": "Text too large"}, status_code=413)
        except ValueError:
            return JSONResponse({"detail": "Bad Content-Length"}, status_code=400)
        return await call_next(request)
