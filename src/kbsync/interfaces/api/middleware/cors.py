"""CORS middleware - adds Access-Control-Allow-Origin headers."""

import falcon.asgi


class CORSMiddleware:
    """Adds CORS headers for the admin and QA frontends; answers OPTIONS preflight."""

    ALLOW_METHODS = "GET, POST, DELETE, OPTIONS"
    ALLOW_HEADERS = "Authorization, Content-Type, X-Request-ID"

    def __init__(self, origins: list[str]) -> None:
        self._origins = origins

    def _set_cors_headers(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not self._origins:
            return
        origin = req.get_header("Origin")
        allowed = origin if origin in self._origins or "*" in self._origins else None
        if not allowed:
            return
        resp.set_header("Access-Control-Allow-Origin", allowed)
        resp.set_header("Vary", "Origin")
        resp.set_header("Access-Control-Allow-Methods", self.ALLOW_METHODS)
        resp.set_header("Access-Control-Allow-Headers", self.ALLOW_HEADERS)
        resp.set_header("Access-Control-Expose-Headers", "X-Request-ID")
        resp.set_header("Access-Control-Max-Age", "86400")

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Short-circuit OPTIONS preflight."""
        if req.method == "OPTIONS":
            self._set_cors_headers(req, resp)
            resp.status = falcon.HTTP_204
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        self._set_cors_headers(req, resp)
