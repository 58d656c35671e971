"""Security headers for API responses."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# The API serves JSON and redirects only, so nothing may be framed or
# loaded from it.
DEFAULT_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Permissions-Policy": "camera=(), geolocation=(), microphone=(), payment=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to every response.

    Strict-Transport-Security is only sent when enable_hsts is set, which
    should be the case whenever the service sits behind HTTPS.
    """

    def __init__(
        self,
        app: object,
        enable_hsts: bool = False,
        hsts_max_age: int = 31536000,  # 1 year
    ) -> None:
        super().__init__(app)
        self.headers = dict(DEFAULT_SECURITY_HEADERS)
        if enable_hsts:
            self.headers["Strict-Transport-Security"] = (
                f"max-age={hsts_max_age}; includeSubDomains"
            )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
