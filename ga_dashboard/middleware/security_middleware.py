"""Security middleware: shared-password gate and anti-crawl header."""
import hashlib
import hmac
import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

AUTH_COOKIE = "auth"
LOGIN_PAGE = "/login.html"

# Paths reachable without the auth cookie
OPEN_PATHS = ("/login", LOGIN_PAGE, "/api/login", "/api/health")


def auth_token(password: str) -> str:
    """Cookie value proving the shared password was entered"""
    return hmac.new(password.encode("utf-8"), b"ga-dashboard-auth", hashlib.sha256).hexdigest()


def is_authenticated(request: Request, password: str) -> bool:
    cookie = request.cookies.get(AUTH_COOKIE, "")
    return secrets.compare_digest(cookie.encode("utf-8"), auth_token(password).encode("utf-8"))


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        settings = request.app.state.settings
        path = request.url.path

        # --- Password gate (only when a dashboard password is configured) ---
        if settings.dashboard_password and path not in OPEN_PATHS:
            if not is_authenticated(request, settings.dashboard_password):
                if path.startswith("/api/"):
                    return JSONResponse(status_code=401, content={"error": "Unauthorized"})
                return RedirectResponse(url=LOGIN_PAGE, status_code=302)

        response: Response = await call_next(request)

        # --- Anti-crawl header on every response ---
        response.headers["X-Robots-Tag"] = "noindex, nofollow"
        return response
