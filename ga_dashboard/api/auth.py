"""Login API for the shared-password gate."""
import secrets

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ga_dashboard.middleware.security_middleware import AUTH_COOKIE, auth_token
from ga_dashboard.utils.logger import log

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    password: str


@router.post("/login")
async def login(body: LoginRequest, request: Request):
    settings = request.app.state.settings
    password = settings.dashboard_password

    if not password:
        return JSONResponse(status_code=404, content={"error": "Login is not enabled"})

    if not secrets.compare_digest(body.password.encode("utf-8"), password.encode("utf-8")):
        log.warning("Dashboard login rejected")
        return JSONResponse(status_code=401, content={"error": "Invalid password"})

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        key=AUTH_COOKIE,
        value=auth_token(password),
        max_age=settings.auth_cookie_max_age,
        path="/",
        httponly=True,
        samesite="strict",
    )
    return response
