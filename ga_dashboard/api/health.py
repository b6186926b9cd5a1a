"""
Health check endpoint
"""
from fastapi import APIRouter, Request

from ga_dashboard import __version__

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint (open even when the password gate is on)"""
    state = request.app.state
    return {
        "status": "ok",
        "hasCredentials": state.query_client is not None,
        "credentialsError": state.credentials_error,
        "version": __version__,
    }
