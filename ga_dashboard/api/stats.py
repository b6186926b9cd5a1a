"""
Dashboard stats API
"""
import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ga_dashboard.services.dashboard_service import DashboardService
from ga_dashboard.services.partner_report_service import PartnerReportService
from ga_dashboard.utils.logger import log

router = APIRouter(prefix="/api", tags=["stats"])

STATS_CACHE_KEY = "stats"


def _client_unavailable(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Analytics client not initialized",
            "credentialsError": request.app.state.credentials_error,
        },
    )


@router.get("/stats")
async def get_stats(request: Request):
    """All configured properties, grouped as on the dashboard"""
    state = request.app.state
    if state.query_client is None:
        return _client_unavailable(request)

    cached = state.response_cache.get(STATS_CACHE_KEY)
    if cached is not None:
        return cached

    try:
        service = DashboardService(state.stats_service, state.registry)
        results = await service.fetch_dashboard()
    except Exception as e:
        log.error(f"Failed to build dashboard stats: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    state.response_cache.set(STATS_CACHE_KEY, results, ttl=state.settings.stats_cache_ttl)
    return results


@router.get("/partner")
async def get_partner_report(request: Request):
    """Traffic referred by the configured partner source"""
    state = request.app.state
    if state.query_client is None:
        return _client_unavailable(request)

    settings = state.settings
    try:
        property_id = state.registry.resolve_property_id(settings.partner_property)
        service = PartnerReportService(state.query_client)
        report = await asyncio.to_thread(
            service.build_report,
            property_id,
            settings.partner_source,
            settings.partner_name,
            settings.partner_website,
        )
    except Exception as e:
        log.error(f"Failed to build partner report: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return report.to_dict()
