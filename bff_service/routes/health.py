"""
Aggregated health route for the gateway
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Probe every health-checked backend and report the combined state"""
    report = await request.app.state.health_aggregator.check()
    return JSONResponse(status_code=report.http_status, content=report.to_payload())
