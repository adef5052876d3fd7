"""Monitoring routes: liveness banner & health check."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from quote_proxy.schemas import HealthCheck

router = APIRouter(tags=["monitoring"])

BANNER = "Quote proxy is running."


@router.get("/", response_class=PlainTextResponse)
async def banner():
    """Public liveness banner (no signature required)."""
    return BANNER


@router.get("/health", response_model=HealthCheck)
async def health_check():
    return HealthCheck(status="ok")
