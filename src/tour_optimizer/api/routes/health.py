"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_digitransit_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.digitransit.client import check_health as digitransit_health_check
    return digitransit_health_check


@router.get("/health/digitransit", status_code=status.HTTP_200_OK)
def health_digitransit() -> dict:
    """Check Digitransit geocoder reachability."""
    try:
        digitransit_health_check = _get_digitransit_health_check()
        status_flag = digitransit_health_check()
        return {"service": "digitransit", "healthy": status_flag}
    except Exception as e:
        return {"service": "digitransit", "healthy": False, "error": str(e)}
