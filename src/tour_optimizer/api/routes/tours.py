"""Tour optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.tours import TourRequest, TourResponse
from ...services.tours.service import optimize_tour

router = APIRouter(prefix="/tours", tags=["tours"])

logger = logging.getLogger(__name__)


@router.post("/optimize", response_model=TourResponse, status_code=status.HTTP_200_OK)
def optimize(payload: TourRequest) -> TourResponse:
    try:
        return optimize_tour(payload)
    except (ValueError, LookupError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing tour: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize tour: {str(exc)}",
        ) from exc
