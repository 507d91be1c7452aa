"""Tour optimization orchestration for the API."""

from __future__ import annotations

import logging

from ...models.domain import CostMatrix
from ...persistence.filesystem import FileStorage
from ...schemas.itineraries import cost_matrix_from_payload
from ...schemas.tours import TourRequest, TourResponse
from ..digitransit.client import DigitransitClient
from ..itineraries.service import load_or_build_cost_matrix
from ..outputs.tour_formatter import tour_result_to_json
from ..search.service import find_best_tour

logger = logging.getLogger(__name__)


def _resolve_cost_matrix(payload: TourRequest, waypoints: list[str]) -> CostMatrix:
    if payload.itineraries is not None:
        return cost_matrix_from_payload(payload.itineraries)
    return load_or_build_cost_matrix(waypoints, FileStorage(), DigitransitClient)


def optimize_tour(payload: TourRequest) -> TourResponse:
    waypoints = [name.strip() for name in payload.waypoints]
    cost_matrix = _resolve_cost_matrix(payload, waypoints)
    logger.info(f"Optimizing tour over {len(waypoints)} waypoints")
    result = find_best_tour(
        waypoints,
        cost_matrix,
        cost_model=payload.cost_model,
        max_workers=payload.max_workers,
        track_worst=payload.include_worst,
    )
    return TourResponse.model_validate(tour_result_to_json(result))
