"""Tour search request/response schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..services.search.evaluator import CostModel
from .itineraries import ItineraryModel


class TourRequest(BaseModel):
    waypoints: List[str] = Field(..., min_length=1, description="Waypoint names to visit.")
    itineraries: Optional[Dict[str, Dict[str, ItineraryModel]]] = Field(
        default=None,
        description="Cost matrix keyed by origin then destination. Loaded from the cache or fetched when omitted.",
    )
    cost_model: Optional[CostModel] = Field(default=None, description="Defaults to the configured cost model.")
    max_workers: Optional[int] = Field(default=None, ge=1, le=64)
    include_worst: bool = True


class TourLegModel(BaseModel):
    mode: str
    duration: float
    distance: float
    trip: Optional[str] = None


class TourStepModel(BaseModel):
    origin: str
    destination: str
    duration: float
    walk_distance: float
    legs: List[TourLegModel]


class TourSolutionModel(BaseModel):
    ordering: List[str]
    comparison_metric: float
    path_duration: float
    path_distance: float
    walk_distance: float
    start_duration: float
    end_duration: float
    boundary_duration: float
    itineraries: List[TourStepModel]


class TourResponse(BaseModel):
    cost_model: CostModel
    evaluated: int
    total: int
    elapsed_seconds: float
    cancelled: bool
    metadata: dict
    best: Optional[TourSolutionModel]
    worst: Optional[TourSolutionModel] = None
