"""Itinerary schemas shared by the Digitransit client, the matrix cache and the API.

Field names follow the Digitransit GraphQL payload (``walkDistance``,
``trip.route.shortName``) so the persisted cost matrix can be fed straight
back into the search.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import CostMatrix, Itinerary, Leg


class RouteModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    short_name: Optional[str] = Field(default=None, alias="shortName")


class TripModel(BaseModel):
    route: RouteModel


class LegModel(BaseModel):
    mode: str
    duration: float = Field(..., ge=0)
    distance: float = Field(..., ge=0)
    trip: Optional[TripModel] = None


class ItineraryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    legs: List[LegModel] = Field(default_factory=list)
    duration: float = Field(..., ge=0)
    walk_distance: float = Field(default=0.0, ge=0, alias="walkDistance")

    def to_domain(self) -> Itinerary:
        return Itinerary(
            legs=tuple(
                Leg(
                    mode=leg.mode,
                    duration=leg.duration,
                    distance=leg.distance,
                    trip=leg.trip.route.short_name if leg.trip else None,
                )
                for leg in self.legs
            ),
            duration=self.duration,
            walk_distance=self.walk_distance,
        )

    @classmethod
    def from_domain(cls, itinerary: Itinerary) -> "ItineraryModel":
        return cls(
            legs=[
                LegModel(
                    mode=leg.mode,
                    duration=leg.duration,
                    distance=leg.distance,
                    trip=TripModel(route=RouteModel(short_name=leg.trip)) if leg.trip is not None else None,
                )
                for leg in itinerary.legs
            ],
            duration=itinerary.duration,
            walk_distance=itinerary.walk_distance,
        )


CostMatrixPayload = Dict[str, Dict[str, ItineraryModel]]


def cost_matrix_from_payload(payload: Dict[str, Dict[str, Any]]) -> CostMatrix:
    """Parse a nested ``origin -> destination -> itinerary`` mapping."""
    if not isinstance(payload, dict):
        raise ValueError("Cost matrix payload must be an object keyed by origin waypoint.")
    matrix: CostMatrix = {}
    for origin, row in payload.items():
        if not isinstance(row, dict):
            raise ValueError(f"Cost matrix row for '{origin}' must be an object keyed by destination.")
        matrix[origin] = {
            destination: (
                value.to_domain()
                if isinstance(value, ItineraryModel)
                else ItineraryModel.model_validate(value).to_domain()
            )
            for destination, value in row.items()
        }
    return matrix


def cost_matrix_to_payload(matrix: CostMatrix) -> Dict[str, Dict[str, Any]]:
    return {
        origin: {
            destination: ItineraryModel.from_domain(itinerary).model_dump(by_alias=True)
            for destination, itinerary in row.items()
        }
        for origin, row in matrix.items()
    }
