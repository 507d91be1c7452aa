"""Serializers for tour search results."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import SolutionSnapshot, TourResult


def solution_to_json(solution: SolutionSnapshot | None) -> dict | None:
    if solution is None:
        return None
    metrics = solution.metrics
    return {
        "ordering": list(solution.ordering),
        "comparison_metric": metrics.comparison_metric,
        "path_duration": metrics.path_duration,
        "path_distance": metrics.path_distance,
        "walk_distance": metrics.walk_distance,
        "start_duration": metrics.start_duration,
        "end_duration": metrics.end_duration,
        "boundary_duration": metrics.boundary_duration,
        "itineraries": [
            {
                "origin": origin,
                "destination": destination,
                "duration": itinerary.duration,
                "walk_distance": itinerary.walk_distance,
                "legs": [asdict(leg) for leg in itinerary.legs],
            }
            for origin, destination, itinerary in zip(
                solution.ordering, solution.ordering[1:], solution.itineraries
            )
        ],
    }


def tour_result_to_json(result: TourResult) -> dict:
    return {
        "cost_model": result.cost_model,
        "evaluated": result.evaluated,
        "total": result.total,
        "elapsed_seconds": result.elapsed_seconds,
        "cancelled": result.cancelled,
        "metadata": result.metadata,
        "best": solution_to_json(result.best),
        "worst": solution_to_json(result.worst),
    }


def _describe(label: str, solution: SolutionSnapshot) -> list[str]:
    metrics = solution.metrics
    lines = [
        f"{label} duration: {metrics.path_duration / 60.0:.0f} min",
        f"{label} duration with start/end: {metrics.comparison_metric / 60.0:.0f} min",
        f"{label} distance: {metrics.path_distance / 1000.0:.1f} km",
        f"{label} walk distance: {metrics.walk_distance / 1000.0:.1f} km",
        f"{label} order: {' -> '.join(solution.ordering)}",
    ]
    for origin, destination, itinerary in zip(solution.ordering, solution.ordering[1:], solution.itineraries):
        legs = ", ".join(
            f"{leg.mode}{' ' + leg.trip if leg.trip else ''} ({leg.duration / 60.0:.0f} min)"
            for leg in itinerary.legs
        )
        lines.append(f"  {origin} -> {destination}: {itinerary.duration / 60.0:.0f} min [{legs}]")
    return lines


def tour_result_to_text(result: TourResult) -> str:
    lines = [f"Evaluated {result.evaluated} of {result.total} orderings ({result.cost_model} cost model)"]
    if result.cancelled:
        lines.append("Search was cancelled before every ordering was evaluated.")
    if result.best is not None:
        lines.extend(_describe("Shortest", result.best))
    if result.worst is not None:
        lines.extend(_describe("Longest", result.worst))
    return "\n".join(lines)


def tour_result_to_csv(result: TourResult) -> str:
    """One row per leg of the best tour."""
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "origin",
        "destination",
        "itinerary_duration",
        "walk_distance",
        "mode",
        "trip",
        "leg_duration",
        "leg_distance",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    if result.best is None:
        return buffer.getvalue()
    solution = result.best
    pairs = zip(solution.ordering, solution.ordering[1:], solution.itineraries)
    for sequence, (origin, destination, itinerary) in enumerate(pairs, start=1):
        for leg in itinerary.legs:
            writer.writerow(
                {
                    "sequence": sequence,
                    "origin": origin,
                    "destination": destination,
                    "itinerary_duration": itinerary.duration,
                    "walk_distance": itinerary.walk_distance,
                    "mode": leg.mode,
                    "trip": leg.trip or "",
                    "leg_duration": leg.duration,
                    "leg_distance": leg.distance,
                }
            )
    return buffer.getvalue()
