"""File-based persistence for waypoint lists and the itinerary cost matrix."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import settings
from ..models.domain import CostMatrix
from ..schemas.itineraries import cost_matrix_from_payload, cost_matrix_to_payload

logger = logging.getLogger(__name__)


class FileStorage:
    """Thin wrapper around the data root for reading and writing JSON files."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()

    def resolve(self, path: Path | str) -> Path:
        path = Path(path).expanduser()
        return path if path.is_absolute() else self.root / path

    def read_json(self, path: Path | str) -> Any:
        with self.resolve(path).open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_json(self, path: Path | str, data: Any, *, indent: int = 2) -> Path:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        return target

    def load_waypoint_names(self, path: Path | str | None = None) -> list[str]:
        """Load the JSON array of waypoint names."""
        source = self.resolve(path or settings.addresses_file)
        data = self.read_json(source)
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise ValueError(f"{source} must contain a JSON array of waypoint names.")
        return [item.strip() for item in data]

    def load_cost_matrix(self, path: Path | str | None = None) -> CostMatrix | None:
        """Return the persisted cost matrix, or None when no cache file exists."""
        source = self.resolve(path or settings.itineraries_file)
        if not source.exists():
            return None
        logger.info(f"Found {source.name}, skipping itinerary fetch")
        return cost_matrix_from_payload(self.read_json(source))

    def save_cost_matrix(self, matrix: CostMatrix, path: Path | str | None = None) -> Path:
        target = self.write_json(path or settings.itineraries_file, cost_matrix_to_payload(matrix))
        logger.info(f"Wrote {target}")
        return target
