"""Command line entry point: load waypoints, load or fetch itineraries, search."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

import httpx

from .config import settings
from .persistence.filesystem import FileStorage
from .services.itineraries.service import load_or_build_cost_matrix
from .services.outputs.tour_formatter import tour_result_to_csv, tour_result_to_json, tour_result_to_text
from .services.search.evaluator import CostModel
from .services.search.service import find_best_tour

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tour-optimizer",
        description="Find the visiting order of a few waypoints with the least total transit time.",
    )
    parser.add_argument("--addresses", help="JSON array of waypoint names (default: %(default)s)",
                        default=str(settings.addresses_file))
    parser.add_argument("--itineraries", help="Cost matrix cache file (default: %(default)s)",
                        default=str(settings.itineraries_file))
    parser.add_argument("--refresh", action="store_true", help="Fetch itineraries even if the cache exists")
    parser.add_argument("--workers", type=int, default=None, help="Search worker threads")
    parser.add_argument("--cost-model", choices=[model.value for model in CostModel], default=settings.cost_model)
    parser.add_argument("--progress-interval", type=int, default=settings.progress_interval)
    parser.add_argument("--no-worst", action="store_true", help="Do not track the longest ordering")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print the result as JSON")
    output.add_argument("--csv", action="store_true", help="Print the legs of the best tour as CSV")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        storage = FileStorage()
        names = storage.load_waypoint_names(args.addresses)
        cost_matrix = load_or_build_cost_matrix(
            names,
            storage,
            refresh=args.refresh,
            cache_path=args.itineraries,
        )
        result = find_best_tour(
            names,
            cost_matrix,
            cost_model=args.cost_model,
            max_workers=args.workers,
            progress_interval=args.progress_interval,
            track_worst=not args.no_worst,
        )
    except (ValueError, LookupError, ConnectionError, OSError, httpx.HTTPError) as exc:
        logger.error(f"Tour optimization failed: {exc}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    if args.json:
        print(json.dumps(tour_result_to_json(result), indent=2, ensure_ascii=False))
    elif args.csv:
        sys.stdout.write(tour_result_to_csv(result))
    else:
        print(tour_result_to_text(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
