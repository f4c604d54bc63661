"""
Generate vegetation points for every polygon in a CSV file and write the tab-separated export.

  python scripts/generate_vegetation.py parcels.csv --type 2 --seed 42 --output-dir out/

Parameters default to the built-in profile of --type; --density/--variation/--type-value override it.
Exit code is 1 when any row failed, 2 on bad arguments or unreadable input.
"""
import argparse
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

# backend/scripts -> backend
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vegepoly.config import load_app_settings
from vegepoly.services.batch import BatchRunner
from vegepoly.services.csv_input import read_polygon_rows
from vegepoly.services.export import export_filename, write_export
from vegepoly.services.profiles import TREES, default_params, params_to_config
from vegepoly.services.progress import ProgressSnapshot

logger = logging.getLogger("generate_vegetation")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    p.add_argument("csv_path", type=Path, help="CSV file with one WKT POLYGON per data line")
    p.add_argument("--type", dest="vegetation_type", type=int, default=TREES, help="Vegetation type (1-3 built in)")
    p.add_argument("--density", type=float, default=None, help="Minimum distance between points")
    p.add_argument("--variation", type=float, default=None, help="Max radial jitter distance after sampling")
    p.add_argument("--type-value", type=int, default=None, help="Value written to the 'type' column")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for the export (default: EXPORT_DIR)")
    p.add_argument(
        "--strict-variation",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep jittered points inside the polygon and apart by the minimum distance",
    )
    return p


def _log_progress(snap: ProgressSnapshot) -> None:
    if snap.total_rows and not snap.is_finished:
        logger.debug("Progress %.1f%% (%d/%d)", snap.percentage, snap.current_row, snap.total_rows)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = load_app_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    params = default_params(args.vegetation_type)
    overrides = {
        k: v
        for k, v in (("density", args.density), ("variation", args.variation), ("type_value", args.type_value))
        if v is not None
    }
    params = replace(params, **overrides)
    strict = args.strict_variation if args.strict_variation is not None else settings.strict_variation
    try:
        config = params_to_config(
            params,
            max_seed_attempts=settings.max_seed_attempts,
            max_attempts_per_point=settings.max_attempts_per_point,
            strict_variation=strict,
        )
    except ValueError as exc:
        logger.error("Invalid parameters: %s", exc)
        return 2

    try:
        rows = read_polygon_rows(args.csv_path)
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.csv_path, exc)
        return 2

    seed = args.seed if args.seed is not None else settings.sampler_seed
    runner = BatchRunner(config, rng=random.Random(seed), vegetation_type=params.vegetation_type)
    runner.tracker.subscribe(_log_progress)
    report = runner.run_rows(rows, finish=False)

    output_dir = args.output_dir or settings.export_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        out = write_export(output_dir / export_filename(), report.records)
    except OSError as exc:
        logger.error("Cannot write export to %s: %s", output_dir, exc)
        return 2
    finally:
        runner.tracker.finish()
    logger.info("Wrote %d points to %s", report.points_created, out)
    if report.errors:
        logger.warning("%d error(s) during generation", len(report.errors))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
