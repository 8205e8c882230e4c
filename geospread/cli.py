from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import Settings
from .constants import DEFAULT_OUTPUT_PATH
from .errors import MalformedTabularResource
from .io import group_inputs, load_photo_resources, resolve_input_paths
from .models import Marker
from .predict import shift_distance_km
from .render import FoliumRenderer
from .session import MarkerSession
from .time_utils import format_timespan, isoformat_local, parse_date_string


def parse_args(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> argparse.Namespace:
    settings = settings or Settings()
    palette = list(settings.palette)
    parser = argparse.ArgumentParser(
        description="Plot geotagged photos and CSV points on a map and predict their spread."
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help="Photos (EXIF GPS) and .csv files with lat,lng[,timestamp,name,color] columns, imported in order.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help=f"HTML path for the generated map (default: {DEFAULT_OUTPUT_PATH.name}).",
    )
    parser.add_argument(
        "-c",
        "--upload-color",
        choices=palette,
        default=settings.default_upload_color,
        help="Category assigned to imported markers that do not name one (default: %(default)s).",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Only display markers from this UTC date (YYYY-MM-DD or YYYYMMDD).",
    )
    parser.add_argument(
        "--colors",
        nargs="+",
        choices=palette,
        default=None,
        help="Only display markers of these categories (default: all).",
    )
    parser.add_argument(
        "--predict",
        action="store_true",
        help="Draw the centroid shift prediction ray for the displayed markers.",
    )
    parser.add_argument(
        "--min-for-predict",
        type=int,
        default=None,
        help=f"Minimum displayed markers needed for a prediction (default: {settings.min_for_predict}).",
    )
    parser.add_argument(
        "--arrow-factor",
        type=float,
        default=None,
        help=f"Length multiplier for the prediction ray (default: {settings.arrow_factor:g}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details of each pipeline step.",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def summarise_markers(label: str, markers: Sequence[Marker]) -> None:
    print(f"{label}: {len(markers)}")
    if not markers:
        return
    times = sorted(marker.time for marker in markers)
    span = times[-1] - times[0]
    print(f"  from {isoformat_local(times[0])} to {isoformat_local(times[-1])} ({format_timespan(span)})")


def import_inputs(session: MarkerSession, paths: Sequence[Path]) -> None:
    for kind, group in group_inputs(paths):
        if kind == "table":
            path = group[0]
            try:
                result = session.import_table(path)
            except MalformedTabularResource as exc:
                print(f"CSV parse error: {exc}")
                continue
            print(f"Imported {len(result.markers)} marker(s) from {path.name}.")
            for rejected in result.rejected:
                print(f"  skipped {rejected}")
            continue

        result = session.import_photos(load_photo_resources(group))
        print(f"Imported {len(result.markers)} of {len(group)} photo(s).")
        for notice in result.notices:
            print(f"  {notice}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = Settings().with_overrides(
            min_for_predict=args.min_for_predict,
            arrow_factor=args.arrow_factor,
        )
        selected_date = parse_date_string(args.date) if args.date else None
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    paths: List[Path] = resolve_input_paths(args.inputs)
    if not paths:
        raise SystemExit("No input files provided. Pass photos and/or .csv files to plot.")

    renderer = FoliumRenderer()
    session = MarkerSession(settings=settings, renderer=renderer)
    session.set_upload_category(args.upload_color)
    import_inputs(session, paths)

    if not session.markers:
        raise SystemExit("No markers could be imported from the supplied files.")

    if args.colors:
        session.set_categories(args.colors)
    session.select_date(selected_date)

    summarise_markers("Stored markers", session.markers)
    summarise_markers("Displayed markers", session.display_markers)

    if args.predict:
        ray = session.predict_spread()
        if ray is None:
            print(
                f"Prediction skipped: needs at least {settings.min_for_predict} displayed markers "
                f"(have {session.display_count})."
            )
        else:
            print(
                f"Centroid moved {shift_distance_km(ray):.2f} km from "
                f"({ray.early.lat:.5f}, {ray.early.lng:.5f}) to ({ray.late.lat:.5f}, {ray.late.lng:.5f}); "
                f"bearing {ray.angle_degrees:.1f} deg, ray extended x{ray.arrow_factor:g}."
            )

    output_path = renderer.save(args.output)
    print(f"Saved interactive map to {output_path.resolve()}")
