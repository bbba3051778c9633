from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from chartsy import (
    BarDataSeries,
    ChartConfig,
    ChartFrame,
    ScatterDataSeries,
    bar_chart,
    compute_bounds,
    load_config,
    scatterplot,
)
from chartsy.engine import axis_state


LOGGER = logging.getLogger("chartsy.cli")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chartsy")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    bounds = sub.add_parser("bounds", help="Print padded axis bounds and ticks for a list of values.")
    bounds.add_argument("values", type=float, nargs="+")
    bounds.add_argument("--clamp", type=float, nargs=2, metavar=("MIN", "MAX"), default=None)

    bar = sub.add_parser("bar", help="Derive bar chart geometry from a JSON series file.")
    bar.add_argument("data", type=Path)
    bar.add_argument("--config", type=Path, default=None)

    scatter = sub.add_parser("scatter", help="Derive scatterplot geometry from a JSON series file.")
    scatter.add_argument("data", type=Path)
    scatter.add_argument("--config", type=Path, default=None)
    scatter.add_argument("--width", type=int, default=None)
    scatter.add_argument("--height", type=int, default=None)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "bounds":
        clamp = tuple(args.clamp) if args.clamp is not None else None
        state = axis_state(compute_bounds(args.values, clamp), vertical=True)
        LOGGER.info("computed bounds for %d values", len(args.values))
        _emit(
            {
                "bounds": asdict(state.bounds),
                "ticks": list(state.ticks),
                "tick_labels": list(state.tick_labels),
            }
        )
        return 0

    config = load_config(args.config) if args.config is not None else ChartConfig()
    payload = _load_series_file(args.data)

    if args.command == "bar":
        chart = bar_chart(
            *(
                BarDataSeries(
                    entry.get("data"),
                    color=entry.get("color"),
                    hidden=bool(entry.get("hidden", False)),
                    name=entry.get("name"),
                )
                for entry in payload
            ),
            config=config,
        )
    else:
        if (args.width is None) != (args.height is None):
            parser.error("--width and --height must be given together")
        chart = scatterplot(
            *(
                ScatterDataSeries(
                    entry.get("x"),
                    entry.get("y"),
                    color=entry.get("color"),
                    hidden=bool(entry.get("hidden", False)),
                    connected=bool(entry.get("connected", False)),
                    name=entry.get("name"),
                )
                for entry in payload
            ),
            config=config,
            width=args.width,
            height=args.height,
        )

    # Mount pass, then the flag broadcast pass a host would run on re-render.
    chart.render()
    frame = chart.render()
    LOGGER.info("derived %s frame with %d series", frame.kind, len(frame.series))
    _emit(_frame_to_json(frame))
    return 0


def _load_series_file(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"series file not found: {path}")
    raw = json.loads(path.read_text(encoding="utf-8"))
    series = raw.get("series") if isinstance(raw, dict) else None
    if not isinstance(series, list) or not all(isinstance(entry, dict) for entry in series):
        raise ValueError("series file must be an object with a `series` list of objects")
    return series


def _frame_to_json(frame: ChartFrame) -> dict[str, Any]:
    out: dict[str, Any] = {
        "kind": frame.kind,
        "revision": frame.revision,
        "y": asdict(frame.y),
        "x": asdict(frame.x) if frame.x is not None else None,
        "labels": list(frame.labels),
        "series": [],
    }
    for view in frame.series:
        entry: dict[str, Any] = {
            "series_id": view.series_id,
            "color": view.color,
            "hidden": view.hidden,
            "connected": view.connected,
        }
        if frame.kind == "bar":
            entry["bars"] = [asdict(bar) for bar in view.bars]
        else:
            entry["markers"] = [asdict(marker) for marker in view.markers]
            entry["segments"] = [asdict(segment) for segment in view.segments]
        out["series"].append(entry)
    return out


def _emit(payload: dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    raise SystemExit(main())
