"""CLI entry point for tsalign.

Enables ``python -m tsalign <command>`` usage.

Subcommands:
    doctor   - Environment check: dependencies.
    version  - Print tsalign version.
    merge    - Align series from a JSON file and print the table.
    event    - List outcomes of a Polymarket event, or chart a selection.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from tsalign.core.config import AlignConfig
from tsalign.core.errors import EInvalidInput, TSAlignError
from tsalign.core.options import AlignOptions
from tsalign.core.results import AlignResult
from tsalign.core.types import Series


def _check_import(module_name: str) -> tuple[bool, str | None]:
    """Try importing a module and return (success, version_or_none)."""
    try:
        mod = importlib.import_module(module_name)
        version = getattr(mod, "__version__", getattr(mod, "VERSION", None))
        return True, str(version) if version is not None else "installed"
    except ImportError:
        return False, None


def _cmd_doctor() -> int:
    """Run environment diagnostics."""
    import tsalign

    print(f"tsalign {tsalign.__version__}")
    print(f"Python {sys.version}")
    print()

    core_deps = [
        ("pandas", "pandas"),
        ("numpy", "numpy"),
        ("pydantic", "pydantic"),
        ("requests", "requests"),
    ]

    print("Core dependencies:")
    all_core_ok = True
    for display_name, module_name in core_deps:
        ok, version = _check_import(module_name)
        status = f"  {version}" if ok else "  NOT INSTALLED"
        marker = "ok" if ok else "MISSING"
        print(f"  [{marker:>7s}] {display_name}{status}")
        if not ok:
            all_core_ok = False

    print()
    if all_core_ok:
        print("All systems go.")
    else:
        print("WARNING: Some core dependencies are missing. Install with:")
        print("  pip install tsalign")
    return 0


def _cmd_version() -> int:
    """Print version string."""
    import tsalign

    print(tsalign.__version__)
    return 0


def _series_from_json(obj: dict[str, Any]) -> Series:
    return Series.from_pairs(str(obj["key"]), obj.get("samples", []))


def load_request(path: Path) -> tuple[list[Series], Series | None, dict[str, Any]]:
    """Read a merge request file.

    Format::

        {"series": [{"key": "Yes", "samples": [[ts_ms, value], ...]}, ...],
         "reference": {"key": "Bitcoin Price", "samples": [...]},
         "config": {"window_ms": 1800000, "aggregate": true}}

    Raises:
        EInvalidInput: If the file cannot be read as JSON or a series is malformed
    """
    context = {"path": str(path)}
    try:
        with path.open() as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise EInvalidInput(f"Cannot read request file: {e}", context=context) from e
    if not isinstance(data, dict):
        raise EInvalidInput("Request file must hold a JSON object", context=context)

    try:
        series = [_series_from_json(s) for s in data.get("series") or []]
        reference = _series_from_json(data["reference"]) if data.get("reference") else None
        config = dict(data.get("config") or {})
    except (KeyError, TypeError, ValueError) as e:
        raise EInvalidInput(
            f"Malformed request: {type(e).__name__}: {e}",
            context=context,
            fix_hint='Each series needs a "key" and "samples" as [[timestamp_ms, value], ...]',
        ) from e
    return series, reference, config


def _build_config(config_kwargs: dict[str, Any], path: str) -> AlignConfig:
    try:
        return AlignConfig(**config_kwargs)
    except (TypeError, ValueError) as e:
        raise EInvalidInput(
            f"Invalid config: {e}",
            context={"path": path, "config": config_kwargs},
            fix_hint="See AlignConfig for the accepted fields",
        ) from e


def _write_result(result: AlignResult, fmt: str, out: TextIO) -> None:
    if fmt == "csv":
        result.to_dataframe().to_csv(out, index=False)
        return
    payload = {
        "table": result.to_records(),
        "range": None if result.range is None else {"min": result.range.min, "max": result.range.max},
    }
    json.dump(payload, out, indent=2)
    out.write("\n")


def _cmd_merge(args: argparse.Namespace) -> int:
    from tsalign.pipeline import align

    series, reference, config_kwargs = load_request(Path(args.file))
    if args.window_ms is not None:
        config_kwargs["window_ms"] = args.window_ms
    if args.sum:
        config_kwargs["aggregate"] = True
    options = AlignOptions(config=_build_config(config_kwargs, args.file), reference=reference)

    result = align(series, options)
    if result.is_empty:
        print("No data", file=sys.stderr)
    _write_result(result, args.format, sys.stdout)
    return 0


def _cmd_event(args: argparse.Namespace) -> int:
    from tsalign.serving import ChartSession, Selection
    from tsalign.sources import BinanceSource, PolymarketSource

    poly = PolymarketSource()
    event = poly.fetch_event(args.url)

    if not args.select:
        print(event.title or event.slug or event.id)
        for market in event.markets:
            label = f"${market.price_threshold:,}" if market.price_threshold else market.question
            print(f"  {label}")
            for outcome in market.outcomes:
                print(f"    [{outcome.type:>7s}] {outcome.id}  {outcome.title}  {outcome.price:.3f}")
        return 0

    labels = {}
    for outcome_id in args.select:
        outcome = event.find_outcome(outcome_id)
        if outcome is None:
            print(f"Unknown outcome id: {outcome_id}", file=sys.stderr)
            return 2
        labels[outcome_id] = outcome.title

    # Titles repeat across markets ("Yes"/"No"); disambiguate with the threshold
    if len(set(labels.values())) < len(labels):
        for market in event.markets:
            for outcome in market.outcomes:
                if outcome.id in labels and market.price_threshold:
                    labels[outcome.id] = f"{outcome.title} {market.price_threshold:,}"

    config = AlignConfig(window_ms=args.window_ms) if args.window_ms is not None else AlignConfig()
    reference = BinanceSource() if not args.no_reference else None
    with ChartSession(poly, reference, config=config, labels=labels) as session:
        outcome = session.refresh(Selection(series_ids=tuple(args.select), show_sum=args.sum))

    if outcome is None or outcome.result is None:
        error = outcome.error if outcome is not None else "superseded"
        print(f"Failed to load chart data: {error}", file=sys.stderr)
        return 1
    if outcome.failed:
        print(f"Unavailable series: {', '.join(outcome.failed)}", file=sys.stderr)
    _write_result(outcome.result, args.format, sys.stdout)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tsalign",
        description="tsalign - Gap-aware alignment of irregular time series for charting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("doctor", help="Environment check: dependencies")
    subparsers.add_parser("version", help="Print version")

    merge_parser = subparsers.add_parser("merge", help="Align series from a JSON request file")
    merge_parser.add_argument("file", help="Path to the request JSON")
    merge_parser.add_argument("--window-ms", type=int, default=None, help="Tolerance window (ms)")
    merge_parser.add_argument("--sum", action="store_true", help="Add the Sum column")
    merge_parser.add_argument("--format", choices=["json", "csv"], default="json")

    event_parser = subparsers.add_parser("event", help="Polymarket event outcomes and charts")
    event_parser.add_argument("url", help="Event URL or slug")
    event_parser.add_argument("--select", nargs="*", default=[], help="Outcome ids to chart")
    event_parser.add_argument("--sum", action="store_true", help="Add the Sum column")
    event_parser.add_argument("--no-reference", action="store_true", help="Skip the reference price")
    event_parser.add_argument("--window-ms", type=int, default=None, help="Tolerance window (ms)")
    event_parser.add_argument("--format", choices=["json", "csv"], default="json")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "doctor":
            return _cmd_doctor()
        elif args.command == "version":
            return _cmd_version()
        elif args.command == "merge":
            return _cmd_merge(args)
        elif args.command == "event":
            return _cmd_event(args)
        else:
            parser.print_help()
            return 0
    except TSAlignError as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
