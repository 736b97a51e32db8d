"""CLI entrypoint for the urban stocks explorer tooling."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Sequence

import requests
import yaml

from .breadcrumbs import format_breadcrumbs
from .config import AppConfig, load_config
from .io_ne import NormalizerError
from .normalize import format_coverage_lines, run_check, run_fix_countries
from .session import ExplorerSession
from .util import setup_logging

LOGGER = logging.getLogger("urbanstocks.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="urbanstocks",
        description="Urban material stocks explorer tooling.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default="config.yaml", help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")

    fix_p = subparsers.add_parser(
        "fix-countries",
        help="Download Natural Earth countries, normalize iso3/name and write GeoJSON.",
    )
    add_common(fix_p)

    check_p = subparsers.add_parser(
        "check",
        help="Validate the existing countries GeoJSON against the city index.",
    )
    add_common(check_p)

    explore_p = subparsers.add_parser(
        "explore",
        help="Replay a YAML list of navigation events and log the resulting views.",
    )
    add_common(explore_p)
    explore_p.add_argument("events", help="Path to YAML file with a list of events.")

    return parser


def _load_and_setup(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(args.config)
    log_path = cfg.paths.logs_dir / "urbanstocks.log"
    setup_logging(log_path, verbose=args.verbose)
    return cfg


def _run_fix_countries(cfg: AppConfig) -> int:
    try:
        report = run_fix_countries(cfg)
    except (NormalizerError, requests.RequestException, OSError, ValueError) as exc:
        LOGGER.error("Country dataset build failed: %s", exc)
        return 1
    for line in format_coverage_lines(report):
        LOGGER.info(line)
    LOGGER.info("Done!")
    return 0


def _run_check(cfg: AppConfig) -> int:
    try:
        report = run_check(cfg)
    except (NormalizerError, OSError, ValueError) as exc:
        LOGGER.error("Country dataset check failed: %s", exc)
        return 1
    for line in format_coverage_lines(report):
        LOGGER.info(line)
    return 0


def _load_events(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Events file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"Expected list in {path}")
    events: list[dict[str, Any]] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Expected mapping at index {idx} in {path}")
        events.append(item)
    return events


def _run_explore(cfg: AppConfig, *, events_path: Path) -> int:
    try:
        events = _load_events(events_path)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not load events: %s", exc)
        return 1

    session = ExplorerSession(cfg.explorer)
    for idx, event in enumerate(events, start=1):
        try:
            session.apply_event(event)
        except ValueError as exc:
            LOGGER.error("Event %d rejected: %s", idx, exc)
            return 1
        city_panel = session.city_panel()
        hood_panel = session.neighborhood_panel()
        LOGGER.info(
            "[%d] %s | metric=%s | city_panel=%s | neighborhoods=%s | dark=%s",
            idx,
            format_breadcrumbs(session.breadcrumbs()),
            session.metric.metric.value,
            city_panel.title if city_panel else "-",
            hood_panel.city_name if hood_panel else "-",
            session.theme.is_dark,
        )
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    cfg = _load_and_setup(args)
    command = str(args.command)
    if command == "fix-countries":
        return _run_fix_countries(cfg)
    if command == "check":
        return _run_check(cfg)
    if command == "explore":
        return _run_explore(cfg, events_path=Path(args.events))
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
