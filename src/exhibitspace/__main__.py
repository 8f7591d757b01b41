"""Command-line interface.

Run with: python -m exhibitspace <command> ...

    platforms                       list the platform table
    layout PLATFORM                 placements of every exhibit on a platform
    viewpoint EXHIBIT KIND PLATFORM camera pose for one exhibit
    fixed PLATFORM [NAME]           hand-placed camera pose (center, reception)
    tour EXHIBIT KIND PLATFORM      run the navigation state machine headless
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from exhibitspace.config import DEFAULT_PLATFORMS_PATH, SAMPLE_CATALOG_PATH, START_PLATFORM_ID, TRANSPORT_FALLBACK_MS
from exhibitspace.logging_config import setup_logging
from exhibitspace.model.io import load_exhibit_catalog, load_platform_registry
from exhibitspace.model.layout import layout_platform
from exhibitspace.model.viewpoints import CENTER_VIEW_NAME, ViewpointResolver


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exhibitspace", description=__doc__.splitlines()[0])
    parser.add_argument("--platforms", default=DEFAULT_PLATFORMS_PATH, help="Platform table JSON")
    parser.add_argument("--catalog", default=SAMPLE_CATALOG_PATH, help="Exhibit catalog JSON")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("platforms", help="List platforms")

    p_layout = sub.add_parser("layout", help="Place the exhibits of one platform")
    p_layout.add_argument("platform")

    p_view = sub.add_parser("viewpoint", help="Camera pose for an exhibit")
    p_view.add_argument("exhibit")
    p_view.add_argument("kind", choices=["booth", "wall"])
    p_view.add_argument("platform")

    p_fixed = sub.add_parser("fixed", help="Hand-placed camera pose")
    p_fixed.add_argument("platform")
    p_fixed.add_argument("name", nargs="?", default=CENTER_VIEW_NAME)

    p_tour = sub.add_parser("tour", help="Navigate to an exhibit without a renderer")
    p_tour.add_argument("exhibit")
    p_tour.add_argument("kind", choices=["booth", "wall"])
    p_tour.add_argument("platform")
    p_tour.add_argument("--start", default=START_PLATFORM_ID)
    p_tour.add_argument("--fallback-ms", type=int, default=TRANSPORT_FALLBACK_MS)
    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def _run_tour(args: argparse.Namespace) -> int:
    # Qt is only needed for the event loop of the state machine
    from PySide6.QtCore import QTimer
    from exhibitspace.app.application import create_app, create_session

    app = create_app()
    session = create_session(
        catalog_path=args.catalog,
        platforms_path=args.platforms,
        start_platform_id=args.start,
        fallback_ms=args.fallback_ms,
    )
    nav = session.navigation
    outcome: dict = {}

    def on_published(viewpoint) -> None:
        outcome["viewpoint"] = viewpoint.to_dict()
        app.quit()

    def on_dropped(request) -> None:
        outcome["dropped"] = repr(request)
        app.quit()

    nav.viewpoint_published.connect(on_published)
    nav.request_dropped.connect(on_dropped)
    nav.transport_started.connect(lambda target: print(f"transport -> {target}"))
    nav.transport_finished.connect(lambda target: print(f"arrived at {target}"))

    if not nav.navigate_to_exhibit(args.exhibit, args.kind, args.platform):
        if not outcome:
            print("request ignored", file=sys.stderr)
            return 1
    elif not outcome:
        # No renderer will call finish_transport(); the fallback timer completes it
        QTimer.singleShot(args.fallback_ms * 2 + 1000, app.quit)
        app.exec()

    if "viewpoint" in outcome:
        _print_json({"platform": nav.current_platform_id, **outcome["viewpoint"]})
        return 0
    print(f"no viewpoint: {outcome.get('dropped', 'timed out')}", file=sys.stderr)
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING), log_file=args.log_file)

    if args.command == "tour":
        return _run_tour(args)

    registry = load_platform_registry(args.platforms)

    if args.command == "platforms":
        for platform in registry:
            c = platform.center
            neighbours = ",".join(registry.neighbours(platform.id))
            print(f"{platform.id:<4} {platform.kind:<9} center=({c.x:g}, {c.y:g}, {c.z:g}) "
                  f"radius={platform.radius:g} -> {neighbours}")
        return 0

    catalog = load_exhibit_catalog(args.catalog)
    resolver = ViewpointResolver.for_catalog(registry, catalog)

    if args.command == "layout":
        if args.platform not in registry:
            print(f"unknown platform '{args.platform}'", file=sys.stderr)
            return 1
        _print_json([
            {
                "id": p.exhibit_id,
                "kind": p.kind.value,
                "position": list(p.position.to_tuple()),
                "facing_angle": p.facing_angle,
            }
            for p in layout_platform(registry, catalog, args.platform)
        ])
        return 0

    if args.command == "viewpoint":
        viewpoint = resolver.resolve_viewpoint(args.exhibit, args.kind, args.platform)
    else:
        viewpoint = resolver.fixed_viewpoint(args.platform, args.name)

    if viewpoint is None:
        print("not found", file=sys.stderr)
        return 1
    _print_json(viewpoint.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
