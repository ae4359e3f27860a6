#!/usr/bin/env python3
"""
Transit Routes - Main Entry Point

- plan:  read a topology file and print its routing plan
- serve: run the REST API
"""

import argparse
import json
import os
import sys

import uvicorn

from .diagnostic_logger import configure_logging
from .engine import RoutePlanningEngine
from .errors import RoutePlanningError
from .report.plan_renderer import get_plan_renderer
from .topology import dump_topology, load_topology_file


def start_rest_api(host: str, port: int):
    """Start the FastAPI REST API server."""
    from .api.rest_api_server import app

    print(f"Starting REST API on {host}:{port}...")
    uvicorn.run(app, host=host, port=port, log_level="info")


def run_plan(args) -> int:
    try:
        entities = load_topology_file(args.topology)
        plan = RoutePlanningEngine().plan(entities)
    except RoutePlanningError as e:
        print(f"  ✗ {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.format == "text":
        output = get_plan_renderer().render(plan)
    elif args.format == "resolved":
        output = dump_topology(entities)
    else:
        output = json.dumps(plan.to_dict(), indent=2)

    if args.output:
        with open(args.output, "w") as f:
            f.write(output)
        print(f"  ✓ Wrote {len(plan.actions)} actions to {args.output}")
    else:
        print(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transit-routes",
        description="Hub-and-spoke route planning",
    )
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)

    plan = commands.add_parser("plan", help="Plan routes for a topology file")
    plan.add_argument("topology", help="YAML (or JSON) topology document")
    plan.add_argument("--format", choices=["json", "text", "resolved"], default="json")
    plan.add_argument("--output", "-o", default=None)

    serve = commands.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=os.getenv("REST_HOST", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=int(os.getenv("REST_PORT", 8000)))
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        start_rest_api(args.host, args.port)
        return 0
    return run_plan(args)


if __name__ == "__main__":
    sys.exit(main())
