"""Entry point: ``python -m hivemind``.

Supports two modes:
  - ``python -m hivemind``        -> FastAPI server over a running demo colony
  - ``python -m hivemind cli``    -> headless run of the demo scenario
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hivemind colony decision core")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--ticks", type=int, default=5000)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run the demo scenario headless")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=500)
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from hivemind.api.app import create_app
    from hivemind.config import HivemindConfig

    config = HivemindConfig(seed=args.seed, max_ticks=args.ticks, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from hivemind.config import HivemindConfig
    from hivemind.engine.world_loop import WorldLoop
    from hivemind.sandbox.scenarios import build_demo_world
    from hivemind.utils.event_log import EventLog
    from hivemind.utils.logging import setup_logging

    config = HivemindConfig(seed=args.seed, max_ticks=args.ticks, log_level=args.log_level)
    setup_logging(config.log_level)

    events = EventLog()
    loop = WorldLoop(config, build_demo_world(config), events=events)
    loop.run()

    for category in ("directive.placed", "directive.removed", "safe_mode", "fault"):
        logger.info("%-18s %d", category, len(events.by_category(category)))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
