"""Entry point: ``python -m docket_router``.

Supports two modes:
  - ``python -m docket_router``       → Launch FastAPI server (player drives via HTTP)
  - ``python -m docket_router cli``   → Headless session at a fixed frame rate
"""

from __future__ import annotations

import argparse
import logging
import sys

from docket_router.config import DIFFICULTIES

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Docket Router — real-time routing puzzle")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=None)
    srv.add_argument("--fps", type=float, default=60.0)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless session")
    cli.add_argument("--difficulty", type=str, default="easy", choices=sorted(DIFFICULTIES))
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--fps", type=float, default=60.0)
    cli.add_argument("--render-every", type=int, default=0, help="Print a text frame every N steps (0 = end only)")
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from docket_router.api.app import create_app
    from docket_router.config import SessionConfig

    config = SessionConfig(
        seed=args.seed,
        frame_rate=args.fps,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from docket_router.config import SessionConfig
    from docket_router.engine.session_loop import build_session
    from docket_router.presentation import TextRenderer
    from docket_router.utils.logging import setup_logging

    config = SessionConfig(
        seed=args.seed,
        frame_rate=args.fps,
        log_level=args.log_level,
        replay_file=args.replay,
    )
    setup_logging(config.log_level, stream=sys.stderr)

    loop = build_session(config, args.difficulty, seed=args.seed, recorder_path=config.replay_file)
    summary = loop.run(
        frame_delta=1.0 / config.frame_rate,
        renderer=TextRenderer(),
        render_every=args.render_every,
    )
    logger.info(
        "Final: score=%d correct=%d wrong=%d stuck=%d max_combo=%d",
        summary.score, summary.correct, summary.wrong, summary.stuck, summary.max_combo,
    )


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
