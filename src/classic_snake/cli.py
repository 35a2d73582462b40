"""Command-line launcher for Classic Snake."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classic-snake",
        description="Classic Snake: desktop window, HTTP server, and renderer.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser("play", help="Open the desktop window.")
    play_p.add_argument("--width", type=int, default=800)
    play_p.add_argument("--height", type=int, default=600)
    play_p.add_argument("--seed", type=int, default=None)
    play_p.add_argument(
        "--settings", type=str, default=None,
        help="Path to a JSON settings file.",
    )
    play_p.add_argument(
        "--snapshot-dir", type=str, default=".",
        help="Directory for snapshot JPEGs.",
    )

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)
    serve_p.add_argument("--settings", type=str, default=None)

    # --- render ---
    render_p = sub.add_parser(
        "render", help="Play a headless game without input and save a JPEG.",
    )
    render_p.add_argument("output", help="Path of the JPEG to write.")
    render_p.add_argument("--ticks", type=int, default=5)
    render_p.add_argument("--width", type=int, default=320)
    render_p.add_argument("--height", type=int, default=320)
    render_p.add_argument("--seed", type=int, default=None)
    render_p.add_argument("--settings", type=str, default=None)
    render_p.add_argument(
        "--no-caption", action="store_true",
        help="Omit the score caption.",
    )

    return parser


def _load_settings(args: argparse.Namespace):
    from classic_snake.settings import Settings

    return Settings.load(args.settings) if args.settings else Settings()


def _run_play(args: argparse.Namespace) -> int:
    from classic_snake.desktop import DesktopShell

    shell = DesktopShell(
        width=args.width,
        height=args.height,
        settings=_load_settings(args),
        seed=args.seed,
        snapshot_dir=args.snapshot_dir,
    )
    shell.run()
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from classic_snake.server.app import create_app

    uvicorn.run(create_app(_load_settings(args)), host=args.host, port=args.port)
    return 0


def _run_render(args: argparse.Namespace) -> int:
    from classic_snake.engine import GameEngine
    from classic_snake.render import save_snapshot

    engine = GameEngine(
        args.width, args.height, settings=_load_settings(args), seed=args.seed,
    )
    engine.start_game()
    for _ in range(args.ticks):
        engine.update()
        if not engine.playing:
            break
    out = save_snapshot(engine, args.output, caption=not args.no_caption)
    print(f"Wrote {out} (tick {engine.tick}, score {engine.score})")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``classic-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "serve": _run_serve,
        "render": _run_render,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        # Unplayable surfaces and malformed settings files.
        raise SystemExit(f"classic-snake: error: {exc}") from exc


if __name__ == "__main__":
    sys.exit(main())
