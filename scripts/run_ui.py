"""Launch the StockTW market dashboard."""

from __future__ import annotations

import argparse
import os

import uvicorn

from stocktw.ui import create_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server (default: 8000).",
    )
    parser.add_argument(
        "--no-auto-refresh",
        action="store_true",
        help="Start with the 60 second background refresh paused.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level passed to uvicorn (default: info).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.no_auto_refresh:
        os.environ["STOCKTW_AUTO_REFRESH"] = "false"

    app = create_app()
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
