#!/usr/bin/env python3
"""Run one acquisition cycle and print the row it would commit."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from stocktw.config import AppSettings
from stocktw.dashboard import CycleResult, DashboardController, RefreshTrigger


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Per-request deadline in milliseconds (default: STOCKTW_REQUEST_TIMEOUT_MS or 8000).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log each proxy attempt.",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> AppSettings:
    settings = AppSettings()
    if args.timeout_ms is not None:
        settings = settings.model_copy(update={"request_timeout_ms": args.timeout_ms})
    return settings


async def run(settings: AppSettings) -> dict:
    controller = DashboardController(settings=settings)
    try:
        outcome = await controller.refresh(RefreshTrigger.EXPLICIT)
    finally:
        controller.close()
    return outcome.to_dict()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    payload = asyncio.run(run(build_settings(args)))
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0 if payload["result"] != CycleResult.SIMULATED.value else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
