#!/usr/bin/env python3
"""Track one or more routes from the command line.

Loads the route catalog from ``{base_url}/routes``, starts tracking the given
route ids over the MQTT realtime channel and prints marker movements until
every started route has finished.

With ``--demo`` no broker is needed: a loopback channel replays a straight-line
trip from each route's start to its end.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import time
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from routetrack import (  # noqa: E402
    LoopbackChannel,
    RouteTrackError,
    StartOutcome,
    TrackerConfig,
    TrackingService,
)
from routetrack.models import Route  # noqa: E402

_LOG = logging.getLogger("track_route")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Track live vehicle routes until they finish.",
    )
    parser.add_argument(
        "route_ids",
        nargs="*",
        help="Route ids to start (see --list).",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Backend base URL (default: ROUTETRACK_BASE_URL or http://localhost:3000).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the route catalog and exit.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = until all routes finish or Ctrl+C).",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Replay straight-line trips over a loopback channel instead of MQTT.",
    )
    parser.add_argument(
        "--demo-steps",
        type=int,
        default=10,
        help="Number of position updates per demo trip.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


async def _replay(channel: LoopbackChannel, route: Route, steps: int, interval: float) -> None:
    start = route.start_position
    end = route.end_position
    for step in range(1, steps + 1):
        await asyncio.sleep(interval)
        fraction = step / steps
        channel.deliver(
            {
                "routeId": route.id,
                "position": [
                    start.lat + (end.lat - start.lat) * fraction,
                    start.lng + (end.lng - start.lng) * fraction,
                ],
                "finished": step == steps,
            }
        )


async def _run(args: argparse.Namespace) -> int:
    overrides = {"base_url": args.base_url} if args.base_url else {}
    config = TrackerConfig.from_env(**overrides)
    loopback = LoopbackChannel() if args.demo else None

    async with TrackingService(config, channel=loopback) as service:
        if args.list or not args.route_ids:
            for route in service.catalog:
                print(f"{route.id}\t{route.title}\t{route.start_position} -> {route.end_position}")
            return 0

        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop_event.set)

        replays: list[asyncio.Task[None]] = []
        for route_id in args.route_ids:
            try:
                outcome = await service.start_tracking(route_id)
            except RouteTrackError as exc:
                print(f"[track] {route_id}: {exc}", file=sys.stderr)
                continue
            print(f"[track] {route_id}: {outcome}")
            if loopback is not None and outcome is StartOutcome.STARTED:
                route = service.catalog.get(route_id)
                replays.append(asyncio.create_task(_replay(loopback, route, args.demo_steps, 0.5)))

        started_at = time.monotonic()
        last_seen: dict[str, str] = {}
        while len(service.controller) and not stop_event.is_set():
            if args.duration > 0 and time.monotonic() - started_at >= args.duration:
                print(f"[track] Reached --duration={args.duration}s, stopping.")
                break
            for route_id in service.controller.tracked_route_ids():
                view = service.controller.get(route_id)
                if view is None:
                    continue
                position = str(view.current_position)
                if last_seen.get(route_id) != position:
                    last_seen[route_id] = position
                    print(f"[track] {route_id} at {position}")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=0.5)
            except TimeoutError:
                pass

        for task in replays:
            task.cancel()
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except RouteTrackError as exc:
        print(f"[track] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(_main())
