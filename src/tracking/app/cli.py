from __future__ import annotations

import argparse
import sys

from tracking.app.runner import replay
from tracking.features.host.types import Page


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tracking")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_replay = sub.add_parser("replay", help="Replay a queued-call buffer against the endpoint")
    p_replay.add_argument("--config", default="config/tracking.yaml")
    p_replay.add_argument("--calls", required=True, help="JSON array of [method, ...args]")
    p_replay.add_argument("--url", default="")
    p_replay.add_argument("--user-agent", default="")
    p_replay.add_argument("--referrer", default="")
    p_replay.add_argument(
        "--no-cors", action="store_true", help="Deliver through script injection instead of POST"
    )

    args = parser.parse_args(argv)

    if args.cmd == "replay":
        page = Page(url=args.url, user_agent=args.user_agent, referrer=args.referrer)
        result = replay(
            args.config, args.calls, page=page, supports_cors=not args.no_cors
        )
        # minimal stdout signal
        print(f"uid={result.uid} requests={result.requests} scripts={result.scripts}")
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
