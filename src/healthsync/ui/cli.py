from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from healthsync.adapters.memory import InMemoryCacheStore
from healthsync.app import poll_load_balancer_health
from healthsync.config import ConfigurationError, configure_logging
from healthsync.domain.errors import ValidationError
from healthsync.domain.keys import decode_key

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh load-balancer member health")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    poll = subparsers.add_parser("poll", help="Run one health poll cycle")
    poll.add_argument(
        "--snapshot",
        type=Path,
        required=True,
        help="JSON cache snapshot holding the known load balancers",
    )
    poll.add_argument(
        "--account",
        type=str,
        help="Account to poll (defaults to HEALTHSYNC_ACCOUNT)",
    )
    poll.add_argument(
        "--region",
        type=str,
        help="Region to poll (defaults to HEALTHSYNC_REGION)",
    )
    poll.add_argument(
        "--output",
        type=Path,
        help="Write the cache result as JSON to this file instead of stdout",
    )
    poll.add_argument(
        "--apply",
        action="store_true",
        help="Merge the result back into the snapshot file",
    )

    decode = subparsers.add_parser("decode-key", help="Print the components of a cache key")
    decode.add_argument("key", type=str, help="Cache key to decode")

    return parser.parse_args(list(argv))


def _poll(args: argparse.Namespace) -> None:
    store = InMemoryCacheStore.from_snapshot(args.snapshot)
    result = poll_load_balancer_health(
        cache_store=store,
        account=args.account,
        region=args.region,
        apply=args.apply,
    )
    _write_json(result.to_dict(), args.output)
    if args.apply:
        store.write_snapshot(args.snapshot)


def _decode(args: argparse.Namespace) -> None:
    key = decode_key(args.key)
    _write_json(
        {
            "type": str(key.type),
            "account": key.account,
            "region": key.region,
            "name": key.name,
            "subScope": key.sub_scope,
            "subtype": key.subtype,
            "provider": key.provider,
            "pattern": key.is_pattern,
        },
        None,
    )


def _write_json(payload: object, path: Path | None) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    if path is None:
        sys.stdout.write(text + "\n")
        return
    path.write_text(text + "\n", encoding="utf-8")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "poll":
            _poll(parsed_args)
        elif parsed_args.command == "decode-key":
            _decode(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValidationError:
        log.exception("Health poll produced conflicting records")
        sys.exit(1)
    except (ConfigurationError, ValueError):
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during health poll")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
