from __future__ import annotations

import argparse
from typing import Callable, TextIO
import sys

from ..config import settings
from ..logging_utils import configure_logging
from .display import DisplayClient, RecordFetcher


def run(client: DisplayClient, read_line: Callable[[], str], out: TextIO) -> int:
    """Drive the client from line input; returns the number of clicks.

    The fallback text is printed right away; the fetch lands whenever it lands.
    """
    client.mount()
    print(client.display_text, file=out)

    clicks = 0
    while True:
        line = read_line()
        if not line or line.strip().lower() in {"q", "quit", "exit"}:
            break
        print(client.click(), file=out)
        clicks += 1

    client.unmount()
    return clicks


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Cycle through records served by the rowcycle API")
    parser.add_argument("--base-url", default=settings.api_url, help="API root, without the /api/data path")
    parser.add_argument("--timeout", type=float, default=settings.client_timeout, help="Request timeout in seconds")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    client = DisplayClient(RecordFetcher(base_url=args.base_url, timeout=args.timeout))
    print("Press Enter to show the next record, q to quit.", file=sys.stderr)
    run(client, sys.stdin.readline, sys.stdout)


if __name__ == "__main__":
    main()
