from __future__ import annotations

import argparse
import logging
import sys

from fu_server.durations import parse_duration
from fu_server.errors import ConfigError
from fu_server.logging_config import setup_logging

from .client import Client, UploadError
from .config import settings

log = logging.getLogger("fu")

USAGE_EXAMPLES = """\
When FILE is -, read from stdin.

Examples:
  fu main.go
  echo 'Hello, world.' | fu -
"""


def _duration(value: str):
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fu",
        usage="%(prog)s [OPTION]... [FILE]",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    p.add_argument("-h", action="store_true", dest="help", help="show this usage information")
    p.add_argument("-addr", default=settings.addr, help="http server address")
    p.add_argument("-token", default=settings.token, help="secret token required to upload")

    server = p.add_argument_group("server")
    server.add_argument("-s", action="store_true", dest="server", help="start a fu http server on addr")
    server.add_argument("-db-path", default="store.db", help="path to database file")
    server.add_argument("-upload-dir", default="uploads", help="path to upload directory")
    server.add_argument("-max-upload-size", type=int, default=32 << 20,
                        help="max upload file size in bytes")

    client = p.add_argument_group("client")
    client.add_argument("-d", type=_duration, default="1h", dest="lifetime",
                        help="duration to keep file")
    p.add_argument("file", nargs="?", metavar="FILE")
    return p


def run_server(args) -> int:
    from fu_server.config import Settings
    from fu_server.main import serve

    try:
        serve(Settings(
            addr=args.addr,
            token=args.token,
            db_path=args.db_path,
            upload_dir=args.upload_dir,
            max_upload_size=args.max_upload_size,
        ))
    except ConfigError as e:
        log.error("%s", e)
        return 1
    return 0


def run_client(args) -> int:
    logging.getLogger("httpx").setLevel(logging.WARNING)
    try:
        c = Client(args.addr, args.token, timeout=settings.timeout)
    except ValueError as e:
        log.error("%s", e)
        return 1

    try:
        if args.file == "-":
            f = sys.stdin.buffer
            remote = c.upload(f, "-", args.lifetime)
        else:
            with open(args.file, "rb") as f:
                remote = c.upload(f, args.file, args.lifetime)
    except (OSError, UploadError) as e:
        log.error("%s", e)
        return 1

    print(c.url(remote))
    return 0


def main(argv: list[str] | None = None) -> int:
    # stdout carries only the URL
    setup_logging("WARNING", stream=sys.stderr)
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help(sys.stderr)
        return 0
    if args.server:
        return run_server(args)
    if not args.file:
        parser.print_help(sys.stderr)
        return 2
    return run_client(args)


if __name__ == "__main__":
    sys.exit(main())
