"""
=============================================================================
LWEBSERVR CLI ENTRY POINT
=============================================================================

    # Serve the current directory on http://127.0.0.1:8080
    python -m lwebservr

    # Custom port
    python -m lwebservr --port 3000

    # Print every raw request
    python -m lwebservr --verbose

    # No banner, no per-request lines
    python -m lwebservr --silent

Exit codes:
    0   stopped normally (Ctrl+C / SIGTERM)
    1   startup failed (e.g. port already in use)
    2   invalid command-line arguments

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .server import HTTPServer
from .config import ServerConfig


PORT_ERROR = "port must be a number between 1 and 65535"


def port_number(value: str) -> int:
    """argparse type for --port."""
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(PORT_ERROR)
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(PORT_ERROR)
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lwebservr",
        description="Serve local files via http",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lwebservr                   # Serve the current directory on port 8080
  lwebservr --port 3000       # Custom port
  lwebservr -v                # Dump raw requests
  lwebservr -s                # Quiet
        """
    )

    parser.add_argument(
        "--port", "-p",
        type=port_number,
        default=8080,
        metavar="PORT",
        help="Port to listen on, on 127.0.0.1 (default: 8080)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print the raw request text after each request"
    )

    parser.add_argument(
        "--silent", "-s",
        action="store_true",
        help="Don't print the startup banner or per-request lines"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level for diagnostics (default: INFO); request lines use --silent"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"lwebservr {__version__}"
    )

    return parser


def format_error(error: BaseException) -> str:
    """
    Render an error and its chain of causes:

        error: could not bind to 127.0.0.1:80
        caused by: [Errno 13] Permission denied
    """
    lines = [f"error: {error}"]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig(
            port=args.port,
            verbose=args.verbose,
            silent=args.silent,
            log_level=args.log_level,
        )
        server = HTTPServer(config)
        server.run()
    except Exception as e:
        print(format_error(e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
