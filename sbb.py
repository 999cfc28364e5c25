"""Fetches available connections from SBB and prints one table per itinerary.

Usage:
    sbb --from Bern --to "Zürich HB"
    sbb -f Bern -t "Zürich HB" -n 3

Environment:
    TRANSIT_API_URL      base URL of the connections API
    TRANSIT_API_TIMEOUT  request timeout in seconds (default: none)
    LOG_LEVEL            logging level (default: WARNING)
    DEBUG=true           forces DEBUG logging, including the raw payload
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from rich.console import Console

from sbb_legs import EmptyItineraryError, MalformedResponseError, TransitError, extract_itineraries
from sbb_provider import ConfigError, ProviderConfig, SwissConnectionsProvider, TransitProvider
from sbb_render import render_itineraries

__version__ = "0.1.0"

DEFAULT_NUMBER = 1

EXIT_REQUEST_ERROR = 1
EXIT_USAGE = 2
EXIT_BAD_RESPONSE = 3
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def configure_logging(environ=None) -> None:
    environ = os.environ if environ is None else environ

    level_name = environ.get("LOG_LEVEL", "WARNING").upper()
    if environ.get("DEBUG") == "true":
        level_name = "DEBUG"
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sbb",
        description="Fetches available connections from SBB",
    )
    parser.add_argument("-f", "--from", dest="origin", required=True, help="From")
    parser.add_argument("-t", "--to", dest="destination", required=True, help="To")
    parser.add_argument(
        "-n", "--number",
        type=_positive_int,
        default=DEFAULT_NUMBER,
        help="The number/amount of connections to fetch (default: %(default)s)",
    )
    parser.add_argument("-v", "--via", help="Via")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def run(args: argparse.Namespace, provider: TransitProvider, console: Optional[Console] = None) -> None:
    """Query the provider and render every itinerary it returns"""
    if args.via:
        logger.info(f"Via station {args.via!r} is not forwarded to the connections query")

    response = provider.get_connections(args.origin, args.destination, limit=args.number)
    # Extract everything first so a malformed response prints nothing
    itineraries = extract_itineraries(response)

    if not itineraries:
        logger.warning(f"No connections found for {args.origin} -> {args.destination}")

    render_itineraries(itineraries, console)


def _exit_code_for(error: TransitError) -> int:
    if isinstance(error, (MalformedResponseError, EmptyItineraryError)):
        return EXIT_BAD_RESPONSE
    return EXIT_REQUEST_ERROR


def main(argv: Optional[List[str]] = None, provider: Optional[TransitProvider] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    owns_provider = provider is None
    if provider is None:
        try:
            config = ProviderConfig.from_env()
        except ConfigError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return EXIT_USAGE
        provider = SwissConnectionsProvider(config)

    try:
        run(args, provider)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except TransitError as e:
        logger.debug(f"Lookup failed with {type(e).__name__}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return _exit_code_for(e)
    finally:
        if owns_provider:
            provider.close()

    return 0


def cli_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
