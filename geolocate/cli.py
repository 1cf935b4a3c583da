"""Command line front end."""

import argparse
import ipaddress
import logging
import sys
from typing import TextIO

from geolocate.config import Settings
from geolocate.errors import GeolocateError
from geolocate.fake_service import FakeProbeService
from geolocate.orchestrator import Orchestrator
from geolocate.report import ConsoleReporter, print_results
from geolocate.service import GlobalpingService, ProbeService

logger = logging.getLogger(__name__)

PROMPT = "geolocate> "
INTERACTIVE_DEFAULT_LIMIT = 100
INTERACTIVE_MAX_LIMIT = 250


def is_valid_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _limit(value: str) -> int:
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("--limit requires a numeric value") from None
    if limit < 1:
        raise argparse.ArgumentTypeError("--limit must be at least 1")
    return limit


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geolocate",
        description="Geolocate an IP address using latency measurements from probes worldwide.",
        epilog=(
            "Environment: GLOBALPING_TOKEN raises the request quota "
            "(get one at https://dash.globalping.io)."
        ),
    )
    parser.add_argument("ip", nargs="?", help="IP address to locate")
    parser.add_argument(
        "-L",
        "--limit",
        type=_limit,
        default=settings.probe_limit,
        help=f"number of probes per measurement (default: {settings.probe_limit})",
    )
    parser.add_argument(
        "--split-continents",
        action="store_true",
        help="measure each continent with its own concurrent request",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="read addresses from a prompt until end of input",
    )
    return parser


def parse_command(
    line: str,
    default_limit: int = INTERACTIVE_DEFAULT_LIMIT,
    max_limit: int = INTERACTIVE_MAX_LIMIT,
) -> tuple[str, int] | str:
    """Parse one prompt line of the form ``<ip> [-L <limit>]``.

    Returns:
        (ip, limit) on success, with the limit capped at ``max_limit``, or an
        error message
    """
    parts = line.split()
    if not parts:
        return "Please enter an IP address"

    ip = parts[0]
    if not is_valid_ip(ip):
        return f"Invalid IP address: {ip}"

    limit = default_limit
    rest = iter(parts[1:])
    for part in rest:
        if part in ("-L", "--limit"):
            value = next(rest, "")
            if not value.isdigit() or int(value) < 1:
                return "Invalid limit value"
            limit = min(int(value), max_limit)

    return ip, limit


async def geolocate(
    service: ProbeService,
    settings: Settings,
    ip: str,
    limit: int,
    split_continents: bool = False,
    out: TextIO | None = None,
) -> int:
    """Run one geolocation and print its outcome; return the exit status.

    Errors go to ``out`` when a stream is given, to stderr otherwise.
    """
    err = out or sys.stderr
    out = out or sys.stdout
    out.write(f"Geolocating {ip}...\n\n")

    orchestrator = Orchestrator(
        service,
        reporter=ConsoleReporter(out),
        interval=settings.poll_interval,
        deadline=settings.poll_deadline,
        split_continents=split_continents,
    )

    try:
        result = await orchestrator.run(ip, limit)
    except GeolocateError as e:
        logger.debug("Geolocation of %s failed", ip, exc_info=True)
        out.flush()
        print(f"\nError: {e}", file=err)
        return 1

    print_results(result, out)
    return 0


async def interactive(
    service: ProbeService,
    settings: Settings,
    split_continents: bool = False,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> int:
    """Prompt for addresses until end of input, one run per line."""
    stdin = stdin or sys.stdin
    out = out or sys.stdout

    while True:
        out.write(PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            return 0
        if not line.strip():
            continue

        parsed = parse_command(line)
        if isinstance(parsed, str):
            out.write(f"Error: {parsed}\n")
            continue

        ip, limit = parsed
        await geolocate(service, settings, ip, limit, split_continents, out)
        out.write("\n")


def create_service(settings: Settings) -> ProbeService:
    """Probe service selected by ``settings.service``."""
    if settings.service == "fake":
        logger.info("Using FakeProbeService (GEOLOCATE_SERVICE=fake)")
        return FakeProbeService()

    return GlobalpingService(
        token=settings.token,
        timeout=settings.timeout,
        base_url=settings.api_url,
    )


async def run(args: argparse.Namespace, settings: Settings) -> int:
    service = create_service(settings)
    try:
        if args.interactive:
            return await interactive(service, settings, args.split_continents)
        return await geolocate(service, settings, args.ip, args.limit, args.split_continents)
    finally:
        if isinstance(service, GlobalpingService):
            await service.aclose()


def parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    """Parse and validate the command line; exits with status 1 on bad input."""
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.interactive:
        return args

    if not args.ip:
        print("Error: IP address is required", file=sys.stderr)
        parser.print_usage(sys.stderr)
        sys.exit(1)

    if not is_valid_ip(args.ip):
        print(f"Error: Invalid IP address: {args.ip}", file=sys.stderr)
        sys.exit(1)

    return args
