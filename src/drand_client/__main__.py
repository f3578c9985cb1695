"""
drand client CLI entry point.

Fetch and verify beacons from the command line.

Usage::

    python -m drand_client latest
    python -m drand_client --network quicknet get 1000
    python -m drand_client --url https://api.drand.sh --url https://api2.drand.sh watch
    python -m drand_client --network-file mynet.yaml time 1700000000
    python -m drand_client --url https://api.drand.sh chains
    python -m drand_client --url https://api.drand.sh health

Options:
    --url           Base URL of a node (can be repeated; several URLs race each other)
    --network       Known network preset (default: $DRAND_NETWORK or "default")
    --network-file  YAML file describing a network preset
    --chain-hash    Pin the chain hash (with --public-key)
    --public-key    Pin the chain public key (with --chain-hash)
    --no-verify     Skip beacon signature verification
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from drand_client.chain import HttpCachingChain
from drand_client.client import ChainClient, FastestNodeClient, HttpChainClient, MultiBeaconNode
from drand_client.config import DRAND_NETWORK, ChainOptions
from drand_client.defaults import PRESETS, NetworkPreset
from drand_client.errors import DrandError
from drand_client.types import Beacon, ChainVerificationParams
from drand_client.watch import watch

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formats like `LOG_FORMAT`, with the level name colored for terminals."""

    RESET = "\x1b[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[2m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;31m",
    }

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, LOG_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Other handlers share the record; color a copy.
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging with optional colors. Logs go to stderr, beacons to stdout."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter = (
        logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT) if no_color else ColoredFormatter()
    )

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def resolve_preset(network: str, network_file: Path | None) -> NetworkPreset:
    """Pick the network preset from a YAML file or by name."""
    if network_file is not None:
        return NetworkPreset.from_yaml_file(network_file)
    return PRESETS[network]


def build_options(args: argparse.Namespace, preset: NetworkPreset) -> ChainOptions:
    """
    Chain options from the command line.

    Explicit --chain-hash/--public-key win over the preset.
    Explicit --url without pinning disables chain verification,
    since the preset's fingerprint may not describe those nodes.
    """
    if args.chain_hash or args.public_key:
        if not (args.chain_hash and args.public_key):
            raise SystemExit("--chain-hash and --public-key must be given together")
        params: ChainVerificationParams | None = ChainVerificationParams(
            chain_hash=args.chain_hash, public_key=args.public_key
        )
    elif args.urls:
        params = None
    else:
        params = preset.verification_params()

    return ChainOptions(
        disable_beacon_verification=args.no_verify,
        chain_verification_params=params,
    )


def build_client(urls: list[str], options: ChainOptions) -> ChainClient:
    """Single-node client for one URL, fastest-node client for several."""
    if len(urls) == 1:
        return HttpChainClient(HttpCachingChain(urls[0], options), options)
    return FastestNodeClient(urls, options)


def print_beacon(beacon: Beacon) -> None:
    """Print a beacon as one JSON line."""
    print(json.dumps(beacon.to_json_dict()), flush=True)


async def run(args: argparse.Namespace) -> int:
    """Execute one CLI command. Returns the process exit code."""
    preset = resolve_preset(args.network, args.network_file)
    urls = args.urls or list(preset.urls)
    options = build_options(args, preset)

    if args.command == "chains":
        for chain in await MultiBeaconNode(urls[0], options).chains():
            print(chain.base_url)
        return 0

    if args.command == "health":
        health = await MultiBeaconNode(urls[0], options).health()
        print(json.dumps(asdict(health)))
        return 0 if 200 <= health.status < 300 else 1

    client = build_client(urls, options)
    if isinstance(client, FastestNodeClient):
        client.start()

    try:
        if args.command == "latest":
            print_beacon(await client.latest())
        elif args.command == "get":
            print_beacon(await client.get(args.round))
        elif args.command == "time":
            print_beacon(await client.get_by_time(args.timestamp))
        elif args.command == "watch":
            watcher = watch(client)
            while True:
                try:
                    beacon = await anext(watcher)
                except StopAsyncIteration:
                    break
                except DrandError as e:
                    if watcher.is_done:
                        raise
                    logger.error("Round %s failed, retrying: %s", watcher.next_round, e)
                    await asyncio.sleep(1.0)
                    continue
                print_beacon(beacon)
    finally:
        if isinstance(client, FastestNodeClient):
            client.stop()

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="drand randomness beacon client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--url",
        action="append",
        default=[],
        dest="urls",
        help="Base URL of a node (can be repeated)",
    )
    parser.add_argument(
        "--network",
        choices=sorted(PRESETS),
        default=DRAND_NETWORK,
        help=f"Known network preset (default: {DRAND_NETWORK})",
    )
    parser.add_argument(
        "--network-file",
        type=Path,
        default=None,
        help="YAML file describing a network preset",
    )
    parser.add_argument("--chain-hash", default=None, help="Expected chain hash")
    parser.add_argument("--public-key", default=None, help="Expected chain public key")
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip beacon signature verification",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("latest", help="Fetch the latest beacon")
    get_parser = commands.add_parser("get", help="Fetch the beacon of a round")
    get_parser.add_argument("round", type=int)
    time_parser = commands.add_parser("time", help="Fetch the beacon at a Unix time")
    time_parser.add_argument("timestamp", type=float)
    commands.add_parser("watch", help="Print new beacons as they are published")
    commands.add_parser("chains", help="List the chains served by the node")
    commands.add_parser("health", help="Report the node's health")

    args = parser.parse_args()
    if args.network_file is None and args.network not in PRESETS:
        parser.error(
            f"unknown network {args.network!r} (from $DRAND_NETWORK), "
            f"choose from {', '.join(sorted(PRESETS))}"
        )

    setup_logging(args.verbose, args.no_color)

    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        code = 0
    except DrandError as e:
        logger.error("%s", e)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
