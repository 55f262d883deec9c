"""prscout entry point.

Lists open pull requests of the configured repository as JSON, either as
normalized records or as template parameters. Usage: prscout [list] [options].
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from prscout.adapters import PullRequestServiceError, RepositoryNotFoundError
from prscout.config import load_config
from prscout.factory import build_service
from prscout.generator import generate_params
from prscout.logging import PrscoutLogging

logger = logging.getLogger("prscout")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (list)."""
    argv = argv if argv is not None else sys.argv[1:]
    rest = list(argv)
    if rest and rest[0] == "list":
        rest = rest[1:]

    parser = argparse.ArgumentParser(
        prog="prscout",
        description="prscout - list open pull requests as normalized JSON records",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--params",
        action="store_true",
        help="Print template parameters instead of records",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Total time budget in seconds for listing",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log prscout debug output (overrides logging.level)",
    )
    return parser.parse_args(rest)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, list pull requests, print JSON."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except PullRequestServiceError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 1
    PrscoutLogging(config.logging, verbose=args.verbose).setup()

    try:
        service = build_service(config)
    except PullRequestServiceError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.check:
        bb = config.bitbucket_cloud
        print("Config OK:", config.provider, f"{bb.owner}/{bb.repository}")
        return 0

    try:
        if args.params:
            output = generate_params(service, timeout=args.timeout)
        else:
            try:
                pulls = service.list_pull_requests(timeout=args.timeout)
            except RepositoryNotFoundError as e:
                logger.warning("%s", e)
                pulls = e.pull_requests
            output = [pr.model_dump() for pr in pulls]
    except PullRequestServiceError as e:
        logger.error("Listing pull requests failed: %s", e)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
