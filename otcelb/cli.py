"""
Command-line tool: authenticate with AK/SK, then list the classic ELB
listeners and load balancers of a project.

Usage:
    otcelb --project eu-de_myproject --access-key AK --secret-key SK
    otcelb --project-id 0123abcd --region eu-de --log-prefix "[elb]" -v

Every request and response is dumped to the log, credentials included.
"""
import argparse
import logging
import sys
from typing import List, Optional

import httpx

from ._logging import logger
from .client import ProviderClient
from .config import CLIConfig
from .exceptions import ConfigurationError, OTCError
from .resources import extract_listeners, extract_load_balancers

LOG_FORMAT = "%(asctime)s %(levelname).1s %(name)s] %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otcelb", description="List classic ELB listeners and load balancers")
    parser.add_argument("--identity-endpoint", help="Identity endpoint (default: OTC_IDENTITY_ENDPOINT or eu-de IAM)")
    parser.add_argument("--project", help="Project name")
    parser.add_argument("--project-id", help="Project ID")
    parser.add_argument("--region", help="Region (default: OTC_REGION or eu-de)")
    parser.add_argument("--access-key", help="Access key")
    parser.add_argument("--secret-key", help="Secret key")
    parser.add_argument("--log-prefix", default="", help="Prepended to request/response log lines")
    parser.add_argument("--timeout", type=float, default=0.0,
                        help="Per-request timeout in seconds (default: 15)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log debug messages too")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr, level=level)


def run(config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> int:
    """Validate, authenticate and list. Returns the process exit code."""
    try:
        config.validate()
    except ConfigurationError as e:
        logger.critical("%s", e.message)
        return 1

    with ProviderClient(config.identity_endpoint, http_config=config.http_config(), transport=transport) as provider:
        try:
            provider.authenticate(config.auth_options())
        except (OTCError, httpx.HTTPError, ValueError) as e:
            logger.critical("authentication failed with error: %s", e)
            return 1
        try:
            elb = provider.elb_v1(config.region)
        except OTCError as e:
            logger.critical("ELB client creation failed with error: %s", e)
            return 1

        try:
            pages = elb.listeners.list_pages()
        except (OTCError, httpx.HTTPError) as e:
            logger.error("error occurred while getting all pages: %s", e)
            return 1
        try:
            listeners = extract_listeners(pages)
        except (OTCError, ValueError) as e:
            logger.error("error occurred while extracting listeners: %s", e)
            return 1
        logger.info("Listeners: %r", listeners)

        try:
            pages = elb.loadbalancers.list_pages()
        except (OTCError, httpx.HTTPError) as e:
            logger.error("error occurred while getting all pages: %s", e)
            return 1
        try:
            load_balancers = extract_load_balancers(pages)
        except (OTCError, ValueError) as e:
            logger.error("error occurred while extracting lbs: %s", e)
            return 1
        logger.info("ELBs: %r", load_balancers)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    return run(CLIConfig.from_args(args))


if __name__ == "__main__":
    sys.exit(main())
