"""
tomtom-places - Australian address autocomplete from the command line.

All addresses are looked up concurrently through one FuzzySearch client, so
rate limited lookups are delayed and retried together.
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .client import FuzzySearch
from .config import ConfigManager
from .exceptions import TomTomPlacesError
from .logging_utils import initLogging
from .models import AutoCompleteOptions, AutoCompleteResult, FuzzySearchOptions
from .utils import jsonDumps

logger = logging.getLogger(__name__)

# Used when no config file is given: only warnings and errors, on stderr
DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {"level": "WARNING", "console": True}


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="tomtom-places",
        description="Autocomplete Australian addresses with the TomTom Fuzzy Search API, dood!",
    )
    parser.add_argument("address", nargs="*", help="Address to autocomplete (can be specified multiple times)")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml, optional)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument("--api-key", help="TomTom API key (default: from config or TOMTOM_API_KEY)")
    parser.add_argument("--limit", type=int, help="Maximum number of results per address, 1 to 100")
    parser.add_argument("--delay", type=float, help="Delay in seconds after a rate limit error")
    parser.add_argument("--timeout", type=float, help="HTTP request timeout in seconds")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    args = parser.parse_args(argv)
    if not args.address and not args.print_config:
        parser.error("at least one address is required")
    return args


def loadConfigManager(args: argparse.Namespace) -> Optional[ConfigManager]:
    """Load the configuration if a config file or config directory is available."""
    if not args.config_dir and not Path(args.config).exists():
        logger.debug(f"No configuration file at {args.config}, using environment and flags")
        return None
    return ConfigManager(configPath=args.config, configDirs=args.config_dir)


def resolveOptions(
    args: argparse.Namespace, configManager: Optional[ConfigManager]
) -> Tuple[FuzzySearchOptions, AutoCompleteOptions]:
    """Merge config file options with command line flags, flags win."""
    searchOptions = FuzzySearchOptions()
    callOptions = AutoCompleteOptions()
    if configManager is not None:
        searchOptions = configManager.getFuzzySearchOptions()
        callOptions = configManager.getAutoCompleteOptions()

    overrides = {"apiKey": args.api_key, "delay": args.delay, "limit": args.limit}
    searchOptions = dataclasses.replace(searchOptions, **{k: v for k, v in overrides.items() if v is not None})
    if args.timeout is not None:
        callOptions = AutoCompleteOptions(timeout=args.timeout)

    return searchOptions, callOptions


async def lookupAddresses(
    search: FuzzySearch, addresses: Sequence[str], options: AutoCompleteOptions
) -> Tuple[Dict[str, List[AutoCompleteResult]], Dict[str, BaseException]]:
    """Look up all addresses concurrently, returning results and errors keyed by address.

    Repeated addresses are looked up once.
    """
    addresses = list(dict.fromkeys(addresses))
    futures = [search.autoComplete(address, options) for address in addresses]
    outcomes = await asyncio.gather(*futures, return_exceptions=True)

    results: Dict[str, List[AutoCompleteResult]] = {}
    errors: Dict[str, BaseException] = {}
    for address, outcome in zip(addresses, outcomes):
        if isinstance(outcome, BaseException):
            errors[address] = outcome
        else:
            results[address] = outcome
    return results, errors


async def run(args: argparse.Namespace, searchOptions: FuzzySearchOptions, callOptions: AutoCompleteOptions) -> int:
    """Run the lookups and print the results, returns the exit code."""
    async with FuzzySearch.fromOptions(searchOptions) as search:
        results, errors = await lookupAddresses(search, args.address, callOptions)

    for address, error in errors.items():
        logger.error(f"Lookup failed for '{address}': {type(error).__name__}#{error}")

    print(jsonDumps(results, indent=2))
    return 1 if errors else 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        configManager = loadConfigManager(args)

        if args.print_config:
            config = configManager.config if configManager is not None else {}
            print(jsonDumps(config, indent=2))
            sys.exit(0)

        initLogging(configManager.getLoggingConfig() if configManager is not None else DEFAULT_LOGGING_CONFIG)

        searchOptions, callOptions = resolveOptions(args, configManager)
        exitCode = asyncio.run(run(args, searchOptions, callOptions))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        sys.exit(130)
    except TomTomPlacesError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)

    sys.exit(exitCode)


if __name__ == "__main__":
    main()
