#!/usr/bin/env python3
"""
GoDocset - build a Dash docset from godoc.

This tool starts a local godoc server, crawls the documentation of every
third-party package in your GOPATH, and packages it as an offline docset
with a searchable index.

Usage:
    python -m godocset.main --name MyGo --output /tmp --filters github.com/user/*

Features:
    - Crawls package pages concurrently with retry
    - Rewrites stylesheet and script links for offline viewing
    - Mirrors godoc's static assets
    - Indexes packages, functions, types, methods, variables and constants
"""

import argparse
import asyncio
import logging
import sqlite3
import sys
from typing import List, Optional

from godocset.config import DocsetConfig, load_config, parse_filters
from godocset.crawler import DocsetCrawler
from godocset.crawler.scheduler import BATCH
from godocset.errors import SetupError
from godocset.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Arguments to parse; sys.argv when None

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='godocset',
        description='Build a Dash docset from a godoc server',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --name GoDoc --output /tmp
    %(prog)s --filters github.com/user/pkg1,user/pkg2
    %(prog)s --filters 'github.com/user/*' --icon ./gopher.png
    %(prog)s --server http://localhost:6060 --silent

Settings are read from godocset-config.json, .yaml or .yml in /tmp or the
current directory when present; flags override them.
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='JSON or YAML configuration file (default: godocset-config.{json,yaml,yml} in /tmp or .)'
    )

    parser.add_argument(
        '--name', '-n',
        type=str,
        default=None,
        help='Docset name (default: GoDoc)'
    )

    parser.add_argument(
        '--icon',
        type=str,
        default=None,
        help='Docset icon .png path (default: bundled godoc icon)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Directory to store the docset in, e.g. /tmp (default: .)'
    )

    parser.add_argument(
        '--filters', '-f',
        type=str,
        default=None,
        help='Comma separated filters, e.g. github.com/user/pkg1,user/pkg2'
    )

    parser.add_argument(
        '--goroot',
        type=str,
        default=None,
        help='Override the GOROOT godoc serves'
    )

    parser.add_argument(
        '--server',
        type=str,
        default=None,
        help='Use an already running godoc server at this URL'
    )

    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        default=None,
        help='Packages crawled concurrently (default: 10)'
    )

    parser.add_argument(
        '--batch',
        action='store_true',
        help='Crawl in fixed batches instead of a sliding window'
    )

    parser.add_argument(
        '--silent', '-s',
        action='store_true',
        help='Silent mode (only print errors)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write log records to this file'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DocsetConfig:
    """
    Combine the configuration file with command line flags.

    Args:
        args: Parsed arguments

    Returns:
        Effective configuration

    Raises:
        ConfigError: If the configuration file is unusable
    """
    config = load_config(args.config)

    filters = parse_filters(args.filters)

    return config.with_overrides(
        name=args.name,
        icon=args.icon,
        output=args.output,
        filters=filters or None,
        goroot=args.goroot,
        server_url=args.server,
        concurrency=args.concurrency,
        strategy=BATCH if args.batch else None,
        silent=True if args.silent else None,
    )


def print_banner() -> None:
    """Print the application banner."""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                         GODOCSET v1.0                         ║
║                 Dash docsets from your GOPATH                 ║
╚═══════════════════════════════════════════════════════════════╝
    """
    print_status(banner, "bold cyan")


def print_summary(result) -> None:
    """
    Print the build summary.

    Args:
        result: CrawlResult object
    """
    print_status("=" * 60, "bold")
    print_success("DOCSET SUMMARY")
    print_status("=" * 60, "bold")
    print_status(f"  Packages found:    {result.packages_found}", "none")
    print_status(f"  Packages written:  {result.packages_written}", "none")
    print_status(f"  Not packages:      {result.packages_skipped}", "none")
    print_status(f"  Failed:            {len(result.failures)}", "none")
    print_status(f"  Symbols indexed:   {result.symbols_indexed}", "none")
    print_status(f"  Assets mirrored:   {result.assets_mirrored}", "none")
    print_status(f"  Duration:          {result.duration_seconds:.1f} seconds", "none")

    for name, error in result.failures:
        print_error(f"{name}: {error}")

    print_status("=" * 60, "bold")


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the docset builder.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)

    # Logging must exist before the config file is read
    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        config = build_config(args)

        if config.silent:
            setup_logger(level=logging.ERROR, log_file=args.log_file)

        print_banner()

        crawler = DocsetCrawler(config)
        result = await crawler.run()

        print_summary(result)
        print_success(f"Docset written to: {result.docset_dir}")

        return 0

    except KeyboardInterrupt:
        print_error("Build interrupted by user")
        return 1
    except SetupError as e:
        print_error(str(e))
        return 1
    except sqlite3.Error as e:
        print_error(f"Search index error: {e}")
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
