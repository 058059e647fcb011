#!/usr/bin/env python3
"""
Wolai to Markdown Exporter - Main CLI Entry Point

Exports a Wolai page and all of its sub-pages to a directory of
``index.md`` files, downloading embedded images next to each page.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from config_loader import ConfigLoader, get_nested
from exporters import AssetManager, ExportError, MarkdownExporter
from fetchers import (
    BlockTreeFetcher,
    FetcherError,
    PermissionDeniedError,
    TokenInvalidError
)
from logger import log_config, log_section, setup_logging
from models import ExitCode
from wolai_client import WolaiClient

__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='wolai-export',
        description="Export a Wolai page tree to Markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export a page and its sub-pages into ./notes
  wolai-export $WOLAI_TOKEN 5fS1ahg9QwHmYZjYB2xcHL ./notes

  # Use a configuration file and verbose logging
  wolai-export $WOLAI_TOKEN 5fS1ahg9QwHmYZjYB2xcHL ./notes --config config.yaml -vv

  # Keep images on Wolai's servers instead of downloading them
  wolai-export $WOLAI_TOKEN 5fS1ahg9QwHmYZjYB2xcHL ./notes --no-images
        """
    )

    parser.add_argument('token', help='Wolai API access token')
    parser.add_argument('page_id', help='ID of the page to export')
    parser.add_argument('output_dir', help='Existing directory to write the export into')

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file (optional)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '--no-images',
        action='store_true',
        help='Link images remotely instead of downloading them'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_export(config: dict, page_id: str, logger: logging.Logger) -> ExitCode:
    """Execute the export and map failures to exit codes."""
    output_dir = Path(get_nested(config, 'export.output_directory'))

    try:
        client = WolaiClient.from_config(config)
        fetcher = BlockTreeFetcher.from_config(config, client)
        asset_manager = AssetManager(client, config)
        exporter = MarkdownExporter(fetcher, asset_manager, config)

        title = fetcher.fetch_page_title(page_id)
        log_section(f"Exporting {title}")

        stats = exporter.export_page(page_id, title, output_dir)

        if stats['images_failed']:
            logger.warning(f"{stats['images_failed']} image(s) could not be downloaded and link to Wolai instead")
        logger.info("Export completed successfully")
        return ExitCode.SUCCESS

    except TokenInvalidError as e:
        logger.error(str(e))
        return ExitCode.TOKEN_ERROR
    except PermissionDeniedError as e:
        logger.error(str(e))
        return ExitCode.PERMISSION_ERROR
    except FetcherError as e:
        logger.error(str(e))
        return ExitCode.UNKNOWN_ERROR
    except ExportError as e:
        logger.error(f"failed to write to output directory: {e}")
        return ExitCode.OUTPUT_ERROR


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbosity=args.verbose)
    logger = logging.getLogger('wolai_markdown_exporter.cli')

    try:
        config = ConfigLoader.load(args.config)
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Configuration error: {e}")
        return ExitCode.PARAM_ERROR

    try:
        # Explicit -v flags win over the configured level
        setup_logging(
            verbosity=args.verbose,
            level=None if args.verbose else get_nested(config, 'logging.level'),
            log_file=get_nested(config, 'logging.file')
        )
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return ExitCode.PARAM_ERROR

    log_section("Wolai to Markdown Exporter")
    logger.info(f"Version: {__version__}")
    log_config(config)

    try:
        return run_export(config, args.page_id, logger)
    except KeyboardInterrupt:
        logger.error("Export interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Export failed: {str(e)}", exc_info=True)
        return ExitCode.UNKNOWN_ERROR


if __name__ == "__main__":
    sys.exit(main())
