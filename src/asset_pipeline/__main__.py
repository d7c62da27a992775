"""
Command line entry point for the asset import pipeline.

Usage:
    # Search the catalog
    python -m asset_pipeline search fire --page 2 --page-size 12

    # Import one animation (prints the manifest)
    python -m asset_pipeline import abc123 --generate-template

    # JSON logs to a rotating file as well as stderr
    python -m asset_pipeline --json-logs --log-dir logs import abc123

Results are printed to stdout as JSON. Failures print an error object to
stderr and exit non-zero (2 for configuration errors, 1 otherwise).
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from asset_pipeline.common.exceptions import ConfigurationError, PipelineError
from asset_pipeline.common.logging import get_logger, setup_logging
from asset_pipeline.config import DEFAULT_CONFIG_PATH, PipelineConfig
from asset_pipeline.schemas.manifest import ImportOptions
from asset_pipeline.service import AssetImportService

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="asset_pipeline",
        description="Search and import LottieFiles animations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m asset_pipeline search "loading spinner"
    python -m asset_pipeline import abc123 --generate-template
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to config.yaml (default: ./config.yaml, ignored if missing)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Console logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Also write JSON logs under this directory",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines on the console",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search the provider catalog")
    search_parser.add_argument("query", help="Free-text query")
    search_parser.add_argument("--page", type=int, default=1, help="1-based page (default: 1)")
    search_parser.add_argument(
        "--page-size", type=int, default=24, help="Results per page (default: 24)"
    )

    import_parser = subparsers.add_parser("import", help="Import one animation")
    import_parser.add_argument("provider_id", help="Provider identifier of the animation")
    import_parser.add_argument(
        "--generate-template",
        action="store_true",
        help="Attach the default charge/travel/impact sequence template",
    )

    args = parser.parse_args(argv)
    if args.command == "search" and (args.page < 1 or args.page_size < 1):
        parser.error("--page and --page-size must be positive")
    return args


async def run_command(args: argparse.Namespace, config: PipelineConfig) -> str:
    """Execute the selected subcommand and return its JSON output."""
    async with AssetImportService(config) as service:
        if args.command == "search":
            result = await service.search(args.query, page=args.page, page_size=args.page_size)
        else:
            options = ImportOptions(generate_template=args.generate_template)
            result = await service.import_asset(args.provider_id, options)
    return result.model_dump_json(by_alias=True, indent=2)


def _print_error(error: PipelineError) -> None:
    body = error.to_dict()
    print(
        json.dumps({k: body[k] for k in ("error", "type", "status")}),
        file=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    global logger
    args = parse_args(argv)

    setup_logging(
        name="asset_pipeline",
        log_dir=Path(args.log_dir) if args.log_dir else None,
        json_format=args.json_logs,
        console_level=getattr(logging, args.log_level),
    )
    logger = get_logger(__name__)

    try:
        config = PipelineConfig.load_config(args.config)
        output = asyncio.run(run_command(args, config))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        _print_error(e)
        return EXIT_CONFIGURATION
    except PipelineError as e:
        _print_error(e)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_FAILURE

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
