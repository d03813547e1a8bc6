"""
Command line entry point for the publish checker.
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from publish_checker.config.checker_config import CheckerConfig, load_checker_config
from publish_checker.controller import PublishCheckController
from publish_checker.core.schema_loader import load_schema_file
from publish_checker.exceptions import CheckerError
from publish_checker.reporting.publish_report import format_markdown_report

logger = logging.getLogger(__name__)

EXIT_UP_TO_DATE = 0
EXIT_STALE = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="publish-checker",
        description="Find draft content that diverged from its published version",
    )
    parser.add_argument("--type", required=True, dest="type_name", help="Root content type, e.g. Page")
    parser.add_argument("--id", dest="entry_id", help="Root entry id (omit to only print the query)")
    parser.add_argument("--endpoint", help="GraphQL endpoint (overrides config)")
    parser.add_argument("--config", help="Path to checker_config.yaml")
    parser.add_argument("--token-env", help="Environment variable holding the auth token")
    parser.add_argument("--schema-file", help="SDL or introspection JSON to use instead of introspecting")
    parser.add_argument("--show-query", action="store_true", help="Print the generated checker query")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print out-of-date records as JSON")
    output.add_argument("--markdown", action="store_true", help="Print a Markdown report")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


async def run_check(args: argparse.Namespace, config: CheckerConfig) -> int:
    needs_endpoint = args.entry_id or not args.schema_file
    if needs_endpoint:
        controller = PublishCheckController.from_config(
            args.type_name, config, endpoint=args.endpoint
        )
    else:
        # Query generation from a local schema works offline
        controller = PublishCheckController(None, args.type_name, config)

    if args.schema_file:
        controller.explore_schema(load_schema_file(args.schema_file))
    else:
        await controller.explore()

    synthesized = controller.state.synthesized
    if synthesized is None:
        print(controller.render())
        return EXIT_ERROR

    if args.show_query or not args.entry_id:
        print(synthesized.operation_text)
    if not args.entry_id:
        return EXIT_UP_TO_DATE

    results = await controller.refresh(args.entry_id)
    if results is None:
        print(controller.render())
        return EXIT_ERROR

    if args.json:
        print(json.dumps([record.model_dump(by_alias=True) for record in results], indent=2))
    elif args.markdown:
        print(format_markdown_report(args.type_name, args.entry_id, controller.summary))
    else:
        print(controller.render())

    return EXIT_STALE if results else EXIT_UP_TO_DATE


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_checker_config(args.config) if args.config else CheckerConfig()
        if args.token_env:
            config.transport.auth_token_env = args.token_env
        return asyncio.run(run_check(args, config))
    except (CheckerError, FileNotFoundError) as e:
        logger.error(f"Publish check failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
