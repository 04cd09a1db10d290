"""
Show Scheduler CLI - Command Line Interface

argparse-based CLI: generate a schedule from a message, or serve the API.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.logger import setup_logging
from src.supabase_store import SupabaseClient

from .config import SchedulerConfig
from .exceptions import InvalidRequestError, PersistenceError
from .generator import GenerationResult, ScheduleGenerator
from .models import ScheduleRequest
from .openai_client import OpenAIClient
from .playlist_sync import persist_as_playlist
from .workspace import export_schedule

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="python -m src.show_scheduler",
        description="Natural-language radio show schedule generation",
        epilog='Example: python -m src.show_scheduler generate "Build a 2-hour jazz show with news every 30 minutes"',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose debug logging")
    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a schedule from a description")
    generate.add_argument("message", help="What kind of show you want")
    generate.add_argument("--duration", help='Duration hint, e.g. "3 hours"')
    generate.add_argument("--genre", help='Genre hint, e.g. "Rock"')
    generate.add_argument("--energy", help='Energy hint, e.g. "High"')
    generate.add_argument("--output", metavar="FILE", help="Write the schedule JSON to FILE")
    generate.add_argument("--save", action="store_true", help="Save the schedule as a playlist")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    return parser


def display_schedule(result: GenerationResult) -> None:
    """Print a generated schedule as a table."""
    schedule = result.schedule
    print()
    print("=" * 70)
    print(schedule.title.upper())
    print("=" * 70)
    print(result.message)
    print("-" * 70)
    for item in schedule.items:
        label = item.title if not item.artist else f"{item.artist} - {item.title}"
        print(f"{item.start_time:>8}  {item.end_time:>8}  {item.duration_display:>6}  {item.kind.value:<12} {label}")
    print("-" * 70)
    print(f"Total: {schedule.total_duration_display} ({schedule.total_duration_seconds}s)")
    print("=" * 70)
    print()


async def run_generate(args: argparse.Namespace, config: SchedulerConfig) -> int:
    """Generate one schedule and optionally export/save it."""
    request = ScheduleRequest.from_message(
        args.message, {"duration": args.duration, "genre": args.genre, "energy": args.energy}
    )

    async with SupabaseClient(config.to_store_config()) as store:
        generator = ScheduleGenerator(
            store=store,
            model=OpenAIClient(
                api_key=config.openai_api_key,
                model=config.openai_model,
                timeout_seconds=config.model_timeout_seconds,
            ),
            prompt_defaults=config.prompt_defaults,
            catalog_limit=config.catalog_limit,
            model_timeout_seconds=config.model_timeout_seconds,
        )
        result = await generator.generate(request)
        display_schedule(result)

        if args.output:
            _, document = export_schedule(result.schedule)
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(document, encoding="utf-8")
            print(f"Schedule written to {output_path}")

        if args.save:
            saved = await persist_as_playlist(result.schedule, store)
            print(f"Saved as playlist {saved.playlist_id} ({saved.entry_count} entries)")

    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "serve":
        return run_serve(args)

    try:
        config = SchedulerConfig.from_environment()
        logger.debug(f"Started {datetime.now():%Y-%m-%d %H:%M:%S} with {config!r}")
        return asyncio.run(run_generate(args, config))
    except InvalidRequestError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        return 1
    except (EnvironmentError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except PersistenceError as e:
        print(f"Could not save schedule: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
