"""
Command line interface for the narrated script generator.

Loads API keys from environment variables (via `.env`) and exposes the
pipeline and the script library as sub-commands:

    python main.py generate "Every Fighter Jet Generation Explained"
    python main.py list
    python main.py show 2024-05-01-every-fighter-jet-generation-explained.txt
    python main.py delete 2024-05-01-every-fighter-jet-generation-explained.txt
    python main.py status
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from scriptgen import GenerationRequest, ScriptGenError, ScriptOrchestrator, Settings
from scriptgen.script_library import ScriptLibrary

logger = logging.getLogger(__name__)

RULE = "=" * 50


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptgen",
        description="Narrated script generator - create long-form video scripts from titles.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a script from a title.")
    generate.add_argument("title", help="The title of the video.")
    generate.add_argument("-o", "--output", type=Path, default=None, help="Output directory for scripts.")
    generate.add_argument("--no-research", action="store_true", help="Skip the web research phase.")
    generate.add_argument("-w", "--words", type=int, default=1250, help="Target word count.")
    generate.add_argument("-r", "--retries", type=int, default=2, help="Maximum generation attempts.")

    list_cmd = subparsers.add_parser("list", help="List generated scripts.")
    list_cmd.add_argument("-o", "--output", type=Path, default=None, help="Library directory.")

    show = subparsers.add_parser("show", help="Print a generated script.")
    show.add_argument("filename", help="Script filename inside the library.")
    show.add_argument("-o", "--output", type=Path, default=None, help="Library directory.")

    delete = subparsers.add_parser("delete", help="Delete a generated script.")
    delete.add_argument("filename", help="Script filename inside the library.")
    delete.add_argument("-o", "--output", type=Path, default=None, help="Library directory.")

    subparsers.add_parser("status", help="Show which API credentials are configured.")
    return parser


def _library(settings: Settings, output: Optional[Path]) -> ScriptLibrary:
    return ScriptLibrary(output or settings.library_dir)


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    request = GenerationRequest(
        title=args.title,
        enable_research=not args.no_research,
        target_word_count=args.words,
        max_retries=args.retries,
        output_dir=args.output,
    )
    orchestrator = ScriptOrchestrator.from_settings(settings)

    print(RULE)
    result = orchestrator.generate(request)
    print(RULE)

    if result.success:
        print("Script generation completed successfully.")
        print(f"File: {result.file_path}")
        print(f"Word count: {result.word_count} words")
        if result.research_source_count is not None:
            print(f"Research sources: {result.research_source_count}")
        return 0

    print("Script generation did not pass validation." if result.file_path else "Script generation failed.")
    if result.warning:
        print(f"Warning: {result.warning}")
    if result.error:
        print(f"Error: {result.error}")
    if result.file_path:
        print(f"Partial result saved to: {result.file_path}")
    return 1


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    records = _library(settings, args.output).list()
    if not records:
        print("No scripts found in the output directory.")
        return 0

    print("Generated scripts:")
    print(RULE)
    for index, record in enumerate(records, start=1):
        print(
            f"{index}. {record.filename}  "
            f"[{record.generated_at:%Y-%m-%d %H:%M}, {record.word_count} words]  {record.title}"
        )
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    content = _library(settings, args.output).read(args.filename)
    print("Script content:")
    print(RULE)
    print(content)
    return 0


def cmd_delete(args: argparse.Namespace, settings: Settings) -> int:
    if _library(settings, args.output).delete(args.filename):
        print(f"Deleted {args.filename}")
        return 0
    print(f"No script named {args.filename}")
    return 1


def cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    print("Environment status")
    print(RULE)
    for key, is_set in settings.environment_status().items():
        print(f"  {key}: {'set' if is_set else 'not set'}")
    print()
    if not settings.has_synthesis_provider:
        print("ANTHROPIC_API_KEY or OPENAI_API_KEY is required to generate scripts.")
    if not settings.has_search_provider:
        print("No search API configured. Research will use offline mock results.")
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "list": cmd_list,
    "show": cmd_show,
    "delete": cmd_delete,
    "status": cmd_status,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and dispatch to the selected sub-command."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger.info("Loading environment variables from .env file...")
    load_dotenv()

    try:
        settings = Settings.from_env()
        return COMMANDS[args.command](args, settings)
    except ValidationError as exc:
        logger.error("Invalid %s arguments: %s", args.command, exc)
        print("Invalid arguments:")
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "request"
            print(f"  {field}: {error['msg']}")
        return 2
    except ScriptGenError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"An error occurred: {exc}")
        return 1
    except Exception as exc:
        logger.exception("Unexpected error while running '%s': %s", args.command, exc)
        print(f"An error occurred: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
