"""
Command-line interface for SlideFix.
"""

import sys
import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

from slidefix import __version__
from slidefix.config import FOCUS_AREAS, ReviewRequest, ReviewSettings
from slidefix.display import show_analysis, show_apply_result, show_deck, show_report
from slidefix.errors import CollaboratorUnavailable
from slidefix.llm import create_generator
from slidefix.logging_utils import setup_logging
from slidefix.review import ConvergenceLoop, build_text_analysis_prompt
from slidefix.storage import load_deck, save_deck

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SlideFix: review a slide deck's structure and apply suggested fixes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Review with the default focus (flow, intro/conclusion)
  slidefix deck.json

  # Focus on pacing and examples, using a local Ollama model
  slidefix deck.json --focus pacing examples --provider ollama

  # Show a plain-text analysis first, write the result elsewhere
  slidefix deck.json --preview --output improved.json

  # Apply every round without asking
  slidefix deck.json --yes

Environment Variables:
  ANTHROPIC_API_KEY   API key for Claude
  OLLAMA_API_BASE     Ollama server (default: http://localhost:11434)
  DEFAULT_AI_MODEL    Model name for the selected provider
  SLIDEFIX_PROVIDER   auto, anthropic or ollama
        """,
    )

    parser.add_argument(
        "deck",
        nargs="?",
        type=Path,
        help="Deck JSON file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"SlideFix {__version__}",
    )

    parser.add_argument(
        "--provider",
        choices=["auto", "anthropic", "ollama"],
        help="Text-generation backend (default: auto)",
    )

    parser.add_argument(
        "--model",
        help="Model name for the selected provider",
    )

    parser.add_argument(
        "--focus",
        nargs="+",
        choices=sorted(FOCUS_AREAS),
        default=["flow", "intro_conclusion"],
        help="Focus areas for the review (default: flow intro_conclusion)",
    )

    parser.add_argument(
        "--issues",
        default="",
        help="Specific issues you want addressed",
    )

    parser.add_argument(
        "--goal",
        help="What the presentation should achieve",
    )

    parser.add_argument(
        "--iterations",
        type=int,
        choices=[1, 2, 3],
        help="Maximum review rounds (default: 3)",
    )

    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show a plain-text analysis before applying any fixes",
    )

    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Continue to the next round without asking",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Where to write the improved deck (default: overwrite the input)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose logging",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write the log to this file",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tracebacks on errors",
    )

    return parser


def main() -> int:
    """Main CLI entry point."""
    load_dotenv()  # Load .env file if present

    parser = build_parser()
    args = parser.parse_args()

    if not args.deck:
        parser.print_help()
        return 1

    if not args.deck.exists():
        print(f"Error: Deck file not found: {args.deck}", file=sys.stderr)
        return 1

    setup_logging(verbose=args.verbose or args.debug, log_path=args.log_file)
    console = Console()

    try:
        deck = load_deck(args.deck)
        show_deck(console, deck)

        request = ReviewRequest(
            focus_areas=args.focus,
            specific_issues=args.issues,
            **({"target_outcome": args.goal} if args.goal else {}),
        )
        settings = ReviewSettings.from_env(
            provider=args.provider,
            model=args.model,
            max_iterations=args.iterations,
        )
        generator = create_generator(settings)
        logger.info("[CLI] Using %s", generator.name)

        if args.preview:
            analysis_text = generator.generate(build_text_analysis_prompt(deck, request))
            console.print(Panel(analysis_text, title="Structure analysis"))
            if not args.yes and not Confirm.ask("Apply suggested fixes?", default=True):
                return 0

        def confirm(applied: int, next_iteration: int, max_iterations: int) -> bool:
            if args.yes:
                return True
            return Confirm.ask(
                f"Applied {applied} fixes. Run review {next_iteration}/{max_iterations}?",
                default=True,
            )

        def progress(iteration, analysis, result) -> None:
            show_analysis(console, analysis, iteration)
            show_apply_result(console, result)

        loop = ConvergenceLoop(
            generator,
            confirm=confirm,
            max_iterations=settings.max_iterations,
            progress_callback=progress,
        )

        try:
            report = loop.run(deck, request)
        except CollaboratorUnavailable as e:
            console.print(f"[red]Error: {e}[/red]")
            if e.report is not None:
                show_report(console, e.report)
            # Fixes from earlier rounds are kept
            save_deck(deck, args.output or args.deck)
            return 1

        show_report(console, report)
        if report.fixes_applied:
            backup = save_deck(deck, args.output or args.deck)
            if backup:
                console.print(f"[yellow]Previous version backed up to {backup}[/yellow]")
            show_deck(console, deck)
        else:
            console.print("No changes made.")

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
