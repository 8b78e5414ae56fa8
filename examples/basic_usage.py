"""
Basic usage example for SlideFix.

This example shows how to review a deck and apply the suggested fixes
using the Python API.
"""

from pathlib import Path

from slidefix import ConvergenceLoop
from slidefix.config import ReviewRequest, ReviewSettings
from slidefix.llm import create_generator
from slidefix.storage import load_deck, save_deck


def main():
    deck = load_deck(Path("examples/sample_deck.json"))

    # Ollama when it is running locally, otherwise Claude (requires ANTHROPIC_API_KEY)
    generator = create_generator(ReviewSettings.from_env())

    loop = ConvergenceLoop(
        generator,
        confirm=lambda applied, next_iteration, max_iterations: True,  # Never ask
        max_iterations=2,
    )

    request = ReviewRequest(
        focus_areas=["flow", "examples", "pacing"],
        specific_issues="The middle section drags",
    )
    report = loop.run(deck, request)

    print(f"\n✓ Review finished ({report.state.value})")
    print(f"  Fixes applied: {report.fixes_applied}")
    print(f"  Iterations: {report.iterations}")
    for message in report.guidance:
        print(f"  Manual: {message}")

    save_deck(deck, Path("output/sample_deck.json"))


if __name__ == "__main__":
    main()
