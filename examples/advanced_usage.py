"""
Advanced usage examples for SlideFix.

Shows how to:
- Recover JSON from a messy model reply
- Apply fixes without a language model
- Plug in a custom backend
"""

from slidefix import ConvergenceLoop, Deck, Slide, apply_fixes, recover_json
from slidefix.llm.base import TextGenerator
from slidefix.recovery import analysis_from_value


def example_recover_json():
    """Repair a reply with prose, single quotes and a trailing comma."""
    print("\n[Example 1] JSON recovery")

    reply = "Sure! Here are the fixes: {'fixes': [{'type': 'add_slide', 'position': 'end'},]}"
    result = recover_json(reply)

    print(f"✓ Strategy: {result.strategy.value}")
    print(f"  Value: {result.value}")


def example_apply_offline():
    """Apply a hand-written fix batch to a deck."""
    print("\n[Example 2] Offline fix application")

    deck = Deck(
        title="Caching 101",
        slides=[Slide(title="Why cache"), Slide(title="Eviction")],
    )
    analysis = analysis_from_value(
        [
            {"type": "add_slide", "position": "after_slide_0", "description": "Add an intro"},
            {"type": "modify_slide", "position": "slide_3", "new_content": {"title": "Eviction policies"}},
            {"type": "reorder_slides", "description": "Move the demo before eviction"},
        ]
    )

    result = apply_fixes(deck, analysis.fixes)

    print(f"✓ Applied {result.applied} fixes")
    for slide in deck.slides:
        print(f"  {slide.position}. {slide.title}")
    for message in result.guidance:
        print(f"  Manual: {message}")


class EchoGenerator(TextGenerator):
    """Backend that always reports a clean deck."""

    def generate(self, prompt: str) -> str:
        return '{"issues_found": [], "fixes": [], "overall_assessment": "No changes needed"}'


def example_custom_backend():
    """Run the loop with a custom TextGenerator."""
    print("\n[Example 3] Custom backend")

    deck = Deck.from_dict({"title": "Demo", "slides": [{"title": "Hello", "content": ["World"]}]})
    report = ConvergenceLoop(EchoGenerator(), confirm=lambda *args: False).run(deck)

    print(f"✓ {report.state.value}: {report.overall_assessment}")


if __name__ == "__main__":
    example_recover_json()
    example_apply_offline()
    example_custom_backend()
