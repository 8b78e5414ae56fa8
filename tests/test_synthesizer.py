"""
Tests for template content synthesis.
"""

import pytest

from slidefix.fixes.synthesizer import (
    DETAIL_THRESHOLD,
    categorize,
    complete_payload,
    synthesize,
    synthesize_body,
)
from slidefix.models import Fix, FixContent


@pytest.mark.parametrize(
    "description,title",
    [
        ("Add a practical example of caching", "Real-World Example"),
        ("Include a case study from retail", "Real-World Example"),
        ("Add a case-study slide", "Real-World Example"),
        ("Walk through one CaseStudy", "Real-World Example"),
        ("Insert an interactive poll", "Interactive Element"),
        ("Boost engagement midway", "Interactive Element"),
        ("Recap the first section", "Summary"),
        ("Add a stronger intro", "Introduction"),
        ("Wrap up with next steps", "Conclusion"),
        ("Cover the pricing model", "New Content Slide"),
    ],
)
def test_synthesized_titles(description, title):
    """Test title lookup by description keyword."""
    assert synthesize(Fix(type="add_slide", description=description)).title == title


def test_category_order():
    """Test the first matching category wins."""
    assert categorize("An interactive example") == "example"
    assert categorize("") is None


def test_category_bodies():
    """Test the fixed bodies for example, interactive and summary slides."""
    assert len(synthesize_body(Fix(description="Show an example"))) == 4
    assert synthesize_body(Fix(description="Add interactive Q&A"))[-1] == "Q&A opportunity"
    assert synthesize_body(Fix(description="Summary of part one")) == [
        "Key points covered so far",
        "Main takeaways",
        "How this connects to what's next",
    ]


def test_generic_body_detail_threshold():
    """Test the supporting-details line appears only past the threshold."""
    at_threshold = Fix(description="x" * DETAIL_THRESHOLD)
    past_threshold = Fix(description="x" * (DETAIL_THRESHOLD + 1))

    assert synthesize_body(at_threshold) == [
        "Main concept or idea",
        "Examples or applications",
        "Key takeaway",
    ]
    assert synthesize_body(past_threshold) == [
        "Main concept or idea",
        "Examples or applications",
        "Supporting details",
        "Key takeaway",
    ]


def test_generic_body_uses_action_length():
    """Test the action text, when present, decides the threshold."""
    fix = Fix(description="short", action="y" * (DETAIL_THRESHOLD + 10))
    assert "Supporting details" in synthesize_body(fix)


def test_notes_prefer_action():
    """Test speaker notes come from action, else description."""
    assert synthesize(Fix(description="Add pricing", action="Explain tiers")).notes == (
        "Speaker notes: Explain tiers"
    )
    assert synthesize(Fix(description="Add pricing")).notes == "Speaker notes: Add pricing"


def test_complete_payload_fills_missing_fields():
    """Test present payload fields are kept and missing ones synthesized."""
    fix = Fix(type="add_slide", description="Add a recap", new_content={"title": "X"})
    content = complete_payload(fix)

    assert content.title == "X"
    assert content.body == [
        "Key points covered so far",
        "Main takeaways",
        "How this connects to what's next",
    ]
    assert content.notes == "Speaker notes: Add a recap"
    assert content.is_complete()


def test_complete_payload_treats_blank_as_missing():
    """Test blank titles and empty bodies are replaced."""
    fix = Fix(description="Cover costs", payload=FixContent(title="  ", body=[], notes=""))
    content = complete_payload(fix)

    assert content.title == "New Content Slide"
    assert content.body[0] == "Main concept or idea"
    assert content.notes == ""


def test_complete_payload_without_payload():
    """Test a fix with no payload gets a full template slide."""
    fix = Fix(description="Add an interactive exercise")
    assert complete_payload(fix) == synthesize(fix)
