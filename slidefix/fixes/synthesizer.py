"""
Template content for fixes that arrive without slide content.

This is a keyword lookup against the fix description, not text
generation: the same fix always yields the same slide.
"""

import re
from typing import List, Optional

from slidefix.models import Fix, FixContent

# Generic bodies get a "Supporting details" line above this many characters
DETAIL_THRESHOLD = 50

EXAMPLE = "example"
INTERACTIVE = "interactive"
SUMMARY = "summary"
INTRODUCTION = "introduction"
CONCLUSION = "conclusion"

# Checked in order; first category whose pattern matches wins
CATEGORY_KEYWORDS = [
    (EXAMPLE, re.compile(r"example|case.?study", re.IGNORECASE)),
    (INTERACTIVE, re.compile(r"interactive|engagement", re.IGNORECASE)),
    (SUMMARY, re.compile(r"summary|recap", re.IGNORECASE)),
    (INTRODUCTION, re.compile(r"intro", re.IGNORECASE)),
    (CONCLUSION, re.compile(r"conclusion|wrap", re.IGNORECASE)),
]

CATEGORY_TITLES = {
    EXAMPLE: "Real-World Example",
    INTERACTIVE: "Interactive Element",
    SUMMARY: "Summary",
    INTRODUCTION: "Introduction",
    CONCLUSION: "Conclusion",
}
DEFAULT_TITLE = "New Content Slide"

CATEGORY_BODIES = {
    EXAMPLE: [
        "Real-world scenario or use case",
        "Step-by-step walkthrough",
        "Key insights and takeaways",
        "Discussion: How does this apply to your work?",
    ],
    INTERACTIVE: [
        "Quick poll: [Ask audience a relevant question]",
        "Small group discussion (2-3 minutes)",
        "Share insights with the larger group",
        "Q&A opportunity",
    ],
    SUMMARY: [
        "Key points covered so far",
        "Main takeaways",
        "How this connects to what's next",
    ],
}


def categorize(description: str) -> Optional[str]:
    """Return the content category named by a fix description, if any."""
    for category, pattern in CATEGORY_KEYWORDS:
        if pattern.search(description or ""):
            return category
    return None


def _detail_source(fix: Fix) -> str:
    return fix.action if fix.action else fix.description


def synthesize_title(fix: Fix) -> str:
    return CATEGORY_TITLES.get(categorize(fix.description), DEFAULT_TITLE)


def synthesize_body(fix: Fix) -> List[str]:
    category = categorize(fix.description)
    if category in CATEGORY_BODIES:
        return list(CATEGORY_BODIES[category])

    body = ["Main concept or idea", "Examples or applications"]
    if len(_detail_source(fix)) > DETAIL_THRESHOLD:
        body.append("Supporting details")
    body.append("Key takeaway")
    return body


def synthesize_notes(fix: Fix) -> str:
    return f"Speaker notes: {_detail_source(fix)}"


def synthesize(fix: Fix) -> FixContent:
    """Fabricate a complete title/body/notes payload for a fix."""
    return FixContent(
        title=synthesize_title(fix),
        body=synthesize_body(fix),
        notes=synthesize_notes(fix),
    )


def complete_payload(fix: Fix) -> FixContent:
    """
    Keep every usable field of the fix payload and synthesize the rest.

    Blank titles and empty bodies count as missing.
    """
    payload = fix.payload or FixContent()
    return FixContent(
        title=payload.title if payload.title and payload.title.strip() else synthesize_title(fix),
        body=payload.body if payload.body else synthesize_body(fix),
        notes=payload.notes if payload.notes is not None else synthesize_notes(fix),
    )
