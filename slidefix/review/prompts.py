"""
Prompts sent to the language model during a structure review.

The review prompt documents the JSON interchange shape the rest of the
package expects:

    {
      "issues_found": [{category, severity, description, affected_slides, impact}],
      "fixes": [{type, description, action, position, new_content: {title, content, notes}}],
      "overall_assessment": "..."
    }
"""

from typing import List

from slidefix.config import FOCUS_AREAS, ReviewRequest
from slidefix.models import Deck

DECK_DETAILS_TEMPLATE = """**Presentation Details:**
Title: {title}
Description: {description}
Duration: {duration} minutes
Audience: {audience}
Current Slides: {slide_count}
Goal: {goal}"""

REVIEW_PROMPT_TEMPLATE = """Analyze this presentation structure and provide actionable fixes:

{details}

**Current Structure:**
{structure}
{specific_issues}
**Focus Areas for Analysis:**
{focus}

**Required Analysis Format:**
Provide your response in this JSON format:
{{
  "issues_found": [
    {{
      "category": "flow|pacing|content|structure|engagement",
      "severity": "high|medium|low",
      "description": "detailed description of the issue",
      "affected_slides": [slide_numbers],
      "impact": "how this affects the presentation"
    }}
  ],
  "fixes": [
    {{
      "type": "add_slide",
      "description": "what this fix does",
      "action": "detailed implementation",
      "position": "after_slide_X or end (add_slide), slide_X (modify_slide)",
      "new_content": {{
        "title": "slide title",
        "content": ["bullet point 1", "bullet point 2"],
        "notes": "speaker notes"
      }}
    }}
  ],
  "overall_assessment": "summary of presentation quality and recommended priority fixes"
}}

**IMPORTANT FIX TYPE RULES:**
- Use ONLY these exact fix types: "add_slide", "modify_slide", "reorder_slides", "split_slide", "merge_slides"
- Use ONE type per fix, never combine types like "add_slide|modify_slide"
- For complex changes, create multiple separate fixes
- STRONGLY PRIORITIZE "add_slide" and "modify_slide" as these can be applied automatically
- For "add_slide": position is "after_slide_X" or "end"
- For "modify_slide": position is "slide_X" (X is the current slide number)
- Slide numbers refer to the structure shown above

Focus on providing 3-7 high-impact fixes that address the most critical issues.
At least 70% of your fixes should be "add_slide" or "modify_slide" type.
Provide complete new_content (title, content array, notes) for automatic application.
If the structure needs no further changes, return an empty "fixes" array.

IMPORTANT: Return ONLY the JSON object, no explanatory text before or after."""

TEXT_ANALYSIS_PROMPT_TEMPLATE = """Analyze this presentation structure and provide a detailed text analysis:

{details}

**Current Structure:**
{structure}
{specific_issues}
**Focus Areas for Analysis:**
{focus}

Provide a comprehensive analysis covering:
1. Major structural issues you identify
2. Flow and pacing problems
3. Content gaps or redundancies
4. Audience engagement opportunities
5. Areas that need improvement

Write this as a clear, readable analysis that explains the issues and why they matter.
Do NOT include JSON or fixes in this response - just the analysis."""


def describe_structure(deck: Deck) -> str:
    """Numbered slide listing with each slide's content on one line."""
    if not deck.slides:
        return "(no slides yet)"
    return "\n\n".join(
        f"{slide.position}. {slide.title}\n   Content: {', '.join(slide.body)}"
        for slide in deck.slides
    )


def _focus_lines(deck: Deck, request: ReviewRequest) -> List[str]:
    return [
        "- " + FOCUS_AREAS[area].format(
            slide_count=deck.slide_count, duration=deck.duration_minutes
        )
        for area in request.focus_areas
    ]


def _template_values(deck: Deck, request: ReviewRequest) -> dict:
    details = DECK_DETAILS_TEMPLATE.format(
        title=deck.title,
        description=deck.description,
        duration=deck.duration_minutes,
        audience=deck.target_audience,
        slide_count=deck.slide_count,
        goal=request.target_outcome,
    )
    specific_issues = ""
    if request.specific_issues.strip():
        specific_issues = f"\n**Specific Issues to Address:**\n{request.specific_issues.strip()}\n"
    return {
        "details": details,
        "structure": describe_structure(deck),
        "specific_issues": specific_issues,
        "focus": "\n".join(_focus_lines(deck, request)),
    }


def build_review_prompt(deck: Deck, request: ReviewRequest) -> str:
    """Structure-review prompt asking for issues and fixes as JSON."""
    return REVIEW_PROMPT_TEMPLATE.format(**_template_values(deck, request))


def build_text_analysis_prompt(deck: Deck, request: ReviewRequest) -> str:
    """Plain-text review prompt, shown to the user before any fix is applied."""
    return TEXT_ANALYSIS_PROMPT_TEMPLATE.format(**_template_values(deck, request))
