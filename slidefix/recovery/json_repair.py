"""
Structured-data recovery for language-model responses.

Models are asked for JSON but regularly wrap it in prose, leave trailing
commas, use single quotes or "smart" quotes, or forget to quote keys.
``recover_json`` tries a fixed chain of strategies, from cheapest to most
aggressive, and stops at the first one that parses:

1. Direct parse of the whole response (code fences stripped)
2. Parse of the first balanced ``{...}`` span
3. Correction by a language model (only when a corrector is supplied)
4. Regex-based heuristic repairs of the extracted span

It never raises: an unrecoverable response comes back as a result with
``strategy == RecoveryStrategy.FAILED`` and the raw text preserved.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from pydantic import BaseModel

from slidefix.errors import MalformedResponse
from slidefix.models import StructuralAnalysis

logger = logging.getLogger(__name__)

# (malformed_snippet, parse_error_message) -> corrected text or None
Corrector = Callable[[str, str], Optional[str]]

CORRECTION_PROMPT_TEMPLATE = """The following JSON is malformed and needs to be corrected:

ERROR: {error}

MALFORMED JSON:
{snippet}

Please provide a corrected version that:
1. Fixes the syntax error
2. Preserves all the original data
3. Maintains the same structure
4. Is valid JSON

IMPORTANT: Respond with ONLY the corrected JSON, no explanations or additional text."""

ANALYSIS_KEYS = ("issues_found", "issues", "fixes")


class RecoveryStrategy(str, Enum):
    """Which step of the recovery chain produced the value."""

    DIRECT = "direct"
    EXTRACTED = "extracted"
    AI_CORRECTED = "ai_corrected"
    HEURISTIC = "heuristic"
    FAILED = "failed"


class RecoveryResult(BaseModel):
    """Parsed value (or failure) plus how it was obtained."""

    strategy: RecoveryStrategy
    value: Any = None
    error: Optional[str] = None
    raw: str = ""

    @property
    def ok(self) -> bool:
        return self.strategy != RecoveryStrategy.FAILED

    def unwrap(self) -> Any:
        """Return the parsed value or raise MalformedResponse."""
        if not self.ok:
            raise MalformedResponse(self.raw, self.error)
        return self.value


# --- Parsing helpers ---


def _parse(text: str) -> Tuple[bool, Any, Optional[str]]:
    try:
        return True, json.loads(text), None
    except (json.JSONDecodeError, TypeError) as e:
        return False, None, str(e)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```)."""
    text = text.strip()
    text = re.sub(r"^```[\w-]*[ \t]*\n?", "", text)
    text = re.sub(r"\n?```$", "", text)
    return text.strip()


def _scan_object_end(text: str, start: int, respect_strings: bool) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and respect_strings:
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> Optional[str]:
    """
    Slice the first top-level ``{...}`` object out of a response.

    Braces inside double-quoted strings are ignored. If that scan never
    closes (e.g. an unbalanced quote in malformed output) a plain brace
    count is used instead, and an object that never closes is sliced to the
    end of the text.

    Returns None when the text has no ``{`` followed by a ``}``.
    """
    if not text:
        return None
    start = text.find("{")
    if start == -1 or "}" not in text[start:]:
        return None

    end = _scan_object_end(text, start, respect_strings=True)
    if end is None:
        end = _scan_object_end(text, start, respect_strings=False)
    if end is None:
        return text[start:]
    return text[start:end + 1]


# --- Heuristic repairs ---

_DOUBLE_QUOTED = r'"(?:[^"\\]|\\.)*"'


def _sub_outside_strings(pattern: str, repl, text: str, flags: int = 0) -> str:
    """re.sub that leaves double-quoted JSON strings untouched."""
    regex = re.compile(f"(?P<dq>{_DOUBLE_QUOTED})|{pattern}", flags)

    def _replace(match: re.Match) -> str:
        if match.group("dq") is not None:
            return match.group("dq")
        if callable(repl):
            return repl(match)
        return match.expand(repl)

    return regex.sub(_replace, text)


def _requote_single(match: re.Match) -> str:
    inner = match.group("inner").replace("\\'", "'")
    inner = re.sub(r'(?<!\\)"', r'\\"', inner)
    return f'{match.group("lead")}"{inner}"'


def remove_trailing_commas(text: str) -> str:
    return _sub_outside_strings(r",(?P<ws>\s*)(?P<close>[}\]])", r"\g<ws>\g<close>", text)


def convert_single_quotes(text: str) -> str:
    # Only quotes in token position: after { [ , : and before : , } ]
    return _sub_outside_strings(
        r"(?P<lead>[{\[,:]\s*)'(?P<inner>(?:[^'\\\n]|\\.)*)'(?=\s*[:,}\]])",
        _requote_single,
        text,
    )


def quote_bare_keys(text: str) -> str:
    return _sub_outside_strings(
        r"(?P<lead>[{,]\s*)(?P<key>[A-Za-z_$][\w$-]*)(?P<colon>\s*:)",
        r'\g<lead>"\g<key>"\g<colon>',
        text,
    )


def strip_comments(text: str) -> str:
    text = _sub_outside_strings(r"/\*.*?\*/", "", text, flags=re.DOTALL)
    return _sub_outside_strings(r"//[^\n]*", "", text)


def normalize_smart_quotes(text: str) -> str:
    text = _sub_outside_strings(r"[“”„‟]", '"', text)
    return _sub_outside_strings(r"[‘’‚‛]", "'", text)


def insert_missing_commas(text: str) -> str:
    # A value that ends a line directly followed by one that starts the next
    return _sub_outside_strings(
        r"(?<=[\"}\]\del])(?P<gap>[ \t]*\n\s*)(?=[\"{\[])",
        r",\g<gap>",
        text,
    )


def apply_heuristic_fixes(text: str) -> str:
    """Apply every heuristic repair in sequence. The result is not validated."""
    fixed = remove_trailing_commas(text)
    fixed = convert_single_quotes(fixed)
    fixed = quote_bare_keys(fixed)
    fixed = strip_comments(fixed)
    # A comment may have hidden a trailing comma from the first pass
    fixed = remove_trailing_commas(fixed)
    fixed = normalize_smart_quotes(fixed)
    fixed = insert_missing_commas(fixed)
    return fixed.strip()


# --- Recovery chain ---


def _ask_corrector(corrector: Corrector, snippet: str, error: str) -> Optional[str]:
    try:
        reply = corrector(snippet, error)
    except Exception as e:
        logger.warning("[Recovery] AI correction request failed: %s", e)
        return None
    if not reply or not reply.strip():
        return None
    # If no JSON brackets found, assume the entire reply is JSON
    return extract_json_object(reply) or reply.strip()


def recover_json(text: Optional[str], corrector: Optional[Corrector] = None) -> RecoveryResult:
    """
    Turn a model response into a parsed JSON value.

    Args:
        text: Raw response text
        corrector: Optional callable asked to fix the extracted JSON, given
            the snippet and the parse error message

    Returns:
        RecoveryResult; never raises
    """
    raw = "" if text is None else str(text)

    ok, value, error = _parse(strip_code_fences(raw))
    if ok:
        return RecoveryResult(strategy=RecoveryStrategy.DIRECT, value=value, raw=raw)

    snippet = extract_json_object(raw)
    if not snippet or not snippet.strip():
        logger.debug("[Recovery] No JSON object found in response")
        return RecoveryResult(
            strategy=RecoveryStrategy.FAILED, error="no JSON object found", raw=raw
        )

    ok, value, error = _parse(snippet)
    if ok:
        return RecoveryResult(strategy=RecoveryStrategy.EXTRACTED, value=value, raw=raw)
    logger.warning("[Recovery] JSON parsing error: %s", error)

    if corrector is not None:
        logger.info("[Recovery] Attempting AI-assisted JSON correction")
        corrected = _ask_corrector(corrector, snippet, error)
        if corrected:
            ok, value, correction_error = _parse(corrected)
            if ok:
                logger.info("[Recovery] JSON correction successful")
                return RecoveryResult(
                    strategy=RecoveryStrategy.AI_CORRECTED, value=value, raw=raw
                )
            logger.warning("[Recovery] AI correction failed: %s", correction_error)

    logger.info("[Recovery] Trying heuristic repairs")
    ok, value, heuristic_error = _parse(apply_heuristic_fixes(snippet))
    if ok:
        logger.info("[Recovery] Heuristic repair successful")
        return RecoveryResult(strategy=RecoveryStrategy.HEURISTIC, value=value, raw=raw)

    logger.warning("[Recovery] All JSON correction attempts failed")
    return RecoveryResult(
        strategy=RecoveryStrategy.FAILED, error=heuristic_error or error, raw=raw
    )


def ai_corrector(generator) -> Corrector:
    """Build a corrector that sends the broken snippet back to a TextGenerator."""

    def _correct(snippet: str, error: str) -> Optional[str]:
        prompt = CORRECTION_PROMPT_TEMPLATE.format(error=error, snippet=snippet)
        return generator.generate(prompt)

    return _correct


def analysis_from_value(value: Any) -> Optional[StructuralAnalysis]:
    """
    Interpret a recovered JSON value as a structural analysis.

    Accepts an object carrying issues and/or fixes, or a bare list of fixes.
    """
    if isinstance(value, list):
        value = {"fixes": value}
    if not isinstance(value, dict) or not any(key in value for key in ANALYSIS_KEYS):
        return None
    return StructuralAnalysis.from_response(value)


def parse_analysis(
    text: Optional[str], corrector: Optional[Corrector] = None
) -> Optional[StructuralAnalysis]:
    """Recover and interpret an analysis response. None if it cannot be read."""
    result = recover_json(text, corrector)
    if not result.ok:
        return None
    return analysis_from_value(result.value)
