"""
Answer verification against the extracted evidence.

Rules:
- Every string is bounded and every quote is normalized the same way the
  sanitizer normalizes evidence.
- Given the evidence set, quotes in verbatim that do not appear in any
  evidence quote are removed.
- FOUND with no remaining verbatim quote is replaced by the canned
  NOT_FOUND result.

Violations are corrected silently (logged, noted in warnings), never raised.
"""

from doseguide.language import message
from doseguide.logging import get_logger
from doseguide.models import AnswerResult, EvidenceQuote, EvidenceSet, Verdict
from doseguide.retrieval.sanitize import (
    MAX_QUOTES,
    clip,
    normalize_quotes,
    normalize_whitespace,
    quote_identity,
)

logger = get_logger(__name__, component="verifier")

MAX_SHORT_ANSWER_CHARS = 2400
MAX_SOURCE_HINT_CHARS = 300
MAX_WARNING_CHARS = 300
MAX_WARNINGS = 10

UNGROUNDED_FOUND_WARNING = "answer claimed FOUND without supporting quotes; downgraded to NOT_FOUND"


def not_found_result(language: str, *warnings: str) -> AnswerResult:
    """The canned NOT_FOUND result used by every fail-closed path."""
    return AnswerResult(
        verdict=Verdict.NOT_FOUND,
        short_answer=message("not_found", language),
        verbatim=(),
        source_hint="",
        warnings=tuple(warnings),
    )


def _bound_short_answer(text: str) -> str:
    # Keep line breaks: bullet and detailed styles rely on them
    return clip(str(text or "").strip(), MAX_SHORT_ANSWER_CHARS)


def _bound_warnings(warnings: tuple[str, ...]) -> list[str]:
    bounded = []
    for warning in warnings:
        text = clip(normalize_whitespace(warning), MAX_WARNING_CHARS)
        if text:
            bounded.append(text)
    return bounded[:MAX_WARNINGS]


def _with_audit(warnings: list[str], audit: list[str]) -> list[str]:
    """Composer warnings first, trimmed so the verifier's own notes always fit."""
    return [*warnings[:MAX_WARNINGS - len(audit)], *audit]


def _grounded(quotes: list[EvidenceQuote], evidence: EvidenceSet) -> list[EvidenceQuote]:
    """Keep quotes whose text occurs inside some evidence quote."""
    sources = [quote_identity(q.quote) for q in evidence.quotes]
    return [q for q in quotes if any(quote_identity(q.quote) in src for src in sources)]


def verify(
        raw: AnswerResult,
        evidence: EvidenceSet | None = None,
        language: str = "en",
) -> AnswerResult:
    """
    Check a composed answer before it is rendered.

    Args:
        raw: AnswerResult as parsed from the composer
        evidence: Sanitized evidence the composer was given; when present,
                  verbatim quotes must come from it
        language: Language for the canned NOT_FOUND message

    Returns:
        AnswerResult where FOUND implies at least one verbatim quote
    """
    warnings = _bound_warnings(raw.warnings)
    audit: list[str] = []

    quotes = normalize_quotes(raw.verbatim)
    if evidence is not None:
        grounded = _grounded(quotes, evidence)
        dropped = len(quotes) - len(grounded)
        if dropped:
            logger.info("verbatim_quotes_dropped", dropped=dropped, kept=len(grounded))
            audit.append(f"removed {dropped} quote(s) not present in the extracted evidence")
        quotes = grounded
    quotes = quotes[:MAX_QUOTES]

    if raw.verdict is Verdict.FOUND and not quotes:
        logger.info("answer_downgraded", reason="found_without_verbatim")
        audit.append(UNGROUNDED_FOUND_WARNING)
        return not_found_result(language, *_with_audit(warnings, audit))

    return AnswerResult(
        verdict=raw.verdict,
        short_answer=_bound_short_answer(raw.short_answer),
        verbatim=tuple(quotes),
        source_hint=clip(normalize_whitespace(raw.source_hint), MAX_SOURCE_HINT_CHARS),
        warnings=tuple(_with_audit(warnings, audit)),
    )
