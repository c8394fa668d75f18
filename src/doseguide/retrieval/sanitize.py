"""
Evidence sanitizer: deterministic checks on raw extractor output.

The oracle can satisfy the schema and still return junk: quotes repeated
with different spacing, filler fragments like "ok", or FOUND with nothing
usable behind it. sanitize() normalizes what came back and forces NOT_FOUND
whenever no usable quote survives.

Steps, in order:
1. NOT_FOUND: discard quotes and stop
2. Collapse whitespace, clip lengths, drop quotes under MIN_QUOTE_CHARS
3. Deduplicate case-insensitively, keeping first-seen order
4. Nothing left: force NOT_FOUND
5. Keep at most MAX_QUOTES

sanitize() never calls the oracle, never raises, and is idempotent.
"""

from doseguide.logging import get_logger
from doseguide.models import EvidenceQuote, EvidenceSet, Verdict

logger = get_logger(__name__, component="sanitizer")

MIN_QUOTE_CHARS = 8
MAX_QUOTES = 6
MAX_QUOTE_CHARS = 900
MAX_HINT_CHARS = 120
MAX_NOTE_CHARS = 500

NO_USABLE_EVIDENCE_NOTE = "no usable evidence extracted"

ELLIPSIS = "…"


def normalize_whitespace(text: str | None) -> str:
    """Collapse runs of whitespace (including newlines) to single spaces."""
    return " ".join(str(text or "").split())


def clip(text: str, limit: int) -> str:
    """
    Bound text to limit characters, marking the cut with an ellipsis.

    Clipped output is itself within the limit, so clipping twice is a no-op.
    """
    if len(text) <= limit:
        return text
    return text[:limit - 1].rstrip() + ELLIPSIS


def quote_identity(text: str) -> str:
    """Identity used for deduplication: whitespace-collapsed and case-folded."""
    return normalize_whitespace(text).casefold()


def normalize_quote(quote: EvidenceQuote) -> EvidenceQuote | None:
    """Normalize one quote, or return None if it is too short to be useful."""
    text = clip(normalize_whitespace(quote.quote), MAX_QUOTE_CHARS)
    if len(text) < MIN_QUOTE_CHARS:
        return None
    return EvidenceQuote(
        quote=text,
        section_hint=clip(normalize_whitespace(quote.section_hint), MAX_HINT_CHARS),
        page_hint=clip(normalize_whitespace(quote.page_hint), MAX_HINT_CHARS),
    )


def normalize_quotes(quotes: tuple[EvidenceQuote, ...] | list[EvidenceQuote]) -> list[EvidenceQuote]:
    """Normalize, drop short quotes and deduplicate; order is preserved."""
    seen: set[str] = set()
    kept: list[EvidenceQuote] = []

    for quote in quotes:
        normalized = normalize_quote(quote)
        if normalized is None:
            continue
        identity = quote_identity(normalized.quote)
        if identity in seen:
            continue
        seen.add(identity)
        kept.append(normalized)

    return kept


def sanitize(raw: EvidenceSet) -> EvidenceSet:
    """
    Validate and normalize a raw EvidenceSet.

    Args:
        raw: EvidenceSet exactly as the extractor parsed it

    Returns:
        An EvidenceSet where FOUND implies 1-6 distinct quotes of at
        least MIN_QUOTE_CHARS characters each
    """
    note = clip(normalize_whitespace(raw.note), MAX_NOTE_CHARS)

    # ===== Step 1: NOT_FOUND carries no quotes =====
    if raw.verdict is Verdict.NOT_FOUND:
        return EvidenceSet(verdict=Verdict.NOT_FOUND, quotes=(), note=note)

    # ===== Steps 2-3: normalize, drop short, dedupe =====
    kept = normalize_quotes(raw.quotes)

    # ===== Step 4: nothing usable means NOT_FOUND =====
    if not kept:
        logger.info("evidence_forced_not_found", raw_quotes=len(raw.quotes))
        return EvidenceSet(
            verdict=Verdict.NOT_FOUND,
            quotes=(),
            note=NO_USABLE_EVIDENCE_NOTE,
        )

    # ===== Step 5: bound the count =====
    if len(kept) > MAX_QUOTES:
        logger.debug("evidence_truncated", kept=MAX_QUOTES, dropped=len(kept) - MAX_QUOTES)
        kept = kept[:MAX_QUOTES]

    logger.debug("evidence_sanitized", raw_quotes=len(raw.quotes), quotes=len(kept))

    return EvidenceSet(verdict=Verdict.FOUND, quotes=tuple(kept), note=note)
