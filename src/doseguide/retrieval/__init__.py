"""
Evidence retrieval for protocol questions.

This module handles:
- Quote extraction from a topic's knowledge store
- Sanitizing the extracted evidence (dedupe, length floor, verdict gate)
"""

from doseguide.retrieval.extract import EvidenceExtractor
from doseguide.retrieval.sanitize import (
    MAX_QUOTES,
    MIN_QUOTE_CHARS,
    NO_USABLE_EVIDENCE_NOTE,
    sanitize,
)

__all__ = [
    "EvidenceExtractor",
    "sanitize",
    "MAX_QUOTES",
    "MIN_QUOTE_CHARS",
    "NO_USABLE_EVIDENCE_NOTE",
]
