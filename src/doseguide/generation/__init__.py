"""
Answer generation with citations and guardrails.

This module handles:
- Composing an answer from sanitized evidence only
- Verifying the answer against that evidence
- Rendering the result for the requested output mode
"""

from doseguide.generation.compose import AnswerComposer
from doseguide.generation.render import render
from doseguide.generation.verify import not_found_result, verify

__all__ = [
    "AnswerComposer",
    "render",
    "verify",
    "not_found_result",
]
