"""
Structured-output contracts for the two oracle stages.

Each stage sends a JSON schema with its request and validates the reply with
the matching pydantic model before reading any field. The hand-written
schemas follow the strict structured-output rules (every property required,
no additional properties) so the same dicts work for OpenAI text formats and
Anthropic tool input schemas.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from doseguide.errors import MalformedOutput
from doseguide.models import AnswerResult, EvidenceQuote, EvidenceSet, Verdict
from doseguide.oracle.base import OutputSchema

_QUOTE_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "quote": {
            "type": "string",
            "description": "Exact text copied from the protocol, no paraphrase",
        },
        "section_hint": {
            "type": "string",
            "description": "Heading of the section the quote comes from, or empty",
        },
        "page_hint": {
            "type": "string",
            "description": "Page reference such as 'p.4', or empty",
        },
    },
    "required": ["quote", "section_hint", "page_hint"],
}

EVIDENCE_SET_SCHEMA = OutputSchema(
    name="evidence_set",
    schema={
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "verdict": {"type": "string", "enum": ["FOUND", "NOT_FOUND"]},
            "quotes": {"type": "array", "items": _QUOTE_SCHEMA},
            "note": {"type": "string"},
        },
        "required": ["verdict", "quotes", "note"],
    },
    description="Verbatim protocol quotes that support answering the question",
)

ANSWER_RESULT_SCHEMA = OutputSchema(
    name="answer_result",
    schema={
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "verdict": {"type": "string", "enum": ["FOUND", "NOT_FOUND"]},
            "short_answer": {"type": "string"},
            "verbatim": {"type": "array", "items": _QUOTE_SCHEMA},
            "source_hint": {"type": "string"},
            "warnings": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["verdict", "short_answer", "verbatim", "source_hint", "warnings"],
    },
    description="Answer bounded by the supplied protocol quotes",
)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)


class QuotePayload(_Payload):
    quote: str
    section_hint: str = ""
    page_hint: str = ""

    def to_quote(self) -> EvidenceQuote:
        return EvidenceQuote(
            quote=self.quote,
            section_hint=self.section_hint,
            page_hint=self.page_hint,
        )


class EvidenceSetPayload(_Payload):
    verdict: Literal["FOUND", "NOT_FOUND"]
    quotes: list[QuotePayload] = []
    note: str = ""

    def to_evidence(self) -> EvidenceSet:
        return EvidenceSet(
            verdict=Verdict(self.verdict),
            quotes=tuple(q.to_quote() for q in self.quotes),
            note=self.note,
        )


class AnswerResultPayload(_Payload):
    verdict: Literal["FOUND", "NOT_FOUND"]
    short_answer: str = ""
    verbatim: list[QuotePayload] = []
    source_hint: str = ""
    warnings: list[str] = []

    def to_result(self) -> AnswerResult:
        return AnswerResult(
            verdict=Verdict(self.verdict),
            short_answer=self.short_answer,
            verbatim=tuple(q.to_quote() for q in self.verbatim),
            source_hint=self.source_hint,
            warnings=tuple(self.warnings),
        )


def parse_payload(model: type[_Payload], data: Any) -> Any:
    """Validate raw oracle output against a payload model."""
    if not isinstance(data, dict):
        raise MalformedOutput(f"expected a JSON object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedOutput(f"{model.__name__} validation failed: {e.error_count()} error(s)") from e
