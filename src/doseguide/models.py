"""
Request-scoped value objects passed between pipeline stages.

Every object here is frozen: a stage builds one, the next stage consumes it,
and nothing outlives a single answer() call.
"""

from dataclasses import dataclass, field, replace
from enum import Enum


class Verdict(str, Enum):
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"


class AnswerStyle(str, Enum):
    RECOMMENDED = "recommended"
    DETAILED = "detailed"
    BULLET = "bullet"

    @classmethod
    def parse(cls, value: str | None) -> "AnswerStyle":
        """Lenient parsing: "Bullets", "detailed answer" and so on."""
        text = str(value or "").lower()
        if "bullet" in text:
            return cls.BULLET
        if "detail" in text:
            return cls.DETAILED
        return cls.RECOMMENDED


class OutputMode(str, Enum):
    HYBRID = "hybrid"
    VERBATIM = "verbatim"
    SHORT = "short"
    LINK = "link"

    @classmethod
    def parse(cls, value: str | None) -> "OutputMode":
        """Lenient parsing; "source" is the older name for link mode."""
        text = str(value or "").lower()
        if "short" in text:
            return cls.SHORT
        if "verbatim" in text:
            return cls.VERBATIM
        if "link" in text or "source" in text:
            return cls.LINK
        return cls.HYBRID


class Guardrail(str, Enum):
    """Why an outcome did not go through the full pipeline."""

    TOPIC_NOT_SUPPORTED = "topic_not_supported"
    EVIDENCE_EXTRACTION_FAILED = "evidence_extraction_failed"
    ANSWER_COMPOSITION_FAILED = "answer_composition_failed"


@dataclass(frozen=True)
class EvidenceQuote:
    """A verbatim passage from the protocol plus where it was found."""

    quote: str
    section_hint: str = ""
    page_hint: str = ""

    def to_dict(self) -> dict:
        return {
            "quote": self.quote,
            "section_hint": self.section_hint,
            "page_hint": self.page_hint,
        }


@dataclass(frozen=True)
class EvidenceSet:
    """
    Output of the extraction stage.

    After sanitizing, FOUND always comes with between one and six quotes.
    """

    verdict: Verdict
    quotes: tuple[EvidenceQuote, ...] = ()
    note: str = ""

    @property
    def found(self) -> bool:
        return self.verdict is Verdict.FOUND


@dataclass(frozen=True)
class AnswerResult:
    """
    Structured answer produced by the composer and checked by the verifier.

    verbatim carries the supporting quotes; after verification a FOUND
    result always has at least one.
    """

    verdict: Verdict
    short_answer: str = ""
    verbatim: tuple[EvidenceQuote, ...] = ()
    source_hint: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.verdict is Verdict.FOUND

    def with_warning(self, warning: str) -> "AnswerResult":
        return replace(self, warnings=(*self.warnings, warning))

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict.value,
            "short_answer": self.short_answer,
            "verbatim": [q.to_dict() for q in self.verbatim],
            "source_hint": self.source_hint,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class RequestContext:
    """Per-request configuration, fixed when the request arrives."""

    topic_key: str
    question: str
    language: str
    answer_style: AnswerStyle = AnswerStyle.RECOMMENDED
    output_mode: OutputMode = OutputMode.HYBRID


@dataclass(frozen=True)
class AnswerOutcome:
    """What the orchestrator returns to the API, CLI and UI."""

    context: RequestContext
    result: AnswerResult
    reply: str
    store_id: str | None = None
    guardrail: Guardrail | None = None
    supported_topics: tuple[str, ...] = field(default=())

    @property
    def verdict(self) -> Verdict:
        return self.result.verdict

    @property
    def topic_supported(self) -> bool:
        return self.guardrail is not Guardrail.TOPIC_NOT_SUPPORTED
