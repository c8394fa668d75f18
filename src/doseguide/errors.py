"""
Exception hierarchy for the answering pipeline.

Oracle adapters raise OracleError subclasses. The extraction and composition
stages wrap those in ExtractionFailed / CompositionFailed, which the
orchestrator turns into canned NOT_FOUND results. TopicNotFound is the only
error a client gets to see, as the fixed "topic not supported" reply.
"""


class DoseGuideError(Exception):
    """Base class for all DoseGuide errors."""


# -----------------
# Oracle boundary
# -----------------


class OracleError(DoseGuideError):
    """An oracle call did not produce usable structured output."""


class OracleTransportError(OracleError):
    """The oracle could not be reached or rejected the request."""


class OracleTimeout(OracleError):
    """The oracle did not answer within the configured timeout."""


class MalformedOutput(OracleError):
    """The oracle answered, but not with JSON matching the declared schema."""


class RetrievalNotSupported(OracleTransportError):
    """A retrieval scope was given to an oracle without file search."""


# -----------------
# Pipeline stages
# -----------------


class TopicNotFound(DoseGuideError):
    """The topic key has no knowledge store bound to it."""

    def __init__(self, topic_key: str, supported: list[str] | None = None):
        self.topic_key = topic_key
        self.supported = supported or []
        super().__init__(f"Topic not supported: {topic_key!r}")


class StageFailed(DoseGuideError):
    """An oracle-backed stage failed; the cause is chained."""

    guardrail: str = "stage_failed"


class ExtractionFailed(StageFailed):
    guardrail = "evidence_extraction_failed"


class CompositionFailed(StageFailed):
    guardrail = "answer_composition_failed"


# -----------------
# Knowledge stores
# -----------------


class KnowledgeStoreError(DoseGuideError):
    """Listing or uploading protocol files failed."""
