"""
Evidence extraction: the only stage allowed to search the protocol.

The oracle is asked for verbatim quotes plus a FOUND / NOT_FOUND verdict,
never for an answer. Retrieval is limited to the single knowledge store
bound to the topic.

Any oracle failure (transport, timeout, malformed output) becomes
ExtractionFailed. There is no partial credit: a reply that does not match
the schema is discarded whole.

Usage:
    from doseguide.retrieval import EvidenceExtractor

    extractor = EvidenceExtractor(oracle)
    raw = extractor.extract("vs_abc123", "Max daily dose?", "en")
"""

from doseguide.errors import ExtractionFailed, OracleError
from doseguide.language import language_name
from doseguide.logging import get_logger
from doseguide.models import EvidenceSet
from doseguide.oracle.base import Oracle
from doseguide.retrieval.prompts import EXTRACTION_SYSTEM_PROMPT, EXTRACTION_USER_PROMPT
from doseguide.schemas import EVIDENCE_SET_SCHEMA, EvidenceSetPayload, parse_payload

logger = get_logger(__name__, component="extractor")


class EvidenceExtractor:
    """
    Pull verbatim supporting quotes out of a topic's knowledge store.

    The returned EvidenceSet is raw: run it through sanitize() before use.
    """

    def __init__(self, oracle: Oracle, max_output_tokens: int = 1500):
        self.oracle = oracle
        self.max_output_tokens = max_output_tokens

    def build_prompts(self, question: str, language: str, topic_key: str = "") -> tuple[str, str]:
        user_prompt = EXTRACTION_USER_PROMPT.format(
            topic_key=topic_key or "(unnamed)",
            language_name=language_name(language),
            question=question,
        )
        return EXTRACTION_SYSTEM_PROMPT, user_prompt

    def extract(
            self,
            store_id: str,
            question: str,
            language: str,
            topic_key: str = "",
    ) -> EvidenceSet:
        """
        Run one extraction call against a single knowledge store.

        Args:
            store_id: Vector store bound to the topic
            question: The user's question
            language: Response language code ("en", "ar")
            topic_key: Topic name, included in the prompt for context

        Returns:
            Raw (unsanitized) EvidenceSet

        Raises:
            ExtractionFailed: the oracle failed, answered off-schema, or no
                store id was given
        """
        if not str(store_id or "").strip():
            # An empty scope would let the oracle answer without the protocol
            logger.warning("extraction_without_store")
            raise ExtractionFailed("no knowledge store bound to the topic")

        system_prompt, user_prompt = self.build_prompts(question, language, topic_key)

        logger.debug("extraction_start", store_id=store_id, model=self.oracle.model)

        try:
            data = self.oracle.invoke(
                system_prompt,
                user_prompt,
                EVIDENCE_SET_SCHEMA,
                retrieval_scope=store_id,
                max_output_tokens=self.max_output_tokens,
            )
            payload = parse_payload(EvidenceSetPayload, data)
        except OracleError as e:
            logger.warning(
                "extraction_failed",
                store_id=store_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise ExtractionFailed(str(e)) from e

        evidence = payload.to_evidence()

        logger.info(
            "evidence_extracted",
            store_id=store_id,
            verdict=evidence.verdict.value,
            quotes=len(evidence.quotes),
        )

        return evidence
