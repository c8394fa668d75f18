"""
Answer composition from sanitized evidence.

The composer sees the question and the sanitized quotes, nothing else. No
retrieval scope is passed to the oracle at this stage, so it cannot pull in
material the extractor did not return.

Oracle failures become CompositionFailed; the orchestrator turns that into
a canned NOT_FOUND result.

Usage:
    from doseguide.generation import AnswerComposer

    composer = AnswerComposer(oracle)
    raw = composer.compose(question, evidence, "en", AnswerStyle.BULLET)
"""

from doseguide.errors import CompositionFailed, OracleError
from doseguide.generation.prompts import (
    COMPOSE_SYSTEM_PROMPT,
    COMPOSE_USER_PROMPT,
    STYLE_INSTRUCTIONS,
    format_evidence,
)
from doseguide.language import language_name
from doseguide.logging import get_logger
from doseguide.models import AnswerResult, AnswerStyle, EvidenceSet
from doseguide.oracle.base import Oracle
from doseguide.schemas import ANSWER_RESULT_SCHEMA, AnswerResultPayload, parse_payload

logger = get_logger(__name__, component="composer")

# Detailed answers get a larger output budget
MAX_OUTPUT_TOKENS = {
    AnswerStyle.RECOMMENDED: 700,
    AnswerStyle.BULLET: 700,
    AnswerStyle.DETAILED: 1400,
}


class AnswerComposer:
    """Compose a structured answer bounded by the supplied quotes."""

    def __init__(self, oracle: Oracle):
        self.oracle = oracle

    def build_prompts(
            self,
            question: str,
            evidence: EvidenceSet,
            language: str,
            answer_style: AnswerStyle,
    ) -> tuple[str, str]:
        system_prompt = COMPOSE_SYSTEM_PROMPT.format(
            language_name=language_name(language),
            style_instruction=STYLE_INSTRUCTIONS[answer_style],
        )
        user_prompt = COMPOSE_USER_PROMPT.format(
            question=question,
            evidence=format_evidence(evidence.quotes),
        )
        return system_prompt, user_prompt

    def compose(
            self,
            question: str,
            evidence: EvidenceSet,
            language: str,
            answer_style: AnswerStyle = AnswerStyle.RECOMMENDED,
    ) -> AnswerResult:
        """
        Run one composition call.

        Args:
            question: The user's question
            evidence: Sanitized evidence with verdict FOUND
            language: Response language code
            answer_style: recommended, detailed or bullet

        Returns:
            Raw AnswerResult; pass it through verify() before rendering

        Raises:
            CompositionFailed: the oracle failed or answered off-schema
        """
        if not evidence.found:
            raise ValueError("compose() needs FOUND evidence; NOT_FOUND must short-circuit earlier")

        system_prompt, user_prompt = self.build_prompts(question, evidence, language, answer_style)

        logger.debug(
            "composition_start",
            quotes=len(evidence.quotes),
            style=answer_style.value,
            model=self.oracle.model,
        )

        try:
            data = self.oracle.invoke(
                system_prompt,
                user_prompt,
                ANSWER_RESULT_SCHEMA,
                retrieval_scope=None,
                max_output_tokens=MAX_OUTPUT_TOKENS[answer_style],
            )
            payload = parse_payload(AnswerResultPayload, data)
        except OracleError as e:
            logger.warning(
                "composition_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            raise CompositionFailed(str(e)) from e

        result = payload.to_result()

        logger.info(
            "answer_composed",
            verdict=result.verdict.value,
            verbatim=len(result.verbatim),
        )

        return result
