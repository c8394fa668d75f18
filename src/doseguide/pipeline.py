"""
Evidence-gated answering pipeline.

Pipeline stages:
1. Topic resolution: unknown topics are rejected before any oracle call
2. Evidence extraction: quotes from the topic's knowledge store only
3. Sanitizing: dedupe, length floor, FOUND requires quotes
4. Composition: answer from the sanitized quotes, no retrieval
5. Verification: FOUND requires quotes carried forward from the evidence
6. Rendering: reply text for the requested output mode

Data only flows forward. Every failure below the HTTP layer ends in a valid
NOT_FOUND result: extraction failure skips composition entirely, and
composition failure never surfaces a transport error as an answer. Each
oracle call is attempted exactly once.

Usage:
    from doseguide.pipeline import AnswerPipeline

    pipeline = AnswerPipeline.from_settings(get_settings())
    outcome = pipeline.answer("vancomycin", "What is the loading dose?")
    print(outcome.reply)
"""

import uuid

import structlog

from doseguide.config import Settings
from doseguide.errors import CompositionFailed, ExtractionFailed, TopicNotFound
from doseguide.generation import AnswerComposer, not_found_result, render, verify
from doseguide.language import message, resolve_language
from doseguide.logging import get_logger, preview
from doseguide.models import (
    AnswerOutcome,
    AnswerResult,
    AnswerStyle,
    Guardrail,
    OutputMode,
    RequestContext,
)
from doseguide.oracle import AnthropicOracle, OpenAIOracle, Oracle
from doseguide.retrieval import EvidenceExtractor, sanitize
from doseguide.vectorstore import TopicRegistry, normalize_topic_key

logger = get_logger(__name__, component="answer_pipeline")

COMPOSITION_FAILED_WARNING = "answer composition failed; returned NOT_FOUND instead of an unverified answer"


class AnswerPipeline:
    """
    Single parameterized answering pipeline.

    Holds no per-request state: the registry and oracles are shared and
    read-only, everything else lives in the request's own objects, so one
    instance can serve concurrent requests.

    Example:
        pipeline = AnswerPipeline(
            registry=TopicRegistry({"vancomycin": "vs_abc"}),
            extractor_oracle=OpenAIOracle(api_key=key),
        )
        outcome = pipeline.answer("vancomycin", "Max dose?", output_mode="verbatim")
    """

    def __init__(
            self,
            registry: TopicRegistry,
            extractor_oracle: Oracle,
            composer_oracle: Oracle | None = None,
            default_language: str = "auto",
    ):
        """
        Initialize the pipeline.

        Args:
            registry: Topic → knowledge store table
            extractor_oracle: Oracle with file search, used for extraction
            composer_oracle: Oracle for composition; defaults to the extractor's
            default_language: Used when a request names no language
        """
        self.registry = registry
        self.extractor = EvidenceExtractor(extractor_oracle)
        self.composer = AnswerComposer(composer_oracle or extractor_oracle)
        self.default_language = default_language

        logger.info(
            "answer_pipeline_initialized",
            topics=len(registry),
            extractor_model=extractor_oracle.model,
            composer_model=self.composer.oracle.model,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnswerPipeline":
        """Build the pipeline and its oracles from application settings."""
        registry = TopicRegistry.from_file(settings.vectorstores_path)

        extractor_oracle = OpenAIOracle(
            api_key=settings.openai_api_key.get_secret_value(),
            model=settings.extractor_model,
            timeout=settings.oracle_timeout_seconds,
            temperature=settings.oracle_temperature,
        )

        if settings.composer_provider == "anthropic":
            if settings.anthropic_api_key is None:
                raise ValueError("COMPOSER_PROVIDER=anthropic needs ANTHROPIC_API_KEY")
            composer_oracle: Oracle = AnthropicOracle(
                api_key=settings.anthropic_api_key.get_secret_value(),
                model=settings.anthropic_model,
                timeout=settings.oracle_timeout_seconds,
                temperature=settings.oracle_temperature,
            )
        else:
            composer_oracle = OpenAIOracle(
                api_key=settings.openai_api_key.get_secret_value(),
                model=settings.composer_model,
                timeout=settings.oracle_timeout_seconds,
                temperature=settings.oracle_temperature,
            )

        return cls(
            registry=registry,
            extractor_oracle=extractor_oracle,
            composer_oracle=composer_oracle,
            default_language=settings.default_language,
        )

    def build_context(
            self,
            topic_key: str,
            question: str,
            language: str | None = None,
            answer_style: str | AnswerStyle | None = None,
            output_mode: str | OutputMode | None = None,
    ) -> RequestContext:
        """Freeze the request options into a RequestContext."""
        topic_key = normalize_topic_key(topic_key)
        question = str(question or "").strip()
        if not topic_key or not question:
            raise ValueError("topic_key and question are required")

        return RequestContext(
            topic_key=topic_key,
            question=question,
            language=resolve_language(language or self.default_language, question),
            answer_style=AnswerStyle.parse(answer_style),
            output_mode=OutputMode.parse(output_mode),
        )

    def answer(
            self,
            topic_key: str,
            question: str,
            language: str | None = None,
            answer_style: str | AnswerStyle | None = None,
            output_mode: str | OutputMode | None = None,
    ) -> AnswerOutcome:
        """
        Answer one question about one topic.

        Args:
            topic_key: Topic (drug) key, case-insensitive
            question: Free-text question
            language: "en", "ar" or "auto"/None for script detection
            answer_style: recommended, detailed or bullet
            output_mode: hybrid, verbatim, short or link

        Returns:
            AnswerOutcome with the verified result and rendered reply

        Raises:
            ValueError: topic_key or question is empty
        """
        context = self.build_context(topic_key, question, language, answer_style, output_mode)

        with structlog.contextvars.bound_contextvars(
                request_id=uuid.uuid4().hex[:12],
                topic_key=context.topic_key,
        ):
            logger.info(
                "answer_request",
                question=preview(context.question),
                language=context.language,
                output_mode=context.output_mode.value,
            )
            return self.run(context)

    def run(self, context: RequestContext) -> AnswerOutcome:
        """Execute the stages for an already-built context."""
        language = context.language

        # ===== Step 1: Topic resolution =====
        try:
            store_id = self.registry.require(context.topic_key)
        except TopicNotFound as e:
            logger.info("topic_not_supported", supported=len(e.supported))
            return AnswerOutcome(
                context=context,
                result=not_found_result(language),
                reply=message("topic_not_supported", language),
                guardrail=Guardrail.TOPIC_NOT_SUPPORTED,
                supported_topics=tuple(e.supported),
            )

        # ===== Step 2: Evidence extraction =====
        try:
            raw_evidence = self.extractor.extract(
                store_id,
                context.question,
                language,
                topic_key=context.topic_key,
            )
        except ExtractionFailed as e:
            return self._finish(
                context,
                store_id,
                not_found_result(language),
                Guardrail(e.guardrail),
            )

        # ===== Step 3: Sanitizing =====
        evidence = sanitize(raw_evidence)
        if not evidence.found:
            logger.info("evidence_not_found", note=preview(evidence.note))
            return self._finish(context, store_id, not_found_result(language))

        # ===== Step 4: Composition =====
        try:
            raw_answer = self.composer.compose(
                context.question,
                evidence,
                language,
                context.answer_style,
            )
        except CompositionFailed as e:
            return self._finish(
                context,
                store_id,
                not_found_result(language).with_warning(COMPOSITION_FAILED_WARNING),
                Guardrail(e.guardrail),
            )

        # ===== Step 5: Verification =====
        result = verify(raw_answer, evidence, language)

        return self._finish(context, store_id, result)

    def _finish(
            self,
            context: RequestContext,
            store_id: str,
            result: AnswerResult,
            guardrail: Guardrail | None = None,
    ) -> AnswerOutcome:
        # ===== Step 6: Rendering =====
        if guardrail is None:
            reply = render(result, context.output_mode, context.language)
        else:
            reply = message("not_found", context.language)

        logger.info(
            "answer_complete",
            verdict=result.verdict.value,
            guardrail=guardrail.value if guardrail else None,
            output_mode=context.output_mode.value,
            verbatim=len(result.verbatim),
        )

        return AnswerOutcome(
            context=context,
            result=result,
            reply=reply,
            store_id=store_id,
            guardrail=guardrail,
        )
