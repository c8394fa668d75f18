"""
FastAPI application.

Routes:
- GET  /health   liveness
- GET  /topics   supported topic keys
- POST /answer   run the answering pipeline (also served at /ask)

Run with: uv run doseguide serve
"""

from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from doseguide import __version__
from doseguide.api.schemas import AnswerRequest, outcome_body
from doseguide.config import get_settings
from doseguide.language import message, resolve_language
from doseguide.logging import configure_logging, get_logger
from doseguide.models import Guardrail, Verdict
from doseguide.pipeline import AnswerPipeline

logger = get_logger(__name__, component="api")


@lru_cache
def get_pipeline() -> AnswerPipeline:
    """Build the shared pipeline on first use."""
    return AnswerPipeline.from_settings(get_settings())


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("api_started", version=__version__)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="DoseGuide API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/topics")
    def topics(pipeline: AnswerPipeline = Depends(get_pipeline)) -> dict:
        keys = pipeline.registry.supported_keys()
        return {"count": len(keys), "topics": keys}

    @app.post("/answer")
    @app.post("/ask", include_in_schema=False)
    def answer(payload: AnswerRequest, pipeline: AnswerPipeline = Depends(get_pipeline)):
        try:
            outcome = pipeline.answer(
                payload.topic_key,
                payload.question,
                language=payload.language,
                answer_style=payload.answer_style,
                output_mode=payload.output_mode,
            )
        except Exception:
            # Fail closed: an unexpected bug still yields a NOT_FOUND body
            logger.exception("answer_failed_unexpectedly")
            language = resolve_language(payload.language, payload.question)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "verdict": Verdict.NOT_FOUND.value,
                    "reply": message("not_found", language),
                    "error": "internal_error",
                },
            )

        if outcome.guardrail is Guardrail.TOPIC_NOT_SUPPORTED:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "error": message("topic_not_supported", "en"),
                    "reply": outcome.reply,
                    "topicKey": outcome.context.topic_key,
                    "supportedTopicKeys": list(outcome.supported_topics),
                },
            )

        return outcome_body(outcome)

    return app


app = create_app()
