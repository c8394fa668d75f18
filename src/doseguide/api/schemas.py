"""Request and response bodies for the HTTP API."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from doseguide.models import AnswerOutcome


class AnswerRequest(BaseModel):
    """
    POST /answer body.

    camelCase is canonical; the older field names (drugKey, q, lang, mode,
    style) are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    topic_key: str = Field(
        validation_alias=AliasChoices("topicKey", "topic_key", "drugKey", "drug", "topic"),
    )
    question: str = Field(
        validation_alias=AliasChoices("question", "q"),
        max_length=2000,
    )
    language: str | None = Field(
        default=None,
        validation_alias=AliasChoices("language", "lang"),
    )
    answer_style: str | None = Field(
        default=None,
        validation_alias=AliasChoices("answerStyle", "answer_style", "style"),
    )
    output_mode: str | None = Field(
        default=None,
        validation_alias=AliasChoices("outputMode", "output_mode", "mode", "received_mode"),
    )

    @field_validator("topic_key", "question")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


def outcome_body(outcome: AnswerOutcome) -> dict[str, Any]:
    """Serialize an outcome the way clients expect it."""
    context = outcome.context
    body: dict[str, Any] = {
        "verdict": outcome.verdict.value,
        "reply": outcome.reply,
        "result": outcome.result.to_dict(),
        "topicKey": context.topic_key,
        "storeId": outcome.store_id,
        "language": context.language,
        "outputMode": context.output_mode.value,
        "answerStyle": context.answer_style.value,
    }
    if outcome.guardrail is not None:
        body["error_guardrail"] = outcome.guardrail.value
    return body
