"""
Oracle interface.

An oracle turns (system prompt, user prompt, output schema) into a JSON
object, optionally searching one knowledge store while it does so. Its output
is untrusted: callers validate it before reading any field.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from doseguide.errors import MalformedOutput


@dataclass(frozen=True)
class OutputSchema:
    """A named JSON schema the oracle must answer with."""

    name: str
    schema: dict[str, Any]
    description: str = ""
    strict: bool = field(default=True)


class Oracle(ABC):
    """Abstract base class for oracles."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier, for logging."""
        pass

    @abstractmethod
    def invoke(
            self,
            system_prompt: str,
            user_prompt: str,
            schema: OutputSchema,
            retrieval_scope: str | None = None,
            max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        """
        Make exactly one call and return the decoded JSON object.

        Args:
            system_prompt: Instructions constraining the model
            user_prompt: The task for this call
            schema: Structured-output contract
            retrieval_scope: Knowledge store id to search, or None for no retrieval
            max_output_tokens: Per-call cap on generated tokens, or the oracle default

        Raises:
            OracleTransportError, OracleTimeout, MalformedOutput
        """
        pass


def load_json_object(text: str | None) -> dict[str, Any]:
    """
    Decode model output text into a JSON object.

    Tolerates a ```json fenced block around the object; anything else that
    is not a single JSON object is MalformedOutput.
    """
    if not text or not text.strip():
        raise MalformedOutput("empty output")

    raw = text.strip()
    if raw.startswith("```"):
        raw = raw.strip("`")
        if raw.lower().startswith("json"):
            raw = raw[4:]
        raw = raw.strip()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedOutput(f"output is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise MalformedOutput(f"expected a JSON object, got {type(data).__name__}")
    return data
