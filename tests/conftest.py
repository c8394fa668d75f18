"""Pytest configuration and shared fixtures."""

import json
import os
from pathlib import Path
from typing import Any

import pytest

# Settings require an OpenAI key; tests never reach the network
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from doseguide.models import AnswerResult, EvidenceQuote, EvidenceSet, Verdict  # noqa: E402
from doseguide.oracle.base import Oracle, OutputSchema  # noqa: E402
from doseguide.vectorstore import TopicRegistry  # noqa: E402


class ScriptedOracle(Oracle):
    """
    Oracle that replays scripted replies and records every call.

    A scripted Exception instance is raised instead of returned.
    """

    def __init__(self, replies: list[Any] | None = None, model: str = "scripted"):
        self.replies = list(replies or [])
        self.calls: list[dict] = []
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    def invoke(
            self,
            system_prompt: str,
            user_prompt: str,
            schema: OutputSchema,
            retrieval_scope: str | None = None,
            max_output_tokens: int | None = None,
    ) -> dict:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "schema": schema,
            "retrieval_scope": retrieval_scope,
            "max_output_tokens": max_output_tokens,
        })
        if not self.replies:
            raise AssertionError(f"unexpected oracle call for {schema.name}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_oracle():
    """Factory: scripted_oracle(reply1, reply2, ...)."""
    def _make(*replies: Any, model: str = "scripted") -> ScriptedOracle:
        return ScriptedOracle(list(replies), model=model)
    return _make


@pytest.fixture
def registry() -> TopicRegistry:
    return TopicRegistry({"vancomycin": "vs_vanco", "ciprofloxacin": "vs_cipro"})


@pytest.fixture
def vectorstores_file(tmp_path: Path) -> Path:
    path = tmp_path / "vectorstores.json"
    path.write_text(json.dumps({
        "Vancomycin": "vs_vanco",
        "stores": {
            "ciprofloxacin": {"id": "vs_cipro"},
            "meropenem": "vs_mero",
        },
    }))
    return path


@pytest.fixture
def dosing_quote() -> EvidenceQuote:
    return EvidenceQuote(
        quote="Loading dose: 25 mg/kg IV once, based on actual body weight.",
        section_hint="Dosing",
        page_hint="p.4",
    )


@pytest.fixture
def renal_quote() -> EvidenceQuote:
    return EvidenceQuote(
        quote="Adjust maintenance interval when CrCl is below 50 mL/min.",
        section_hint="Renal impairment",
        page_hint="p.6",
    )


@pytest.fixture
def found_evidence(dosing_quote, renal_quote) -> EvidenceSet:
    return EvidenceSet(
        verdict=Verdict.FOUND,
        quotes=(dosing_quote, renal_quote),
        note="",
    )


@pytest.fixture
def evidence_payload(dosing_quote, renal_quote) -> dict:
    """Extractor reply as the oracle would return it."""
    return {
        "verdict": "FOUND",
        "quotes": [dosing_quote.to_dict(), renal_quote.to_dict()],
        "note": "",
    }


@pytest.fixture
def answer_payload(dosing_quote) -> dict:
    """Composer reply as the oracle would return it."""
    return {
        "verdict": "FOUND",
        "short_answer": "Give a loading dose of 25 mg/kg IV once, based on actual body weight.",
        "verbatim": [dosing_quote.to_dict()],
        "source_hint": "Dosing, p.4",
        "warnings": [],
    }


@pytest.fixture
def found_answer(dosing_quote) -> AnswerResult:
    return AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="Give a loading dose of 25 mg/kg IV once.",
        verbatim=(dosing_quote,),
        source_hint="Dosing, p.4",
        warnings=(),
    )
