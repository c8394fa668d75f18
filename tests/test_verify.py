"""Tests for answer verification."""

from doseguide.generation.verify import (
    MAX_SHORT_ANSWER_CHARS,
    MAX_WARNINGS,
    UNGROUNDED_FOUND_WARNING,
    not_found_result,
    verify,
)
from doseguide.models import AnswerResult, EvidenceQuote, Verdict


def test_found_without_verbatim_is_downgraded():
    raw = AnswerResult(verdict=Verdict.FOUND, short_answer="Give 2 g daily.", verbatim=())

    result = verify(raw)

    assert result.verdict is Verdict.NOT_FOUND
    assert result.verbatim == ()
    assert result.short_answer == "Not found in protocol."
    assert UNGROUNDED_FOUND_WARNING in result.warnings


def test_grounded_answer_passes_through(found_answer, found_evidence):
    result = verify(found_answer, found_evidence)

    assert result == found_answer


def test_quotes_absent_from_evidence_are_removed(found_evidence, dosing_quote):
    invented = EvidenceQuote(quote="Double the dose in septic shock.", section_hint="Sepsis")
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="Loading dose 25 mg/kg.",
        verbatim=(invented, dosing_quote),
    )

    result = verify(raw, found_evidence)

    assert result.verdict is Verdict.FOUND
    assert result.verbatim == (dosing_quote,)
    assert any("not present in the extracted evidence" in w for w in result.warnings)


def test_only_invented_quotes_means_not_found(found_evidence):
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="Double the dose in septic shock.",
        verbatim=(EvidenceQuote(quote="Double the dose in septic shock."),),
    )

    result = verify(raw, found_evidence)

    assert result.verdict is Verdict.NOT_FOUND
    assert result.verbatim == ()


def test_partial_quote_of_evidence_counts_as_grounded(found_evidence):
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="25 mg/kg IV once.",
        verbatim=(EvidenceQuote(quote="loading dose: 25 MG/KG IV once"),),
    )

    result = verify(raw, found_evidence)

    assert result.verdict is Verdict.FOUND
    assert len(result.verbatim) == 1


def test_without_evidence_only_structure_is_checked():
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="Give 500mg q8h",
        verbatim=(EvidenceQuote(quote="Give 500mg q8h", section_hint="Dosing", page_hint="p.4"),),
    )

    assert verify(raw).verdict is Verdict.FOUND


def test_not_found_answer_keeps_its_explanation():
    raw = AnswerResult(
        verdict=Verdict.NOT_FOUND,
        short_answer="The protocol does not state a paediatric dose.",
    )

    result = verify(raw)

    assert result.verdict is Verdict.NOT_FOUND
    assert result.short_answer == "The protocol does not state a paediatric dose."


def test_strings_are_bounded(dosing_quote):
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="a" * (MAX_SHORT_ANSWER_CHARS + 500),
        verbatim=(dosing_quote,) * 3,
        source_hint="  Dosing,\n p.4 ",
        warnings=("  ", "Check   renal function", *[f"w{i}" for i in range(20)]),
    )

    result = verify(raw)

    assert len(result.short_answer) == MAX_SHORT_ANSWER_CHARS
    assert result.verbatim == (dosing_quote,)
    assert result.source_hint == "Dosing, p.4"
    assert result.warnings[0] == "Check renal function"
    assert len(result.warnings) == 10


def test_verified_found_always_has_quotes(found_evidence, dosing_quote):
    candidates = [
        AnswerResult(verdict=Verdict.FOUND, verbatim=()),
        AnswerResult(verdict=Verdict.FOUND, verbatim=(EvidenceQuote(quote="ok"),)),
        AnswerResult(verdict=Verdict.FOUND, verbatim=(EvidenceQuote(quote="Not in the protocol at all."),)),
        AnswerResult(verdict=Verdict.FOUND, verbatim=(dosing_quote,)),
    ]

    for raw in candidates:
        result = verify(raw, found_evidence)
        if result.verdict is Verdict.FOUND:
            assert len(result.verbatim) >= 1


def test_not_found_result_is_localized():
    result = not_found_result("ar", "warning one")

    assert result.verdict is Verdict.NOT_FOUND
    assert result.short_answer == "غير موجود في البروتوكول."
    assert result.warnings == ("warning one",)


def test_grounding_note_survives_a_full_warning_list(found_evidence, dosing_quote):
    invented = EvidenceQuote(quote="Double the dose in septic shock.")
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        short_answer="Loading dose 25 mg/kg.",
        verbatim=(invented, dosing_quote),
        warnings=tuple(f"composer warning {i}" for i in range(MAX_WARNINGS)),
    )

    result = verify(raw, found_evidence)

    assert len(result.warnings) == MAX_WARNINGS
    assert result.warnings[-1] == "removed 1 quote(s) not present in the extracted evidence"
    assert result.warnings[0] == "composer warning 0"


def test_downgrade_keeps_both_verifier_notes(found_evidence):
    raw = AnswerResult(
        verdict=Verdict.FOUND,
        verbatim=(EvidenceQuote(quote="Double the dose in septic shock."),),
        warnings=tuple(f"composer warning {i}" for i in range(MAX_WARNINGS)),
    )

    result = verify(raw, found_evidence)

    assert result.verdict is Verdict.NOT_FOUND
    assert len(result.warnings) == MAX_WARNINGS
    assert result.warnings[-2:] == (
        "removed 1 quote(s) not present in the extracted evidence",
        UNGROUNDED_FOUND_WARNING,
    )


def test_with_warning_appends_without_mutating():
    result = not_found_result("en", "first")

    updated = result.with_warning("second")

    assert updated.warnings == ("first", "second")
    assert result.warnings == ("first",)
