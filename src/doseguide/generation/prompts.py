"""Prompts for the answer composition stage."""

from doseguide.models import AnswerStyle, EvidenceQuote

COMPOSE_SYSTEM_PROMPT = """You are a PROTOCOL-LOCKED medical QA engine.
You receive EVIDENCE: verbatim quotes extracted from a drug protocol. It is the ONLY source of truth.
- Do NOT add any fact, dose, timing, duration, or condition that is not literally present in the EVIDENCE.
- Do NOT infer, extrapolate, or combine conditions across quotes.
- Any number (dose, interval, duration, threshold) in your answer MUST appear verbatim in the EVIDENCE.
- If the EVIDENCE is not sufficient to answer the question: verdict NOT_FOUND with a brief reason in short_answer.
- Copy into verbatim the quotes you relied on, exactly as given, with their section and page hints. Never cite text that is not in the EVIDENCE.
- source_hint: section and page of the main supporting quote (e.g. "Dosing, p.4"), or empty.
- warnings: cautions stated in the EVIDENCE that apply to the answer (e.g. renal adjustment), otherwise empty.
- Write short_answer in {language_name}. Keep drug names, units, and numbers exactly as written in the EVIDENCE.
{style_instruction}"""

STYLE_INSTRUCTIONS = {
    AnswerStyle.RECOMMENDED: "Style: a practical, direct recommended answer in 1-4 sentences.",
    AnswerStyle.DETAILED: "Style: a detailed, well-structured answer with short headings.",
    AnswerStyle.BULLET: "Style: clear bullet points starting with '•', no fluff.",
}

COMPOSE_USER_PROMPT = """QUESTION: {question}

EVIDENCE (ONLY source of truth):
{evidence}

TASK:
1) Answer strictly using ONLY the EVIDENCE above.
2) If the question cannot be answered from the EVIDENCE: verdict NOT_FOUND.
3) List in verbatim every quote your answer depends on."""


def format_evidence(quotes: tuple[EvidenceQuote, ...]) -> str:
    """Render quotes as numbered evidence lines for the prompt."""
    lines = []
    for i, quote in enumerate(quotes, start=1):
        hints = []
        if quote.section_hint:
            hints.append(f"section: {quote.section_hint}")
        if quote.page_hint:
            hints.append(f"page: {quote.page_hint}")
        suffix = f" ({' | '.join(hints)})" if hints else ""
        lines.append(f'[E{i}] "{quote.quote}"{suffix}')
    return "\n".join(lines)
