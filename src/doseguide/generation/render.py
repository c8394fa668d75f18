"""
Render a verified AnswerResult as user-facing text.

Modes:
- verbatim: numbered quotes with their section/page hints
- link: the source hint plus the first quote
- short / hybrid: the short answer when FOUND, else the not-found message

Rendering trusts the verdict it is given; it never re-decides it.
"""

from doseguide.language import message
from doseguide.models import AnswerResult, EvidenceQuote, OutputMode


def _format_quote(index: int, quote: EvidenceQuote) -> str:
    text = f"{index}) {quote.quote}"
    hints = []
    if quote.section_hint:
        hints.append(f"[{quote.section_hint}]")
    if quote.page_hint:
        hints.append(quote.page_hint)
    if hints:
        text += "\n   " + " ".join(hints)
    return text


def render_verbatim(result: AnswerResult, language: str) -> str:
    if not result.verbatim:
        return message("not_found", language)
    return "\n\n".join(
        _format_quote(i, quote) for i, quote in enumerate(result.verbatim, start=1)
    )


def render_link(result: AnswerResult, language: str) -> str:
    if not result.source_hint:
        return message("source_not_found", language)
    lines = [result.source_hint]
    if result.verbatim:
        lines.append(result.verbatim[0].quote)
    return "\n".join(lines)


def render_short(result: AnswerResult, language: str) -> str:
    if result.found and result.short_answer.strip():
        return result.short_answer
    return message("not_found", language)


def render(result: AnswerResult, output_mode: OutputMode, language: str) -> str:
    """
    Map a verified result and an output mode to the reply text.

    Args:
        result: AnswerResult that has been through verify()
        output_mode: Requested presentation
        language: Language for the fixed messages

    Returns:
        Reply text; the quotes stay on the result for audit whatever the mode
    """
    if output_mode is OutputMode.VERBATIM:
        return render_verbatim(result, language)
    if output_mode is OutputMode.LINK:
        return render_link(result, language)
    return render_short(result, language)
