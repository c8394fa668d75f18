"""
DoseGuide Streamlit Frontend.

Run with: streamlit run streamlit_app/app.py
"""

import streamlit as st

from doseguide.config import get_settings
from doseguide.logging import configure_logging
from doseguide.pipeline import AnswerPipeline

st.set_page_config(
    page_title="DoseGuide - Protocol Q&A",
    page_icon="💊",
    layout="wide",
)


@st.cache_resource
def load_pipeline() -> AnswerPipeline:
    configure_logging()
    return AnswerPipeline.from_settings(get_settings())


st.title("💊 DoseGuide")
st.markdown("*Answers come only from the protocol. No evidence, no answer.*")

pipeline = load_pipeline()
topics = pipeline.registry.supported_keys()

if not topics:
    st.error("No topics configured. Run: uv run doseguide upload TOPIC FILE...")
    st.stop()

with st.sidebar:
    topic = st.selectbox("Drug / topic", topics)
    language = st.radio("Language", ["auto", "en", "ar"], horizontal=True)
    style = st.selectbox("Answer style", ["recommended", "detailed", "bullet"])
    mode = st.selectbox("Output mode", ["hybrid", "verbatim", "short", "link"])

question = st.text_area("Question", placeholder="e.g. What is the loading dose in renal impairment?")

if st.button("Ask", type="primary", disabled=not question.strip()):
    with st.spinner("Searching the protocol..."):
        outcome = pipeline.answer(
            topic,
            question,
            language=language,
            answer_style=style,
            output_mode=mode,
        )

    if outcome.result.found:
        st.success(outcome.verdict.value)
    else:
        st.warning(outcome.verdict.value)

    st.markdown(outcome.reply)

    if outcome.guardrail:
        st.caption(f"guardrail: {outcome.guardrail.value}")

    for warning in outcome.result.warnings:
        st.info(warning)

    if outcome.result.verbatim:
        with st.expander(f"Evidence ({len(outcome.result.verbatim)} quote(s))"):
            for i, quote in enumerate(outcome.result.verbatim, 1):
                hint = " · ".join(h for h in (quote.section_hint, quote.page_hint) if h)
                st.markdown(f"**{i}.** {quote.quote}")
                if hint:
                    st.caption(hint)
