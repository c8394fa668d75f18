"""
Response language selection and the fixed user-facing messages.

Language only changes how prompts ask for output and which canned message
is shown. It never affects whether evidence is accepted.
"""

import re

SUPPORTED_LANGUAGES = {
    "en": "English",
    "ar": "Arabic",
}

DEFAULT_LANGUAGE = "en"

# Arabic script block
_ARABIC_RE = re.compile(r"[\u0600-\u06FF]")

MESSAGES = {
    "not_found": {
        "en": "Not found in protocol.",
        "ar": "غير موجود في البروتوكول.",
    },
    "source_not_found": {
        "en": "Source not found in protocol.",
        "ar": "لم يتم العثور على المصدر في البروتوكول.",
    },
    "topic_not_supported": {
        "en": "Topic not supported.",
        "ar": "هذا الموضوع غير مدعوم.",
    },
}


def is_arabic(text: str) -> bool:
    return bool(_ARABIC_RE.search(text or ""))


def resolve_language(requested: str | None, question: str) -> str:
    """
    Pick the response language.

    An explicit "ar"/"arabic" or "en"/"english" wins; anything else
    (including "auto" or nothing) is decided by the script of the question.
    """
    value = str(requested or "").strip().lower()
    if value.startswith("ar"):
        return "ar"
    if value.startswith("en"):
        return "en"
    return "ar" if is_arabic(question) else "en"


def language_name(language: str) -> str:
    return SUPPORTED_LANGUAGES.get(language, SUPPORTED_LANGUAGES[DEFAULT_LANGUAGE])


def message(key: str, language: str) -> str:
    """Look up a canned message, falling back to English."""
    variants = MESSAGES[key]
    return variants.get(language, variants[DEFAULT_LANGUAGE])
