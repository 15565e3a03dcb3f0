# =============================================================================
# madrasa_core/i18n/__init__.py
# Translation lookup (English / Urdu)
# =============================================================================
"""
Usage:
    from madrasa_core.i18n import t, is_rtl

    st.header(t("nav.students", "ur"))
    st.toast(t("sync.pending_count", lang, count=3))
"""

from __future__ import annotations
from typing import Any

from madrasa_core.logging import get_logger
from .translations import TRANSLATIONS

logger = get_logger(__name__)

DEFAULT_LANGUAGE = "en"
RTL_LANGUAGES = ("ur",)


def t(key: str, lang: str = DEFAULT_LANGUAGE, **params: Any) -> str:
    """
    Translate key into lang, falling back to English, then to the key itself.

    Named params are substituted with str.format; a missing param leaves the
    template untouched.
    """
    table = TRANSLATIONS.get(lang, TRANSLATIONS[DEFAULT_LANGUAGE])
    text = table.get(key)
    if text is None:
        text = TRANSLATIONS[DEFAULT_LANGUAGE].get(key)
    if text is None:
        logger.debug(f"Missing translation: {key}")
        return key

    if params:
        try:
            return text.format(**params)
        except (KeyError, IndexError, ValueError):
            logger.debug(f"Bad params for translation {key}: {params}")
    return text


def is_rtl(lang: str) -> bool:
    """True for right-to-left languages."""
    return lang in RTL_LANGUAGES


def label(name: str, lang: str = DEFAULT_LANGUAGE) -> str:
    """Field label; unknown field names are humanised."""
    text = t(f"field.{name}", lang)
    if text == f"field.{name}":
        return name.replace("_", " ").title()
    return text


def status_label(value: Any, lang: str = DEFAULT_LANGUAGE) -> str:
    """Translated status value, or the value itself when unknown."""
    text = t(f"status.{value}", lang)
    return str(value) if text == f"status.{value}" else text


__all__ = ["t", "is_rtl", "label", "status_label", "TRANSLATIONS", "DEFAULT_LANGUAGE"]
