# =============================================================================
# tests/unit/test_i18n.py
# Unit Tests for English / Urdu translation lookup
# =============================================================================

import re

import pytest


class TestTranslate:
    """t(), label(), status_label()"""

    def test_english_and_urdu(self):
        from madrasa_core.i18n import t

        assert t("sync.offline", "en") == "Offline"
        assert t("sync.offline", "ur") == "آف لائن"

    def test_params_substituted(self):
        from madrasa_core.i18n import t

        assert t("sync.pending_count", "en", count=3) == "3 changes pending"

    def test_missing_param_leaves_template(self):
        from madrasa_core.i18n import t

        assert t("sync.pending_count", "en", other=1) == "{count} changes pending"

    def test_unknown_language_falls_back_to_english(self):
        from madrasa_core.i18n import t

        assert t("sync.online", "fr") == "Online"

    def test_unknown_key_returned_as_is(self):
        from madrasa_core.i18n import t

        assert t("no.such.key", "ur") == "no.such.key"

    def test_label_humanises_unknown_fields(self):
        from madrasa_core.i18n import label

        assert label("mystery_column", "en") == "Mystery Column"

    def test_status_label_unknown_value(self):
        from madrasa_core.i18n import status_label

        assert status_label("weird", "ur") == "weird"

    def test_rtl(self):
        from madrasa_core.i18n import is_rtl

        assert is_rtl("ur")
        assert not is_rtl("en")


class TestTranslationTables:
    """Both languages cover the same keys"""

    def test_same_keys(self):
        from madrasa_core.i18n import TRANSLATIONS

        assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["ur"])

    @pytest.mark.parametrize("lang", ["en", "ur"])
    def test_placeholders_match_english(self, lang):
        from madrasa_core.i18n import TRANSLATIONS

        placeholder = re.compile(r"\{(\w+)\}")
        for key, text in TRANSLATIONS["en"].items():
            assert set(placeholder.findall(TRANSLATIONS[lang][key])) == set(placeholder.findall(text)), key

    def test_every_notice_key_translated(self):
        from madrasa_core.i18n import TRANSLATIONS
        from madrasa_core.offline import notifications

        keys = [
            notifications.WENT_OFFLINE,
            notifications.BACK_ONLINE,
            notifications.SAVED_OFFLINE,
            notifications.SYNC_COMPLETE,
            notifications.SYNC_PARTIAL,
            notifications.SYNC_ERROR,
            notifications.SYNC_OFFLINE,
        ]
        for key in keys:
            assert key in TRANSLATIONS["en"]
