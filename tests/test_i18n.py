from daynightmap.i18n import phase_name, t
from daynightmap.models import MoonPhase


def test_translation_and_formatting():
    assert t("sun", "ko") == "태양"
    assert t("illuminated", "en", percent=42) == "42% illuminated"


def test_unknown_language_falls_back_to_english():
    assert t("moon", "fr") == "Moon"


def test_unknown_key_returns_key():
    assert t("no_such_label", "en") == "no_such_label"


def test_phase_names():
    assert phase_name(MoonPhase.FULL, "en") == "Full Moon"
    assert phase_name(MoonPhase.WANING_CRESCENT, "ko") == "그믐달"
    assert all(phase_name(p, "ko") for p in MoonPhase)
