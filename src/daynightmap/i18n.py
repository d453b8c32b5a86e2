"""Simple two-language (ko/en) translation helper."""

from daynightmap.models import MoonPhase

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "낮과 밤 지도",
        "en": "DayNightMap",
    },
    "label_projection": {
        "ko": "투영법",
        "en": "Projection",
    },
    "label_profile": {
        "ko": "표시 모드",
        "en": "Display mode",
    },
    "label_stride": {
        "ko": "샘플 간격(px)",
        "en": "Sample stride (px)",
    },
    "label_terminator": {
        "ko": "명암 경계선 표시",
        "en": "Show terminator",
    },
    "label_live": {
        "ko": "1분마다 갱신",
        "en": "Refresh every minute",
    },
    "label_timestamp": {
        "ko": "고정 시각 (Unix 타임스탬프)",
        "en": "Fixed time (Unix timestamp)",
    },
    "label_use_location": {
        "ko": "내 위치 사용",
        "en": "Use my location",
    },
    "label_interactive": {
        "ko": "확대/이동 가능한 지도",
        "en": "Interactive map (zoom and pan)",
    },
    "label_place": {
        "ko": "장소 검색 (예: 서울)",
        "en": "Search a place (e.g. Seoul)",
    },
    "place_not_found": {
        "ko": "장소를 찾을 수 없습니다: {place}",
        "en": "Place not found: {place}",
    },
    "current_time": {
        "ko": "현재 UTC 시각",
        "en": "Current UTC Time",
    },
    "sun": {
        "ko": "태양",
        "en": "Sun",
    },
    "moon": {
        "ko": "달",
        "en": "Moon",
    },
    "illuminated": {
        "ko": "{percent}% 밝음",
        "en": "{percent}% illuminated",
    },
    "sunrise": {
        "ko": "일출",
        "en": "Sunrise",
    },
    "sunset": {
        "ko": "일몰",
        "en": "Sunset",
    },
    "day_length": {
        "ko": "낮의 길이",
        "en": "Day length",
    },
    "polar_day": {
        "ko": "백야 (해가 지지 않음)",
        "en": "Polar day (sun never sets)",
    },
    "polar_night": {
        "ko": "극야 (해가 뜨지 않음)",
        "en": "Polar night (sun never rises)",
    },
    "location_unavailable": {
        "ko": "위치 정보 없음",
        "en": "Location unavailable",
    },
    "error_config": {
        "ko": "설정 값을 확인하세요. ({error})",
        "en": "Check the settings. ({error})",
    },
    "band_0": {"ko": "낮", "en": "Day"},
    "band_1": {"ko": "시민 박명", "en": "Civil twilight"},
    "band_2": {"ko": "항해 박명", "en": "Nautical twilight"},
    "band_3": {"ko": "천문 박명", "en": "Astronomical twilight"},
    "band_4": {"ko": "밤", "en": "Night"},
}

_PHASE_KO: dict[MoonPhase, str] = {
    MoonPhase.NEW: "삭",
    MoonPhase.WAXING_CRESCENT: "초승달",
    MoonPhase.FIRST_QUARTER: "상현달",
    MoonPhase.WAXING_GIBBOUS: "차가는 달",
    MoonPhase.FULL: "보름달",
    MoonPhase.WANING_GIBBOUS: "기우는 달",
    MoonPhase.THIRD_QUARTER: "하현달",
    MoonPhase.WANING_CRESCENT: "그믐달",
}


def t(key: str, lang: str, **kwargs: object) -> str:
    """Return the translated string for key in lang, formatted with kwargs.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry.get("en") or key
    return text.format(**kwargs) if kwargs else text


def phase_name(phase: MoonPhase, lang: str) -> str:
    if lang == "ko":
        return _PHASE_KO[phase]
    return phase.label
