"""DayNightMap: Streamlit app showing the live day/night world map."""

import asyncio
from datetime import timedelta

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv
from streamlit_js_eval import get_geolocation, streamlit_js_eval

load_dotenv()

from daynightmap.compute import render  # noqa: E402
from daynightmap.config import (  # noqa: E402
    ConfigError,
    RenderConfig,
    load_config,
    load_observer,
    parse_timestamp,
)
from daynightmap.i18n import t  # noqa: E402
from daynightmap.location import GeocodingError, from_browser_geolocation, geocode  # noqa: E402
from daynightmap.models import ProfileKind, Projection  # noqa: E402
from daynightmap.renderers.plotly_2d import render_plotly_map  # noqa: E402
from daynightmap.renderers.svg_2d import render_svg_html  # noqa: E402
from daynightmap.twilight import PROFILES  # noqa: E402

_REFRESH = timedelta(minutes=1)

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in, at which point _lang is set correctly.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="🌗",
    layout="wide",
    initial_sidebar_state="expanded",
)

# --- Session state initialization ---

if "observer" not in st.session_state:
    st.session_state.observer = load_observer()
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

st.markdown(
    """
    <style>
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0d1b35 !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    [data-testid="stMainBlockContainer"] {
        padding-top: 1rem !important;
    }
    label, [data-testid="stWidgetLabel"] p {
        color: #aaaaaa !important;
        font-size: 0.85rem !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Controls ---
_base = load_config()

with st.sidebar:
    projection = st.selectbox(
        t("label_projection", _lang),
        options=list(Projection),
        index=list(Projection).index(_base.projection),
        format_func=lambda p: p.value,
    )
    profile_kind = st.radio(
        t("label_profile", _lang),
        options=list(ProfileKind),
        index=list(ProfileKind).index(_base.profile.kind),
        format_func=lambda k: k.value,
        horizontal=True,
    )
    stride = st.slider(t("label_stride", _lang), min_value=1, max_value=8, value=_base.stride)
    draw_terminator = st.checkbox(t("label_terminator", _lang), value=_base.draw_terminator)
    timestamp = st.text_input(t("label_timestamp", _lang), value="")
    live = st.checkbox(t("label_live", _lang), value=True)
    interactive = st.checkbox(t("label_interactive", _lang), value=False)
    use_location = st.checkbox(t("label_use_location", _lang), value=False)
    place = st.text_input(t("label_place", _lang), value="")

# A typed place wins over the browser position
if place.strip() and st.session_state.get("place") != place:
    try:
        _found = asyncio.run(geocode(place))
        if _found is None:
            st.warning(t("place_not_found", _lang, place=place))
    except GeocodingError as e:
        _found = None
        st.warning(str(e))
    if _found is not None:
        st.session_state.observer = _found
        st.session_state.place = place

# Browser geolocation: None until the user answers the permission prompt
if use_location and st.session_state.observer is None:
    _point = from_browser_geolocation(get_geolocation())
    if _point is not None:
        st.session_state.observer = _point

try:
    _config = RenderConfig(
        width=_base.width,
        height=_base.height,
        projection=projection,
        profile=PROFILES[profile_kind],
        stride=stride,
        moon_radius=_base.moon_radius,
        draw_terminator=draw_terminator,
        fixed_instant=parse_timestamp(timestamp) if timestamp.strip() else _base.fixed_instant,
    )
    st.session_state.error_msg = None
except ConfigError as e:
    _config = _base
    st.session_state.error_msg = t("error_config", _lang, error=e)

if st.session_state.error_msg:
    st.warning(st.session_state.error_msg)


# A pinned instant never changes, so only the live clock needs a timer
@st.fragment(run_every=_REFRESH if live and _config.fixed_instant is None else None)
def _map_panel() -> None:
    frame = render(None, st.session_state.observer, _config)
    if interactive:
        st.plotly_chart(
            render_plotly_map(frame),
            use_container_width=False,
            config={"scrollZoom": True, "displayModeBar": False},
        )
    else:
        components.html(
            render_svg_html(frame, lang=_lang),
            height=_config.height + 160,
            scrolling=False,
        )
    if frame.observer is None:
        st.caption(t("location_unavailable", _lang))


_map_panel()
