"""Render configuration: one immutable value threaded through every call.

Values can come from code, CLI flags, or DAYNIGHT_* environment variables
(``.env`` files are loaded by the entry points with python-dotenv).
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from pytz import utc

from daynightmap.models import GeoPoint, Profile, ProfileKind, Projection
from daynightmap.raster import DEFAULT_STRIDE
from daynightmap.twilight import COLOR_PROFILE, PROFILES

SECONDS_CUTOFF = 4102444800  # 2100-01-01 in seconds; larger values are milliseconds


class ConfigError(ValueError):
    """Unparsable or out-of-range configuration value."""


@dataclass(frozen=True)
class RenderConfig:
    """Everything a render needs besides the instant and the observer."""

    width: int = 1000
    height: int = 500
    projection: Projection = Projection.MERCATOR
    profile: Profile = field(default=COLOR_PROFILE)
    stride: int = DEFAULT_STRIDE
    moon_radius: float = 10.0
    draw_terminator: bool = False
    fixed_instant: datetime | None = None  # Deterministic renders / screenshots

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigError(f"canvas must be at least 1x1, got {self.width}x{self.height}")
        if self.stride < 1:
            raise ConfigError(f"stride must be >= 1, got {self.stride}")
        if self.moon_radius <= 0:
            raise ConfigError(f"moon radius must be positive, got {self.moon_radius}")


def parse_projection(value: str) -> Projection:
    try:
        return Projection(value.strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in Projection)
        raise ConfigError(f"unknown projection {value!r} (choose from {choices})") from None


def parse_profile(value: str) -> Profile:
    try:
        return PROFILES[ProfileKind(value.strip().lower())]
    except ValueError:
        choices = ", ".join(k.value for k in ProfileKind)
        raise ConfigError(f"unknown profile {value!r} (choose from {choices})") from None


def parse_timestamp(value: str | int) -> datetime:
    """Unix timestamp in seconds or milliseconds to an aware UTC datetime.

    Values below SECONDS_CUTOFF are read as seconds, the rest as milliseconds.
    """
    try:
        stamp = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"timestamp must be an integer, got {value!r}") from None
    millis = stamp * 1000 if stamp < SECONDS_CUTOFF else stamp
    try:
        return datetime.fromtimestamp(millis / 1000, tz=utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ConfigError(f"timestamp out of range: {value!r}") from e


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(environ: Mapping[str, str] | None = None) -> RenderConfig:
    """Build a RenderConfig from DAYNIGHT_* variables. Missing keys keep defaults.

    Raises:
        ConfigError: On any unparsable value.
    """
    env = os.environ if environ is None else environ
    kwargs: dict[str, object] = {}
    if "DAYNIGHT_WIDTH" in env:
        kwargs["width"] = _parse_int("DAYNIGHT_WIDTH", env["DAYNIGHT_WIDTH"])
    if "DAYNIGHT_HEIGHT" in env:
        kwargs["height"] = _parse_int("DAYNIGHT_HEIGHT", env["DAYNIGHT_HEIGHT"])
    if "DAYNIGHT_STRIDE" in env:
        kwargs["stride"] = _parse_int("DAYNIGHT_STRIDE", env["DAYNIGHT_STRIDE"])
    if "DAYNIGHT_PROJECTION" in env:
        kwargs["projection"] = parse_projection(env["DAYNIGHT_PROJECTION"])
    if "DAYNIGHT_PROFILE" in env:
        kwargs["profile"] = parse_profile(env["DAYNIGHT_PROFILE"])
    if "DAYNIGHT_TERMINATOR" in env:
        kwargs["draw_terminator"] = _parse_bool(env["DAYNIGHT_TERMINATOR"])
    if env.get("DAYNIGHT_TIMESTAMP"):
        kwargs["fixed_instant"] = parse_timestamp(env["DAYNIGHT_TIMESTAMP"])
    return RenderConfig(**kwargs)  # type: ignore[arg-type]


def load_observer(environ: Mapping[str, str] | None = None) -> GeoPoint | None:
    """Observer from DAYNIGHT_LAT/DAYNIGHT_LNG, or None when either is unset.

    Raises:
        ConfigError: If the values are not numbers or out of range.
    """
    env = os.environ if environ is None else environ
    lat, lng = env.get("DAYNIGHT_LAT"), env.get("DAYNIGHT_LNG")
    if not lat or not lng:
        return None
    try:
        return GeoPoint(lat=float(lat), lng=float(lng))
    except ValueError as e:
        raise ConfigError(f"invalid observer location: {e}") from e
