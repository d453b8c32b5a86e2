"""Data model definitions: explicit boundaries between time, ephemeris, raster, and render layers."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, IntEnum

import numpy as np


class DomainError(ValueError):
    """Latitude/longitude (or other geometric input) outside its valid range."""


def wrap_longitude(lng: float) -> float:
    """Bring a longitude into (-180, 180] by repeated ±360 steps.

    Stepping rather than taking a modulo keeps the sign stable right at
    the ±180 seam.
    """
    while lng > 180.0:
        lng -= 360.0
    while lng <= -180.0:
        lng += 360.0
    return lng


@dataclass(frozen=True)
class GeoPoint:
    """A point on the globe. Rejects out-of-range input at construction."""

    lat: float  # Latitude (decimal degrees, -90..90)
    lng: float  # Longitude (decimal degrees, -180 exclusive..180)

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise DomainError(f"non-finite coordinate: lat={self.lat}, lng={self.lng}")
        if not -90.0 <= self.lat <= 90.0:
            raise DomainError(f"latitude out of range [-90, 90]: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise DomainError(f"longitude out of range [-180, 180]: {self.lng}")
        if self.lng == -180.0:
            object.__setattr__(self, "lng", 180.0)


@dataclass(frozen=True)
class TimeParts:
    """Decomposition of an instant consumed by the ephemerides."""

    day_of_year: int  # 1 = January 1st (UTC calendar)
    utc_hours: float  # Fractional hour of the UTC day, 0 <= h < 24
    julian_date: float  # Continuous day count (JD)


@dataclass(frozen=True)
class CelestialPosition:
    """Sub-point of a body. Elongation/illumination are only set for the Moon."""

    point: GeoPoint
    elongation_deg: float | None = None  # Moon-Sun separation, 0 <= e < 360
    illuminated_fraction: float | None = None  # 0 = new, 1 = full

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lng(self) -> float:
        return self.point.lng

    @property
    def waxing(self) -> bool:
        """True while elongation is below 180° (lit limb on the right)."""
        return self.elongation_deg is not None and self.elongation_deg < 180.0


class MoonPhase(Enum):
    """The eight named phases, each a 45° elongation sector."""

    NEW = ("New Moon", "\U0001f311")
    WAXING_CRESCENT = ("Waxing Crescent", "\U0001f312")
    FIRST_QUARTER = ("First Quarter", "\U0001f313")
    WAXING_GIBBOUS = ("Waxing Gibbous", "\U0001f314")
    FULL = ("Full Moon", "\U0001f315")
    WANING_GIBBOUS = ("Waning Gibbous", "\U0001f316")
    THIRD_QUARTER = ("Third Quarter", "\U0001f317")
    WANING_CRESCENT = ("Waning Crescent", "\U0001f318")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def symbol(self) -> str:
        return self.value[1]


class Projection(Enum):
    """Supported map projections. Mapping math lives in projection.py."""

    EQUIRECTANGULAR = "equirectangular"
    MERCATOR = "mercator"


class TwilightBand(IntEnum):
    """Shading bands ordered from brightest to darkest."""

    DAY = 0
    CIVIL = 1
    NAUTICAL = 2
    ASTRONOMICAL = 3
    NIGHT = 4


@dataclass(frozen=True)
class BandStop:
    """One row of a threshold table: the band starts at floor_deg and below."""

    band: TwilightBand
    floor_deg: float  # Lowest solar elevation still inside this band
    opacity: float  # Overlay opacity at floor_deg


class ProfileKind(Enum):
    COLOR = "color"
    GRAYSCALE = "grayscale"


RGB = tuple[int, int, int]


@dataclass(frozen=True)
class Profile:
    """Rendering profile: a tagged variant carrying its own threshold table.

    The table is ordered from the brightest band (highest floor) down to the
    darkest. With ``smooth`` set, opacity is interpolated between adjacent
    floors; otherwise each band is one flat step.
    """

    kind: ProfileKind
    table: tuple[BandStop, ...]
    smooth: bool
    overlay_rgb: RGB  # Night overlay color
    alpha_scale: float  # Global overlay opacity factor
    moon_lit_rgb: RGB
    moon_shadow_rgb: RGB
    sun_rgb: RGB

    def __post_init__(self) -> None:
        if not self.table:
            raise ValueError("threshold table must not be empty")
        floors = [s.floor_deg for s in self.table]
        if any(a <= b for a, b in zip(floors, floors[1:])):
            raise ValueError(f"band floors must strictly decrease: {floors}")
        opacities = [s.opacity for s in self.table]
        if any(a > b for a, b in zip(opacities, opacities[1:])):
            raise ValueError(f"opacity must not decrease as elevation rises: {opacities}")
        if any(not 0.0 <= o <= 1.0 for o in opacities):
            raise ValueError(f"opacity out of [0, 1]: {opacities}")


@dataclass(frozen=True)
class ShadeSample:
    """Overlay color and opacity assigned to one sample."""

    color: RGB
    alpha: float  # 0..1, before the profile's alpha_scale


@dataclass(frozen=True)
class SunTimes:
    """Sunrise/sunset in UTC, or a polar sentinel when the sun never crosses."""

    sunrise: datetime | None = None
    sunset: datetime | None = None
    polar_day: bool = False
    polar_night: bool = False

    @property
    def day_length(self) -> timedelta:
        if self.polar_day:
            return timedelta(hours=24)
        if self.polar_night or self.sunrise is None or self.sunset is None:
            return timedelta(0)
        return self.sunset - self.sunrise


@dataclass(frozen=True)
class ObserverInfo:
    """Location-dependent panel values."""

    point: GeoPoint
    solar_elevation: float  # Degrees
    band: TwilightBand
    moon_elevation: float  # Degrees
    sun_times: SunTimes


@dataclass(frozen=True)
class MoonGlyph:
    """Vector geometry of the moon disk, centred at the origin (y up)."""

    radius: float
    disk_outline: tuple[tuple[float, float], ...]  # Polygonal disk, same sampling as lit_outline
    lit_outline: tuple[tuple[float, float], ...]  # Empty at new moon
    lit_rgb: RGB
    shadow_rgb: RGB


@dataclass(frozen=True, eq=False)
class Frame:
    """The sole input to renderers. Fully computed state for one instant."""

    instant: datetime
    width: int
    height: int
    projection: Projection
    profile: Profile
    overlay: np.ndarray  # (height, width, 4) uint8 RGBA
    sun: CelestialPosition
    moon: CelestialPosition
    phase: MoonPhase
    sun_pixel: tuple[float, float] | None  # None when outside the visible range
    moon_pixel: tuple[float, float] | None
    moon_glyph: MoonGlyph
    terminator: tuple[tuple[float, float], ...] = field(default_factory=tuple)
    observer: ObserverInfo | None = None

    @property
    def illuminated_percent(self) -> int:
        return round((self.moon.illuminated_fraction or 0.0) * 100)

    def summary(self) -> dict[str, object]:
        """Derived info for legends and text panels."""
        info: dict[str, object] = {
            "instant": self.instant.isoformat(),
            "sub_solar": (round(self.sun.lat, 2), round(self.sun.lng, 2)),
            "sub_lunar": (round(self.moon.lat, 2), round(self.moon.lng, 2)),
            "phase_name": self.phase.label,
            "phase_symbol": self.phase.symbol,
            "illuminated_percent": self.illuminated_percent,
        }
        if self.observer is not None:
            times = self.observer.sun_times
            info["sunrise"] = times.sunrise.isoformat() if times.sunrise else None
            info["sunset"] = times.sunset.isoformat() if times.sunset else None
            info["polar_day"] = times.polar_day
            info["polar_night"] = times.polar_night
            info["day_length"] = str(times.day_length)
        return info
