"""GPS fix decoding (command 0x23, sub 0x00).

The radio packs the fix into 27 bytes of decimal nibbles:

  d0..d4    latitude   dd mm.mmm, d4 low nibble 1 = North
  d5..d10   longitude  ddd mm.mmm, d10 low nibble 1 = East
  d11..d14  altitude   tenths of a meter, d14 low nibble 1 = negative
  d15..d16  course     degrees (three digits)
  d17..d19  speed      tenths of km/h
  d20..d26  UTC        YYYY MM DD hh mm ss
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from civ.errors import InvalidFrameError

GPS_DATA_SIZE = 27


def _hi(byte: int) -> int:
    return byte >> 4


def _lo(byte: int) -> int:
    return byte & 0x0F


def _digits(data: bytes) -> int:
    """Read every nibble of data as one decimal number, high nibble first."""
    value = 0
    for byte in data:
        value = value * 100 + _hi(byte) * 10 + _lo(byte)
    return value


@dataclass(frozen=True)
class RawGpsPosition:
    """GPS fix fields exactly as the radio reports them."""

    lat_deg: int
    lat_min: int
    lat_min_frac: int  # thousandths of a minute
    lat_north: bool
    lon_deg: int
    lon_min: int
    lon_min_frac: int
    lon_east: bool
    alt_tenths: int
    alt_negative: bool
    course: int
    speed_tenths: int
    utc_year: int
    utc_month: int
    utc_day: int
    utc_hour: int
    utc_minute: int
    utc_second: int

    @classmethod
    def from_data(cls, d: bytes) -> "RawGpsPosition":
        """Decode the 27 data bytes that follow the sub-command."""
        if len(d) != GPS_DATA_SIZE:
            raise InvalidFrameError(f"GPS data must be {GPS_DATA_SIZE} bytes, got {len(d)}")
        return cls(
            lat_deg=_digits(d[0:1]),
            lat_min=_digits(d[1:2]),
            lat_min_frac=_hi(d[2]) * 100 + _lo(d[2]) * 10 + _hi(d[3]),
            lat_north=_lo(d[4]) == 1,
            lon_deg=_lo(d[5]) * 100 + _digits(d[6:7]),
            lon_min=_digits(d[7:8]),
            lon_min_frac=_hi(d[8]) * 100 + _lo(d[8]) * 10 + _hi(d[9]),
            lon_east=_lo(d[10]) == 1,
            alt_tenths=_digits(d[11:14]),
            alt_negative=_lo(d[14]) == 1,
            course=_hi(d[15]) * 100 + _lo(d[15]) * 10 + _hi(d[16]),
            speed_tenths=_digits(d[17:20]),
            utc_year=_digits(d[20:22]),
            utc_month=_digits(d[22:23]),
            utc_day=_digits(d[23:24]),
            utc_hour=_digits(d[24:25]),
            utc_minute=_digits(d[25:26]),
            utc_second=_digits(d[26:27]),
        )


@dataclass(frozen=True)
class GpsPosition:
    """GPS fix in decimal degrees, meters and km/h."""

    latitude: float
    longitude: float
    altitude: float
    course: int
    speed: float
    raw: RawGpsPosition

    @classmethod
    def from_raw(cls, raw: RawGpsPosition) -> "GpsPosition":
        latitude = raw.lat_deg + (raw.lat_min + raw.lat_min_frac / 1000) / 60
        longitude = raw.lon_deg + (raw.lon_min + raw.lon_min_frac / 1000) / 60
        altitude = raw.alt_tenths / 10
        return cls(
            latitude=latitude if raw.lat_north else -latitude,
            longitude=longitude if raw.lon_east else -longitude,
            altitude=-altitude if raw.alt_negative else altitude,
            course=raw.course,
            speed=raw.speed_tenths / 10,
            raw=raw,
        )

    @property
    def utc(self) -> datetime | None:
        """UTC timestamp of the fix, or None when the radio has no valid time."""
        r = self.raw
        try:
            return datetime(
                r.utc_year, r.utc_month, r.utc_day,
                r.utc_hour, r.utc_minute, r.utc_second,
                tzinfo=timezone.utc,
            )
        except ValueError:
            return None

    def __str__(self) -> str:
        ns = "N" if self.latitude >= 0 else "S"
        ew = "E" if self.longitude >= 0 else "W"
        return (
            f"{abs(self.latitude):.5f}{ns} {abs(self.longitude):.5f}{ew} "
            f"alt {self.altitude:.1f} m, {self.course} deg, {self.speed:.1f} km/h"
        )
