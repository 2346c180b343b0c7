#!/usr/bin/env python3
"""
Utility functions for the IGC flight log decoder

Coordinate, date/time and number primitives shared by the parser and the writer.
All decoding helpers raise ValueError on malformed input.
"""

import re
from datetime import datetime, date, time, timedelta
from typing import Tuple, Union

from igc_constants import (
    IGC_TIME_FORMAT,
    IGC_DATE_FORMAT,
    IGC_DATETIME_FORMAT,
    IGC_LABEL_SEPARATOR,
    LATITUDE_DEGREE_DIGITS,
    LONGITUDE_DEGREE_DIGITS,
    LATITUDE_HEMISPHERES,
    LONGITUDE_HEMISPHERES,
    MINUTE_DECIMALS,
    MINUTES_PER_DEGREE,
    SECONDS_PER_HOUR,
    DATE_FORMAT_YMD,
    TIME_FORMAT_HM
)

_INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')
_DIGITS_PATTERN = re.compile(r'^\d+$')


def secondsFromString(timezone: str) -> int:
    """Convert a timezone string to seconds offset"""
    seconds = 0

    timezone = numberOrString(timezone)
    if isinstance(timezone, (float, int)):
        seconds = timezone * SECONDS_PER_HOUR
    elif isinstance(timezone, str):
        indexAfterSign = int(timezone[0] in ['+','-'])
        zone = timezone[indexAfterSign:].split(':')

        seconds = float(zone.pop())
        seconds += float(zone.pop()) * 60
        if len(zone):
            seconds += float(zone.pop()) * SECONDS_PER_HOUR
        else:
            seconds *= 60

        seconds *= -1 if timezone[0] == '-' else 1

    return int(seconds)


def numberOrString(value: str) -> Union[float, str]:
    """Convert a string to a number if possible, otherwise keep as string"""
    if re.sub('^[+-]', '', re.sub('\\.', '', value)).isnumeric():
        return float(value)
    else:
        return value


def integerFromString(value: str) -> int:
    """Strict integer parsing: optional sign followed by digits only"""
    if not _INTEGER_PATTERN.match(value):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def stripLabel(value: str, separator: str = IGC_LABEL_SEPARATOR) -> str:
    """Drop everything up to and including the first separator, if any"""
    index = value.find(separator)
    if index == -1:
        return value
    return value[index + 1:]


def dmdToDecimal(raw: str, hemispheres: str = LATITUDE_HEMISPHERES + LONGITUDE_HEMISPHERES) -> float:
    """
    Convert a fixed-width degrees/minutes/decimal-minutes string to decimal degrees.

    Latitudes are DDMM[mmm]H and longitudes DDDMM[mmm]H, the number of degree
    digits being given by the hemisphere letter. S and W are negative.
    `hemispheres` lists the letters accepted for this field.
    """
    if len(raw) < 2:
        raise ValueError(f"coordinate too short: {raw!r}")

    hemisphere = raw[-1]
    digits = raw[:-1]
    if hemisphere not in hemispheres:
        raise ValueError(f"hemisphere {hemisphere!r} not one of {hemispheres!r}: {raw!r}")
    if hemisphere in LATITUDE_HEMISPHERES:
        degree_digits = LATITUDE_DEGREE_DIGITS
    elif hemisphere in LONGITUDE_HEMISPHERES:
        degree_digits = LONGITUDE_DEGREE_DIGITS
    else:
        raise ValueError(f"invalid hemisphere in coordinate: {raw!r}")

    if len(digits) < degree_digits + 2 or not _DIGITS_PATTERN.match(digits):
        raise ValueError(f"invalid coordinate: {raw!r}")

    degrees = int(digits[:degree_digits])
    minutes = float(int(digits[degree_digits:degree_digits + 2]))
    decimals = digits[degree_digits + 2:]
    if decimals:
        minutes += int(decimals) / 10 ** len(decimals)

    value = degrees + minutes / MINUTES_PER_DEGREE
    return -value if hemisphere in ('S', 'W') else value


def decimalToDMD(value: float, is_latitude: bool) -> str:
    """Format decimal degrees as an IGC DDMMmmmH / DDDMMmmmH string"""
    if is_latitude:
        hemisphere = 'S' if value < 0 else 'N'
        degree_digits = LATITUDE_DEGREE_DIGITS
    else:
        hemisphere = 'W' if value < 0 else 'E'
        degree_digits = LONGITUDE_DEGREE_DIGITS

    scale = MINUTES_PER_DEGREE * 10 ** MINUTE_DECIMALS
    total = int(round(abs(value) * scale))
    degrees, remainder = divmod(total, scale)
    minutes, decimals = divmod(remainder, 10 ** MINUTE_DECIMALS)

    return (f"{degrees:0{degree_digits}d}{minutes:02d}"
            f"{decimals:0{MINUTE_DECIMALS}d}{hemisphere}")


def _strptime(value: str, fmt: str, width: int) -> datetime:
    # strptime alone accepts single digit fields, so check the width first
    if len(value) != width or not _DIGITS_PATTERN.match(value):
        raise ValueError(f"expected {width} digits: {value!r}")
    return datetime.strptime(value, fmt)


def parseIgcTime(value: str) -> time:
    """Parse a HHMMSS time of day"""
    return _strptime(value, IGC_TIME_FORMAT, 6).time()


def parseIgcDate(value: str) -> date:
    """Parse a DDMMYY date"""
    return _strptime(value, IGC_DATE_FORMAT, 6).date()


def parseIgcDateTime(value: str) -> datetime:
    """Parse a DDMMYYHHMMSS date and time"""
    return _strptime(value, IGC_DATETIME_FORMAT, 12)


def hoursFromOffset(offset: timedelta) -> float:
    """Convert a UTC offset into decimal hours"""
    return offset.total_seconds() / SECONDS_PER_HOUR


def shiftTime(value: time, seconds: int) -> Tuple[time, int]:
    """
    Shift a time of day by an offset in seconds.
    Returns the shifted time and the day carry (-1, 0 or +1).
    """
    total = value.hour * SECONDS_PER_HOUR + value.minute * 60 + value.second + seconds
    days, total = divmod(int(total), 24 * SECONDS_PER_HOUR)
    hours, rest = divmod(total, SECONDS_PER_HOUR)
    return time(hours, rest // 60, rest % 60), days


def toYMD(time_input: Union[datetime, date, str]) -> str:
    """Convert a date to YYYY/MM/DD format"""
    if isinstance(time_input, str):
        try:
            time_input = datetime.fromisoformat(time_input)
        except ValueError:
            return time_input  # Return original if cannot convert

    if isinstance(time_input, (datetime, date)):
        return time_input.strftime(DATE_FORMAT_YMD)

    return str(time_input)  # Fallback


def toHM(time_input: Union[datetime, time, str]) -> str:
    """Convert a time to HH:MM format"""
    if isinstance(time_input, str):
        try:
            time_input = datetime.fromisoformat(time_input)
        except ValueError:
            return time_input  # Return original if cannot convert

    if isinstance(time_input, (datetime, time)):
        return time_input.strftime(TIME_FORMAT_HM)

    return str(time_input)  # Fallback
