#!/usr/bin/env python3
"""
Flight summary functions for the IGC flight log decoder
"""

from datetime import datetime, timedelta

from igc_model import Flight
from igc_utils import toYMD, toHM, shiftTime
from igc_constants import DEFAULT_NA_TEXT


def flightDuration(flight: Flight) -> timedelta:
    """Time between the first and the last fix, wrapping past midnight"""
    if len(flight.points) < 2:
        return timedelta(0)
    start = datetime.combine(datetime.min.date(), flight.points[0].time)
    end = datetime.combine(datetime.min.date(), flight.points[-1].time)
    if end < start:
        end += timedelta(days=1)
    return end - start


def flightSummary(flight: Flight, timezone_offset: int = 0) -> str:
    """
    Generate a summary string for the flight.
    Fix times are shown in local time: the HFTZN header offset when present,
    else `timezone_offset` seconds.
    """
    header = flight.header
    if header.timezone is not None:
        timezone_offset = int(header.timezone.utcoffset(None).total_seconds())

    pilot = f' by {header.pilot}' if header.pilot else ''
    date_str = toYMD(header.date) if header.date else "Unknown Date"

    duration_str = DEFAULT_NA_TEXT
    if len(flight.points) > 1:
        total_seconds = flightDuration(flight).total_seconds()
        hours = int(total_seconds // 3600)
        minutes = int((total_seconds % 3600) // 60)
        duration_str = f"{hours} hours and {minutes} minutes"

    heading = f"{header.glider_id or 'Unknown'} - {date_str}{pilot} ({duration_str})"
    underline = '\n' + ('-' * len(heading))

    def describe(point):
        if point is None:
            return DEFAULT_NA_TEXT
        local_time, _ = shiftTime(point.time, timezone_offset)
        return f"{toHM(local_time)} ({point.latitude:.6f}, {point.longitude:.6f})"

    first = flight.points[0] if flight.points else None
    last = flight.points[-1] if flight.points else None

    task_line = DEFAULT_NA_TEXT
    if flight.task.declared:
        names = ' - '.join(p.description.strip() or '?' for p in flight.task.waypoints)
        task_line = f"{flight.task.description or 'Task ' + str(flight.task.number)}: {names}"

    recorder = ' '.join(v for v in (header.manufacturer, header.flight_recorder) if v)
    glider = header.glider_type or DEFAULT_NA_TEXT
    if header.competition_id:
        glider += f" [{header.competition_id}]"

    return f'''{heading}{underline}
   From: {describe(first)}
     To: {describe(last)}
  Fixes: {len(flight.points)}
   Task: {task_line}
 Glider: {glider}
 Logger: {recorder or DEFAULT_NA_TEXT}
 Events: {sum(len(e) for e in flight.events.values())}'''
