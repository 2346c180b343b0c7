#!/usr/bin/env python3
"""
Data models and enums for the IGC flight log decoder
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional

from igc_constants import IGC_FIX_VALID, IGC_FIX_NO_3D


class FixValidity(Enum):
    VALID = IGC_FIX_VALID
    NO_3D = IGC_FIX_NO_3D


@dataclass
class FieldDescriptor:
    """An extension field declared by an I or J record (1-based, inclusive offsets)"""
    start: int
    end: int
    code: str

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    def extract(self, line: str) -> str:
        """Slice this field out of a record line"""
        return line[self.start - 1:self.end]


@dataclass
class Point:
    """A single GNSS fix (B record)"""
    time: Optional[time] = None
    latitude: float = 0.0
    longitude: float = 0.0
    validity: FixValidity = FixValidity.VALID
    pressure_altitude: int = 0
    gnss_altitude: int = 0
    extensions: Dict[str, str] = field(default_factory=dict)
    num_satellites: int = 0


@dataclass
class TaskPoint:
    """A waypoint of a declared task, position and name only"""
    latitude: float = 0.0
    longitude: float = 0.0
    description: str = ''


@dataclass
class Task:
    """Pre-flight task declaration (C records)"""
    declaration_date: Optional[datetime] = None
    flight_date: Optional[date] = None
    number: int = 0
    description: str = ''
    takeoff: Optional[TaskPoint] = None
    start: Optional[TaskPoint] = None
    turnpoints: List[TaskPoint] = field(default_factory=list)
    finish: Optional[TaskPoint] = None
    landing: Optional[TaskPoint] = None

    @property
    def declared(self) -> bool:
        return self.takeoff is not None

    @property
    def waypoints(self) -> List[TaskPoint]:
        """All waypoints in flying order: takeoff, start, turnpoints, finish, landing"""
        if not self.declared:
            return []
        return [self.takeoff, self.start, *self.turnpoints, self.finish, self.landing]


@dataclass
class LogEntry:
    """A logbook comment (L record)"""
    type: str = ''
    text: str = ''


@dataclass
class Header:
    """Flight metadata from the A and H records"""
    manufacturer: str = ''
    unique_id: str = ''
    additional_data: str = ''
    date: Optional[date] = None
    fix_accuracy: int = 0
    pilot: str = ''
    crew: str = ''
    glider_type: str = ''
    glider_id: str = ''
    gps_datum: str = ''
    firmware_version: str = ''
    hardware_version: str = ''
    flight_recorder: str = ''
    gps: str = ''
    pressure_sensor: str = ''
    competition_id: str = ''
    competition_class: str = ''
    timezone: Optional[timezone] = None


@dataclass
class Flight:
    """Represents a decoded IGC file"""
    header: Header = field(default_factory=Header)
    points: List[Point] = field(default_factory=list)
    task: Task = field(default_factory=Task)
    events: Dict[time, Dict[str, str]] = field(default_factory=dict)
    satellites: Dict[time, List[int]] = field(default_factory=dict)
    k: Dict[time, Dict[str, str]] = field(default_factory=dict)
    logbook: List[LogEntry] = field(default_factory=list)
    signature: str = ''
    dgps_station_id: str = ''
