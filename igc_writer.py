#!/usr/bin/env python3
"""
IGC file writer module for the IGC flight log decoder

This module re-encodes a decoded Flight into IGC text. Extension field
declarations (I/J) are derived from the extension values themselves, and the
time-stamped records (F, E, K) are interleaved with the fixes in time order.
"""

from datetime import time, tzinfo
from typing import Dict, List, Optional, TextIO, Tuple

from igc_model import FieldDescriptor, Flight, Point, Task, TaskPoint
from igc_utils import decimalToDMD, hoursFromOffset
from igc_constants import (
    DEFAULT_SIGNATURE_WIDTH,
    IGC_RECORD_MANUFACTURER,
    IGC_RECORD_POSITION,
    IGC_RECORD_TASK,
    IGC_RECORD_DGPS,
    IGC_RECORD_EVENT,
    IGC_RECORD_SATELLITES,
    IGC_RECORD_SIGNATURE,
    IGC_RECORD_HEADER,
    IGC_RECORD_FIX_EXTENSIONS,
    IGC_RECORD_DATA_EXTENSIONS,
    IGC_RECORD_DATA,
    IGC_RECORD_LOGBOOK,
    IGC_HEADER_DATE,
    IGC_HEADER_FIX_ACCURACY,
    IGC_HEADER_PILOT,
    IGC_HEADER_CREW,
    IGC_HEADER_GLIDER_TYPE,
    IGC_HEADER_GLIDER_ID,
    IGC_HEADER_DATUM,
    IGC_HEADER_FIRMWARE,
    IGC_HEADER_HARDWARE,
    IGC_HEADER_RECORDER,
    IGC_HEADER_GPS,
    IGC_HEADER_PRESSURE_SENSOR,
    IGC_HEADER_COMPETITION_ID,
    IGC_HEADER_COMPETITION_CLASS,
    IGC_HEADER_TIMEZONE,
    IGC_HEADER_LABELS,
    IGC_DGPS_MARKER,
    IGC_TIME_FORMAT,
    IGC_DATE_FORMAT,
    IGC_DATETIME_FORMAT,
    TASK_NULL_DATETIME,
    TASK_NULL_DATE,
    FIX_EXTENSION_FIRST_COLUMN,
    DATA_EXTENSION_FIRST_COLUMN,
    SECONDS_PER_HOUR
)

# Header attributes in the order they are written
HEADER_TEXT_FIELDS = [
    (IGC_HEADER_PILOT, 'pilot'),
    (IGC_HEADER_CREW, 'crew'),
    (IGC_HEADER_GLIDER_TYPE, 'glider_type'),
    (IGC_HEADER_GLIDER_ID, 'glider_id'),
    (IGC_HEADER_DATUM, 'gps_datum'),
    (IGC_HEADER_FIRMWARE, 'firmware_version'),
    (IGC_HEADER_HARDWARE, 'hardware_version'),
    (IGC_HEADER_RECORDER, 'flight_recorder'),
    (IGC_HEADER_GPS, 'gps'),
    (IGC_HEADER_PRESSURE_SENSOR, 'pressure_sensor'),
    (IGC_HEADER_COMPETITION_ID, 'competition_id'),
    (IGC_HEADER_COMPETITION_CLASS, 'competition_class'),
]

# Order of time-stamped records sharing the same second
RANK_SATELLITES = 0
RANK_EVENT = 1
RANK_DATA = 2


class ExtensionLayout:
    """
    Assigns column offsets to extension codes as they are first seen,
    mirroring the append-only I/J tables of the parser.
    """

    def __init__(self, record_type: str, first_column: int):
        self.record_type = record_type
        self.next_column = first_column
        self.fields: List[FieldDescriptor] = []

    def declare_missing(self, values: Dict[str, str]) -> Optional[str]:
        """Declare codes not seen yet, returning the declaration line or None"""
        known = {f.code for f in self.fields}
        new_fields = []
        for code, value in values.items():
            if code in known:
                continue
            width = max(len(value), 1)
            descriptor = FieldDescriptor(self.next_column, self.next_column + width - 1, code)
            self.next_column += width
            new_fields.append(descriptor)
        if not new_fields:
            return None

        self.fields.extend(new_fields)
        groups = ''.join(f'{f.start:02d}{f.end:02d}{f.code:3.3}' for f in new_fields)
        return f'{self.record_type}{len(new_fields):02d}{groups}'

    def encode(self, values: Dict[str, str]) -> str:
        """Lay values out in declaration order, padded to their declared widths"""
        return ''.join(values.get(f.code, '').ljust(f.width)[:f.width] for f in self.fields)


class IgcWriter:
    """
    Handles writing IGC files from decoded flights.
    Formats every record type back into its fixed-width layout.
    """

    def __init__(self, config=None):
        """Initialize with optional configuration"""
        self.config = config

    @property
    def signature_width(self) -> int:
        if self.config is None:
            return DEFAULT_SIGNATURE_WIDTH
        return self.config.signature_width

    @staticmethod
    def format_time(value: time) -> str:
        return value.strftime(IGC_TIME_FORMAT)

    @staticmethod
    def format_task_point(point: TaskPoint) -> str:
        """Format a task waypoint line"""
        return (f'{IGC_RECORD_TASK}{decimalToDMD(point.latitude, True)}'
                f'{decimalToDMD(point.longitude, False)}{point.description}')

    @staticmethod
    def format_timezone(zone: tzinfo) -> str:
        """Decimal hours that decode back to the same whole seconds"""
        seconds = int(zone.utcoffset(None).total_seconds())
        hours = hoursFromOffset(zone.utcoffset(None))
        text = f'{hours:g}'
        if round(float(text) * SECONDS_PER_HOUR) != seconds:
            text = repr(hours)
        return text

    def format_header(self, flight: Flight) -> List[str]:
        """Format the A and H records"""
        header = flight.header
        lines = []

        if header.manufacturer or header.unique_id:
            lines.append(f'{IGC_RECORD_MANUFACTURER}{header.manufacturer:3.3}'
                         f'{header.unique_id:3.3}{header.additional_data}')
        if header.date:
            lines.append(f'{IGC_RECORD_HEADER}F{IGC_HEADER_DATE}{header.date.strftime(IGC_DATE_FORMAT)}')
        if header.fix_accuracy:
            lines.append(f'{IGC_RECORD_HEADER}F{IGC_HEADER_FIX_ACCURACY}{header.fix_accuracy:03d}')

        for key, attribute in HEADER_TEXT_FIELDS:
            value = getattr(header, attribute)
            if not value:
                continue
            label = IGC_HEADER_LABELS.get(key, '') if key != IGC_HEADER_GPS else ''
            lines.append(f'{IGC_RECORD_HEADER}F{key}{label}{value}')

        if header.timezone is not None:
            lines.append(f'{IGC_RECORD_HEADER}F{IGC_HEADER_TIMEZONE}'
                         f'{IGC_HEADER_LABELS[IGC_HEADER_TIMEZONE]}{self.format_timezone(header.timezone)}')
        return lines

    def format_task(self, task: Task) -> List[str]:
        """Format the C record block, empty when no task was declared"""
        if not task.declared:
            return []

        declared = (task.declaration_date.strftime(IGC_DATETIME_FORMAT)
                    if task.declaration_date else TASK_NULL_DATETIME)
        flight_date = (task.flight_date.strftime(IGC_DATE_FORMAT)
                       if task.flight_date else TASK_NULL_DATE)
        lines = [f'{IGC_RECORD_TASK}{declared}{flight_date}{task.number:04d}'
                 f'{len(task.turnpoints):02d}{task.description}']
        lines.extend(self.format_task_point(p) for p in task.waypoints)
        return lines

    def format_position(self, point: Point, layout: ExtensionLayout) -> str:
        """Format a B record"""
        return (f'{IGC_RECORD_POSITION}{self.format_time(point.time)}'
                f'{decimalToDMD(point.latitude, True)}{decimalToDMD(point.longitude, False)}'
                f'{point.validity.value}{point.pressure_altitude:05d}{point.gnss_altitude:05d}'
                f'{layout.encode(point.extensions)}')

    def format_timed_records(self, flight: Flight) -> List[Tuple[time, int, object]]:
        """Collect F, E and K records sorted by time of day"""
        records = []
        for sat_time, satellites in flight.satellites.items():
            records.append((sat_time, RANK_SATELLITES, satellites))
        for event_time, events in flight.events.items():
            records.append((event_time, RANK_EVENT, events))
        for data_time, values in flight.k.items():
            records.append((data_time, RANK_DATA, values))
        records.sort(key=lambda r: (r[0], r[1]))
        return records

    def format_timed_record(self, record: Tuple[time, int, object], layout: ExtensionLayout) -> List[str]:
        record_time, rank, payload = record
        stamp = self.format_time(record_time)
        if rank == RANK_SATELLITES:
            return [f'{IGC_RECORD_SATELLITES}{stamp}' + ''.join(f'{n:02d}' for n in payload)]
        if rank == RANK_EVENT:
            return [f'{IGC_RECORD_EVENT}{stamp}{code:3.3}{text}' for code, text in payload.items()]

        lines = []
        declaration = layout.declare_missing(payload)
        if declaration:
            lines.append(declaration)
        lines.append(f'{IGC_RECORD_DATA}{stamp}{layout.encode(payload)}')
        return lines

    @staticmethod
    def precedes(record: Tuple[time, int, object], point: Point) -> bool:
        """
        Whether a timed record goes before the fix. A same-second F record goes
        after the fix unless the fix already counts its satellites.
        """
        record_time, rank, payload = record
        if record_time != point.time:
            return record_time < point.time
        return rank != RANK_SATELLITES or len(payload) == point.num_satellites

    def format_track(self, flight: Flight) -> List[str]:
        """Format the fixes and the time-stamped records between them"""
        fix_layout = ExtensionLayout(IGC_RECORD_FIX_EXTENSIONS, FIX_EXTENSION_FIRST_COLUMN)
        data_layout = ExtensionLayout(IGC_RECORD_DATA_EXTENSIONS, DATA_EXTENSION_FIRST_COLUMN)
        pending = self.format_timed_records(flight)
        lines = []

        for point in flight.points:
            while pending and self.precedes(pending[0], point):
                lines.extend(self.format_timed_record(pending.pop(0), data_layout))
            declaration = fix_layout.declare_missing(point.extensions)
            if declaration:
                lines.append(declaration)
            lines.append(self.format_position(point, fix_layout))

        for record in pending:
            lines.extend(self.format_timed_record(record, data_layout))
        return lines

    def format_signature(self, signature: str) -> List[str]:
        """Split the signature into G records"""
        width = max(self.signature_width, 1)
        return [f'{IGC_RECORD_SIGNATURE}{signature[i:i + width]}'
                for i in range(0, len(signature), width)]

    def format_flight(self, flight: Flight) -> List[str]:
        """Format every record of a flight, in IGC file order"""
        lines = self.format_header(flight)
        lines.extend(self.format_task(flight.task))
        if flight.dgps_station_id:
            lines.append(f'{IGC_RECORD_DGPS}{IGC_DGPS_MARKER}{flight.dgps_station_id:4.4}')
        lines.extend(self.format_track(flight))
        lines.extend(f'{IGC_RECORD_LOGBOOK}{entry.type:3.3}{entry.text}' for entry in flight.logbook)
        lines.extend(self.format_signature(flight.signature))
        return lines

    def write_file(self, igc_file: TextIO, flight: Flight) -> None:
        """Write a complete IGC file from flight data"""
        for line in self.format_flight(flight):
            igc_file.write(line + '\n')


# Public function
def writeIgcFile(config, igc_file: TextIO, flight: Flight) -> None:
    """Write an IGC file from the flight data"""
    writer = IgcWriter(config)
    writer.write_file(igc_file, flight)
