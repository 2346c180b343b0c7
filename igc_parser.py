#!/usr/bin/env python3
"""
IGC file parser module for the IGC flight log decoder

This module decodes IGC flight recorder logs: manufacturer and header records,
extension field declarations (I/J), position fixes, the multi-line task
declaration and the auxiliary event, satellite, data, signature and logbook
records.

Parsing is fail-fast: the first malformed record raises an IgcParseError that
carries the partially decoded Flight, the offending line and its line number.
"""

import logging
from datetime import timezone, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TextIO, Tuple

from igc_model import (
    FieldDescriptor,
    FixValidity,
    Flight,
    LogEntry,
    Point,
    Task,
    TaskPoint
)
from igc_utils import (
    dmdToDecimal,
    integerFromString,
    parseIgcDate,
    parseIgcDateTime,
    parseIgcTime,
    stripLabel
)
from igc_constants import (
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
    MIN_LENGTH_MANUFACTURER,
    MIN_LENGTH_POSITION,
    MIN_LENGTH_TASK,
    MIN_LENGTH_TASK_POINT,
    MIN_LENGTH_DGPS,
    MIN_LENGTH_EVENT,
    MIN_LENGTH_SATELLITES,
    MIN_LENGTH_HEADER,
    MIN_LENGTH_HEADER_DATE,
    MIN_LENGTH_HEADER_FXA,
    MIN_LENGTH_HEADER_DATUM,
    MIN_LENGTH_EXTENSIONS,
    MIN_LENGTH_DATA,
    MIN_LENGTH_LOGBOOK,
    LATITUDE_HEMISPHERES,
    LONGITUDE_HEMISPHERES,
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
    IGC_DGPS_MARKER,
    TASK_FIXED_LINES,
    EXTENSION_GROUP_WIDTH,
    SECONDS_PER_HOUR
)

# Configure logger
logger = logging.getLogger(__name__)


class IgcParseError(ValueError):
    """
    Base class for structural errors found while decoding an IGC file.
    The driver fills in the line number and the partially decoded flight.
    """

    kind = "invalid record"

    def __init__(self, reason: str, line: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        self.flight: Optional[Flight] = None
        super().__init__(reason)

    def __str__(self) -> str:
        location = f" (line {self.line_number})" if self.line_number else ""
        return f"{self.reason}{location}: {self.line!r}"


class LineTooShortError(IgcParseError):
    kind = "line too short"


class InvalidFieldError(IgcParseError):
    kind = "invalid field value"


class UnknownRecordError(IgcParseError):
    kind = "unknown record"


class StructuralMismatchError(IgcParseError):
    kind = "structural mismatch"


def require_length(line: str, minimum: int) -> None:
    """Raise LineTooShortError unless the line has at least `minimum` characters"""
    if len(line) < minimum:
        raise LineTooShortError(
            f"line too short (expected at least {minimum} characters, got {len(line)})", line
        )


def parse_time_field(line: str, start: int = 1, end: int = 7):
    """Decode the HHMMSS time found at line[start:end]"""
    try:
        return parseIgcTime(line[start:end])
    except ValueError:
        raise InvalidFieldError(f"invalid time {line[start:end]!r}", line) from None


def parse_int_field(line: str, start: int, end: int, name: str) -> int:
    """Decode a strict integer found at line[start:end]"""
    try:
        return integerFromString(line[start:end])
    except ValueError:
        raise InvalidFieldError(f"invalid {name} {line[start:end]!r}", line) from None


def parse_coordinate_field(line: str, start: int, end: int, hemispheres: str) -> float:
    """Decode a fixed-width coordinate found at line[start:end]"""
    try:
        return dmdToDecimal(line[start:end], hemispheres)
    except ValueError:
        raise InvalidFieldError(f"invalid coordinate {line[start:end]!r}", line) from None


class IgcFieldSchema:
    """
    Extension field table declared by I (per fix) or J (per K record) records.
    A fresh instance is created for every parse.
    """

    def __init__(self, record_type: str):
        self.record_type = record_type
        self.fields: List[FieldDescriptor] = []

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def declare(self, line: str) -> List[FieldDescriptor]:
        """
        Decode a declaration line (tag, 2-digit count N, N groups of
        2-digit start, 2-digit end and 3-character code) and append its fields.
        """
        require_length(line, MIN_LENGTH_EXTENSIONS)
        count = parse_int_field(line, 1, 3, f"number of {self.record_type} fields")
        if len(line) != MIN_LENGTH_EXTENSIONS + count * EXTENSION_GROUP_WIDTH:
            raise StructuralMismatchError(
                f"wrong line size for {count} {self.record_type} fields", line
            )

        declared = []
        for i in range(count):
            s = MIN_LENGTH_EXTENSIONS + i * EXTENSION_GROUP_WIDTH
            start = parse_int_field(line, s, s + 2, "field start")
            end = parse_int_field(line, s + 2, s + 4, "field end")
            if start < 1 or end < start:
                raise InvalidFieldError(f"invalid field range {start}-{end}", line)
            declared.append(FieldDescriptor(start=start, end=end, code=line[s + 4:s + 7]))

        self.fields.extend(declared)
        logger.debug(f"Declared {self.record_type} fields: "
                     f"{', '.join(f'{d.code}@{d.start}-{d.end}' for d in declared)}")
        return declared

    def extract(self, line: str) -> Dict[str, str]:
        """Slice every declared field out of a record line"""
        values = {}
        for descriptor in self.fields:
            if len(line) < descriptor.end:
                raise LineTooShortError(
                    f"line too short for {self.record_type} field {descriptor.code} "
                    f"at {descriptor.start}-{descriptor.end}", line
                )
            values[descriptor.code] = descriptor.extract(line)
        return values


class IgcHeaderParser:
    """
    Parses the manufacturer (A) and header (H) records.
    Free text values have their label stripped up to the first colon.
    """

    # sub-key -> (Header attribute, minimum line length, strip label)
    TEXT_FIELDS = {
        IGC_HEADER_PILOT: ('pilot', MIN_LENGTH_HEADER, True),
        IGC_HEADER_CREW: ('crew', MIN_LENGTH_HEADER, True),
        IGC_HEADER_GLIDER_TYPE: ('glider_type', MIN_LENGTH_HEADER, True),
        IGC_HEADER_GLIDER_ID: ('glider_id', MIN_LENGTH_HEADER, True),
        IGC_HEADER_DATUM: ('gps_datum', MIN_LENGTH_HEADER_DATUM, True),
        IGC_HEADER_FIRMWARE: ('firmware_version', MIN_LENGTH_HEADER, True),
        IGC_HEADER_HARDWARE: ('hardware_version', MIN_LENGTH_HEADER, True),
        IGC_HEADER_RECORDER: ('flight_recorder', MIN_LENGTH_HEADER, True),
        IGC_HEADER_GPS: ('gps', MIN_LENGTH_HEADER, False),
        IGC_HEADER_PRESSURE_SENSOR: ('pressure_sensor', MIN_LENGTH_HEADER, True),
        IGC_HEADER_COMPETITION_ID: ('competition_id', MIN_LENGTH_HEADER, True),
        IGC_HEADER_COMPETITION_CLASS: ('competition_class', MIN_LENGTH_HEADER, True),
    }

    @staticmethod
    def parse_manufacturer_line(line: str, flight: Flight) -> None:
        """Parse an A record: manufacturer code, unique ID and free data"""
        require_length(line, MIN_LENGTH_MANUFACTURER)
        flight.header.manufacturer = line[1:4]
        flight.header.unique_id = line[4:7]
        flight.header.additional_data = line[7:]

    def parse_header_line(self, line: str, flight: Flight) -> None:
        """Parse a single H record and update the flight header"""
        require_length(line, MIN_LENGTH_HEADER)
        header = flight.header
        key = line[2:5]

        if key in self.TEXT_FIELDS:
            attribute, minimum, strip = self.TEXT_FIELDS[key]
            require_length(line, minimum)
            value = line[5:]
            setattr(header, attribute, stripLabel(value) if strip else value)

        elif key == IGC_HEADER_DATE:
            require_length(line, MIN_LENGTH_HEADER_DATE)
            # Accepts both HFDTEDDMMYY and HFDTEDATE:DDMMYY,NN
            value = stripLabel(line[5:])
            if len(value) < 6:
                raise LineTooShortError("line too short for a DDMMYY date", line)
            try:
                header.date = parseIgcDate(value[:6])
            except ValueError:
                raise InvalidFieldError(f"invalid date {value[:6]!r}", line) from None

        elif key == IGC_HEADER_FIX_ACCURACY:
            require_length(line, MIN_LENGTH_HEADER_FXA)
            header.fix_accuracy = parse_int_field(line, 5, 8, "fix accuracy")

        elif key == IGC_HEADER_TIMEZONE:
            value = stripLabel(line[5:]).strip()
            try:
                hours = float(value)
                header.timezone = timezone(timedelta(seconds=round(hours * SECONDS_PER_HOUR)))
            except (ValueError, OverflowError):
                raise InvalidFieldError(f"invalid timezone {value!r}", line) from None

        else:
            raise UnknownRecordError(f"unknown header record {key!r}", line)


class IgcPositionParser:
    """
    Parses position records (B records) from IGC files.
    Extracts time, coordinates, validity, altitudes and declared extensions.
    """

    @staticmethod
    def parse_validity(line: str) -> FixValidity:
        """Extract the fix validity flag from a B record"""
        try:
            return FixValidity(line[24])
        except ValueError:
            raise InvalidFieldError(f"invalid fix validity {line[24]!r}", line) from None

    @staticmethod
    def parse_altitude(line: str) -> Tuple[int, int]:
        """
        Extract pressure and GNSS altitude from a B record
        Returns tuple of (pressure_altitude, gnss_altitude)
        """
        return (parse_int_field(line, 25, 30, "pressure altitude"),
                parse_int_field(line, 30, 35, "GNSS altitude"))

    def parse_position_record(self, line: str, schema: IgcFieldSchema,
                              num_satellites: int = 0) -> Point:
        """
        Parse a complete B record and return a Point
        """
        require_length(line, MIN_LENGTH_POSITION)
        point = Point()
        point.time = parse_time_field(line)
        point.latitude = parse_coordinate_field(line, 7, 15, LATITUDE_HEMISPHERES)
        point.longitude = parse_coordinate_field(line, 15, 24, LONGITUDE_HEMISPHERES)
        point.validity = self.parse_validity(line)
        point.pressure_altitude, point.gnss_altitude = self.parse_altitude(line)
        point.extensions = schema.extract(line)
        point.num_satellites = num_satellites
        return point


class IgcTaskParser:
    """
    Parses the task declaration: a C header line followed by takeoff, start,
    N turnpoints, finish and landing lines.
    """

    @staticmethod
    def parse_task_point(line: str) -> TaskPoint:
        """Parse a single waypoint line of the task declaration"""
        require_length(line, MIN_LENGTH_TASK_POINT)
        return TaskPoint(
            latitude=parse_coordinate_field(line, 1, 9, LATITUDE_HEMISPHERES),
            longitude=parse_coordinate_field(line, 9, 18, LONGITUDE_HEMISPHERES),
            description=line[18:]
        )

    def parse_task(self, lines: Sequence[str], flight: Flight) -> int:
        """
        Parse the task block starting at lines[0].
        Returns the number of lines consumed.
        """
        line = lines[0]
        require_length(line, MIN_LENGTH_TASK)
        turnpoints = parse_int_field(line, 23, 25, "number of turnpoints")
        if turnpoints < 0:
            raise InvalidFieldError(f"invalid number of turnpoints {turnpoints}", line)

        needed = TASK_FIXED_LINES + turnpoints
        block = list(lines[:needed])
        if len(block) < needed or any(not l.startswith(IGC_RECORD_TASK) for l in block):
            raise StructuralMismatchError(
                f"task declares {turnpoints} turnpoints and needs {needed} C record lines", line
            )

        # flight.task is replaced only once every line has decoded
        task = Task()
        # The two dates are tolerated when malformed, unlike every other field
        try:
            task.declaration_date = parseIgcDateTime(line[1:13])
        except ValueError:
            logger.warning(f"Invalid task declaration date {line[1:13]!r}, leaving it unset")
            task.declaration_date = None
        try:
            task.flight_date = parseIgcDate(line[13:19])
        except ValueError:
            logger.warning(f"Invalid task flight date {line[13:19]!r}, leaving it unset")
            task.flight_date = None

        task.number = parse_int_field(line, 19, 23, "task number")
        task.description = line[25:]
        task.takeoff = self.parse_task_point(block[1])
        task.start = self.parse_task_point(block[2])
        task.turnpoints = [self.parse_task_point(l) for l in block[3:3 + turnpoints]]
        task.finish = self.parse_task_point(block[3 + turnpoints])
        task.landing = self.parse_task_point(block[4 + turnpoints])
        flight.task = task
        return needed


class IgcAuxiliaryParser:
    """
    Parses the single line records that are neither header, fix nor task:
    D (DGPS station), E (event), F (satellites), G (signature),
    K (extension data) and L (logbook).
    """

    @staticmethod
    def parse_dgps(line: str, flight: Flight) -> None:
        require_length(line, MIN_LENGTH_DGPS)
        if line[1] == IGC_DGPS_MARKER:
            flight.dgps_station_id = line[2:6]

    @staticmethod
    def parse_event(line: str, flight: Flight) -> None:
        require_length(line, MIN_LENGTH_EVENT)
        event_time = parse_time_field(line)
        flight.events.setdefault(event_time, {})[line[7:10]] = line[10:]

    @staticmethod
    def parse_satellites(line: str, flight: Flight) -> int:
        """
        Parse an F record and merge it into the constellation of that second.
        Returns the satellite count to apply to subsequent fixes.
        """
        require_length(line, MIN_LENGTH_SATELLITES)
        sat_time = parse_time_field(line)
        digits = line[MIN_LENGTH_SATELLITES:]
        if len(digits) % 2:
            raise StructuralMismatchError("satellite list has an odd number of digits", line)

        ids = [parse_int_field(line, i, i + 2, "satellite id")
               for i in range(MIN_LENGTH_SATELLITES, len(line), 2)]
        satellites = flight.satellites.setdefault(sat_time, [])
        satellites.extend(ids)
        return len(satellites)

    @staticmethod
    def parse_signature(line: str, flight: Flight) -> None:
        flight.signature += line[1:]

    @staticmethod
    def parse_data(line: str, flight: Flight, schema: IgcFieldSchema) -> None:
        require_length(line, MIN_LENGTH_DATA)
        data_time = parse_time_field(line)
        flight.k[data_time] = schema.extract(line)

    @staticmethod
    def parse_logbook(line: str, flight: Flight) -> None:
        require_length(line, MIN_LENGTH_LOGBOOK)
        flight.logbook.append(LogEntry(type=line[1:4], text=line[4:]))


class IgcParser:
    """
    Main parser class for IGC files. Dispatches every record on its leading
    character and orchestrates the specialized components.

    All decoding state (extension schemas, satellite count, task flag) lives
    on the instance and is reset at the start of every parse.
    """

    def __init__(self):
        """Initialize the record decoders"""
        self.header_parser = IgcHeaderParser()
        self.position_parser = IgcPositionParser()
        self.task_parser = IgcTaskParser()
        self.auxiliary_parser = IgcAuxiliaryParser()
        self.dispatch: Dict[str, Callable[[str, Flight], None]] = {
            IGC_RECORD_MANUFACTURER: self.header_parser.parse_manufacturer_line,
            IGC_RECORD_POSITION: self._parse_position,
            IGC_RECORD_DGPS: self.auxiliary_parser.parse_dgps,
            IGC_RECORD_EVENT: self.auxiliary_parser.parse_event,
            IGC_RECORD_SATELLITES: self._parse_satellites,
            IGC_RECORD_SIGNATURE: self.auxiliary_parser.parse_signature,
            IGC_RECORD_HEADER: self.header_parser.parse_header_line,
            IGC_RECORD_FIX_EXTENSIONS: self._declare_fix_fields,
            IGC_RECORD_DATA_EXTENSIONS: self._declare_data_fields,
            IGC_RECORD_DATA: self._parse_data,
            IGC_RECORD_LOGBOOK: self.auxiliary_parser.parse_logbook,
        }
        self._reset()

    def _reset(self) -> None:
        """Start from empty per-parse state"""
        self.fix_fields = IgcFieldSchema(IGC_RECORD_FIX_EXTENSIONS)
        self.data_fields = IgcFieldSchema(IGC_RECORD_DATA_EXTENSIONS)
        self.num_satellites = 0
        self.task_done = False

    def _parse_position(self, line: str, flight: Flight) -> None:
        point = self.position_parser.parse_position_record(
            line, self.fix_fields, self.num_satellites
        )
        flight.points.append(point)

    def _parse_satellites(self, line: str, flight: Flight) -> None:
        self.num_satellites = self.auxiliary_parser.parse_satellites(line, flight)

    def _parse_data(self, line: str, flight: Flight) -> None:
        self.auxiliary_parser.parse_data(line, flight, self.data_fields)

    def _declare_fix_fields(self, line: str, flight: Flight) -> None:
        self.fix_fields.declare(line)

    def _declare_data_fields(self, line: str, flight: Flight) -> None:
        self.data_fields.declare(line)

    def parse_lines(self, raw_lines: Iterable[str]) -> Flight:
        """
        Parse IGC lines into a Flight.
        Raises an IgcParseError subclass on the first malformed record.
        """
        self._reset()
        flight = Flight()

        # Keep original line numbers for error reporting
        numbered: List[Tuple[int, str]] = []
        for number, raw in enumerate(raw_lines, start=1):
            if isinstance(raw, bytes):
                raw = raw.decode('utf-8', errors='replace')
            line = raw.strip()
            if line:
                numbered.append((number, line))
        lines = [line for _, line in numbered]

        index = 0
        while index < len(lines):
            number, line = numbered[index]
            consumed = 1
            try:
                record_type = line[0]
                if record_type == IGC_RECORD_TASK:
                    if not self.task_done:
                        consumed = self.task_parser.parse_task(lines[index:], flight)
                        self.task_done = True
                    else:
                        logger.debug(f"Ignoring C record after the task declaration: {line}")
                elif record_type in self.dispatch:
                    self.dispatch[record_type](line, flight)
                else:
                    raise UnknownRecordError("invalid record", line)
            except IgcParseError as e:
                if e.line_number is None:
                    e.line_number = self._line_number_of(numbered, index, e.line)
                e.flight = flight
                raise
            index += consumed

        logger.debug(f"Decoded {len(flight.points)} fixes, {len(flight.events)} events, "
                     f"{len(flight.logbook)} logbook entries")
        return flight

    @staticmethod
    def _line_number_of(numbered: List[Tuple[int, str]], index: int, failing: str) -> int:
        # Inside a task block the failing line may come after the C header
        for number, line in numbered[index:]:
            if line == failing:
                return number
        return numbered[index][0]

    def parse(self, content: str) -> Flight:
        """Parse the whole text of an IGC file"""
        return self.parse_lines(content.split('\n'))


# Public functions

def parseIgc(content: str) -> Flight:
    """
    Parse IGC text into a Flight object.
    Main entry point for IGC parsing.
    """
    parser = IgcParser()
    return parser.parse(content)


def parseIgcFile(track_file: TextIO) -> Flight:
    """Parse an open IGC file into a Flight object"""
    parser = IgcParser()
    return parser.parse_lines(track_file)
