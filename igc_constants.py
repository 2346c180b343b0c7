#!/usr/bin/env python3
"""
Constants for the IGC flight log decoder
"""

# Default configuration values
DEFAULT_TIMEZONE = 0
DEFAULT_ENCODING = "utf-8"
DEFAULT_SIGNATURE_WIDTH = 75
DEFAULT_NA_TEXT = "N/A"

# Configuration sections and files
CONFIG_SECTION_DEFAULTS = "Defaults"
CONFIG_FILE_NAMES = ('igcdecode.conf', 'igcdecode.ini')

# IGC record tags
IGC_RECORD_MANUFACTURER = "A"
IGC_RECORD_POSITION = "B"
IGC_RECORD_TASK = "C"
IGC_RECORD_DGPS = "D"
IGC_RECORD_EVENT = "E"
IGC_RECORD_SATELLITES = "F"
IGC_RECORD_SIGNATURE = "G"
IGC_RECORD_HEADER = "H"
IGC_RECORD_FIX_EXTENSIONS = "I"
IGC_RECORD_DATA_EXTENSIONS = "J"
IGC_RECORD_DATA = "K"
IGC_RECORD_LOGBOOK = "L"

# Minimum line lengths per record
MIN_LENGTH_MANUFACTURER = 7
MIN_LENGTH_POSITION = 35
MIN_LENGTH_TASK = 25
MIN_LENGTH_TASK_POINT = 18
MIN_LENGTH_DGPS = 6
MIN_LENGTH_EVENT = 10
MIN_LENGTH_SATELLITES = 7
MIN_LENGTH_HEADER = 5
MIN_LENGTH_HEADER_DATE = 11
MIN_LENGTH_HEADER_FXA = 8
MIN_LENGTH_HEADER_DATUM = 8
MIN_LENGTH_EXTENSIONS = 3
MIN_LENGTH_DATA = 7
MIN_LENGTH_LOGBOOK = 4

# Header sub-keys (characters 2-4 of an H record)
IGC_HEADER_DATE = "DTE"
IGC_HEADER_FIX_ACCURACY = "FXA"
IGC_HEADER_PILOT = "PLT"
IGC_HEADER_CREW = "CM2"
IGC_HEADER_GLIDER_TYPE = "GTY"
IGC_HEADER_GLIDER_ID = "GID"
IGC_HEADER_DATUM = "DTM"
IGC_HEADER_FIRMWARE = "RFW"
IGC_HEADER_HARDWARE = "RHW"
IGC_HEADER_RECORDER = "FTY"
IGC_HEADER_GPS = "GPS"
IGC_HEADER_PRESSURE_SENSOR = "PRS"
IGC_HEADER_COMPETITION_ID = "CID"
IGC_HEADER_COMPETITION_CLASS = "CCL"
IGC_HEADER_TIMEZONE = "TZN"

# Header labels used when encoding
IGC_HEADER_LABELS = {
    IGC_HEADER_PILOT: "PILOTINCHARGE:",
    IGC_HEADER_CREW: "CREW2:",
    IGC_HEADER_GLIDER_TYPE: "GLIDERTYPE:",
    IGC_HEADER_GLIDER_ID: "GLIDERID:",
    IGC_HEADER_DATUM: "GPSDATUM:",
    IGC_HEADER_FIRMWARE: "FIRMWAREVERSION:",
    IGC_HEADER_HARDWARE: "HARDWAREVERSION:",
    IGC_HEADER_RECORDER: "FRTYPE:",
    IGC_HEADER_PRESSURE_SENSOR: "PRESSALTSENSOR:",
    IGC_HEADER_COMPETITION_ID: "COMPETITIONID:",
    IGC_HEADER_COMPETITION_CLASS: "COMPETITIONCLASS:",
    IGC_HEADER_TIMEZONE: "TIMEZONE:",
}

# Header label separator
IGC_LABEL_SEPARATOR = ":"

# Fix validity flags
IGC_FIX_VALID = "A"
IGC_FIX_NO_3D = "V"

# D record marker for a differential GPS station
IGC_DGPS_MARKER = "2"

# Task declaration layout
TASK_FIXED_LINES = 5
TASK_NULL_DATETIME = "000000000000"
TASK_NULL_DATE = "000000"

# Extension field layout
EXTENSION_GROUP_WIDTH = 7
FIX_EXTENSION_FIRST_COLUMN = 36
DATA_EXTENSION_FIRST_COLUMN = 8

# Date and time formats
IGC_TIME_FORMAT = "%H%M%S"
IGC_DATE_FORMAT = "%d%m%y"
IGC_DATETIME_FORMAT = IGC_DATE_FORMAT + IGC_TIME_FORMAT
DATE_FORMAT_YMD = "%Y/%m/%d"
TIME_FORMAT_HM = "%H:%M"

# Coordinate layout
LATITUDE_DEGREE_DIGITS = 2
LONGITUDE_DEGREE_DIGITS = 3
LATITUDE_HEMISPHERES = "NS"
LONGITUDE_HEMISPHERES = "EW"
MINUTE_DECIMALS = 3
MINUTES_PER_DEGREE = 60
SECONDS_PER_HOUR = 3600
