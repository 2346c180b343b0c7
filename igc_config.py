#!/usr/bin/env python3
"""
Configuration handling for the IGC flight log decoder

Settings come from the [Defaults] section of an INI file (igcdecode.conf or
igcdecode.ini, or the file given with -c) and are overridden by command line
arguments.
"""

import configparser
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional, Any

from igc_utils import secondsFromString, numberOrString
from igc_constants import (
    DEFAULT_TIMEZONE,
    DEFAULT_ENCODING,
    DEFAULT_SIGNATURE_WIDTH,
    CONFIG_SECTION_DEFAULTS,
    CONFIG_FILE_NAMES
)

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class DecoderSettings:
    """Settings read from the [Defaults] section"""
    timezone: int = DEFAULT_TIMEZONE
    out_path: Optional[str] = None
    encoding: str = DEFAULT_ENCODING
    signature_width: int = DEFAULT_SIGNATURE_WIDTH

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary keyed like the INI options, for logging"""
        return {key.replace('_', ''): value for key, value in asdict(self).items()}


class ConfigParser:
    """
    Locates and reads the decoder's INI file.
    Option names are case-insensitive, values are returned as raw strings
    except SignatureWidth, which is converted to a number when possible.
    """

    def __init__(self):
        self.parser = configparser.RawConfigParser()
        self.loaded_from: Optional[str] = None

    @staticmethod
    def candidate_paths() -> List[Path]:
        """Standard locations: the working directory, then the program directory"""
        program_dir = Path(os.path.abspath(__file__)).parent
        return [Path(directory) / name
                for directory in (Path('.'), program_dir)
                for name in CONFIG_FILE_NAMES]

    def find_config_file(self, cli_path: Optional[str] = None) -> Optional[str]:
        """Return the file given on the command line, else the first standard one found"""
        if cli_path:
            if Path(cli_path).is_file():
                logger.info(f"Using configuration file: {cli_path}")
                return cli_path
            logger.warning(f"Configuration file not found: {cli_path}")

        for candidate in self.candidate_paths():
            if candidate.is_file():
                logger.info(f"Found configuration file: {candidate}")
                return str(candidate)

        logger.debug("No configuration file found, using defaults")
        return None

    def load_config_file(self, file_path: Optional[str] = None) -> bool:
        """Read the configuration file, returning False when none could be read"""
        config_file = self.find_config_file(file_path)
        if config_file is None:
            return False

        try:
            read = self.parser.read(config_file, encoding=DEFAULT_ENCODING)
        except (configparser.Error, UnicodeDecodeError) as e:
            logger.error(f"Error reading config file {config_file}: {e}")
            return False
        self.loaded_from = config_file if read else None
        return bool(read)

    def get_section(self, section_name: str) -> Dict[str, str]:
        if not self.parser.has_section(section_name):
            return {}
        return {key: value.strip() for key, value in self.parser.items(section_name)}

    def get_sections(self) -> List[str]:
        return self.parser.sections()

    def get_default_settings(self) -> Dict[str, Any]:
        """[Defaults] options, with SignatureWidth converted to a number"""
        defaults = self.get_section(CONFIG_SECTION_DEFAULTS)
        if 'signaturewidth' in defaults:
            defaults['signaturewidth'] = numberOrString(defaults['signaturewidth'])
        return defaults


class Config:
    """Main configuration class for the igcdecode tool"""

    def __init__(self, cli_args):
        """Initialize with command line arguments"""
        self.parser = ConfigParser()
        self.cli_args = cli_args
        self.settings = DecoderSettings()

        self._load_config()

    def _load_config(self):
        """Merge the file's [Defaults] with command line overrides"""
        self.parser.load_config_file(getattr(self.cli_args, 'config', None))
        defaults = self.parser.get_default_settings()

        # Command line wins over the file
        cli_timezone = getattr(self.cli_args, 'timezone', None)
        file_timezone = defaults.get('timezone')
        if cli_timezone or file_timezone:
            self.settings.timezone = secondsFromString(cli_timezone or file_timezone)

        cli_output = getattr(self.cli_args, 'output', None)
        self.settings.out_path = cli_output or defaults.get('outpath') or None

        self.settings.encoding = defaults.get('encoding') or DEFAULT_ENCODING

        width = defaults.get('signaturewidth')
        if isinstance(width, float) and width >= 1:
            self.settings.signature_width = int(width)
        elif width is not None:
            logger.warning(f"Invalid SignatureWidth {width!r}, using {DEFAULT_SIGNATURE_WIDTH}")

        logger.debug(f"Settings: {self.settings.to_dict()}")

    @property
    def timezone(self) -> int:
        """Display offset in seconds for logs without an HFTZN header"""
        return self.settings.timezone

    @property
    def outPath(self) -> Optional[str]:
        """Folder for normalized copies, None when not writing"""
        return self.settings.out_path

    @property
    def encoding(self) -> str:
        return self.settings.encoding

    @property
    def signature_width(self) -> int:
        return self.settings.signature_width
