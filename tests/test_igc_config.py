"""
Tests for igc_config.py configuration handling
"""
import pytest
from argparse import Namespace
from igc_config import Config, ConfigParser, DecoderSettings


class TestDecoderSettings:
    """Tests for DecoderSettings"""

    def test_default_values(self):
        settings = DecoderSettings()
        assert settings.timezone == 0
        assert settings.out_path is None
        assert settings.encoding == 'utf-8'
        assert settings.signature_width == 75

    def test_to_dict(self):
        settings = DecoderSettings(timezone=3600, out_path='out')
        assert settings.to_dict() == {
            'timezone': 3600,
            'outpath': 'out',
            'encoding': 'utf-8',
            'signaturewidth': 75,
        }


class TestConfigParser:
    """Tests for ConfigParser class"""

    def test_load_config_file(self, sample_config_file):
        parser = ConfigParser()
        assert parser.load_config_file(str(sample_config_file))
        assert parser.get_sections() == ['Defaults']

    def test_get_default_settings(self, sample_config_file):
        parser = ConfigParser()
        parser.load_config_file(str(sample_config_file))
        defaults = parser.get_default_settings()
        assert defaults['timezone'] == '+02:00'
        assert defaults['encoding'] == 'utf-8'
        assert defaults['signaturewidth'] == 40.0

    def test_missing_section(self, sample_config_file):
        parser = ConfigParser()
        parser.load_config_file(str(sample_config_file))
        assert parser.get_section('Nonexistent') == {}

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        parser = ConfigParser()
        assert parser.find_config_file(str(tmp_path / 'missing.conf')) is None
        assert not parser.load_config_file(str(tmp_path / 'missing.conf'))

    def test_finds_file_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / 'igcdecode.conf').write_text('[Defaults]\nTimezone = 1\n')
        monkeypatch.chdir(tmp_path)
        parser = ConfigParser()
        assert parser.find_config_file() is not None
        parser.load_config_file()
        assert parser.get_default_settings() == {'timezone': '1'}


class TestConfig:
    """Tests for main Config class"""

    def test_values_from_file(self, sample_config_file):
        config = Config(Namespace(config=str(sample_config_file), timezone=None, output=None))
        assert config.timezone == 7200
        assert config.outPath is None
        assert config.encoding == 'utf-8'
        assert config.signature_width == 40

    def test_cli_overrides_file(self, mock_cli_args, temp_output_dir):
        mock_cli_args.timezone = '-3'
        config = Config(mock_cli_args)
        assert config.timezone == -10800
        assert config.outPath == str(temp_output_dir)

    def test_outpath_from_file(self, tmp_path):
        config_file = tmp_path / 'out.conf'
        config_file.write_text('[Defaults]\nOutPath = normalized\n')
        config = Config(Namespace(config=str(config_file), timezone=None, output=None))
        assert config.outPath == 'normalized'

    @pytest.mark.parametrize('width', ['wide', '0'])
    def test_invalid_signature_width(self, tmp_path, width):
        config_file = tmp_path / 'bad.conf'
        config_file.write_text(f'[Defaults]\nSignatureWidth = {width}\n')
        config = Config(Namespace(config=str(config_file), timezone=None, output=None))
        assert config.signature_width == 75

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config(Namespace(config=None, timezone=None, output=None))
        assert config.timezone == 0
        assert config.outPath is None
        assert config.signature_width == 75
