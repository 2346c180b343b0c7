"""
Pytest configuration and shared fixtures for igcdecode tests
"""
import pytest


@pytest.fixture
def sample_igc_content():
    """Sample IGC file content covering every record type"""
    return """AFLA001Some Additional Data
HFDTE010203
HFFXA500
HFPLTPilotincharge:EZ PILOT
HFCM2Crew2:EZ CREW
HFGTYGliderType:EZ TYPE
HFGIDGliderID:EZ ID
HFDTM100GPSDatum:WGS84
HFRFWFirmwareVersion:v 0.1
HFRHWHardwareVersion:v 0.2
HFFTYFRType:EZ RECORDER,001
HFGPSEZ GPS,002,12,5000
HFPRSPressAltSensor:EZ PRESSURE
HFCIDCompetitionID:EZ COMPID
HFCCLCompetitionClass:EZ COMPCLASS
I033638FXA3940SIU4143ENL
J010812HDT
C150701213841160701000102500KTri
C5111359N00101899WEZ TAKEOFF
C5110179N00102644WEZ START
C5209092N00255227WEZ TP1
C5230147N00017612WEZ TP2
C5110179N00102644WEZ FINISH
C5111359N00101899WEZ LANDING
F160240040609123624
D20331
E160245ATS102312
B1602455107126N00149300WA002880042919509020
K16024800090
B1603105107212N00149174WV002930043519608024
LPLTLOG TEXT
GREJNGJERJKNJKRE31895478537H43982FJN9248F942389T433T
GJNJK2489IERGNV3089IVJE9GO398535J3894N358954983O0934
"""


@pytest.fixture
def task_lines():
    """A task declaration with two turnpoints"""
    return [
        "C150701213841160701000102500KTri",
        "C5111359N00101899WEZ TAKEOFF",
        "C5110179N00102644WEZ START",
        "C5209092N00255227WEZ TP1",
        "C5230147N00017612WEZ TP2",
        "C5110179N00102644WEZ FINISH",
        "C5111359N00101899WEZ LANDING",
    ]


@pytest.fixture
def sample_igc_file(tmp_path, sample_igc_content):
    """Create a temporary IGC file for testing"""
    igc_file = tmp_path / "test_flight.igc"
    igc_file.write_text(sample_igc_content)
    return igc_file


@pytest.fixture
def sample_config_content():
    """Sample configuration file content"""
    return """[Defaults]
Timezone = +02:00
Encoding = utf-8
SignatureWidth = 40
"""


@pytest.fixture
def sample_config_file(tmp_path, sample_config_content):
    """Create a temporary config file for testing"""
    config_file = tmp_path / "test_config.conf"
    config_file.write_text(sample_config_content)
    return config_file


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create a temporary output directory"""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def mock_cli_args(sample_config_file, temp_output_dir):
    """Mock command-line arguments for testing"""
    class MockArgs:
        def __init__(self):
            self.config = str(sample_config_file)
            self.timezone = None
            self.output = str(temp_output_dir)
            self.verbose = False
            self.trackfile = []

    return MockArgs()
