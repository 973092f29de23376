"""
Configuration settings for the cardiac imaging report pipeline
"""
from pathlib import Path

# Base paths (resolved relative to the run location)
BASE_DIR = Path.cwd()
DATA_DIR = BASE_DIR / "data"
NATIONAL_DIR = DATA_DIR / "national"
PROVIDER_DIR = DATA_DIR / "provider"
ENROLLMENT_FILE = DATA_DIR / "enrollment" / "medicare_monthly_enrollment.csv"
OUTPUT_DIR = BASE_DIR / "output"

# Extensions the record extractors know how to read
CSV_SUFFIXES = {".csv", ".txt"}
PARQUET_SUFFIXES = {".parquet", ".pq"}


class StudyConfig:
    FIRST_YEAR = 2013
    LAST_YEAR = 2022
    BASELINE_YEAR = 2013

    # First run of digits in a filename is taken as the data year
    YEAR_PATTERN = r"\d+"

    @classmethod
    def years(cls) -> range:
        return range(cls.FIRST_YEAR, cls.LAST_YEAR + 1)


def _codes(*items) -> frozenset:
    """Expand ints and inclusive (start, end) tuples into a frozenset of code strings"""
    codes = set()
    for item in items:
        if isinstance(item, tuple):
            start, end = item
            codes.update(str(code) for code in range(start, end + 1))
        else:
            codes.add(str(item))
    return frozenset(codes)


# Procedure code sets per imaging modality
class ModalityCodes:
    PET = _codes((78429, 78433), 78459, 78491, 78492)
    SPECT = _codes((78451, 78454), 78466, 78468, 78469, 78472, 78473, 78481, 78483, 78494)
    CT = _codes((75571, 75574))
    MRI = _codes(75557, 75559, 75561, 75563, 75565)
    ECHO = _codes(
        (93303, 93308), (93312, 93318), 93350, 93351, 93355
    )

    # Classification priority and chart/table order
    ORDER = ("PET", "SPECT", "CT", "MRI", "Echo")
    TOTAL = "Total"

    @classmethod
    def as_mapping(cls) -> dict:
        return {
            "PET": cls.PET,
            "SPECT": cls.SPECT,
            "CT": cls.CT,
            "MRI": cls.MRI,
            "Echo": cls.ECHO,
        }


class SpecialtyRules:
    # Evaluated top to bottom, first match wins
    RULES = (
        ("Cardiology", ("Heart", "Cardio", "Cardiac electro", "Interventional Cardiology")),
        ("Radiology", ("Radio", "Nuclear")),
    )
    DEFAULT = "Other"
    ORDER = ("Cardiology", "Radiology", "Other")

    # Known misspellings in Rndrng_Prvdr_Type, matched case-insensitively
    SPELLING_FIXES = {"cardiatric": "cardiac"}


# Column mapping configuration
class ColumnMapping:
    NATIONAL_RENAME = {
        "Rndrng_Prvdr_Geo_Lvl": "geo_level",
        "HCPCS_Cd": "code",
        "Tot_Srvcs": "n_services",
    }
    NATIONAL_COLUMNS = ["year", "code", "n_services"]
    NATIONAL_GEO_LEVEL = "National"

    PROVIDER_RENAME = {
        "Rndrng_NPI": "npi",
        "Rndrng_Prvdr_Type": "provider_type",
        "Rndrng_Prvdr_Crdntls": "credentials",
        "Rndrng_Prvdr_Gndr": "gender",
        "HCPCS_Cd": "code",
        "Tot_Srvcs": "n_services",
    }
    PROVIDER_COLUMNS = ["year", "npi", "provider_type", "credentials", "gender", "code", "n_services"]

    ENROLLMENT_RENAME = {
        "YEAR": "year",
        "MONTH": "month",
        "BENE_GEO_LVL": "geo_level",
        "B_TOT_BENES": "n_part_b",
    }
    ENROLLMENT_GEO_LEVEL = "National"
    ENROLLMENT_ANNUAL_MONTH = "Year"


class ReportConfig:
    FIGURE_FORMAT = "svg"
    FIGURE_SIZE = (8, 5)
    DPI = 300
    THEME = "whitegrid"

    # Fixed log-axis ticks for volume charts
    VOLUME_TICKS = [1e3, 1e4, 1e5, 1e6, 1e7]
    VOLUME_TICK_LABELS = ["1K", "10K", "100K", "1M", "10M"]
    READER_TICKS = [10, 100, 1e3, 1e4, 1e5]
    READER_TICK_LABELS = ["10", "100", "1K", "10K", "100K"]

    PALETTE = {
        "PET": "#d62728",
        "SPECT": "#ff7f0e",
        "CT": "#2ca02c",
        "MRI": "#9467bd",
        "Echo": "#1f77b4",
        "Total": "#333333",
    }

    REPORT_FILE = "report.md"
    RATE_SCALE = 1000  # rates reported per 1,000 Part B beneficiaries
