"""
Pytest configuration and shared fixtures.
"""
import pandas as pd
import pytest
from tests.frames import national_frame, provider_frame


@pytest.fixture
def enrollment_raw():
    """
    Monthly enrollment rows: annual national totals plus monthly and state rows that must be ignored.
    """
    return pd.DataFrame([
        {"YEAR": "2013", "MONTH": "Year", "BENE_GEO_LVL": "National", "B_TOT_BENES": "1,000"},
        {"YEAR": "2013", "MONTH": "January", "BENE_GEO_LVL": "National", "B_TOT_BENES": "990"},
        {"YEAR": "2013", "MONTH": "Year", "BENE_GEO_LVL": "State", "B_TOT_BENES": "50"},
        {"YEAR": "2014", "MONTH": "Year", "BENE_GEO_LVL": "National", "B_TOT_BENES": "1200"},
        {"YEAR": "2014", "MONTH": "December", "BENE_GEO_LVL": "National", "B_TOT_BENES": "1190"},
    ])


@pytest.fixture
def enrollment():
    return pd.DataFrame({"year": [2013, 2014], "n_part_b": [1000.0, 1200.0]})


@pytest.fixture
def national_records():
    """Prepared national records covering every modality in two years"""
    return pd.DataFrame([
        {"year": 2013, "code": "78429", "n_services": 10, "modality": "PET"},
        {"year": 2013, "code": "78452", "n_services": 40, "modality": "SPECT"},
        {"year": 2013, "code": "75574", "n_services": 5, "modality": "CT"},
        {"year": 2013, "code": "75561", "n_services": 5, "modality": "MRI"},
        {"year": 2013, "code": "93306", "n_services": 40, "modality": "Echo"},
        {"year": 2014, "code": "78429", "n_services": 30, "modality": "PET"},
        {"year": 2014, "code": "78452", "n_services": 30, "modality": "SPECT"},
        {"year": 2014, "code": "75574", "n_services": 20, "modality": "CT"},
        {"year": 2014, "code": "75561", "n_services": 10, "modality": "MRI"},
        {"year": 2014, "code": "93306", "n_services": 60, "modality": "Echo"},
    ])


@pytest.fixture
def provider_raw_by_year():
    return {
        2013: provider_frame([
            ("1000000001", "Cardiology", "78452", 20),
            ("1000000001", "Cardiology", "93306", 30),
            ("1000000002", "Diagnostic Radiology", "78452", 20),
            ("1000000003", "Family Medicine", "93306", 10),
            ("1000000003", "Family Medicine", "99214", 500),
        ]),
        2014: provider_frame([
            ("1000000001", "Cardiology", "78452", 25),
            ("1000000004", "Cardiatric Electrophysiology", "93306", 15),
            ("1000000002", "Nuclear Medicine", "75574", 10),
        ]),
    }


@pytest.fixture
def data_dir(tmp_path, provider_raw_by_year, enrollment_raw):
    """
    Directory tree laid out like the pipeline's default data/ folder.
    """
    national = tmp_path / "national"
    provider = tmp_path / "provider"
    enrollment_dir = tmp_path / "enrollment"
    for directory in (national, provider, enrollment_dir):
        directory.mkdir()

    national_frame([
        ("93303", "100"),
        ("78452", "1,000"),
        ("78452", "400", "State"),
        ("99213", "50000"),
    ]).to_csv(national / "national_2013.csv", index=False)
    national_frame([
        ("93303", "150"),
        ("78452", "900"),
        ("99213", "52000"),
    ]).to_csv(national / "national_2014.csv", index=False)

    for year, frame in provider_raw_by_year.items():
        frame.to_csv(provider / f"provider_{year}.csv", index=False)

    enrollment_raw.to_csv(enrollment_dir / "medicare_monthly_enrollment.csv", index=False)
    return tmp_path
