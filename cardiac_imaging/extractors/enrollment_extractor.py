"""
Extract annual national Part B enrollment from the Medicare Monthly Enrollment file
"""
import pandas as pd
import logging
from pathlib import Path
from typing import Iterable
from cardiac_imaging.config.settings import ColumnMapping
from cardiac_imaging.utils.table_reader import TableReader

logger = logging.getLogger(__name__)


class EnrollmentExtractor:
    """Reduce the monthly enrollment file to one Part B beneficiary count per year"""

    def __init__(self,
                 rename: dict = ColumnMapping.ENROLLMENT_RENAME,
                 geo_level: str = ColumnMapping.ENROLLMENT_GEO_LEVEL,
                 annual_month: str = ColumnMapping.ENROLLMENT_ANNUAL_MONTH):
        self.rename = rename
        self.geo_level = geo_level
        self.annual_month = annual_month
        self.reader = TableReader(list(rename))

    def extract_enrollment(self, file_path: Path) -> pd.DataFrame:
        """Load the file and keep the annual national totals"""
        logger.info(f"Extracting enrollment data from {file_path}...")
        raw = self.reader.read(file_path)
        return self.annual_national_totals(raw)

    def annual_national_totals(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Filter to geography level = National and month = Year, returning year and n_part_b"""
        missing_cols = set(self.rename) - set(raw.columns)
        if missing_cols:
            raise ValueError(f"Missing required columns in enrollment data: {sorted(missing_cols)}")

        df = raw.rename(columns=self.rename)
        annual = df[
            (df["geo_level"].astype(str).str.strip() == self.geo_level) &
            (df["month"].astype(str).str.strip() == self.annual_month)
        ]
        logger.info(f"Enrollment rows: {len(df)} -> {len(annual)} annual national rows")

        annual = annual[["year", "n_part_b"]].copy()
        annual["year"] = pd.to_numeric(annual["year"], errors="raise").astype(int)
        annual["n_part_b"] = pd.to_numeric(
            annual["n_part_b"].astype(str).str.replace(",", "", regex=False), errors="coerce"
        )

        duplicated = annual.loc[annual["year"].duplicated(), "year"].unique()
        if len(duplicated):
            raise ValueError(f"Multiple annual national enrollment rows for years: {sorted(int(y) for y in duplicated)}")

        return annual.sort_values("year").reset_index(drop=True)

    @staticmethod
    def missing_years(enrollment: pd.DataFrame, years: Iterable[int]) -> list:
        """Years with no usable enrollment count"""
        available = set(enrollment.loc[enrollment["n_part_b"].notna(), "year"])
        return sorted(int(year) for year in set(years) - available)
