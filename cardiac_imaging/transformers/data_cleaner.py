"""
Data cleaning and validation utilities
"""
import pandas as pd
import logging
from typing import Iterable

logger = logging.getLogger(__name__)


class DataCleaner:
    """Rename, type and filter raw CMS tables"""

    def rename_columns(self, df: pd.DataFrame, rename_dict: dict) -> pd.DataFrame:
        """Rename raw columns to canonical names, failing if any are absent"""
        missing_cols = set(rename_dict) - set(df.columns)
        if missing_cols:
            raise ValueError(f"Missing required columns: {sorted(missing_cols)}")

        df = df.rename(columns=rename_dict)
        logger.debug(f"Renamed columns: {rename_dict}")
        return df

    def select_columns(self, df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
        return df[list(columns)].copy()

    def filter_rows(self, df: pd.DataFrame, mask: pd.Series, reason: str,
                    level: int = logging.INFO) -> pd.DataFrame:
        """Apply a boolean mask, logging how many rows it removed"""
        initial_rows = len(df)
        df = df[mask]
        logger.log(level, f"Filtered by {reason}: {initial_rows} -> {len(df)} rows "
                          f"({initial_rows - len(df)} dropped)")
        return df

    def standardize_data_types(self, df: pd.DataFrame) -> pd.DataFrame:
        """Coerce year to int, code to stripped string and n_services to a number"""
        df = df.copy()

        if "year" in df.columns:
            df["year"] = pd.to_numeric(df["year"], errors="raise").astype(int)

        # String columns
        for col in ["code", "npi", "provider_type", "credentials", "gender"]:
            if col in df.columns:
                df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip())

        if "n_services" in df.columns:
            df["n_services"] = self.clean_counts(df["n_services"])

        return df

    def clean_counts(self, counts: pd.Series) -> pd.Series:
        """Parse service counts stored as text ("1,234", "71842.6")"""
        if pd.api.types.is_numeric_dtype(counts):
            numeric = counts.astype(float)
        else:
            text = counts.astype(str).str.replace(",", "", regex=False).str.strip()
            numeric = pd.to_numeric(text, errors="coerce")
            bad = numeric.isna() & counts.notna()
            if bad.any():
                examples = counts[bad].unique()[:5].tolist()
                raise ValueError(f"Unparseable service counts: {examples}")

        if (numeric < 0).any():
            raise ValueError("Negative service counts in input")
        return numeric

    def codes_as_category(self, df: pd.DataFrame, column: str = "code") -> pd.DataFrame:
        df = df.copy()
        df[column] = df[column].astype("category")
        return df
