"""
Utility for reading tabular CMS files into pandas
"""
import pandas as pd
import logging
from pathlib import Path
import pyarrow.parquet as pq
from cardiac_imaging.config.settings import CSV_SUFFIXES, PARQUET_SUFFIXES

logger = logging.getLogger(__name__)


class TableReader:
    """Read one CSV or parquet file fully into memory"""

    def __init__(self, columns: list = None):
        # Optional subset of raw columns to read
        self.columns = columns

    def read(self, file_path: Path) -> pd.DataFrame:
        """
        Read a file as a dataframe of strings, failing loudly if it can't be parsed
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()

        try:
            if suffix in PARQUET_SUFFIXES:
                df = self._read_parquet(file_path)
            elif suffix in CSV_SUFFIXES:
                df = self._read_csv(file_path)
            else:
                raise ValueError(f"Unsupported file type '{suffix}' for {file_path}")
        except Exception as e:
            logger.error(f"Failed to read {file_path}: {e}")
            raise

        logger.info(f"Read {len(df)} rows from {file_path.name}")
        return df

    def _read_csv(self, file_path: Path) -> pd.DataFrame:
        usecols = None
        if self.columns:
            wanted = set(self.columns)
            usecols = lambda col: col in wanted
        return pd.read_csv(file_path, dtype=str, usecols=usecols, low_memory=False)

    def _read_parquet(self, file_path: Path) -> pd.DataFrame:
        parquet_file = pq.ParquetFile(file_path)
        logger.debug(f"Parquet file {file_path.name}: {parquet_file.metadata.num_rows} rows, "
                     f"{parquet_file.num_row_groups} row groups")

        columns = None
        if self.columns:
            available = set(parquet_file.schema_arrow.names)
            columns = [col for col in self.columns if col in available]

        df = parquet_file.read(columns=columns).to_pandas()
        return df.astype(str).where(df.notna())
