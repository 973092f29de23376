"""
Extract per-year CMS service files and stack them into one table
"""
import re
import pandas as pd
import logging
from pathlib import Path
from typing import List, Mapping, Union
from tqdm import tqdm
from cardiac_imaging.config.settings import StudyConfig
from cardiac_imaging.utils.table_reader import TableReader

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class RecordExtractor:
    """Load one file per year from a directory (or an explicit year -> file map)"""

    def __init__(self, columns: List[str] = None,
                 year_pattern: str = StudyConfig.YEAR_PATTERN,
                 valid_years: range = StudyConfig.years()):
        self.reader = TableReader(columns)
        self.year_pattern = re.compile(year_pattern)
        self.valid_years = valid_years

    def extract_directory(self, directory: PathLike) -> pd.DataFrame:
        """Read every file in a directory, tagging rows with the year in the filename"""
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Input directory not found: {directory}")

        files = sorted(p for p in directory.iterdir() if p.is_file() and not p.name.startswith("."))
        if not files:
            raise FileNotFoundError(f"No input files in {directory}")

        logger.info(f"Found {len(files)} files in {directory}")
        by_year = {}
        for path in files:
            year = self.parse_year(path)
            if year in by_year:
                raise ValueError(f"Files {by_year[year].name} and {path.name} both map to year {year}")
            by_year[year] = path

        return self.extract_files(by_year)

    def extract_files(self, files: Mapping[int, PathLike]) -> pd.DataFrame:
        """Read an explicit {year: path} mapping into one stacked table"""
        if not files:
            raise ValueError("No input files given")

        frames = []
        for year, path in tqdm(sorted(files.items()), desc="Loading files", unit="file"):
            year = self._check_year(int(year), path)
            df = self.reader.read(path)
            df["year"] = year
            frames.append(df)

        result = pd.concat(frames, ignore_index=True)
        logger.info(f"Combined {len(frames)} files into {len(result)} rows "
                    f"(years {min(files)}-{max(files)})")
        return result

    def parse_year(self, path: PathLike) -> int:
        """Year is the first run of digits in the file name"""
        name = Path(path).name
        match = self.year_pattern.search(name)
        if match is None:
            raise ValueError(f"No year found in file name: {name}")
        return self._check_year(int(match.group()), path)

    def _check_year(self, year: int, path: PathLike) -> int:
        if year not in self.valid_years:
            raise ValueError(
                f"Year {year} from {Path(path).name} is outside "
                f"{self.valid_years.start}-{self.valid_years.stop - 1}; "
                f"pass an explicit year mapping for this file"
            )
        return year

