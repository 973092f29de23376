"""
Filter and classify national and provider-level service records
"""
import pandas as pd
import logging
from cardiac_imaging.config.settings import ColumnMapping, ModalityCodes
from cardiac_imaging.transformers.categorizer import ModalityClassifier, SpecialtyClassifier
from cardiac_imaging.transformers.data_cleaner import DataCleaner

logger = logging.getLogger(__name__)


class NationalAggregator:
    """Prepare national totals: the source for procedure volume"""

    def __init__(self, classifier: ModalityClassifier = None,
                 rename: dict = ColumnMapping.NATIONAL_RENAME,
                 columns: list = ColumnMapping.NATIONAL_COLUMNS,
                 geo_level: str = ColumnMapping.NATIONAL_GEO_LEVEL):
        self.classifier = classifier or ModalityClassifier()
        self.cleaner = DataCleaner()
        self.rename = rename
        self.columns = columns
        self.geo_level = geo_level

    def prepare_records(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Canonical {year, code, n_services, modality} rows for cardiac imaging codes"""
        logger.info("Preparing national service records...")
        df = self.cleaner.rename_columns(raw, self.rename)

        # The geography file also carries state rows
        df = self.cleaner.filter_rows(
            df, df["geo_level"].astype(str).str.strip() == self.geo_level, "geography level"
        )

        df = self.cleaner.select_columns(df, self.columns)
        df = self.cleaner.standardize_data_types(df)
        # Dropped-code counts go to the warning log
        df = self.cleaner.filter_rows(
            df, self.classifier.is_imaging_code(df["code"]), "imaging codes", level=logging.WARNING
        )
        df = self.cleaner.codes_as_category(df)
        return self.classifier.categorize_codes(df).reset_index(drop=True)


class ProviderAggregator:
    """Prepare provider-level records: the source for reader counts and specialty mix"""

    def __init__(self, classifier: ModalityClassifier = None,
                 specialty_classifier: SpecialtyClassifier = None,
                 rename: dict = ColumnMapping.PROVIDER_RENAME,
                 columns: list = ColumnMapping.PROVIDER_COLUMNS):
        self.classifier = classifier or ModalityClassifier()
        self.specialty_classifier = specialty_classifier or SpecialtyClassifier()
        self.cleaner = DataCleaner()
        self.rename = rename
        self.columns = columns

    def prepare_records(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Canonical provider rows with modality and specialty columns"""
        logger.info("Preparing provider service records...")
        df = self.cleaner.rename_columns(raw, self.rename)
        df = self.cleaner.select_columns(df, self.columns)
        df = self.cleaner.standardize_data_types(df)
        # Dropped-code counts go to the warning log
        df = self.cleaner.filter_rows(
            df, self.classifier.is_imaging_code(df["code"]), "imaging codes", level=logging.WARNING
        )
        df = self.cleaner.codes_as_category(df)
        df = self.classifier.categorize_codes(df)
        return self.specialty_classifier.categorize_providers(df).reset_index(drop=True)

    def reader_counts(self, records: pd.DataFrame) -> pd.DataFrame:
        """Distinct billing providers per year and modality, plus a pooled Total"""
        by_modality = (
            records.groupby(["year", "modality"], observed=True)["npi"].nunique()
            .reset_index(name="n_readers")
        )
        by_modality["modality"] = by_modality["modality"].astype(str)

        total = records.groupby("year")["npi"].nunique().reset_index(name="n_readers")
        total["modality"] = ModalityCodes.TOTAL

        return pd.concat([by_modality, total], ignore_index=True)[["year", "modality", "n_readers"]]

    def readers_by_specialty(self, records: pd.DataFrame) -> pd.DataFrame:
        """Distinct billing providers per year and specialty group"""
        readers = (
            records.groupby(["year", "specialty"], observed=True)["npi"].nunique()
            .reset_index(name="n_readers")
        )
        readers["specialty"] = readers["specialty"].astype(str)
        return readers

    def specialty_mix(self, records: pd.DataFrame) -> pd.DataFrame:
        """Percent of each year x modality's services billed by each specialty group"""
        mix = (
            records.groupby(["year", "modality", "specialty"], observed=True)["n_services"].sum()
            .reset_index(name="n")
        )
        mix["modality"] = mix["modality"].astype(str)

        total = (
            records.groupby(["year", "specialty"], observed=True)["n_services"].sum()
            .reset_index(name="n")
        )
        total["modality"] = ModalityCodes.TOTAL

        mix = pd.concat([mix, total], ignore_index=True)
        mix["specialty"] = mix["specialty"].astype(str)
        mix["pct"] = mix["n"] / mix.groupby(["year", "modality"])["n"].transform("sum") * 100
        return mix[["year", "modality", "specialty", "n", "pct"]]
