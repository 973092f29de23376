"""
Calculate per-beneficiary rates and change relative to the baseline year
"""
import numpy as np
import pandas as pd
import logging
from cardiac_imaging.config.settings import ModalityCodes, StudyConfig

logger = logging.getLogger(__name__)


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise division where a zero or missing denominator gives NaN"""
    denominator = denominator.astype(float)
    result = numerator.astype(float) / denominator.where(denominator != 0)
    return result.replace([np.inf, -np.inf], np.nan)


class RateCalculator:
    """Join service volume to Part B enrollment and derive rate, prop and ratio"""

    OUTPUT_COLUMNS = ["year", "modality", "n", "prop", "n_part_b", "rate", "baseline_rate", "ratio"]

    def __init__(self, baseline_year: int = StudyConfig.BASELINE_YEAR,
                 modality_order=ModalityCodes.ORDER, total_label: str = ModalityCodes.TOTAL):
        self.baseline_year = baseline_year
        self.modality_order = list(modality_order)
        self.total_label = total_label

    def calculate(self, records: pd.DataFrame, enrollment: pd.DataFrame) -> pd.DataFrame:
        """Rates for each modality and for all modalities pooled, in one long table"""
        logger.info("Calculating rates and ratios...")
        by_modality = self.calculate_by_modality(records, enrollment)
        total = self.calculate_total(records, enrollment)

        result = pd.concat([by_modality, total], ignore_index=True)
        order = {name: i for i, name in enumerate(self.modality_order + [self.total_label])}
        result = result.sort_values(
            ["modality", "year"], key=lambda col: col.map(order) if col.name == "modality" else col
        )
        return result.reset_index(drop=True)

    def calculate_by_modality(self, records: pd.DataFrame, enrollment: pd.DataFrame) -> pd.DataFrame:
        volume = (
            records.groupby(["year", "modality"], observed=True)["n_services"].sum()
            .reset_index(name="n")
        )
        volume["modality"] = volume["modality"].astype(str)
        volume["prop"] = volume["n"] / volume.groupby("year")["n"].transform("sum") * 100
        return self._add_rates(volume, enrollment)

    def calculate_total(self, records: pd.DataFrame, enrollment: pd.DataFrame) -> pd.DataFrame:
        volume = records.groupby("year")["n_services"].sum().reset_index(name="n")
        volume["modality"] = self.total_label
        volume["prop"] = 100.0
        return self._add_rates(volume, enrollment)

    def _add_rates(self, volume: pd.DataFrame, enrollment: pd.DataFrame) -> pd.DataFrame:
        df = volume.merge(enrollment[["year", "n_part_b"]], on="year", how="left", validate="many_to_one")

        missing = sorted(int(year) for year in df.loc[df["n_part_b"].isna(), "year"].unique())
        if missing:
            logger.warning(f"No Part B enrollment for years {missing}; rate and ratio are unavailable")

        df["rate"] = safe_divide(df["n"], df["n_part_b"])

        baseline = (
            df.loc[df["year"] == self.baseline_year, ["modality", "rate"]]
            .rename(columns={"rate": "baseline_rate"})
        )
        no_baseline = sorted(set(df["modality"]) - set(baseline["modality"]))
        if no_baseline:
            logger.warning(f"No {self.baseline_year} baseline for {no_baseline}; ratio is unavailable")

        df = df.merge(baseline, on="modality", how="left", validate="many_to_one")
        df["ratio"] = safe_divide(df["rate"], df["baseline_rate"])
        return df[self.OUTPUT_COLUMNS]
