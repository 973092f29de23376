"""
Categorize procedure codes into imaging modalities and providers into specialty groups
"""
import re
import pandas as pd
import logging
from itertools import combinations
from typing import Mapping, Optional, Sequence, Tuple
from cardiac_imaging.config.settings import ModalityCodes, SpecialtyRules

logger = logging.getLogger(__name__)


def validate_code_sets(code_sets: Mapping[str, frozenset]) -> None:
    """Raise if any code belongs to more than one modality"""
    overlaps = []
    for (name_a, codes_a), (name_b, codes_b) in combinations(code_sets.items(), 2):
        shared = codes_a & codes_b
        if shared:
            overlaps.append(f"{name_a}/{name_b}: {sorted(shared)}")
    if overlaps:
        raise ValueError(f"Modality code sets overlap: {'; '.join(overlaps)}")


class ModalityClassifier:
    """Map HCPCS/CPT codes to PET, SPECT, CT, MRI or Echo"""

    def __init__(self, code_sets: Mapping[str, frozenset] = None):
        self.code_sets = dict(code_sets if code_sets is not None else ModalityCodes.as_mapping())
        validate_code_sets(self.code_sets)

        # Priority order is the mapping order
        self.lookup = {}
        for modality, codes in self.code_sets.items():
            for code in codes:
                self.lookup.setdefault(code, modality)

        self.modalities = tuple(self.code_sets)
        self.all_codes = frozenset(self.lookup)
        logger.debug(f"Modality classifier built with {len(self.all_codes)} codes")

    def classify(self, code) -> Optional[str]:
        """Modality for a single code, or None if the code is not a cardiac imaging code"""
        return self.lookup.get(str(code).strip())

    def is_imaging_code(self, codes: pd.Series) -> pd.Series:
        return codes.astype(str).str.strip().isin(self.all_codes)

    def categorize_codes(self, df: pd.DataFrame, code_column: str = "code") -> pd.DataFrame:
        """Attach an ordered categorical modality column"""
        df = df.copy()
        modality = df[code_column].astype(str).str.strip().map(self.lookup)
        df["modality"] = pd.Categorical(modality, categories=list(self.modalities))
        return df


class SpecialtyClassifier:
    """Bucket free-text provider types into Cardiology, Radiology or Other"""

    def __init__(self,
                 rules: Sequence[Tuple[str, Sequence[str]]] = SpecialtyRules.RULES,
                 default: str = SpecialtyRules.DEFAULT,
                 spelling_fixes: Mapping[str, str] = SpecialtyRules.SPELLING_FIXES):
        self.rules = [(group, tuple(patterns)) for group, patterns in rules]
        self.default = default
        self.spelling_fixes = [
            (re.compile(re.escape(wrong), re.IGNORECASE), right)
            for wrong, right in spelling_fixes.items()
        ]
        self.groups = [group for group, _ in self.rules] + [default]

    def normalize(self, provider_type) -> str:
        text = "" if pd.isna(provider_type) else str(provider_type)
        for pattern, replacement in self.spelling_fixes:
            text = pattern.sub(replacement, text)
        return text

    def classify(self, provider_type) -> str:
        text = self.normalize(provider_type).lower()
        for group, patterns in self.rules:
            if any(pattern.lower() in text for pattern in patterns):
                return group
        return self.default

    def categorize_providers(self, df: pd.DataFrame, type_column: str = "provider_type") -> pd.DataFrame:
        """Normalize provider_type and attach a specialty column"""
        df = df.copy()
        df[type_column] = df[type_column].map(self.normalize)

        # Classify each distinct provider type once
        unique_types = pd.Series(df[type_column].unique())
        mapping = dict(zip(unique_types, unique_types.map(self.classify)))
        df["specialty"] = pd.Categorical(df[type_column].map(mapping), categories=self.groups)

        counts = df["specialty"].value_counts()
        logger.info(f"Specialty groups: {counts.to_dict()}")
        return df
