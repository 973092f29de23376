"""
Assemble the markdown report from the derived aggregates
"""
import logging
from datetime import datetime
import pandas as pd
from cardiac_imaging.config.settings import ModalityCodes, ReportConfig, StudyConfig
from cardiac_imaging.loaders.report_loader import ReportLoader
from cardiac_imaging.reporting import charts, tables
from cardiac_imaging.reporting.tables import format_decimal, format_number

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Render charts and tables, then write report.md linking them"""

    def __init__(self, loader: ReportLoader):
        self.loader = loader

    def render(self, rates: pd.DataFrame, readers: pd.DataFrame, specialty_mix: pd.DataFrame,
               readers_by_specialty: pd.DataFrame) -> str:
        logger.info("Rendering figures...")
        figures = {
            "volume": self.loader.save_figure(charts.volume_chart(rates), "volume_by_modality"),
            "ratio": self.loader.save_figure(charts.ratio_chart(rates), "ratio_by_modality"),
            "readers": self.loader.save_figure(charts.readers_chart(readers), "readers_by_modality"),
        }

        logger.info("Rendering report document...")
        sections = [
            _header(rates),
            _volume_section(rates, self.loader.relative(figures["volume"])),
            _ratio_section(rates, self.loader.relative(figures["ratio"])),
            _reader_section(specialty_mix, readers_by_specialty, self.loader.relative(figures["readers"])),
            _methods(),
        ]
        report = "\n\n".join(sections) + "\n"
        self.loader.save_document(report)
        return report


def _total_row(rates: pd.DataFrame, year) -> pd.Series:
    rows = rates[(rates["modality"] == ModalityCodes.TOTAL) & (rates["year"] == year)]
    return rows.iloc[0] if len(rows) else pd.Series(dtype=float)


def _header(rates: pd.DataFrame) -> str:
    first, last = rates["year"].min(), rates["year"].max()
    start, end = _total_row(rates, first), _total_row(rates, last)
    return f"""# Cardiac Imaging in Medicare Part B, {first}-{last}

**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
**Sources:** CMS Medicare Physician & Other Practitioners (by Geography and Service;
by Provider and Service), Medicare Monthly Enrollment

Cardiac imaging services (PET, SPECT, CT, MRI and echocardiography) billed to
Medicare Part B went from {format_number(start.get("n"))} in {first} to
{format_number(end.get("n"))} in {last}. Per Part B beneficiary, the {last} rate is
{format_decimal(end.get("ratio"))} times the {StudyConfig.BASELINE_YEAR} rate."""


def _volume_section(rates: pd.DataFrame, figure: str) -> str:
    return f"""## Procedure volume

![Procedure volume by modality]({figure})

Rates are procedures per {ReportConfig.RATE_SCALE:,} Part B beneficiaries.

{tables.volume_table(rates)}"""


def _ratio_section(rates: pd.DataFrame, figure: str) -> str:
    return f"""## Change since {StudyConfig.BASELINE_YEAR}

Each line is the per-beneficiary rate divided by the same modality's
{StudyConfig.BASELINE_YEAR} rate; the dashed line marks no change.

![Rate relative to baseline]({figure})"""


def _reader_section(specialty_mix: pd.DataFrame, readers_by_specialty: pd.DataFrame, figure: str) -> str:
    return f"""## Readers and specialty mix

![Readers by modality]({figure})

Distinct billing providers by specialty group:

{tables.readers_table(readers_by_specialty)}

Share of services (%) billed by cardiology, radiology and other specialties:

{tables.specialty_table(specialty_mix)}"""


def _methods() -> str:
    return """## Methods

- Procedure codes are grouped into five disjoint modality code sets; all
  other codes are excluded.
- National volume uses national-level rows of the geography file; readers
  and specialty mix use the provider-level file.
- Specialty groups come from case-insensitive matching on provider type:
  cardiology first, then radiology, everything else is "Other".
- Missing enrollment for a year leaves that year's rate and ratio as NA."""
