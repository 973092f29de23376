"""
First-year vs last-year summary tables
"""
import pandas as pd
from cardiac_imaging.config.settings import ModalityCodes, ReportConfig, SpecialtyRules

SERIES_ORDER = list(ModalityCodes.ORDER) + [ModalityCodes.TOTAL]


def format_number(value) -> str:
    if pd.isna(value):
        return "NA"
    return f"{value:,.0f}"


def format_decimal(value, digits: int = 2) -> str:
    if pd.isna(value):
        return "NA"
    return f"{value:,.{digits}f}"


def _ordered(df: pd.DataFrame, index: str = "modality") -> pd.DataFrame:
    present = [m for m in SERIES_ORDER if m in df.index.get_level_values(index)]
    return df.reindex(present)


def volume_summary(rates: pd.DataFrame) -> pd.DataFrame:
    """Volume, rate per 1,000 beneficiaries and ratio at the first and last year"""
    first, last = rates["year"].min(), rates["year"].max()
    df = rates[rates["year"].isin([first, last])].copy()
    df["rate_per_1k"] = df["rate"] * ReportConfig.RATE_SCALE

    wide = df.pivot(index="modality", columns="year", values=["n", "rate_per_1k", "ratio"])
    summary = pd.DataFrame({
        f"n_{first}": wide[("n", first)],
        f"n_{last}": wide[("n", last)],
        f"rate_{first}": wide[("rate_per_1k", first)],
        f"rate_{last}": wide[("rate_per_1k", last)],
        f"ratio_{last}": wide[("ratio", last)],
    })
    return _ordered(summary)


def specialty_summary(mix: pd.DataFrame) -> pd.DataFrame:
    """Percent of services by specialty group per modality at the first and last year"""
    first, last = mix["year"].min(), mix["year"].max()
    df = mix[mix["year"].isin([first, last])]
    wide = df.pivot_table(index="modality", columns=["specialty", "year"], values="pct", fill_value=0)

    summary = pd.DataFrame(index=wide.index)
    for specialty in SpecialtyRules.ORDER:
        for year in (first, last):
            column = (specialty, year)
            summary[f"{specialty}_{year}"] = wide[column] if column in wide.columns else 0.0
    return _ordered(summary)


def to_markdown(df: pd.DataFrame, formatters: dict = None, index_label: str = "Modality") -> str:
    """Render a small dataframe as a markdown table"""
    formatters = formatters or {}
    header = [index_label] + list(df.columns)
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "|".join(["---"] + ["---:"] * len(df.columns)) + "|",
    ]
    for label, row in df.iterrows():
        cells = [str(label)]
        for column in df.columns:
            formatter = formatters.get(column, format_decimal)
            cells.append(formatter(row[column]))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def volume_table(rates: pd.DataFrame) -> str:
    summary = volume_summary(rates)
    formatters = {col: format_number for col in summary.columns if col.startswith("n_")}
    return to_markdown(summary, formatters)


def specialty_table(mix: pd.DataFrame) -> str:
    summary = specialty_summary(mix)
    formatters = {col: lambda v: format_decimal(v, 1) for col in summary.columns}
    return to_markdown(summary, formatters)


def readers_table(readers_by_specialty: pd.DataFrame) -> str:
    """Distinct readers per specialty group at the first and last year"""
    first, last = readers_by_specialty["year"].min(), readers_by_specialty["year"].max()
    wide = readers_by_specialty.pivot_table(
        index="specialty", columns="year", values="n_readers", fill_value=0
    )
    present = [s for s in SpecialtyRules.ORDER if s in wide.index]
    summary = pd.DataFrame({
        f"readers_{first}": wide[first],
        f"readers_{last}": wide[last],
    }).reindex(present)
    formatters = {col: format_number for col in summary.columns}
    return to_markdown(summary, formatters, index_label="Specialty")
