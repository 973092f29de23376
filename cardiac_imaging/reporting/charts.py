"""
Time-series charts of imaging volume, readers and change from baseline
"""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.ticker import FixedLocator, NullLocator
from cardiac_imaging.config.settings import ModalityCodes, ReportConfig, StudyConfig

SERIES_ORDER = list(ModalityCodes.ORDER) + [ModalityCodes.TOTAL]


def _line_chart(data: pd.DataFrame, y: str, ylabel: str, title: str):
    sns.set_theme(style=ReportConfig.THEME)
    fig, ax = plt.subplots(figsize=ReportConfig.FIGURE_SIZE)

    hue_order = [m for m in SERIES_ORDER if m in set(data["modality"])]
    sns.lineplot(
        data=data, x="year", y=y, hue="modality", hue_order=hue_order,
        palette=ReportConfig.PALETTE, marker="o", errorbar=None, ax=ax,
    )

    years = sorted(data["year"].unique())
    ax.set_xticks(years)
    ax.set_xlabel("Year")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.legend(title="Modality", frameon=False, bbox_to_anchor=(1.02, 1), loc="upper left")
    return fig, ax


def _fixed_log_axis(ax, ticks, labels, values: pd.Series):
    """Fixed tick labels; limits widen to keep every plotted value in view"""
    ax.set_yscale("log")
    ax.yaxis.set_major_locator(FixedLocator(ticks))
    ax.yaxis.set_minor_locator(NullLocator())
    ax.set_yticklabels(labels)

    # Log axis: only positive finite values are drawn
    values = pd.to_numeric(values, errors="coerce")
    values = values[np.isfinite(values) & (values > 0)]
    low, high = ticks[0], ticks[-1]
    if len(values):
        low, high = min(low, values.min() / 1.5), max(high, values.max() * 1.5)
    ax.set_ylim(low, high)


def volume_chart(rates: pd.DataFrame):
    """Services per year, one line per modality, log scale"""
    fig, ax = _line_chart(
        rates, "n", "Procedures (log scale)",
        f"Medicare cardiac imaging volume, {StudyConfig.FIRST_YEAR}-{StudyConfig.LAST_YEAR}",
    )
    _fixed_log_axis(ax, ReportConfig.VOLUME_TICKS, ReportConfig.VOLUME_TICK_LABELS, rates["n"])
    fig.tight_layout()
    return fig


def ratio_chart(rates: pd.DataFrame):
    """Per-beneficiary rate relative to the baseline year; 1 means no change"""
    fig, ax = _line_chart(
        rates, "ratio", f"Rate relative to {StudyConfig.BASELINE_YEAR}",
        "Change in procedures per Part B beneficiary",
    )
    ax.axhline(1, color="black", linestyle="--", linewidth=1)
    fig.tight_layout()
    return fig


def readers_chart(readers: pd.DataFrame):
    """Distinct billing providers per modality and year"""
    fig, ax = _line_chart(readers, "n_readers", "Readers (log scale)", "Providers billing each modality")
    _fixed_log_axis(ax, ReportConfig.READER_TICKS, ReportConfig.READER_TICK_LABELS, readers["n_readers"])
    fig.tight_layout()
    return fig
