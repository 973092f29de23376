"""
Tests for charts, summary tables and the report document.
"""
import numpy as np
import pandas as pd
import pytest

from cardiac_imaging.loaders.report_loader import ReportLoader
from cardiac_imaging.reporting import charts, tables
from cardiac_imaging.reporting.report import ReportBuilder
from cardiac_imaging.transformers.rate_calculator import RateCalculator


@pytest.fixture
def rates(national_records, enrollment):
    return RateCalculator().calculate(national_records, enrollment)


@pytest.fixture
def readers():
    return pd.DataFrame({
        "year": [2013, 2014, 2013, 2014],
        "modality": ["Echo", "Echo", "Total", "Total"],
        "n_readers": [120, 150, 300, 320],
    })


@pytest.fixture
def specialty_mix():
    return pd.DataFrame({
        "year": [2013, 2013, 2014, 2014, 2014],
        "modality": ["Echo", "Echo", "Echo", "Echo", "Echo"],
        "specialty": ["Cardiology", "Other", "Cardiology", "Radiology", "Other"],
        "n": [75, 25, 60, 20, 20],
        "pct": [75.0, 25.0, 60.0, 20.0, 20.0],
    })


@pytest.fixture
def readers_by_specialty():
    return pd.DataFrame({
        "year": [2013, 2013, 2014],
        "specialty": ["Cardiology", "Radiology", "Cardiology"],
        "n_readers": [1200, 800, 1300],
    })


class TestTables:
    """Tests for the first/last year summaries."""

    @pytest.mark.unit
    def test_volume_summary(self, rates):
        summary = tables.volume_summary(rates)

        assert list(summary.index) == ["PET", "SPECT", "CT", "MRI", "Echo", "Total"]
        assert list(summary.columns) == ["n_2013", "n_2014", "rate_2013", "rate_2014", "ratio_2014"]
        assert summary.loc["Total", "n_2014"] == 150
        assert summary.loc["Total", "rate_2014"] == pytest.approx(125.0)
        assert summary.loc["PET", "ratio_2014"] == pytest.approx(2.5)

    @pytest.mark.unit
    def test_volume_table_markdown(self, rates):
        table = tables.volume_table(rates)
        lines = table.splitlines()

        assert lines[0] == "| Modality | n_2013 | n_2014 | rate_2013 | rate_2014 | ratio_2014 |"
        assert lines[-1] == "| Total | 100 | 150 | 100.00 | 125.00 | 1.25 |"

    @pytest.mark.unit
    def test_missing_values_render_as_na(self, rates):
        rates = rates.copy()
        rates.loc[rates["year"] == 2014, "ratio"] = np.nan
        assert "| NA |" in tables.volume_table(rates)

    @pytest.mark.unit
    def test_specialty_summary_fills_absent_groups(self, specialty_mix):
        summary = tables.specialty_summary(specialty_mix)

        assert summary.loc["Echo", "Cardiology_2013"] == 75
        assert summary.loc["Echo", "Radiology_2013"] == 0
        assert summary.loc["Echo", "Radiology_2014"] == 20

    @pytest.mark.unit
    def test_readers_table(self, readers_by_specialty):
        table = tables.readers_table(readers_by_specialty)
        assert "| Cardiology | 1,200 | 1,300 |" in table
        assert "| Radiology | 800 | 0 |" in table


class TestCharts:
    """Tests for chart construction."""

    @pytest.mark.unit
    def test_volume_chart_log_axis(self, rates):
        fig = charts.volume_chart(rates)
        ax = fig.axes[0]

        assert ax.get_yscale() == "log"
        assert [t.get_text() for t in ax.get_yticklabels()] == ["1K", "10K", "100K", "1M", "10M"]
        charts.plt.close(fig)

    @pytest.mark.unit
    def test_volume_chart_limits_cover_data(self):
        rates = pd.DataFrame({
            "year": [2013, 2014, 2013, 2014],
            "modality": ["PET", "PET", "Total", "Total"],
            "n": [500, 800, 1.2e7, 1.4e7],
        })
        fig = charts.volume_chart(rates)
        ax = fig.axes[0]

        low, high = ax.get_ylim()
        assert low <= 500
        assert high >= 1.4e7
        assert [t.get_text() for t in ax.get_yticklabels()] == ["1K", "10K", "100K", "1M", "10M"]
        charts.plt.close(fig)

    @pytest.mark.unit
    def test_volume_chart_limits_default_to_ticks(self):
        rates = pd.DataFrame({
            "year": [2013, 2014],
            "modality": ["Echo", "Echo"],
            "n": [20000, 30000],
        })
        fig = charts.volume_chart(rates)
        assert fig.axes[0].get_ylim() == pytest.approx((1e3, 1e7))
        charts.plt.close(fig)

    @pytest.mark.unit
    def test_readers_chart_limits_cover_data(self):
        readers = pd.DataFrame({
            "year": [2013, 2014],
            "modality": ["Total", "Total"],
            "n_readers": [3, 250000],
        })
        fig = charts.readers_chart(readers)

        low, high = fig.axes[0].get_ylim()
        assert low <= 3
        assert high >= 250000
        charts.plt.close(fig)

    @pytest.mark.unit
    def test_ratio_chart_reference_line(self, rates):
        fig = charts.ratio_chart(rates)
        ax = fig.axes[0]

        assert any(list(line.get_ydata()) == [1, 1] for line in ax.lines)
        charts.plt.close(fig)


class TestReportBuilder:
    """Tests for the markdown document."""

    @pytest.mark.integration
    def test_render(self, tmp_path, rates, readers, specialty_mix, readers_by_specialty):
        loader = ReportLoader(tmp_path)
        report = ReportBuilder(loader).render(rates, readers, specialty_mix, readers_by_specialty)

        assert (tmp_path / "report.md").read_text(encoding="utf-8") == report
        for name in ("volume_by_modality", "ratio_by_modality", "readers_by_modality"):
            assert (tmp_path / "figures" / f"{name}.svg").exists()
            assert f"(figures/{name}.svg)" in report
        assert "# Cardiac Imaging in Medicare Part B, 2013-2014" in report
        assert "1.25 times the 2013 rate" in report
