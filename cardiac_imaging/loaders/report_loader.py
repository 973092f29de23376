"""
Write rendered figures and report documents to disk
"""
import logging
import matplotlib.pyplot as plt
from pathlib import Path
from cardiac_imaging.config.settings import ReportConfig

logger = logging.getLogger(__name__)


class ReportLoader:
    """Save report artifacts under an output directory"""

    def __init__(self, output_dir: Path, figures_subdir: str = "figures",
                 figure_format: str = ReportConfig.FIGURE_FORMAT, dpi: int = ReportConfig.DPI):
        self.output_dir = Path(output_dir)
        self.figures_dir = self.output_dir / figures_subdir
        self.figure_format = figure_format
        self.dpi = dpi

    def save_figure(self, fig, name: str) -> Path:
        """Save a figure as a vector image and close it"""
        self.figures_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.figures_dir / f"{name}.{self.figure_format}"
        try:
            fig.savefig(output_path, dpi=self.dpi, format=self.figure_format, bbox_inches="tight")
            logger.info(f"Saved figure to {output_path}")
        except Exception as e:
            logger.error(f"Failed to save figure {output_path}: {e}")
            raise
        finally:
            plt.close(fig)
        return output_path

    def save_document(self, text: str, file_name: str = ReportConfig.REPORT_FILE) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / file_name
        output_path.write_text(text, encoding="utf-8")
        logger.info(f"Saved report to {output_path}")
        return output_path

    def relative(self, path: Path) -> str:
        """Path of an artifact relative to the report document, for links"""
        return Path(path).relative_to(self.output_dir).as_posix()
