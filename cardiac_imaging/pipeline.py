"""
Main pipeline for the Medicare cardiac imaging report
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict
import pandas as pd

from cardiac_imaging.config import settings
from cardiac_imaging.config.settings import ColumnMapping, ModalityCodes, SpecialtyRules, StudyConfig
from cardiac_imaging.extractors.enrollment_extractor import EnrollmentExtractor
from cardiac_imaging.extractors.record_extractor import RecordExtractor
from cardiac_imaging.loaders.report_loader import ReportLoader
from cardiac_imaging.reporting.report import ReportBuilder
from cardiac_imaging.transformers.aggregator import NationalAggregator, ProviderAggregator
from cardiac_imaging.transformers.categorizer import ModalityClassifier, SpecialtyClassifier
from cardiac_imaging.transformers.rate_calculator import RateCalculator

logger = logging.getLogger(__name__)


def configure_logging(log_file: str = "pipeline.log") -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)
        ]
    )


class CardiacImagingPipeline:
    """Load, aggregate and report Medicare cardiac imaging utilization"""

    def __init__(self,
                 national_dir: Path = settings.NATIONAL_DIR,
                 provider_dir: Path = settings.PROVIDER_DIR,
                 enrollment_file: Path = settings.ENROLLMENT_FILE,
                 output_dir: Path = settings.OUTPUT_DIR,
                 code_sets: dict = None,
                 specialty_rules=SpecialtyRules.RULES):
        self.national_dir = Path(national_dir)
        self.provider_dir = Path(provider_dir)
        self.enrollment_file = Path(enrollment_file)
        self.output_dir = Path(output_dir)

        # Reference data is passed down explicitly so components stay testable
        classifier = ModalityClassifier(code_sets if code_sets is not None else ModalityCodes.as_mapping())
        specialty_classifier = SpecialtyClassifier(specialty_rules)

        self.national_extractor = RecordExtractor(list(ColumnMapping.NATIONAL_RENAME))
        self.provider_extractor = RecordExtractor(list(ColumnMapping.PROVIDER_RENAME))
        self.enrollment_extractor = EnrollmentExtractor()
        self.national_aggregator = NationalAggregator(classifier)
        self.provider_aggregator = ProviderAggregator(classifier, specialty_classifier)
        self.rate_calculator = RateCalculator(StudyConfig.BASELINE_YEAR, classifier.modalities)
        self.report_builder = ReportBuilder(ReportLoader(self.output_dir))

        logger.info(f"Initialized pipeline: national={self.national_dir}, provider={self.provider_dir}, "
                    f"enrollment={self.enrollment_file}, output={self.output_dir}")

    def run_full_pipeline(self) -> Dict[str, pd.DataFrame]:
        """Execute every phase and return the derived aggregates"""
        logger.info("Starting cardiac imaging pipeline...")

        try:
            results = self.build_aggregates()

            logger.info("=== REPORTING PHASE ===")
            self.report_builder.render(
                results["rates"], results["readers"],
                results["specialty_mix"], results["readers_by_specialty"],
            )

            logger.info("Pipeline completed successfully!")
            return results

        except Exception as e:
            logger.error(f"Pipeline failed: {e}")
            raise

    def build_aggregates(self) -> Dict[str, pd.DataFrame]:
        logger.info("=== EXTRACTION PHASE ===")
        national_raw = self.national_extractor.extract_directory(self.national_dir)
        provider_raw = self.provider_extractor.extract_directory(self.provider_dir)
        enrollment = self.enrollment_extractor.extract_enrollment(self.enrollment_file)

        logger.info("=== FILTER AND CLASSIFY PHASE ===")
        national = self.national_aggregator.prepare_records(national_raw)
        providers = self.provider_aggregator.prepare_records(provider_raw)

        if national.empty:
            raise ValueError(f"No cardiac imaging records after filtering in {self.national_dir}")
        if providers.empty:
            raise ValueError(f"No cardiac imaging records after filtering in {self.provider_dir}")

        missing = self.enrollment_extractor.missing_years(enrollment, national["year"].unique())
        if missing:
            logger.warning(f"Enrollment file has no annual national total for {missing}")

        logger.info("=== AGGREGATION PHASE ===")
        return {
            "rates": self.rate_calculator.calculate(national, enrollment),
            "readers": self.provider_aggregator.reader_counts(providers),
            "readers_by_specialty": self.provider_aggregator.readers_by_specialty(providers),
            "specialty_mix": self.provider_aggregator.specialty_mix(providers),
        }


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Medicare cardiac imaging utilization report")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Directory holding national/, provider/ and enrollment/ inputs")
    parser.add_argument("--output-dir", type=Path, default=settings.OUTPUT_DIR,
                        help="Where figures and report.md are written")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    configure_logging()

    paths = {}
    if args.data_dir is not None:
        paths = {
            "national_dir": args.data_dir / settings.NATIONAL_DIR.name,
            "provider_dir": args.data_dir / settings.PROVIDER_DIR.name,
            "enrollment_file": args.data_dir / settings.ENROLLMENT_FILE.relative_to(settings.DATA_DIR),
        }

    try:
        pipeline = CardiacImagingPipeline(output_dir=args.output_dir, **paths)
        pipeline.run_full_pipeline()

    except KeyboardInterrupt:
        logger.info("Pipeline interrupted by user")
    except Exception as e:
        logger.error(f"Pipeline failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
