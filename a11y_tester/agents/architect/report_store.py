"""
Report Store - persists test run results between submission and export.

One JSON file per run, named by report id, under the reports directory.
"""
import logging
import re
import time
import uuid
from pathlib import Path
from typing import Optional

from ...config import settings
from ...errors import AccessibilityTestError, ErrorCode
from ...models import TestRunResult

logger = logging.getLogger(__name__)

REPORT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class ReportStore:
    """
    Filesystem-backed store of TestRunResult records.
    """

    def __init__(self, reports_dir: Optional[Path] = None):
        """
        Args:
            reports_dir: Directory to save reports (defaults to settings.reports_dir)
        """
        self.reports_dir = Path(reports_dir or settings.reports_dir)
        self.reports_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def new_report_id() -> str:
        return f"report-{time.time_ns() // 1_000_000}"

    def save(self, result: TestRunResult, report_id: Optional[str] = None) -> str:
        """
        Save a result and return its report id.
        """
        report_id = report_id or self.new_report_id()
        path = self._json_path(report_id)
        path.write_text(
            result.model_dump_json(by_alias=True, indent=2),
            encoding="utf-8"
        )
        logger.info("Stored report %s", report_id)
        return report_id

    def load(self, report_id: str) -> TestRunResult:
        """
        Load a stored result.

        Raises:
            AccessibilityTestError: NOT_FOUND when no record exists
        """
        path = self._json_path(report_id)
        if not path.exists():
            raise AccessibilityTestError("Report not found", ErrorCode.NOT_FOUND)
        return TestRunResult.model_validate_json(path.read_text(encoding="utf-8"))

    def exists(self, report_id: str) -> bool:
        try:
            return self._json_path(report_id).exists()
        except AccessibilityTestError:
            return False

    def pdf_path(self, report_id: str) -> Path:
        """Fresh path for one rendered copy of a report."""
        report_id = self.normalize_id(report_id)
        return self.reports_dir / f"{report_id}.{uuid.uuid4().hex}.pdf"

    def delete(self, report_id: str, pdf_path: Optional[Path] = None) -> None:
        """Remove the JSON record and, if given, a rendered PDF."""
        self._json_path(report_id).unlink(missing_ok=True)
        if pdf_path is not None:
            Path(pdf_path).unlink(missing_ok=True)
        logger.info("Cleaned up report %s", report_id)

    def _json_path(self, report_id: str) -> Path:
        report_id = self.normalize_id(report_id)
        return self.reports_dir / f"{report_id}.json"

    @staticmethod
    def normalize_id(report_id: str) -> str:
        """Strip a trailing .json and reject anything that is not a plain token."""
        if report_id.endswith(".json"):
            report_id = report_id[:-len(".json")]
        if not REPORT_ID_PATTERN.match(report_id):
            raise AccessibilityTestError("Report not found", ErrorCode.NOT_FOUND)
        return report_id
