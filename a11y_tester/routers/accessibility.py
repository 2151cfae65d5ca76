"""
Accessibility test API endpoints.
"""
import logging
import time
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from starlette.background import BackgroundTask

from ..database import get_db, TestRun
from ..errors import AccessibilityTestError, ErrorCode
from ..models import TestRequest, TestRunStatus
from ..agents.tester.orchestrator import AccessibilityTester
from ..agents.architect.report_generator import ReportGenerator
from ..agents.architect.report_store import ReportStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_tester() -> AccessibilityTester:
    return AccessibilityTester()


def get_report_store() -> ReportStore:
    return ReportStore()


def get_report_generator() -> ReportGenerator:
    return ReportGenerator()


@router.post("/test")
async def submit_test(
    payload: Optional[TestRequest] = None,
    tester: AccessibilityTester = Depends(get_tester),
    store: ReportStore = Depends(get_report_store),
    db: Session = Depends(get_db)
):
    """
    Test a URL for accessibility issues.

    - **url**: page to test, http:// or https://

    Returns the full results and a report ID for PDF export.
    """
    url = (payload.url or "").strip() if payload else ""
    if not url:
        raise AccessibilityTestError("URL is required", ErrorCode.MISSING_URL)

    logger.info("Testing URL: %s", url)

    report_id = store.new_report_id()
    run = TestRun(id=report_id, url=url, status="running")
    db.add(run)
    db.commit()

    try:
        results = await tester.run(url)
        store.save(results, report_id)
    except AccessibilityTestError as e:
        _record_failure(db, run, e)
        raise
    except Exception as e:
        error = AccessibilityTestError(
            "An unexpected error occurred while testing the website.",
            ErrorCode.UNKNOWN_ERROR,
            str(e)
        )
        _record_failure(db, run, error)
        raise error from e

    run.status = "completed"
    run.score = results.score_result.score
    run.grade = results.score_result.grade
    run.completed_at = datetime.utcnow()
    db.commit()

    return {
        "success": True,
        "results": results.model_dump(mode="json", by_alias=True),
        "reportId": report_id
    }


@router.get("/export-pdf/{report_id}")
async def export_pdf(
    report_id: str,
    store: ReportStore = Depends(get_report_store),
    generator: ReportGenerator = Depends(get_report_generator),
    db: Session = Depends(get_db)
):
    """
    Download a stored test run as a PDF.

    The stored record is deleted once the download has been sent,
    so each report ID can be exported once.
    """
    logger.info("Exporting PDF for report: %s", report_id)
    report_id = store.normalize_id(report_id)
    results = store.load(report_id)

    try:
        pdf = await generator.render(results)
    except Exception as e:
        logger.exception("PDF generation failed for %s", report_id)
        raise AccessibilityTestError(
            f"Failed to generate PDF report: {e}",
            ErrorCode.RENDER_ERROR,
            str(e)
        ) from e

    # One file per download
    pdf_path = store.pdf_path(report_id)
    pdf_path.write_bytes(pdf)

    run = db.get(TestRun, report_id)
    if run:
        run.status = "exported"
        run.exported_at = datetime.utcnow()
        db.commit()

    return FileResponse(
        pdf_path,
        media_type="application/pdf",
        filename=f"accessibility-report-{time.time_ns() // 1_000_000}.pdf",
        background=BackgroundTask(store.delete, report_id, pdf_path)
    )


@router.get("/runs")
async def list_runs(
    limit: int = Query(20, ge=1, le=100, description="Number of runs to return"),
    db: Session = Depends(get_db)
):
    """List the most recent test runs, newest first."""
    runs = db.query(TestRun).order_by(TestRun.started_at.desc()).limit(limit).all()
    return [_to_status(run).model_dump(mode="json", by_alias=True) for run in runs]


@router.get("/runs/{report_id}")
async def get_run_status(
    report_id: str,
    db: Session = Depends(get_db)
):
    """Get the status of a single test run."""
    run = db.get(TestRun, report_id)
    if not run:
        raise AccessibilityTestError("Test run not found", ErrorCode.NOT_FOUND)
    return _to_status(run).model_dump(mode="json", by_alias=True)


def _record_failure(db: Session, run: TestRun, error: AccessibilityTestError) -> None:
    run.status = "failed"
    run.error_code = error.code.value
    run.error_message = error.message
    run.completed_at = datetime.utcnow()
    db.commit()
    logger.warning("Test of %s failed: %s (%s)", run.url, error.code.value, error.details or error.message)


def _to_status(run: TestRun) -> TestRunStatus:
    return TestRunStatus(
        report_id=run.id,
        url=run.url,
        status=run.status,
        score=run.score,
        grade=run.grade,
        error_code=run.error_code,
        error_message=run.error_message,
        started_at=run.started_at,
        completed_at=run.completed_at,
        exported_at=run.exported_at
    )
