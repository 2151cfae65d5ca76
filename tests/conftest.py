"""Shared fixtures."""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
_TMP_DIR = tempfile.mkdtemp(prefix="a11y-tester-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["REPORTS_DIR"] = os.path.join(_TMP_DIR, "reports")
os.environ["GEMINI_API_KEY"] = ""
os.environ["AI_SUGGESTIONS_ENABLED"] = "false"

from datetime import datetime, timezone
from typing import Iterator, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from a11y_tester.agents.architect.report_generator import ReportGenerator
from a11y_tester.agents.architect.report_store import ReportStore
from a11y_tester.agents.architect.scorer import Scorer
from a11y_tester.agents.tester.orchestrator import AccessibilityTester
from a11y_tester.database import Base, get_db
from a11y_tester.main import app
from a11y_tester.models import (
    PassRecord,
    ResultSummary,
    TestRunResult,
    Violation,
)
from a11y_tester.routers.accessibility import (
    get_report_generator,
    get_report_store,
    get_tester,
)


def make_violation(
    impact: Optional[str] = "serious",
    rule_id: str = "image-alt",
    nodes: Optional[List[str]] = None,
) -> Violation:
    """Build a violation the way the runner reports it."""
    return Violation(
        id=rule_id,
        impact=impact,
        help="Images must have alternate text",
        description="Ensures <img> elements have alternate text",
        help_url=f"https://dequeuniversity.com/rules/axe/4.9/{rule_id}",
        tags=["wcag2a", "wcag111"],
        affected_nodes=nodes if nodes is not None else ['<img src="logo.png">'],
    )


def make_result(
    violations: Optional[List[Violation]] = None,
    passes: Optional[List[PassRecord]] = None,
    url: str = "https://example.com",
) -> TestRunResult:
    """Build a scored TestRunResult."""
    violations = violations if violations is not None else [make_violation()]
    passes = passes if passes is not None else [
        PassRecord(id="document-title", help="Documents must have <title>", node_count=1)
    ]
    scorer = Scorer()
    return TestRunResult(
        url=url,
        timestamp=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        violations=violations,
        passes=passes,
        summary=ResultSummary(
            total_violations=len(violations),
            total_passes=len(passes),
            impact_counts=AccessibilityTester.count_impacts(violations),
        ),
        score_result=scorer.calculate_score(scorer.tally_from_results(violations, passes)),
    )


@pytest.fixture
def scorer() -> Scorer:
    return Scorer()


@pytest.fixture
def sample_result() -> TestRunResult:
    return make_result(
        violations=[
            make_violation("critical", "color-contrast"),
            make_violation("serious", "image-alt"),
            make_violation("minor", "list"),
        ]
    )


@pytest.fixture
def store(tmp_path) -> ReportStore:
    return ReportStore(tmp_path / "reports")


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    """In-memory database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def tester_mock() -> Mock:
    tester = Mock(spec=AccessibilityTester)
    tester.run = AsyncMock()
    return tester


@pytest.fixture
def generator_mock() -> Mock:
    generator = Mock(spec=ReportGenerator)
    generator.render = AsyncMock(return_value=b"%PDF-1.4 test document")
    return generator


@pytest.fixture
def client(
    tester_mock: Mock,
    generator_mock: Mock,
    store: ReportStore,
    session_factory: sessionmaker,
) -> Iterator[TestClient]:
    """API client with collaborators replaced."""

    def _get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_tester] = lambda: tester_mock
    app.dependency_overrides[get_report_generator] = lambda: generator_mock
    app.dependency_overrides[get_report_store] = lambda: store
    app.dependency_overrides[get_db] = _get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


