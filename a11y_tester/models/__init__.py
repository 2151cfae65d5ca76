"""
Pydantic models for test results and request/response schemas.

Fields are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Impact(str, Enum):
    """Severity assigned to a violation by axe-core."""
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class IssueTally(CamelModel):
    """Issue and best-practice counts fed to the scorer, in either spelling."""
    critical_issues: int = 0
    major_issues: int = 0
    minor_issues: int = 0
    best_practices_followed: int = 0

    @field_validator("*", mode="before")
    @classmethod
    def _non_negative(cls, value):
        # Absent or unreadable counts are zero, negative counts are clamped
        if value is None:
            return 0
        try:
            return max(0, int(value))
        except (TypeError, ValueError, OverflowError):
            return 0


class ScoreBreakdown(CamelModel):
    model_config = ConfigDict(frozen=True)

    base_score: int
    critical_deductions: int
    major_deductions: int
    minor_deductions: int
    best_practices_bonus: int
    final_score: int


class ScoringCriteria(CamelModel):
    model_config = ConfigDict(frozen=True)

    critical: int = -10
    major: int = -5
    minor: int = -2
    best_practice: int = 1


class ScoreResult(CamelModel):
    """Score, grade and explanation for one test run."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    grade: str
    breakdown: ScoreBreakdown
    explanation: str
    improvements: List[str] = []
    positives: List[str] = []
    recommendations: List[str] = []
    scoring_criteria: ScoringCriteria = ScoringCriteria()


class Violation(CamelModel):
    """A failed accessibility rule and the markup it failed on."""
    id: str = ""
    impact: Impact = Impact.MINOR
    help: str = ""
    description: str = ""
    help_url: str = ""
    tags: List[str] = []
    affected_nodes: List[str] = []
    ai_suggestion: Optional[str] = None

    @field_validator("impact", mode="before")
    @classmethod
    def _default_impact(cls, value):
        return value or Impact.MINOR


class PassRecord(CamelModel):
    """A rule the page passed."""
    id: str = ""
    impact: Optional[str] = None
    help: str = ""
    description: str = ""
    help_url: str = ""
    node_count: int = 0


class ResultSummary(CamelModel):
    total_violations: int
    total_passes: int
    impact_counts: Dict[str, int] = {}


class TestRunResult(CamelModel):
    """Everything collected for one tested URL."""
    __test__ = False

    url: str
    timestamp: datetime
    violations: List[Violation] = []
    passes: List[PassRecord] = []
    summary: ResultSummary
    score_result: ScoreResult


class TestRequest(BaseModel):
    """Request body for submitting a URL."""
    __test__ = False

    url: Optional[str] = Field(None, description="URL of the page to test")


class TestRunStatus(CamelModel):
    """History entry for a submitted test run."""
    report_id: str
    url: str
    status: str
    score: Optional[int] = None
    grade: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    exported_at: Optional[datetime] = None
