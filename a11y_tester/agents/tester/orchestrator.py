"""
Accessibility Tester - runs one full test of a URL.

Pipeline:
1. Validate the URL
2. Run axe-core in a headless browser (AxeRunner)
3. Ask Gemini for remediation advice per violation (GeminiAdvisor)
4. Summarize impacts and compute the score (Scorer)

Author: Accessibility Tester
"""
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ...config import settings
from ...errors import AccessibilityTestError, ErrorCode
from ...models import PassRecord, ResultSummary, TestRunResult, Violation
from ..analyst.gemini_client import GeminiAdvisor
from ..architect.scorer import Scorer
from .axe_runner import AxeRunner

logger = logging.getLogger(__name__)


class AccessibilityTester:
    """
    Coordinates the browser, the AI advisor and the scorer for a single URL.
    """

    def __init__(
        self,
        runner: Optional[AxeRunner] = None,
        advisor: Optional[GeminiAdvisor] = None,
        scorer: Optional[Scorer] = None,
        ai_suggestions: Optional[bool] = None
    ):
        self.runner = runner or AxeRunner()
        self.scorer = scorer or Scorer()
        self.ai_suggestions = (
            settings.ai_suggestions_enabled if ai_suggestions is None else ai_suggestions
        )
        self.advisor = advisor
        if self.ai_suggestions and self.advisor is None:
            self.advisor = GeminiAdvisor()

    async def run(self, url: str) -> TestRunResult:
        """
        Test a URL and score the results.

        Raises:
            AccessibilityTestError: the URL is invalid or the run failed
        """
        self.validate_url(url)

        try:
            raw = await self.runner.run(url)

            violations = [Violation.model_validate(self._normalize_violation(v)) for v in raw.get("violations", [])]
            passes = [PassRecord.model_validate(p) for p in raw.get("passes", [])]

            if self.ai_suggestions and violations:
                violations = await self.advisor.enrich(violations)

            tally = self.scorer.tally_from_results(violations, passes)
            score_result = self.scorer.calculate_score(tally)

            logger.info("Scored %s: %s/100 (%s)", url, score_result.score, score_result.grade)

            return TestRunResult(
                url=url,
                timestamp=datetime.now(timezone.utc),
                violations=violations,
                passes=passes,
                summary=ResultSummary(
                    total_violations=len(violations),
                    total_passes=len(passes),
                    impact_counts=self.count_impacts(violations)
                ),
                score_result=score_result
            )

        except AccessibilityTestError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure testing %s", url)
            raise AccessibilityTestError(
                "An unexpected error occurred while testing the website.",
                ErrorCode.UNKNOWN_ERROR,
                str(e)
            ) from e

    @staticmethod
    def validate_url(url: str) -> None:
        """Accept only absolute http(s) URLs with a host."""
        try:
            parsed = urlparse(url)
        except ValueError:
            parsed = None

        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise AccessibilityTestError(
                "Please enter a valid URL starting with http:// or https://",
                ErrorCode.INVALID_URL
            )

    @staticmethod
    def count_impacts(violations: List[Violation]) -> Dict[str, int]:
        """Number of violations per impact level present."""
        return dict(Counter(v.impact.value for v in violations))

    @staticmethod
    def _normalize_violation(raw: Dict[str, Any]) -> Dict[str, Any]:
        # Runner reports node markup under "nodes"
        data = dict(raw)
        if "nodes" in data and "affectedNodes" not in data:
            data["affectedNodes"] = [str(n) for n in data.pop("nodes") or []]
        return data
