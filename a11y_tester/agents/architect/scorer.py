"""
Scorer - The Architect Agent

This module calculates the Accessibility Score (0-100) based on:
1. Critical issues: -10 points each
2. Major issues: -5 points each
3. Minor issues: -2 points each
4. Best practices followed: +1 point each, bonus capped at 20

Author: Accessibility Tester
"""
from typing import Any, Dict, Iterable, List, Mapping, Union

from ...models import (
    Impact,
    IssueTally,
    PassRecord,
    ScoreBreakdown,
    ScoreResult,
    ScoringCriteria,
    Violation,
)


class Scorer:
    """
    Calculates the weighted Accessibility Score and letter grade.

    Scoring weights (points per item):
    - Critical: -10
    - Major: -5
    - Minor: -2
    - Best practice: +1 (max +20)
    """

    BASE_SCORE = 100

    WEIGHTS = {
        "critical": -10,
        "major": -5,
        "minor": -2,
        "best_practice": 1
    }

    MAX_BONUS = 20

    # Evaluated top-down, first match wins
    GRADE_THRESHOLDS = [
        (95, "A+"),
        (90, "A"),
        (80, "B"),
        (70, "C"),
        (60, "D"),
    ]

    FIXED_RECOMMENDATIONS = [
        "Implement automated accessibility testing",
        "Conduct regular accessibility audits",
        "Document and maintain accessibility best practices"
    ]

    def calculate_score(
        self,
        tally: Union[IssueTally, Mapping[str, Any], None] = None
    ) -> ScoreResult:
        """
        Calculate the accessibility score for a tally of issues.

        Missing counts are treated as zero. The calculation never fails.

        Args:
            tally: Issue counts, as an IssueTally or a mapping keyed in
                snake_case or camelCase

        Returns:
            ScoreResult with score, grade, breakdown and guidance
        """
        if not isinstance(tally, IssueTally):
            tally = IssueTally.model_validate(dict(tally or {}))

        critical_deductions = tally.critical_issues * self.WEIGHTS["critical"]
        major_deductions = tally.major_issues * self.WEIGHTS["major"]
        minor_deductions = tally.minor_issues * self.WEIGHTS["minor"]
        best_practices_bonus = min(
            tally.best_practices_followed * self.WEIGHTS["best_practice"],
            self.MAX_BONUS
        )

        score = (
            self.BASE_SCORE
            + critical_deductions
            + major_deductions
            + minor_deductions
            + best_practices_bonus
        )
        score = max(0, min(100, score))
        grade = self._assign_grade(score)

        return ScoreResult(
            score=score,
            grade=grade,
            breakdown=ScoreBreakdown(
                base_score=self.BASE_SCORE,
                critical_deductions=critical_deductions,
                major_deductions=major_deductions,
                minor_deductions=minor_deductions,
                best_practices_bonus=best_practices_bonus,
                final_score=score
            ),
            explanation=self._explain(score, grade, tally),
            improvements=self._improvements(
                tally, critical_deductions, major_deductions, minor_deductions
            ),
            positives=self._positives(tally, best_practices_bonus),
            recommendations=self._recommendations(tally),
            scoring_criteria=ScoringCriteria(
                critical=self.WEIGHTS["critical"],
                major=self.WEIGHTS["major"],
                minor=self.WEIGHTS["minor"],
                best_practice=self.WEIGHTS["best_practice"]
            )
        )

    def tally_from_results(
        self,
        violations: Iterable[Violation],
        passes: Iterable[PassRecord]
    ) -> IssueTally:
        """
        Convert axe-core results into scoring counts.

        critical -> critical, serious -> major, moderate/minor -> minor,
        each passed rule counts as one best practice followed.
        """
        counts: Dict[Impact, int] = {impact: 0 for impact in Impact}
        for violation in violations:
            counts[violation.impact] += 1

        return IssueTally(
            critical_issues=counts[Impact.CRITICAL],
            major_issues=counts[Impact.SERIOUS],
            minor_issues=counts[Impact.MODERATE] + counts[Impact.MINOR],
            best_practices_followed=len(list(passes))
        )

    def _assign_grade(self, score: int) -> str:
        for threshold, grade in self.GRADE_THRESHOLDS:
            if score >= threshold:
                return grade
        return "F"

    def _explain(self, score: int, grade: str, tally: IssueTally) -> str:
        """Human-readable summary of the score."""
        return (
            f"This website scored {score}/100 (Grade: {grade}). "
            "\nFound:\n"
            f"• {tally.critical_issues} critical issues\n"
            f"• {tally.major_issues} major issues\n"
            f"• {tally.minor_issues} minor issues\n\n"
            f"{tally.best_practices_followed} best practices being followed"
        )

    def _improvements(
        self,
        tally: IssueTally,
        critical_deductions: int,
        major_deductions: int,
        minor_deductions: int
    ) -> List[str]:
        improvements = []

        if tally.critical_issues > 0:
            improvements.append(
                f"CRITICAL: Address {tally.critical_issues} critical accessibility "
                f"violations ({critical_deductions} points)"
            )
        if tally.major_issues > 0:
            improvements.append(
                f"MAJOR: Fix {tally.major_issues} major accessibility issues "
                f"({major_deductions} points)"
            )
        if tally.minor_issues > 0:
            improvements.append(
                f"MINOR: Resolve {tally.minor_issues} minor accessibility concerns "
                f"({minor_deductions} points)"
            )

        return improvements

    def _positives(self, tally: IssueTally, bonus: int) -> List[str]:
        if tally.best_practices_followed > 0:
            return [
                f"Following {tally.best_practices_followed} accessibility best "
                f"practices (+{bonus} bonus points)"
            ]
        return []

    def _recommendations(self, tally: IssueTally) -> List[str]:
        recommendations = []

        if tally.critical_issues > 0:
            recommendations.append("Prioritize fixing critical issues first")
        if tally.major_issues > 0:
            recommendations.append("Address major issues to significantly improve score")

        return recommendations + list(self.FIXED_RECOMMENDATIONS)
