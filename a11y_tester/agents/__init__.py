"""
Agents package - Contains the agents behind an accessibility test run.

Modules:
- tester/: Browser + axe-core runner and the run orchestrator
- analyst/: Gemini remediation advisor
- architect/: Scoring, report storage and PDF rendering
"""
from .tester import AccessibilityTester, AxeRunner
from .analyst import GeminiAdvisor
from .architect import Scorer, ReportGenerator, ReportStore

__all__ = [
    "AccessibilityTester",
    "AxeRunner",
    "GeminiAdvisor",
    "Scorer",
    "ReportGenerator",
    "ReportStore"
]
