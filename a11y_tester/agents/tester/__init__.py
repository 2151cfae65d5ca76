"""
Tester Agent - axe-core runner and test orchestration.
"""
from .axe_runner import AxeRunner
from .orchestrator import AccessibilityTester

__all__ = ["AxeRunner", "AccessibilityTester"]
