"""
Architect Agent - Scoring, report storage and PDF generation.
"""
from .scorer import Scorer
from .report_generator import ReportGenerator
from .report_store import ReportStore

__all__ = ["Scorer", "ReportGenerator", "ReportStore"]
