"""
Analyst Agent - Gemini AI remediation suggestions.
"""
from .gemini_client import GeminiAdvisor

__all__ = ["GeminiAdvisor"]
