"""
Gemini AI Client - The Analyst Agent

This module integrates Google's Gemini for remediation advice on each
accessibility violation:
1. Why the violation is an accessibility issue
2. Specific code suggestions to fix it
3. Best practices to prevent it
4. A 1-10 severity estimate

Failures never propagate: a placeholder suggestion is returned instead.

Author: Accessibility Tester
"""
import asyncio
import logging
from typing import List, Optional
import google.generativeai as genai

from ...config import settings
from ...models import Violation

logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTION = (
    "You are an expert web accessibility consultant who provides clear, "
    "actionable advice for fixing WCAG violations."
)

UNAVAILABLE_PREFIX = "⚠️ AI suggestions unavailable"


class GeminiAdvisor:
    """
    Gemini AI integration for per-violation remediation suggestions.
    """

    GENERATION_CONFIG = {
        "temperature": 0.7,
        "max_output_tokens": 500
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        max_concurrency: Optional[int] = None
    ):
        """
        Initialize the Gemini advisor.

        Args:
            api_key: Gemini API key (uses config if not provided)
            model_name: Gemini model (uses config if not provided)
            max_concurrency: Upper bound on simultaneous Gemini calls
        """
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.max_concurrency = max_concurrency or settings.ai_max_concurrency

        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(
                model_name or settings.gemini_model,
                system_instruction=SYSTEM_INSTRUCTION
            )
        else:
            self.model = None
            logger.warning("Gemini API key not configured, AI suggestions disabled")

    async def suggest(self, violation: Violation) -> str:
        """
        Ask Gemini how to fix a single violation.

        Args:
            violation: The accessibility violation

        Returns:
            Markdown suggestion, or a placeholder if Gemini is unavailable
        """
        if not self.model:
            return f"{UNAVAILABLE_PREFIX}: Gemini API key is not configured"

        try:
            prompt = self._create_suggestion_prompt(violation)
            return await asyncio.to_thread(self._generate_response, prompt)
        except Exception as e:
            logger.warning("Gemini suggestion failed for %s: %s", violation.id or violation.help, e)
            return f"{UNAVAILABLE_PREFIX}: {e}"

    async def enrich(self, violations: List[Violation]) -> List[Violation]:
        """
        Attach a suggestion to every violation.

        Calls run concurrently; the returned list keeps the input order.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _enrich_one(violation: Violation) -> Violation:
            async with semaphore:
                suggestion = await self.suggest(violation)
            return violation.model_copy(update={"ai_suggestion": suggestion})

        return list(await asyncio.gather(*(_enrich_one(v) for v in violations)))

    def _generate_response(self, prompt: str) -> str:
        """Generate response from Gemini (sync wrapper)."""
        response = self.model.generate_content(
            prompt,
            generation_config=self.GENERATION_CONFIG
        )
        return response.text

    def _create_suggestion_prompt(self, violation: Violation) -> str:
        """Create the remediation prompt for Gemini."""
        prompt = """As an accessibility expert, analyze this WCAG violation:

Issue: {help}
Description: {description}
Impact Level: {impact}

Affected HTML:
{nodes}

Please provide:
1. A brief explanation of why this is an accessibility issue
2. Specific code suggestions to fix the issue
3. Best practices to prevent this issue in the future
4. A severity score for this issue on a scale of 1-10 (10 being most severe)

Format the response in markdown."""

        return prompt.format(
            help=violation.help,
            description=violation.description,
            impact=violation.impact.value,
            nodes="\n".join(violation.affected_nodes) or "Not provided"
        )
