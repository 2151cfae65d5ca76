"""
Axe Runner - The Tester Agent

This module uses Playwright to load a page in headless Chromium and runs the
axe-core accessibility engine inside it:
1. Navigates to the page and waits for the network to go idle
2. Injects axe-core from a local file or the CDN
3. Runs the WCAG 2.0/2.1 A and AA rule sets
4. Returns violations and passes as plain dictionaries

Author: Accessibility Tester
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from playwright.async_api import (
    async_playwright,
    Browser,
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)

from ...config import settings
from ...errors import AccessibilityTestError, ErrorCode

logger = logging.getLogger(__name__)


AXE_OPTIONS = {
    "resultTypes": ["violations", "passes"],
    "runOnly": {
        "type": "tag",
        "values": ["wcag2a", "wcag2aa", "wcag21a", "wcag21aa"]
    },
    "rules": {
        "color-contrast": {"enabled": True},
        "document-title": {"enabled": True},
        "html-has-lang": {"enabled": True},
        "image-alt": {"enabled": True},
        "label": {"enabled": True},
        "link-name": {"enabled": True},
        "list": {"enabled": True},
        "heading-order": {"enabled": True}
    }
}

# Keeps the payload crossing the browser boundary small
AXE_RUN_SCRIPT = """
async (options) => {
    const results = await window.axe.run(document, options);
    return {
        violations: results.violations.map(v => ({
            id: v.id,
            impact: v.impact,
            help: v.help,
            description: v.description,
            helpUrl: v.helpUrl,
            tags: v.tags,
            nodes: v.nodes.map(n => n.html)
        })),
        passes: results.passes.map(p => ({
            id: p.id,
            impact: p.impact,
            help: p.help,
            description: p.description,
            helpUrl: p.helpUrl,
            nodeCount: p.nodes.length
        }))
    };
}
"""


class AxeRunner:
    """
    Playwright-based axe-core runner.
    """

    BROWSER_ARGS = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage"
    ]
    USER_AGENT = "Accessibility-Test-Bot"
    VIEWPORT = {"width": 1280, "height": 720}
    INJECTION_TIMEOUT_MS = 10000

    def __init__(
        self,
        headless: bool = True,
        timeout_ms: Optional[int] = None,
        axe_source_url: Optional[str] = None,
        axe_script_path: Optional[str] = None
    ):
        """
        Initialize the runner.

        Args:
            headless: Run browser in headless mode
            timeout_ms: Page load timeout (defaults to settings)
            axe_source_url: Where to load axe-core from
            axe_script_path: Local axe.min.js, preferred over the URL when it exists
        """
        self.headless = headless
        self.timeout_ms = timeout_ms or settings.page_load_timeout_ms
        self.axe_source_url = axe_source_url or settings.axe_cdn_url
        self.axe_script_path = axe_script_path or settings.axe_script_path
        self.browser: Optional[Browser] = None

    async def run(self, url: str) -> Dict[str, Any]:
        """
        Run axe-core against a URL.

        Args:
            url: Fully qualified http(s) URL

        Returns:
            Dictionary with "violations" and "passes" lists

        Raises:
            AccessibilityTestError: classified navigation, injection or engine failure
        """
        async with async_playwright() as p:
            self.browser = await p.chromium.launch(
                headless=self.headless,
                chromium_sandbox=False,
                executable_path=settings.chromium_path or None,
                args=self.BROWSER_ARGS
            )

            try:
                context = await self.browser.new_context(
                    viewport=self.VIEWPORT,
                    user_agent=self.USER_AGENT
                )
                page = await context.new_page()

                await self._navigate(page, url)

                # Wait for any client-side rendering to complete
                await page.wait_for_load_state("domcontentloaded")

                await self._inject_axe(page)
                results = await self._run_axe(page)

                logger.info(
                    "axe finished for %s: %d violations, %d passes",
                    url, len(results["violations"]), len(results["passes"])
                )
                return results

            finally:
                try:
                    await self.browser.close()
                except PlaywrightError as e:
                    logger.warning("Failed to close browser: %s", e)

    async def _navigate(self, page: Page, url: str) -> None:
        """Load the page, classifying failures."""
        try:
            response = await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.timeout_ms
            )
        except PlaywrightTimeout:
            raise AccessibilityTestError(
                "The page took too long to load. Please try again or check if the URL is correct.",
                ErrorCode.TIMEOUT_ERROR
            )
        except PlaywrightError as e:
            raise AccessibilityTestError(
                "Failed to load the webpage. Please check if the URL is accessible.",
                ErrorCode.NAVIGATION_ERROR,
                e.message
            )

        if response is not None and response.status == 429:
            raise AccessibilityTestError(
                "The website is rate limiting requests. Please try again later.",
                ErrorCode.RATE_LIMIT,
                f"HTTP {response.status} from {url}"
            )

    async def _inject_axe(self, page: Page) -> None:
        """Add axe-core to the page and wait until it is defined."""
        try:
            if self.axe_script_path and Path(self.axe_script_path).exists():
                await page.add_script_tag(path=self.axe_script_path)
            else:
                await page.add_script_tag(url=self.axe_source_url)
            await page.wait_for_function(
                "typeof window.axe !== 'undefined'",
                timeout=self.INJECTION_TIMEOUT_MS
            )
        except PlaywrightError as e:
            raise AccessibilityTestError(
                "Failed to inject testing tools into the page.",
                ErrorCode.INJECTION_ERROR,
                e.message
            )

    async def _run_axe(self, page: Page) -> Dict[str, Any]:
        try:
            results = await page.evaluate(AXE_RUN_SCRIPT, AXE_OPTIONS)
        except PlaywrightError as e:
            raise AccessibilityTestError(
                "Failed to run accessibility tests.",
                ErrorCode.TEST_ERROR,
                e.message
            )

        return {
            "violations": results.get("violations", []),
            "passes": results.get("passes", [])
        }
