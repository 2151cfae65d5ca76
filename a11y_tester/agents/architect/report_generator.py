"""
Report Generator - The Architect Agent

This module turns a stored test run into a downloadable PDF containing:
1. The tested URL and the standards checked
2. Score, grade and explanation
3. Quick summary and score guidance
4. Every violation with affected markup and AI suggestions

The HTML is rendered with Jinja2 and printed to PDF by headless Chromium.

Author: Accessibility Tester
"""
import logging
from typing import Optional
from jinja2 import Template
from playwright.async_api import async_playwright

from ...config import settings
from ...models import TestRunResult

logger = logging.getLogger(__name__)


TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>Accessibility Report</title>
<style>
  body { font-family: Arial, sans-serif; line-height: 1.6; color: #1a1a1a; margin: 40px; }
  .header { text-align: center; margin-bottom: 30px; }
  .tested-url { margin: 20px auto; padding: 15px; background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 8px; max-width: 600px; }
  .tested-url h2 { margin: 0 0 10px 0; font-size: 18px; color: #1e293b; }
  .tested-url a { color: #2563eb; word-break: break-all; }
  .standards-section { background: #f8fafc; padding: 20px; border-radius: 8px; margin-bottom: 30px; }
  .score-section { text-align: center; margin: 30px 0; padding: 20px; background: #f0f9ff; border-radius: 8px; }
  .score { font-size: 48px; font-weight: bold; color: #2563eb; }
  .grade { display: inline-block; padding: 5px 20px; border-radius: 4px; color: white; font-weight: bold; }
  .grade-a-plus, .grade-a { background-color: #22c55e; }
  .grade-b { background-color: #84cc16; }
  .grade-c { background-color: #eab308; }
  .grade-d { background-color: #f97316; }
  .grade-f { background-color: #ef4444; }
  .explanation { white-space: pre-line; }
  .summary-box { background: #ffffff; border: 1px solid #e5e7eb; padding: 20px; border-radius: 8px; margin: 20px 0; }
  .violation { margin: 20px 0; padding: 20px; background: white; border: 1px solid #e5e7eb; border-radius: 8px; page-break-inside: avoid; }
  .violation-header { background: #f3f4f6; padding: 10px; margin: -20px -20px 20px -20px; border-radius: 8px 8px 0 0; }
  .impact-badge { display: inline-block; padding: 4px 8px; border-radius: 4px; color: white; font-size: 0.875rem; }
  .impact-critical { background-color: #dc2626; }
  .impact-serious { background-color: #ea580c; }
  .impact-moderate { background-color: #d97706; }
  .impact-minor { background-color: #65a30d; }
  .code-block { background: #f8fafc; padding: 10px; border-radius: 4px; font-family: monospace; font-size: 0.875rem; white-space: pre-wrap; word-break: break-all; }
  .suggestions { background: #f0f9ff; padding: 15px; border-radius: 4px; margin-top: 15px; white-space: pre-wrap; }
  @page { margin: 40px; }
</style>
</head>
<body>
<div class="header">
  <h1>Accessibility Test Results</h1>
  <div class="tested-url">
    <h2>Website Tested</h2>
    <a href="{{ result.url }}">{{ result.url }}</a>
  </div>
</div>

<div class="standards-section">
  <h2>Standards Checked</h2>
  <ul>
  {% for standard in standards %}<li>{{ standard }}</li>{% endfor %}
  </ul>
  <h3>Key Areas Evaluated</h3>
  <ul>
  {% for area in key_areas %}<li>{{ area }}</li>{% endfor %}
  </ul>
</div>

<div class="score-section">
  <h2>Accessibility Score</h2>
  <div class="score">{{ score.score }}/100</div>
  <div class="grade grade-{{ grade_class }}">{{ score.grade }}</div>
  <p class="explanation">{{ score.explanation }}</p>
</div>

<div class="summary-box">
  <h2>Quick Summary</h2>
  <p>URL Tested: {{ result.url }}</p>
  <p>Test Date: {{ tested_at }}</p>
  <p>Total Issues Found: {{ result.violations|length }}</p>
  <p>Passing Tests: {{ result.passes|length }}</p>
  {% if score.improvements %}
  <h3>Improvements</h3>
  <ul>{% for item in score.improvements %}<li>{{ item }}</li>{% endfor %}</ul>
  {% endif %}
  {% if score.positives %}
  <h3>Positives</h3>
  <ul>{% for item in score.positives %}<li>{{ item }}</li>{% endfor %}</ul>
  {% endif %}
  <h3>Recommendations</h3>
  <ul>{% for item in score.recommendations %}<li>{{ item }}</li>{% endfor %}</ul>
</div>

{% if result.violations %}
<h2>Detailed Violations</h2>
{% for violation in result.violations %}
<div class="violation">
  <div class="violation-header">
    <span class="impact-badge impact-{{ violation.impact.value }}">{{ violation.impact.value }}</span>
    <strong>{{ violation.help }}</strong>
  </div>
  <p>{{ violation.description }}</p>
  {% if violation.help_url %}<p><a href="{{ violation.help_url }}">WCAG Reference</a></p>{% endif %}
  {% if violation.affected_nodes %}
  <h4>Affected Elements:</h4>
  <div class="code-block">{% for node in violation.affected_nodes %}<p>{{ node }}</p>{% endfor %}</div>
  {% endif %}
  {% if violation.ai_suggestion %}
  <div class="suggestions">
    <h4>AI Suggestions:</h4>
    {{ violation.ai_suggestion }}
  </div>
  {% endif %}
</div>
{% endfor %}
{% endif %}
</body>
</html>
"""

STANDARDS = [
    "WCAG 2.0 Level A",
    "WCAG 2.0 Level AA",
    "WCAG 2.1 Level A",
    "WCAG 2.1 Level AA",
]

KEY_AREAS = [
    "Color Contrast and Visual Presentation",
    "Document Structure and Navigation",
    "Image and Media Accessibility",
    "Form Controls and Labels",
    "Keyboard Navigation and Focus",
    "Language and Text Content",
    "Dynamic Content and ARIA",
    "Mobile and Responsive Accessibility",
]


class ReportGenerator:
    """
    Renders TestRunResult records as PDF documents.
    """

    PDF_OPTIONS = {
        "format": "A4",
        "margin": {"top": "40px", "right": "40px", "bottom": "40px", "left": "40px"},
        "print_background": True,
        "prefer_css_page_size": True
    }

    def __init__(self, headless: bool = True):
        self.headless = headless
        self.template = Template(TEMPLATE, autoescape=True)

    def build_html(self, result: TestRunResult) -> str:
        """
        Render the report HTML.

        Args:
            result: Stored test run

        Returns:
            Complete HTML document
        """
        score = result.score_result
        return self.template.render(
            result=result,
            score=score,
            grade_class=self._grade_class(score.grade),
            tested_at=result.timestamp.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
            standards=STANDARDS,
            key_areas=KEY_AREAS
        )

    async def render(self, result: TestRunResult) -> bytes:
        """
        Print the report to PDF.

        Returns:
            PDF document bytes
        """
        html = self.build_html(result)

        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=self.headless,
                chromium_sandbox=False,
                executable_path=settings.chromium_path or None,
                args=["--no-sandbox", "--disable-dev-shm-usage"]
            )
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="load")
                pdf = await page.pdf(**self.PDF_OPTIONS)
            finally:
                await browser.close()

        logger.info("Rendered PDF for %s (%d bytes)", result.url, len(pdf))
        return pdf

    @staticmethod
    def _grade_class(grade: Optional[str]) -> str:
        """CSS class suffix for a grade, e.g. A+ -> a-plus."""
        if not grade:
            return "f"
        return grade.lower().replace("+", "-plus")
