"""
Accessibility Tester - tests web pages against WCAG with axe-core,
scores the results and exports PDF reports.
"""
__version__ = "1.0.0"
