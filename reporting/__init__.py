"""
Reporting for comparable searches.

Provides a plain-text renderer for ComparisonResult and the command-line
entry point (python -m reporting.cli).
"""

from .report import render_text_report

__all__ = ["render_text_report"]
