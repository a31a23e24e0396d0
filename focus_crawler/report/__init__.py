# File: focus_crawler/report/__init__.py
"""focus_crawler.report: приёмники результатов обхода (JSON и HTML)."""

from focus_crawler.report.html_report import render_html
from focus_crawler.report.json_report import default_output_name, render_json

__all__ = ["render_json", "render_html", "default_output_name"]
