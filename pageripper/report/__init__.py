"""pageripper.report: JSON and HTML report writers used by the CLI."""

from pageripper.report.html_report import render_html
from pageripper.report.json_report import render_json

__all__ = ["render_json", "render_html"]
