# File: pageripper/report/json_report.py
"""
JSON report writer for PageRipper.

Serializes a RipReport into a file.
"""
from __future__ import annotations

import json
from pathlib import Path

from pageripper.models import RipReport


def render_json(report: RipReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: RipReport returned by a rip
    :param output_path: path of the JSON file
    :param pretty: indent the output by 2 spaces
    :return: Path of the saved file

    Example:
    ```python
    from pageripper.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
