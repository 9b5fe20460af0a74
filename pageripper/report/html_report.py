# File: pageripper/report/html_report.py
"""pageripper.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from pageripper.models import RipReport

TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: RipReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
    *,
    target: str = "",
) -> Path:
    """Render the HTML report and save it at *output_path*.

    Args:
        report: RipReport to render.
        output_path: path of the resulting HTML file.
        template_dir: directory holding ``report.html.j2``; the bundled
            template is used when omitted.
        target: ripped URL shown in the page title.

    Returns:
        Path of the saved HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    loader: BaseLoader
    if template_dir is None:
        loader = PackageLoader("pageripper", "templates")
    else:
        loader = FileSystemLoader(str(template_dir))
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "target": target,
        "links": report.links,
        "hostnames": sorted(report.hostnames.items(), key=lambda kv: (-kv[1], kv[0])),
        "ripcount": report.ripcount,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
