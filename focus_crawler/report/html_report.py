# File: focus_crawler/report/html_report.py
"""focus_crawler.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from focus_crawler.aggregator import CrawlResult, summary

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    result: CrawlResult,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        result: финальный CrawlResult.
        template_dir: директория с шаблоном ``report.html.j2``
            (None: встроенный шаблон пакета).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "pages": result.to_records(),
        "failures": result.failures,
        "summary": summary(result),
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
