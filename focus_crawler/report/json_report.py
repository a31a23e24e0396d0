# focus_crawler/report/json_report.py

"""
Генерация JSON-файла с результатами обхода FocusCrawler.
"""
import json
import re
from pathlib import Path

from focus_crawler.aggregator import CrawlResult

_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")


def default_output_name(base_domain: str) -> str:
    """
    Имя файла, детерминированно полученное из домена.

    >>> default_output_name("cam.ac.uk")
    'scraped_cam_ac_uk.json'
    """
    slug = _NON_ALNUM.sub("_", base_domain).strip("_") or "site"
    return f"scraped_{slug}.json"


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в JSON-массив объектов
    ``{url, title, headings, paragraphs, tables}``.

    :param result: финальный CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.to_records(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
