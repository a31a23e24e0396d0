from focus_crawler.parser.html_parser import ParsedPage, parse_html

__all__ = ["ParsedPage", "parse_html"]
