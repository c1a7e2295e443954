"""crawlscope.report: вывод итогов обхода, используемый CLI и тестами."""

from crawlscope.report.json_report import render_json

__all__ = ["render_json"]
