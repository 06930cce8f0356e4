"""Check report assembly."""

from reqsnap_engine.report.check_report import build_check_report

__all__ = ["build_check_report"]
