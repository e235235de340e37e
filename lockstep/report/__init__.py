"""Report rendering — turns a ``ReconciliationReport`` into terminal output."""

from lockstep.report.renderer import ReportRenderer, format_action

__all__ = ["ReportRenderer", "format_action"]
