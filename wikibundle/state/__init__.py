"""Run report persistence."""

from wikibundle.state.manager import RunReportManager

__all__ = ["RunReportManager"]
