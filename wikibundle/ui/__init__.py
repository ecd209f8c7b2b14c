"""UI."""

from wikibundle.ui.reporter import Reporter

__all__ = ["Reporter"]
