"""Orchestration layer.

This module contains the high-level workflow orchestrator that coordinates
exporting, staging and processing.
"""

from wikibundle.orchestrators.site_export import SiteExport

__all__ = [
    "SiteExport",
]
