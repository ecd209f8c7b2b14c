"""Shared type definitions."""

from collections.abc import Awaitable, Callable

from wikibundle.domain.models import ExportJob

# Progress hook for download operations (downloaded bytes, total bytes)
DownloadProgressHook = Callable[[int, int | None], None]

# Progress hook for extraction operations (filename, current count, total count)
ExtractionProgressHook = Callable[[str, int, int], None]

# Called after every status check with the updated job
PollProgressHook = Callable[[ExportJob], None]

# Injectable sleep used between status checks
SleepFunc = Callable[[float], Awaitable[None]]
