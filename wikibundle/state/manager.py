"""Persistence of the last run report."""

import logging
from pathlib import Path

import orjson
from atomicwrites import atomic_write
from pydantic import ValidationError

from wikibundle.domain.models import RunReport

logger = logging.getLogger(__name__)


class RunReportManager:
    """Context manager holding the report of the most recent run.

    Loads the previous report on enter and writes the current one atomically on
    a clean exit.

    Example:
        with RunReportManager("data/last_run.json") as manager:
            manager.data = orchestrator.run()

    Pass load=False when the previous report is only going to be replaced.
    """

    def __init__(self, path: str | Path, load: bool = True):
        """Initialize the manager.

        Args:
            path: Path to the report JSON file
            load: If False, start from an empty report and only write on exit
        """
        self.path = Path(path)
        self.load = load
        self.data: RunReport = RunReport()

    def __enter__(self) -> "RunReportManager":
        """Enter context manager, loading an existing report if available."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.load and self.path.exists():
            try:
                self.data = RunReport.model_validate(orjson.loads(self.path.read_bytes()))
            except (orjson.JSONDecodeError, ValidationError) as e:
                logger.error(f"Failed to parse report file {self.path}: {e}")
                raise
            except OSError as e:
                logger.error(f"Failed to read report file {self.path}: {e}")
                raise
        elif self.load:
            logger.debug(f"No existing report file at {self.path}, starting fresh")

        return self

    def __exit__(self, exc_type, _exc_value, _traceback) -> bool:
        """Exit context manager, saving the report if no exceptions occurred.

        Returns:
            False to propagate any exceptions
        """
        if exc_type is None:
            try:
                payload = orjson.dumps(
                    self.data.model_dump(mode="json"),
                    option=orjson.OPT_INDENT_2,
                )
                with atomic_write(self.path, mode="wb", overwrite=True) as f:
                    f.write(payload)
                    f.write(b"\n")
            except OSError as e:
                logger.error(f"Failed to write report file {self.path}: {e}")
                raise

        return False
