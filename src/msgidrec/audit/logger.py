"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from msgidrec.audit.helpers import generate_run_id
from msgidrec.audit.models import LOG_LEVELS, LogEvent
from msgidrec.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    min_level : str
        Events below this level are dropped.
    """

    def __init__(
        self,
        log_path: Path,
        run_id: str | None = None,
        min_level: str = "DEBUG",
    ) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        log_path : Path
            Path to JSONL log file.
        run_id : str | None, optional
            Run identifier, generated if omitted.
        min_level : str, optional
            Lowest level written, by default "DEBUG".
        """
        if min_level not in LOG_LEVELS:
            raise ValueError(f"min_level must be one of {LOG_LEVELS}, got {min_level!r}")

        self.run_id = run_id or generate_run_id()
        self.log_path = Path(log_path)
        self.current_stage: str | None = None
        self.min_level = min_level

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        owner: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "scan_started").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        owner : str | None, optional
            Owner label if event is owner-specific.
        """
        if LOG_LEVELS.index(level) < LOG_LEVELS.index(self.min_level):
            return

        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
            owner=owner,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        event_dict = asdict(event)
        json.dump(event_dict, self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def scan_started(self, stage: str, parameters: dict[str, Any]) -> None:
        """Log scan_started event and enter the stage.

        Parameters
        ----------
        stage : str
            Stage identifier ("scan" or "pairing").
        parameters : dict[str, Any]
            Scan parameters.
        """
        self.set_stage(stage)
        self.event("scan_started", data={"parameters": parameters}, stage=stage)

    def declarations_collected(self, counters: dict[str, int]) -> None:
        """Log declarations_collected event with aggregation counters."""
        self.event("declarations_collected", data={"counters": counters})

    def duplicate_found(self, id_display: str, owners: list[str]) -> None:
        """Log duplicate_found event (DEBUG).

        Parameters
        ----------
        id_display : str
            Duplicate ID as "0x" hex.
        owners : list[str]
            Owner labels declaring the ID so far.
        """
        self.event(
            "duplicate_found",
            data={"id": id_display, "owners": owners},
            level="DEBUG",
            owner=owners[-1] if owners else None,
        )

    def scan_finished(
        self,
        status: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log scan_finished event and leave the stage.

        Parameters
        ----------
        status : str
            Scan status ("success" or "failed").
        duration_seconds : float
            Scan execution time in seconds.
        counters : dict[str, int] | None, optional
            Result counters.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if counters:
            data["counters"] = counters

        self.event("scan_finished", data=data, level="INFO" if status == "success" else "ERROR")
        self.set_stage(None)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        owner: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        owner : str | None, optional
            Owner label if error is owner-specific.
        """
        data: dict[str, Any] = {
            "exception_class": exception_class,
            "message": message,
        }
        self.event("error", data=data, stage=stage, level="ERROR", owner=owner)
