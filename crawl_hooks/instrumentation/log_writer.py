"""
crawl_hooks/instrumentation/log_writer.py

JSONL persistence for the instrumentation hub's logs.
Used by host collectors to hand the logs over to the crawler process.
"""

import json
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from crawl_hooks.data_models.records import EventListenerRecord, NavigationEvent, RecordModel
from crawl_hooks.instrumentation.hub import InstrumentationHub
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)


class LogFileWriter:
    """
    Writes the navigation and event listener logs to JSONL files.

    Usage:
        writer = LogFileWriter(paths={
            "navigated_links_path": "./captures/navigation/events.jsonl",
            "event_listeners_path": "./captures/listeners/events.jsonl",
        })
        hub.install(page.environment)
        ...
        writer.write_hub(hub)
    """

    def __init__(self, paths: dict[str, str]) -> None:
        """
        Initialize LogFileWriter.

        Args:
            paths: Dict with file paths. Expected keys:
                - 'navigated_links_path': Path for navigation events JSONL
                - 'event_listeners_path': Path for event listener records JSONL
                Additional keys are preserved.
        """
        self.paths = paths

        self.navigated_links_path = Path(
            paths.get("navigated_links_path", "./navigation/events.jsonl")
        )
        self.event_listeners_path = Path(
            paths.get("event_listeners_path", "./listeners/events.jsonl")
        )

        # Ensure parent directories exist
        self.navigated_links_path.parent.mkdir(parents=True, exist_ok=True)
        self.event_listeners_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("LogFileWriter initialized")
        logger.debug("   Navigation events: %s", self.navigated_links_path)
        logger.debug("   Event listeners: %s", self.event_listeners_path)

    @staticmethod
    def _write_records(output_path: Path, records: Iterable[RecordModel]) -> int:
        written = 0
        try:
            with open(output_path, mode="a", encoding="utf-8") as f:
                for record in records:
                    f.write(record.model_dump_json(by_alias=True) + "\n")
                    written += 1
        except (OSError, ValueError) as e:
            logger.error("❌ Failed to write records to %s: %s", output_path, e)
        return written

    def write_navigated_links(self, events: Iterable[NavigationEvent]) -> int:
        """Append navigation events; returns the number written."""
        return self._write_records(self.navigated_links_path, events)

    def write_event_listeners(self, records: Iterable[EventListenerRecord]) -> int:
        """Append event listener records; returns the number written."""
        return self._write_records(self.event_listeners_path, records)

    def write_hub(self, hub: InstrumentationHub) -> dict[str, int]:
        """Append both logs of `hub`."""
        counts = {
            "navigated_links": self.write_navigated_links(hub.navigated_links),
            "event_listeners": self.write_event_listeners(hub.event_listeners),
        }
        logger.info(
            "Wrote %d navigation events to %s and %d event listeners to %s",
            counts["navigated_links"], self.navigated_links_path,
            counts["event_listeners"], self.event_listeners_path,
        )
        return counts

    @classmethod
    def create_from_output_dir(cls, output_dir: str | Path) -> "LogFileWriter":
        """
        Factory method to create LogFileWriter from an output directory.

        Creates standard subdirectory structure:
            output_dir/
            ├── navigation/
            │   └── events.jsonl
            └── listeners/
                └── events.jsonl

        Args:
            output_dir: Base output directory path.

        Returns:
            Configured LogFileWriter instance.
        """
        output_dir = Path(output_dir)
        paths = {
            "output_dir": str(output_dir),
            "navigation_dir": str(output_dir / "navigation"),
            "listeners_dir": str(output_dir / "listeners"),
            "navigated_links_path": str(output_dir / "navigation" / "events.jsonl"),
            "event_listeners_path": str(output_dir / "listeners" / "events.jsonl"),
        }
        return cls(paths=paths)


def _read_records(path: str | Path, model: type[RecordModel]) -> list:
    path = Path(path)
    if not path.exists():
        return []

    records = []
    with open(path, mode="r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(model.model_validate(json.loads(line)))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping malformed line %d of %s: %s", line_number, path, e)
    return records


def read_navigation_events(path: str | Path) -> list[NavigationEvent]:
    """Load navigation events from a JSONL file; missing files yield []."""
    return _read_records(path, NavigationEvent)


def read_event_listeners(path: str | Path) -> list[EventListenerRecord]:
    """Load event listener records from a JSONL file; missing files yield []."""
    return _read_records(path, EventListenerRecord)
