"""
Pipeline event logging utilities for QUILL (Tier 2 logging).

Appends one JSON object per line to the file named by PIPELINE_EVENTS_FILE so
render outcomes can be streamed and filtered across runs. When the variable is
unset, event logging is switched off.

For detailed within-context logging (Tier 1), use quill.utils.logger instead.

Usage:
    from quill.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="render_completed",
        source="rendering",
        stage="local",
        page_count=2,
    )
"""

import json
import os
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

from quill.utils.timestamp import now_exact

load_dotenv()

_events_file = os.getenv("PIPELINE_EVENTS_FILE")
PIPELINE_EVENTS_FILE: Optional[Path] = Path(_events_file) if _events_file else None


def log_pipeline_event(
    event_type: str,
    source: str,
    events_file: Optional[Union[str, Path]] = None,
    **extra_fields,
) -> Optional[Path]:
    """
    Log an event to the pipeline event log.

    Args:
        event_type: Type of event (e.g., "render_completed", "render_fallback")
        source: Event source (e.g., "rendering", "generation", "cli")
        events_file: Override for PIPELINE_EVENTS_FILE
        **extra_fields: Additional event-specific fields (must be JSON-serializable)

    Returns:
        Path written to, or None when event logging is not configured

    Raises:
        OSError: If the event file cannot be written
    """
    target = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    if target is None:
        return None

    target.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(target, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")

    return target


def get_recent_events(
    n: int = 10,
    event_type: Optional[str] = None,
    events_file: Optional[Union[str, Path]] = None,
) -> List[dict]:
    """
    Get the last n events from the pipeline log, optionally filtered by type.

    Args:
        n: Number of recent events to return (default: 10)
        event_type: Filter to only events of this type (optional)
        events_file: Override for PIPELINE_EVENTS_FILE

    Returns:
        List of event dicts (most recent last); empty when no log exists

    Example:
        # Last 5 fallbacks
        events = get_recent_events(5, event_type="render_fallback")
    """
    target = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    if target is None or not target.exists():
        return []

    events = []
    with open(target, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
