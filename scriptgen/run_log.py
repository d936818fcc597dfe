"""JSON trace of a single generation run, written when a log directory is configured."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


class RunLog:
    """Collects pipeline steps in memory and dumps them to disk at the end of a run."""

    def __init__(self, log_dir: Optional[Path], *, title: str) -> None:
        self._log_dir = log_dir
        self._path: Optional[Path] = None
        self._entries: Dict[str, Any] = {}
        if log_dir is None:
            return
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Unable to create log directory %s: %s", log_dir, exc)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self._path = log_dir / f"scriptgen_{timestamp}_{uuid4().hex[:8]}.json"
        self._entries = {"timestamp": timestamp, "title": title, "steps": []}

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def steps(self) -> List[Dict[str, Any]]:
        return list(self._entries.get("steps", []))

    def record(self, step: str, context: Dict[str, Any]) -> None:
        if not self._entries:
            return
        entry = {
            "step": step,
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "context": _make_serializable(context),
        }
        self._entries["steps"].append(entry)

    def finalize(self, *, result: Optional[Dict[str, Any]] = None, error: Optional[str] = None) -> None:
        if not self._entries or not self._path:
            return
        if result is not None:
            self._entries["result"] = _make_serializable(result)
        if error:
            self._entries["error"] = error
        try:
            serialized = json.dumps(self._entries, indent=2, ensure_ascii=False)
            self._path.write_text(serialized, encoding="utf-8")
            logger.info("Wrote run log to %s", self._path)
        except OSError as exc:
            logger.warning("Failed to write run log %s: %s", self._path, exc)
        finally:
            self._entries = {}


def _make_serializable(data: Any) -> Any:
    try:
        json.dumps(data)
        return data
    except TypeError:
        if isinstance(data, dict):
            return {str(key): _make_serializable(value) for key, value in data.items()}
        if isinstance(data, (list, set, tuple)):
            return [_make_serializable(item) for item in data]
        if isinstance(data, (Path, datetime)):
            return str(data)
        return repr(data)
