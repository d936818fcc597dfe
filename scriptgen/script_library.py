"""
ScriptLibrary: flat-file storage for generated scripts.

Each script is a `.txt` file named `<YYYY-MM-DD>-<slug>.txt` that starts with
a small metadata header:

    Generated on: 2024-05-01T12:00:00+00:00
    Title: Every Fighter Jet Generation
    Word count: 1312

    <script body>
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .errors import PersistenceError
from .models import ScriptRecord
from .validator import count_words

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".txt"
GENERATED_LABEL = "Generated on:"
TITLE_LABEL = "Title:"
WORD_COUNT_LABEL = "Word count:"
HEADER_LINES = 3
LIST_WORKERS = 8


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def slugify_title(title: str) -> str:
    """Return the filesystem-safe slug for `title` (only `[a-z0-9-]`)."""

    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug or "untitled"


def artifact_filename(title: str, on_date: date) -> str:
    return f"{on_date.isoformat()}-{slugify_title(title)}{ARTIFACT_SUFFIX}"


def header_title(title: str) -> str:
    """Collapse all whitespace runs, line breaks included, so the title fits on one header line."""

    return " ".join(title.split())


@dataclass(slots=True)
class _Header:
    generated_at: Optional[datetime] = None
    title: Optional[str] = None
    word_count: Optional[int] = None


def _parse_header(text: str) -> Tuple[_Header, str]:
    """Split an artifact into its header fields and body, tolerating damage."""

    header = _Header()
    lines = text.split("\n")
    consumed = 0
    for line in lines[:HEADER_LINES]:
        stripped = line.strip()
        if stripped.startswith(GENERATED_LABEL):
            value = stripped[len(GENERATED_LABEL):].strip()
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                logger.warning("Unparsable timestamp in header: %r", value)
            else:
                header.generated_at = parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        elif stripped.startswith(TITLE_LABEL):
            value = stripped[len(TITLE_LABEL):].strip()
            header.title = value or None
        elif stripped.startswith(WORD_COUNT_LABEL):
            value = stripped[len(WORD_COUNT_LABEL):].strip()
            try:
                header.word_count = int(value)
            except ValueError:
                logger.warning("Unparsable word count in header: %r", value)
        else:
            break
        consumed += 1

    if consumed == 0:
        return header, text
    body_lines = lines[consumed:]
    if body_lines and not body_lines[0].strip():
        body_lines = body_lines[1:]
    return header, "\n".join(body_lines)


def _title_from_filename(filename: str) -> str:
    return filename[: -len(ARTIFACT_SUFFIX)] if filename.endswith(ARTIFACT_SUFFIX) else filename


class ScriptLibrary:
    """Reads and writes script artifacts inside one directory."""

    def __init__(self, root: Path | str, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._root = Path(root)
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def for_directory(self, root: Optional[Path | str]) -> "ScriptLibrary":
        """Return a library rooted at `root`, sharing this library's clock."""

        if root is None or Path(root) == self._root:
            return self
        return ScriptLibrary(root, clock=self._clock)

    # ------------------------------------------------------------------
    # Write / read / delete
    # ------------------------------------------------------------------
    def save(self, title: str, content: str) -> Path:
        if not title or not title.strip():
            raise ValueError("Title must be a non-empty string.")

        now = self._clock()
        file_path = self._root / artifact_filename(title, now.date())
        header = (
            f"{GENERATED_LABEL} {now.isoformat()}\n"
            f"{TITLE_LABEL} {header_title(title)}\n"
            f"{WORD_COUNT_LABEL} {count_words(content)}\n\n"
        )
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            file_path.write_text(header + content, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write script file {file_path}: {exc}") from exc
        logger.info("Script saved to: %s", file_path)
        return file_path

    def read(self, filename: str) -> str:
        """Return the full text of an artifact, header included."""

        file_path = self._resolve(filename)
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Failed to read script file: {file_path}") from exc

    def load(self, filename: str) -> Tuple[ScriptRecord, str]:
        """Return the parsed metadata and the body of an artifact."""

        file_path = self._resolve(filename)
        if not file_path.is_file():
            raise PersistenceError(f"Script not found: {filename}")
        return self._load_record(file_path)

    def delete(self, filename: str) -> bool:
        file_path = self._resolve(filename)
        try:
            file_path.unlink()
        except FileNotFoundError:
            logger.warning("Cannot delete %s: no such script.", file_path)
            return False
        except OSError as exc:
            raise PersistenceError(f"Failed to delete script file {file_path}: {exc}") from exc
        logger.info("Deleted script %s", file_path)
        return True

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def list(self) -> List[ScriptRecord]:
        """Return metadata for every artifact, newest first."""

        if not self._root.is_dir():
            return []
        paths = sorted(path for path in self._root.glob(f"*{ARTIFACT_SUFFIX}") if path.is_file())
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=min(LIST_WORKERS, len(paths))) as pool:
            records = list(pool.map(self._safe_record, paths))
        records.sort(key=lambda record: record.filename, reverse=True)
        records.sort(key=lambda record: record.generated_at, reverse=True)
        return records

    def most_recent(self, title: Optional[str] = None) -> Optional[Tuple[ScriptRecord, str]]:
        """Return the newest artifact, preferring one whose title matches `title`."""

        records = self.list()
        if not records:
            return None
        chosen = records[0]
        if title:
            wanted = header_title(title).lower()
            chosen = next((record for record in records if record.title.lower() == wanted), chosen)
        try:
            return self._load_record(chosen.file_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unable to read %s: %s", chosen.file_path, exc)
            return None

    def _safe_record(self, file_path: Path) -> ScriptRecord:
        try:
            record, _ = self._load_record(file_path)
            return record
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unable to read %s: %s", file_path, exc)
            return ScriptRecord(
                filename=file_path.name,
                file_path=file_path,
                title=_title_from_filename(file_path.name),
                generated_at=self._modified_at(file_path),
                word_count=0,
            )

    def _load_record(self, file_path: Path) -> Tuple[ScriptRecord, str]:
        text = file_path.read_text(encoding="utf-8")
        header, body = _parse_header(text)
        record = ScriptRecord(
            filename=file_path.name,
            file_path=file_path,
            title=header.title or _title_from_filename(file_path.name),
            generated_at=header.generated_at or self._modified_at(file_path),
            word_count=header.word_count if header.word_count is not None else count_words(body),
        )
        return record, body

    @staticmethod
    def _modified_at(file_path: Path) -> datetime:
        try:
            return datetime.fromtimestamp(file_path.stat().st_mtime, tz=timezone.utc)
        except OSError:
            return datetime.fromtimestamp(0, tz=timezone.utc)

    def _resolve(self, filename: str) -> Path:
        if not filename or filename in {".", ".."} or any(char in filename for char in ("/", "\\", "\x00")):
            raise PersistenceError(f"Invalid script filename: {filename!r}")
        return self._root / filename
