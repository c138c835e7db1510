"""SQLite storage for generated study guides."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from src.models.question import QuestionSection
from src.models.study_guide import StoredStudyGuide, StudyGuide

logger = logging.getLogger(__name__)


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS study_guides (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT NOT NULL,
                summary TEXT NOT NULL,
                sections_json TEXT NOT NULL,
                total_questions INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


class StudyGuideRepository:
    """Saves and loads study guides.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def save(self, guide: StudyGuide) -> StoredStudyGuide:
        """Insert a study guide and return it with its new id."""
        sections = [section.model_dump(mode="json") for section in guide.sections]

        conn = get_connection(self._db_path)
        try:
            cursor = conn.execute(
                """
                INSERT INTO study_guides
                    (filename, summary, sections_json, total_questions, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    guide.filename,
                    guide.summary,
                    json.dumps(sections, ensure_ascii=False),
                    guide.total_questions,
                    guide.created_at.isoformat(),
                ),
            )
            conn.commit()
            guide_id = cursor.lastrowid
        finally:
            conn.close()

        logger.info("Saved study guide %d for %s", guide_id, guide.filename)
        return StoredStudyGuide(id=guide_id, guide=guide)

    def get(self, guide_id: int) -> StoredStudyGuide | None:
        """Load a study guide by id, or None if it does not exist."""
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM study_guides WHERE id = ?", (guide_id,)
            ).fetchone()
        finally:
            conn.close()

        return self._from_row(row) if row else None

    def list_recent(self, limit: int = 10) -> list[StoredStudyGuide]:
        """Return the most recently saved study guides, newest first."""
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                "SELECT * FROM study_guides ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()
        finally:
            conn.close()

        return [self._from_row(row) for row in rows]

    def _from_row(self, row: sqlite3.Row) -> StoredStudyGuide:
        sections = [
            QuestionSection.model_validate(data) for data in json.loads(row["sections_json"])
        ]
        guide = StudyGuide(
            filename=row["filename"],
            summary=row["summary"],
            sections=sections,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
        return StoredStudyGuide(id=row["id"], guide=guide)
