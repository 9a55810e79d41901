from __future__ import annotations

import os
import sqlite3
import threading
from functools import lru_cache
from pathlib import PurePath
from typing import Protocol

from resume_analyzer.core.config import settings
from resume_analyzer.schemas import Analysis, ResumeRecord


class AnalysisStore(Protocol):
    def save_resume(self, record: ResumeRecord) -> str: ...

    def load_resume(self, resume_id: str) -> ResumeRecord | None: ...

    def persist(self, analysis: Analysis) -> str:
        """Store ``analysis`` and return its id.

        Works without a prior ``save_resume``; the resume is then registered with
        only the analysis file name and an empty text.
        """
        ...

    def load(self, analysis_id: str) -> Analysis | None: ...

    def load_for_resume(self, resume_id: str) -> Analysis | None: ...

    def list_recent(self, limit: int) -> list[tuple[ResumeRecord, Analysis]]: ...

    def delete(self, resume_id: str) -> bool: ...


class SqliteAnalysisStore:
    """Resumes and their analyses in SQLite. Analyses are stored as serialized snapshots."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.Lock()
        self._conn = self._connect()

    def _connect(self) -> sqlite3.Connection:
        if self._db_path != ":memory:":
            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute("PRAGMA foreign_keys=ON;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resumes (
                resume_id TEXT PRIMARY KEY,
                file_name TEXT NOT NULL,
                file_type TEXT NOT NULL,
                file_size INTEGER NOT NULL,
                extracted_text TEXT NOT NULL,
                uploaded_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analyses (
                analysis_id TEXT PRIMARY KEY,
                resume_id TEXT NOT NULL UNIQUE REFERENCES resumes (resume_id) ON DELETE CASCADE,
                overall_score REAL NOT NULL,
                payload_json TEXT NOT NULL,
                analyzed_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_resumes_uploaded_at
            ON resumes (uploaded_at);
            """
        )
        return conn

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def save_resume(self, record: ResumeRecord) -> str:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO resumes (
                    resume_id, file_name, file_type, file_size, extracted_text, uploaded_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.file_name,
                    record.file_type,
                    record.file_size,
                    record.extracted_text,
                    record.uploaded_at.isoformat(),
                ),
            )
        return record.id

    def load_resume(self, resume_id: str) -> ResumeRecord | None:
        with self._lock:
            row = self._conn.execute(
                """
                SELECT resume_id, file_name, file_type, file_size, extracted_text, uploaded_at
                FROM resumes WHERE resume_id = ?
                """,
                (resume_id,),
            ).fetchone()
        return self._resume_from_row(row) if row else None

    def persist(self, analysis: Analysis) -> str:
        """Store the analysis; a newer analysis of the same resume supersedes the old one."""
        with self._lock:
            self._conn.execute("BEGIN")
            try:
                self._conn.execute(
                    """
                    INSERT OR IGNORE INTO resumes (
                        resume_id, file_name, file_type, file_size, extracted_text, uploaded_at
                    ) VALUES (?, ?, ?, 0, '', ?)
                    """,
                    (
                        analysis.resume_id,
                        analysis.file_name,
                        PurePath(analysis.file_name).suffix.lstrip(".").lower(),
                        analysis.analyzed_at.isoformat(),
                    ),
                )
                self._conn.execute("DELETE FROM analyses WHERE resume_id = ?", (analysis.resume_id,))
                self._conn.execute(
                    """
                    INSERT INTO analyses (analysis_id, resume_id, overall_score, payload_json, analyzed_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        analysis.id,
                        analysis.resume_id,
                        analysis.overall_score,
                        analysis.model_dump_json(),
                        analysis.analyzed_at.isoformat(),
                    ),
                )
            except sqlite3.Error:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")
        return analysis.id

    def load(self, analysis_id: str) -> Analysis | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT payload_json FROM analyses WHERE analysis_id = ?",
                (analysis_id,),
            ).fetchone()
        return Analysis.model_validate_json(row[0]) if row else None

    def load_for_resume(self, resume_id: str) -> Analysis | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT payload_json FROM analyses WHERE resume_id = ?",
                (resume_id,),
            ).fetchone()
        return Analysis.model_validate_json(row[0]) if row else None

    def list_recent(self, limit: int) -> list[tuple[ResumeRecord, Analysis]]:
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT r.resume_id, r.file_name, r.file_type, r.file_size, r.extracted_text,
                       r.uploaded_at, a.payload_json
                FROM resumes r
                JOIN analyses a ON a.resume_id = r.resume_id
                ORDER BY r.uploaded_at DESC
                LIMIT ?
                """,
                (max(0, int(limit)),),
            ).fetchall()
        return [(self._resume_from_row(row[:6]), Analysis.model_validate_json(row[6])) for row in rows]

    def delete(self, resume_id: str) -> bool:
        with self._lock:
            cur = self._conn.execute("DELETE FROM resumes WHERE resume_id = ?", (resume_id,))
        return cur.rowcount > 0

    @staticmethod
    def _resume_from_row(row: tuple) -> ResumeRecord:
        return ResumeRecord(
            id=row[0],
            file_name=row[1],
            file_type=row[2],
            file_size=row[3],
            extracted_text=row[4],
            uploaded_at=row[5],
        )


@lru_cache(maxsize=1)
def get_default_store() -> SqliteAnalysisStore:
    return SqliteAnalysisStore(settings.analysis_db_path)
