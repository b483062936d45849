"""SQLite persistence for user progress, completions and achievements.

Every write runs inside ``transaction()``, which opens the database with
``BEGIN IMMEDIATE`` so concurrent writers queue on the file lock (bounded by
``timeout_seconds``) instead of interleaving read-then-write cycles.
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import structlog

from vibe_progression.errors import ConsistencyError, StorageError, TransientStorageError
from vibe_progression.models.progress import CompletionRecord, CompletionStatus, UserProgress

logger = structlog.get_logger()

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        xp INTEGER NOT NULL DEFAULT 0 CHECK (xp >= 0),
        level INTEGER NOT NULL DEFAULT 1,
        current_streak INTEGER NOT NULL DEFAULT 0,
        last_active_at TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS challenge_progress (
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        challenge_id TEXT NOT NULL,
        status TEXT NOT NULL,
        best_score INTEGER,
        xp_awarded INTEGER NOT NULL DEFAULT 0,
        completed_at TEXT NOT NULL,
        submitted_at TEXT NOT NULL,
        PRIMARY KEY (user_id, challenge_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_achievements (
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        achievement_id TEXT NOT NULL,
        xp_bonus INTEGER NOT NULL DEFAULT 0,
        unlocked_at TEXT NOT NULL,
        PRIMARY KEY (user_id, achievement_id)
    )
    """,
)

# sqlite3.OperationalError messages that mean "try again later".
_TRANSIENT_MARKERS = ("locked", "busy", "unable to open", "disk i/o")


def _is_transient(exc: sqlite3.OperationalError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class ProgressStore:
    """Transactional SQLite store.

    Args:
        db_path: SQLite database file.
        timeout_seconds: Longest wait for the write lock before the call
            fails with TransientStorageError.
    """

    def __init__(self, db_path: Path | str, timeout_seconds: float = 5.0):
        self.db_path = str(db_path)
        self.timeout_seconds = timeout_seconds
        self.init_schema()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(
            self.db_path,
            timeout=self.timeout_seconds,
            isolation_level=None,
            check_same_thread=False,
        )
        con.row_factory = sqlite3.Row
        con.execute("PRAGMA foreign_keys = ON")
        return con

    @contextmanager
    def transaction(self, write: bool = True) -> Iterator[sqlite3.Connection]:
        """Run a unit of work atomically: commit on success, roll back on any error."""
        try:
            con = self._connect()
        except sqlite3.OperationalError as exc:
            logger.warning("storage_unavailable", db_path=self.db_path, error=str(exc))
            raise TransientStorageError(f"storage unavailable: {exc}") from exc

        try:
            con.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            yield con
            con.execute("COMMIT")
        except sqlite3.OperationalError as exc:
            if con.in_transaction:
                con.execute("ROLLBACK")
            if _is_transient(exc):
                logger.warning("storage_busy", db_path=self.db_path, error=str(exc))
                raise TransientStorageError(f"storage busy: {exc}") from exc
            logger.error("storage_failed", db_path=self.db_path, error=str(exc))
            raise StorageError(f"storage failed: {exc}") from exc
        except BaseException:
            if con.in_transaction:
                con.execute("ROLLBACK")
            raise
        finally:
            con.close()

    def init_schema(self) -> None:
        with self.transaction() as con:
            for statement in SCHEMA:
                con.execute(statement)

    # Users

    def insert_user(self, con: sqlite3.Connection, user_id: str, now: datetime) -> bool:
        """Create a user row; False if it already existed."""
        cur = con.execute(
            """
            INSERT INTO users (id, xp, level, current_streak, created_at)
            VALUES (?, 0, 1, 0, ?)
            ON CONFLICT(id) DO NOTHING
            """,
            (user_id, now.isoformat()),
        )
        return cur.rowcount == 1

    def add_xp(self, con: sqlite3.Connection, user_id: str, delta: int) -> int:
        """Increment XP in place and return the new total."""
        cur = con.execute("UPDATE users SET xp = xp + ? WHERE id = ?", (delta, user_id))
        if cur.rowcount != 1:
            raise ConsistencyError(f"user {user_id} vanished during an XP update")
        return con.execute("SELECT xp FROM users WHERE id = ?", (user_id,)).fetchone()["xp"]

    def update_standing(
        self,
        con: sqlite3.Connection,
        user_id: str,
        level: int,
        streak: int,
        last_active_at: datetime,
    ) -> None:
        con.execute(
            """
            UPDATE users SET level = ?, current_streak = ?, last_active_at = ?
            WHERE id = ?
            """,
            (level, streak, last_active_at.isoformat(), user_id),
        )

    def set_level(self, con: sqlite3.Connection, user_id: str, level: int) -> None:
        con.execute("UPDATE users SET level = ? WHERE id = ?", (level, user_id))

    def read_progress(self, con: sqlite3.Connection, user_id: str) -> UserProgress | None:
        row = con.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        completed = con.execute(
            "SELECT challenge_id FROM challenge_progress WHERE user_id = ?", (user_id,)
        ).fetchall()
        unlocked = con.execute(
            "SELECT achievement_id FROM user_achievements WHERE user_id = ?", (user_id,)
        ).fetchall()
        return UserProgress(
            user_id=row["id"],
            xp=row["xp"],
            level=row["level"],
            completed_challenge_ids={r["challenge_id"] for r in completed},
            unlocked_achievement_ids={r["achievement_id"] for r in unlocked},
            current_streak_days=row["current_streak"],
            last_active_at=_parse_ts(row["last_active_at"]),
        )

    def load_progress(self, user_id: str) -> UserProgress | None:
        with self.transaction(write=False) as con:
            return self.read_progress(con, user_id)

    # Completions

    def insert_completion(
        self,
        con: sqlite3.Connection,
        user_id: str,
        challenge_id: str,
        xp_awarded: int,
        score: int | None,
        now: datetime,
    ) -> bool:
        """Insert the completion record; False if the pair was already completed.

        The primary key on (user_id, challenge_id) is the gate for awarding XP.
        """
        cur = con.execute(
            """
            INSERT INTO challenge_progress
                (user_id, challenge_id, status, best_score, xp_awarded, completed_at, submitted_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, challenge_id) DO NOTHING
            """,
            (
                user_id,
                challenge_id,
                CompletionStatus.COMPLETED.value,
                score,
                xp_awarded,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        return cur.rowcount == 1

    def touch_completion(
        self,
        con: sqlite3.Connection,
        user_id: str,
        challenge_id: str,
        score: int | None,
        now: datetime,
    ) -> None:
        """Resubmission: refresh submitted_at and keep the best score."""
        con.execute(
            """
            UPDATE challenge_progress
            SET submitted_at = ?,
                best_score = CASE
                    WHEN best_score IS NULL THEN ?
                    WHEN ? IS NULL THEN best_score
                    ELSE MAX(best_score, ?)
                END
            WHERE user_id = ? AND challenge_id = ?
            """,
            (now.isoformat(), score, score, score, user_id, challenge_id),
        )

    def list_completions(self, con: sqlite3.Connection, user_id: str) -> list[CompletionRecord]:
        rows = con.execute(
            "SELECT * FROM challenge_progress WHERE user_id = ? ORDER BY completed_at",
            (user_id,),
        ).fetchall()
        return [
            CompletionRecord(
                user_id=r["user_id"],
                challenge_id=r["challenge_id"],
                status=CompletionStatus(r["status"]),
                best_score=r["best_score"],
                xp_awarded=r["xp_awarded"],
                completed_at=_parse_ts(r["completed_at"]),
                submitted_at=_parse_ts(r["submitted_at"]),
            )
            for r in rows
        ]

    def get_completions(self, user_id: str) -> list[CompletionRecord]:
        with self.transaction(write=False) as con:
            return self.list_completions(con, user_id)

    # Achievements

    def insert_achievement(
        self,
        con: sqlite3.Connection,
        user_id: str,
        achievement_id: str,
        xp_bonus: int,
        now: datetime,
    ) -> bool:
        """Record an unlock; False if the user already held it."""
        cur = con.execute(
            """
            INSERT INTO user_achievements (user_id, achievement_id, xp_bonus, unlocked_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id, achievement_id) DO NOTHING
            """,
            (user_id, achievement_id, xp_bonus, now.isoformat()),
        )
        return cur.rowcount == 1

    def ledger_total(self, con: sqlite3.Connection, user_id: str) -> int:
        """XP the user should hold according to completions and unlocks."""
        row = con.execute(
            """
            SELECT
                (SELECT COALESCE(SUM(xp_awarded), 0) FROM challenge_progress WHERE user_id = ?)
                + (SELECT COALESCE(SUM(xp_bonus), 0) FROM user_achievements WHERE user_id = ?)
                AS total
            """,
            (user_id, user_id),
        ).fetchone()
        return row["total"]
