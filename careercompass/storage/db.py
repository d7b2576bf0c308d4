from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, TypeVar

from careercompass.core.config import settings
from careercompass.schemas.chat import ChatSession, ConversationMessage
from careercompass.schemas.match import Match, MatchStatus, MatchWithOpportunity
from careercompass.schemas.opportunity import Opportunity, OpportunityCreate
from careercompass.schemas.profile import Profile
from careercompass.schemas.user import User, UserCreate

T = TypeVar("T")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _written(record: T | None, kind: str, record_id: int) -> T:
    if record is None:
        raise RuntimeError(f"{kind} {record_id} was not readable after insert.")
    return record


def _get_db_path() -> Path:
    return Path(settings.database_path)


def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(_get_db_path(), timeout=5)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def init_db() -> None:
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with _connect() as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT NOT NULL UNIQUE,
                full_name TEXT NOT NULL,
                domain TEXT,
                experience_level TEXT,
                resume_text TEXT,
                resume_filename TEXT,
                profile_json TEXT,
                analyzed_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS opportunities (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                organization TEXT NOT NULL,
                category TEXT NOT NULL,
                description TEXT NOT NULL,
                location TEXT,
                country TEXT,
                deadline TEXT,
                compensation TEXT,
                requirements TEXT,
                skills_json TEXT NOT NULL DEFAULT '[]',
                matching_criteria_json TEXT NOT NULL DEFAULT '[]',
                application_url TEXT,
                active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users (id),
                opportunity_id INTEGER NOT NULL REFERENCES opportunities (id),
                percentage REAL NOT NULL,
                reasoning TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'suggested',
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS chat_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users (id),
                messages_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_matches_user ON matches (user_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_chat_sessions_user ON chat_sessions (user_id)")
        conn.commit()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _row_to_user(row: sqlite3.Row) -> User:
    profile = Profile.model_validate(json.loads(row["profile_json"])) if row["profile_json"] else None
    return User(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        domain=row["domain"],
        experience_level=row["experience_level"],
        resume_filename=row["resume_filename"],
        profile=profile,
        analyzed_at=row["analyzed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_user(data: UserCreate) -> User:
    now = _utc_now()
    with _connect() as conn:
        cur = conn.execute(
            """
            INSERT INTO users (email, full_name, domain, experience_level, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (_normalize_email(data.email), data.full_name.strip(), data.domain, data.experience_level, now, now),
        )
        user_id = cur.lastrowid
        conn.commit()
    return _written(get_user(int(user_id)), "User", user_id)


def get_user(user_id: int) -> User | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _row_to_user(row) if row else None


def get_user_by_email(email: str) -> User | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (_normalize_email(email),)).fetchone()
    return _row_to_user(row) if row else None


def update_user_scan(user_id: int, *, domain: str, experience_level: str) -> User | None:
    with _connect() as conn:
        cur = conn.execute(
            "UPDATE users SET domain = ?, experience_level = ?, updated_at = ? WHERE id = ?",
            (domain, experience_level, _utc_now(), user_id),
        )
        conn.commit()
        if not cur.rowcount:
            return None
    return get_user(user_id)


def save_user_profile(
    user_id: int,
    profile: Profile,
    *,
    resume_text: str,
    resume_filename: str | None,
) -> User | None:
    now = _utc_now()
    with _connect() as conn:
        cur = conn.execute(
            """
            UPDATE users
            SET resume_text = ?, resume_filename = ?, profile_json = ?, analyzed_at = ?, updated_at = ?
            WHERE id = ?
            """,
            (resume_text, resume_filename, profile.model_dump_json(), now, now, user_id),
        )
        conn.commit()
        if not cur.rowcount:
            return None
    return get_user(user_id)


def _row_to_opportunity(row: sqlite3.Row) -> Opportunity:
    return Opportunity(
        id=row["id"],
        title=row["title"],
        organization=row["organization"],
        category=row["category"],
        description=row["description"],
        location=row["location"],
        country=row["country"],
        deadline=row["deadline"],
        compensation=row["compensation"],
        requirements=row["requirements"],
        skills=json.loads(row["skills_json"] or "[]"),
        matching_criteria=json.loads(row["matching_criteria_json"] or "[]"),
        application_url=row["application_url"],
        active=bool(row["active"]),
        created_at=row["created_at"],
    )


def count_opportunities() -> int:
    with _connect() as conn:
        return int(conn.execute("SELECT COUNT(*) FROM opportunities").fetchone()[0])


def create_opportunity(data: OpportunityCreate) -> Opportunity:
    with _connect() as conn:
        cur = conn.execute(
            """
            INSERT INTO opportunities (
                title, organization, category, description, location, country, deadline,
                compensation, requirements, skills_json, matching_criteria_json, application_url,
                active, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                data.title,
                data.organization,
                data.category,
                data.description,
                data.location,
                data.country,
                data.deadline.isoformat() if data.deadline else None,
                data.compensation,
                data.requirements,
                json.dumps(data.skills, ensure_ascii=False),
                json.dumps(data.matching_criteria, ensure_ascii=False),
                data.application_url,
                1 if data.active else 0,
                _utc_now(),
            ),
        )
        opportunity_id = cur.lastrowid
        conn.commit()
    return _written(get_opportunity(int(opportunity_id)), "Opportunity", opportunity_id)


def get_opportunity(opportunity_id: int) -> Opportunity | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM opportunities WHERE id = ?", (opportunity_id,)).fetchone()
    return _row_to_opportunity(row) if row else None


def list_opportunities(*, active_only: bool = True) -> list[Opportunity]:
    query = "SELECT * FROM opportunities"
    if active_only:
        query += " WHERE active = 1"
    query += " ORDER BY id"
    with _connect() as conn:
        rows = conn.execute(query).fetchall()
    return [_row_to_opportunity(row) for row in rows]


def _row_to_match(row: sqlite3.Row) -> Match:
    return Match(
        id=row["id"],
        user_id=row["user_id"],
        opportunity_id=row["opportunity_id"],
        percentage=row["percentage"],
        reasoning=row["reasoning"],
        status=row["status"],
        created_at=row["created_at"],
    )


def create_match(
    *,
    user_id: int,
    opportunity_id: int,
    percentage: float,
    reasoning: str,
    status: MatchStatus = "suggested",
) -> Match:
    with _connect() as conn:
        cur = conn.execute(
            """
            INSERT INTO matches (user_id, opportunity_id, percentage, reasoning, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, opportunity_id, percentage, reasoning, status, _utc_now()),
        )
        match_id = cur.lastrowid
        conn.commit()
    return _written(get_match(int(match_id)), "Match", match_id)


def refresh_match(match_id: int, *, percentage: float, reasoning: str) -> Match | None:
    with _connect() as conn:
        conn.execute(
            "UPDATE matches SET percentage = ?, reasoning = ? WHERE id = ?",
            (percentage, reasoning, match_id),
        )
        conn.commit()
    return get_match(match_id)


def get_match(match_id: int) -> Match | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM matches WHERE id = ?", (match_id,)).fetchone()
    return _row_to_match(row) if row else None


def find_match(user_id: int, opportunity_id: int) -> Match | None:
    with _connect() as conn:
        row = conn.execute(
            "SELECT * FROM matches WHERE user_id = ? AND opportunity_id = ? ORDER BY id LIMIT 1",
            (user_id, opportunity_id),
        ).fetchone()
    return _row_to_match(row) if row else None


def list_user_matches(user_id: int) -> list[MatchWithOpportunity]:
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT
                m.id AS m_id, m.user_id AS m_user_id, m.opportunity_id AS m_opportunity_id,
                m.percentage AS m_percentage, m.reasoning AS m_reasoning, m.status AS m_status,
                m.created_at AS m_created_at, o.*
            FROM matches m
            JOIN opportunities o ON o.id = m.opportunity_id
            WHERE m.user_id = ?
            ORDER BY m.percentage DESC, m.id
            """,
            (user_id,),
        ).fetchall()
    return [
        MatchWithOpportunity(
            id=row["m_id"],
            user_id=row["m_user_id"],
            opportunity_id=row["m_opportunity_id"],
            percentage=row["m_percentage"],
            reasoning=row["m_reasoning"],
            status=row["m_status"],
            created_at=row["m_created_at"],
            opportunity=_row_to_opportunity(row),
        )
        for row in rows
    ]


def update_match_status(match_id: int, status: MatchStatus) -> Match | None:
    with _connect() as conn:
        cur = conn.execute("UPDATE matches SET status = ? WHERE id = ?", (status, match_id))
        conn.commit()
        if not cur.rowcount:
            return None
    return get_match(match_id)


def _dump_messages(messages: Iterable[ConversationMessage]) -> str:
    return json.dumps([m.model_dump() for m in messages], ensure_ascii=False)


def _row_to_session(row: sqlite3.Row) -> ChatSession:
    raw: list[dict[str, Any]] = json.loads(row["messages_json"] or "[]")
    return ChatSession(
        id=row["id"],
        user_id=row["user_id"],
        messages=[ConversationMessage.model_validate(item) for item in raw],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_chat_session(user_id: int, messages: list[ConversationMessage]) -> ChatSession:
    now = _utc_now()
    with _connect() as conn:
        cur = conn.execute(
            "INSERT INTO chat_sessions (user_id, messages_json, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (user_id, _dump_messages(messages), now, now),
        )
        session_id = cur.lastrowid
        conn.commit()
    return _written(get_chat_session(int(session_id)), "Chat session", session_id)


def update_chat_session(session_id: int, messages: list[ConversationMessage]) -> ChatSession | None:
    with _connect() as conn:
        cur = conn.execute(
            "UPDATE chat_sessions SET messages_json = ?, updated_at = ? WHERE id = ?",
            (_dump_messages(messages), _utc_now(), session_id),
        )
        conn.commit()
        if not cur.rowcount:
            return None
    return get_chat_session(session_id)


def get_chat_session(session_id: int) -> ChatSession | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM chat_sessions WHERE id = ?", (session_id,)).fetchone()
    return _row_to_session(row) if row else None


def list_user_chat_sessions(user_id: int) -> list[ChatSession]:
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM chat_sessions WHERE user_id = ? ORDER BY updated_at DESC, id DESC",
            (user_id,),
        ).fetchall()
    return [_row_to_session(row) for row in rows]
