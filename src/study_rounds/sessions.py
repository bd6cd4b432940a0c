"""Study session storage.

Sessions are facts logged by the user. They are only changed through an
explicit update and never expire.
"""
from datetime import date, datetime, time
from typing import Optional

from loguru import logger

from study_rounds.db import get_connection
from study_rounds.errors import NotFoundError
from study_rounds.models import StudySession, to_date

_COLUMNS = (
    "id", "user_id", "plan_id", "date", "units_completed", "duration_minutes",
    "concentration", "difficulty", "round", "start_unit", "end_unit",
)


def start_of_day(day: date) -> datetime:
    return datetime.combine(to_date(day), time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(to_date(day), time.max)


def _session_params(session: StudySession) -> tuple:
    return (
        session.id, session.user_id, session.plan_id, session.date.isoformat(),
        session.units_completed, session.duration_minutes, session.concentration,
        session.difficulty, session.round, session.start_unit, session.end_unit,
    )


def row_to_session(row) -> StudySession:
    return StudySession(
        id=row["id"],
        user_id=row["user_id"],
        plan_id=row["plan_id"],
        date=datetime.fromisoformat(row["date"]),
        units_completed=row["units_completed"],
        duration_minutes=row["duration_minutes"],
        concentration=row["concentration"],
        difficulty=row["difficulty"],
        round=row["round"],
        start_unit=row["start_unit"],
        end_unit=row["end_unit"],
    )


def create_session(db_path: str, session: StudySession) -> StudySession:
    conn = get_connection(db_path)
    conn.execute(
        f"INSERT INTO study_sessions ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
        _session_params(session),
    )
    conn.commit()
    conn.close()
    logger.info(
        "Logged session {} for plan {}: {} units, round {}",
        session.id, session.plan_id, session.units_completed, session.round,
    )
    return session


def update_session(db_path: str, session: StudySession) -> None:
    params = _session_params(session)
    assignments = ", ".join(f"{c} = ?" for c in _COLUMNS[1:])
    conn = get_connection(db_path)
    updated = conn.execute(
        f"UPDATE study_sessions SET {assignments} WHERE id = ?",
        params[1:] + (session.id,),
    ).rowcount
    conn.commit()
    conn.close()
    if updated == 0:
        raise NotFoundError("Session", session.id)


def get_session(db_path: str, session_id: str) -> Optional[StudySession]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM study_sessions WHERE id = ?", (session_id,)).fetchone()
    conn.close()
    return row_to_session(row) if row else None


def get_sessions_for_plan(db_path: str, plan_id: str) -> list[StudySession]:
    """All sessions of a plan, oldest first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM study_sessions WHERE plan_id = ? ORDER BY date ASC, id ASC", (plan_id,)
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def get_sessions_for_plan_until(db_path: str, plan_id: str, today: date) -> list[StudySession]:
    """Sessions of a plan logged before ``today``."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM study_sessions WHERE plan_id = ? AND date < ? ORDER BY date ASC, id ASC",
        (plan_id, start_of_day(today).isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def get_sessions_between(db_path: str, user_id: str, start: date, end: date) -> list[StudySession]:
    """Sessions of a user from the start of ``start`` to the end of ``end``."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM study_sessions
        WHERE user_id = ? AND date >= ? AND date <= ?
        ORDER BY date ASC, id ASC""",
        (user_id, start_of_day(start).isoformat(), end_of_day(end).isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def get_sessions_for_day(db_path: str, plan_id: str, day: date) -> list[StudySession]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM study_sessions
        WHERE plan_id = ? AND date >= ? AND date <= ?
        ORDER BY date ASC, id ASC""",
        (plan_id, start_of_day(day).isoformat(), end_of_day(day).isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def delete_session(db_path: str, session_id: str) -> None:
    conn = get_connection(db_path)
    deleted = conn.execute("DELETE FROM study_sessions WHERE id = ?", (session_id,)).rowcount
    conn.commit()
    conn.close()
    if deleted == 0:
        raise NotFoundError("Session", session_id)
