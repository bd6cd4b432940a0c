"""Review scheduling and review item storage."""
from datetime import date, datetime, timedelta
from typing import Optional

from loguru import logger

from study_rounds.config import get_settings
from study_rounds.db import get_connection
from study_rounds.errors import NotFoundError
from study_rounds.models import ReviewItem
from study_rounds.sessions import end_of_day, start_of_day

_COLUMNS = (
    "id", "user_id", "plan_id", "unit_number", "last_review_date",
    "next_review_date", "ease_factor", "repetitions", "interval_days",
)


def schedule_legacy_review(session_date: datetime, days: Optional[int] = None) -> datetime:
    """Fixed-offset review date for items without spaced-repetition state."""
    if days is None:
        days = get_settings().legacy_review_days
    return session_date + timedelta(days=days)


def schedule_by_spaced_repetition(item: ReviewItem, quality: int, now: datetime) -> ReviewItem:
    return item.record_review(quality, now)


def _item_params(item: ReviewItem) -> tuple:
    return (
        item.id, item.user_id, item.plan_id, item.unit_number,
        item.last_review_date.isoformat(), item.next_review_date.isoformat(),
        item.ease_factor, item.repetitions, item.interval_days,
    )


def row_to_review_item(row) -> ReviewItem:
    return ReviewItem(
        id=row["id"],
        user_id=row["user_id"],
        plan_id=row["plan_id"],
        unit_number=row["unit_number"],
        last_review_date=datetime.fromisoformat(row["last_review_date"]),
        next_review_date=datetime.fromisoformat(row["next_review_date"]),
        ease_factor=row["ease_factor"],
        repetitions=row["repetitions"],
        interval_days=row["interval_days"],
    )


def create_review_item(db_path: str, item: ReviewItem) -> ReviewItem:
    conn = get_connection(db_path)
    conn.execute(
        f"INSERT INTO review_items ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
        _item_params(item),
    )
    conn.commit()
    conn.close()
    return item


def update_review_item(db_path: str, item: ReviewItem) -> None:
    params = _item_params(item)
    assignments = ", ".join(f"{c} = ?" for c in _COLUMNS[1:])
    conn = get_connection(db_path)
    updated = conn.execute(
        f"UPDATE review_items SET {assignments} WHERE id = ?", params[1:] + (item.id,)
    ).rowcount
    conn.commit()
    conn.close()
    if updated == 0:
        raise NotFoundError("Review item", item.id)


def get_review_item(db_path: str, item_id: str) -> Optional[ReviewItem]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM review_items WHERE id = ?", (item_id,)).fetchone()
    conn.close()
    return row_to_review_item(row) if row else None


def get_review_items_for_plan(db_path: str, plan_id: str) -> list[ReviewItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM review_items WHERE plan_id = ? ORDER BY unit_number", (plan_id,)
    ).fetchall()
    conn.close()
    return [row_to_review_item(r) for r in rows]


def get_due_review_items(db_path: str, user_id: str, today: date) -> list[ReviewItem]:
    """Items whose next review falls on or before the end of ``today``, most overdue first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM review_items
        WHERE user_id = ? AND next_review_date <= ?
        ORDER BY next_review_date ASC, unit_number ASC""",
        (user_id, end_of_day(today).isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_review_item(r) for r in rows]


def get_review_items_between(db_path: str, user_id: str, start: date, end: date) -> list[ReviewItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM review_items
        WHERE user_id = ? AND next_review_date >= ? AND next_review_date <= ?
        ORDER BY next_review_date ASC""",
        (user_id, start_of_day(start).isoformat(), end_of_day(end).isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_review_item(r) for r in rows]


def delete_review_item(db_path: str, item_id: str) -> None:
    conn = get_connection(db_path)
    deleted = conn.execute("DELETE FROM review_items WHERE id = ?", (item_id,)).rowcount
    conn.commit()
    conn.close()
    if deleted == 0:
        raise NotFoundError("Review item", item_id)


def delete_review_items_for_plan(db_path: str, plan_id: str) -> int:
    conn = get_connection(db_path)
    deleted = conn.execute("DELETE FROM review_items WHERE plan_id = ?", (plan_id,)).rowcount
    conn.commit()
    conn.close()
    return deleted


def record_review_result(db_path: str, item_id: str, quality: int, now: datetime) -> ReviewItem:
    """Grade a stored review item and save its new SM-2 schedule."""
    item = get_review_item(db_path, item_id)
    if item is None:
        raise NotFoundError("Review item", item_id)
    updated = schedule_by_spaced_repetition(item, quality, now)
    update_review_item(db_path, updated)
    logger.info(
        "Review {} graded {}: next review in {} days", item_id, quality, updated.interval_days,
    )
    return updated
