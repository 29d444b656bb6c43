from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from task_platform.db import fetch_returning
from task_platform.errors import BadRequest, NotFound


# Only these columns may appear in an UPDATE built from client input.
UPDATABLE_FIELDS = ("title", "description", "completed")

TASK_NOT_FOUND = "Task not found"

MAX_LIMIT = 100
# Largest page whose OFFSET still fits a signed 64-bit integer at MAX_LIMIT.
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


def public_task(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("total_count", None)
    d["completed"] = bool(d.get("completed"))
    return d


def list_tasks(
    conn: Any,
    *,
    user_id: int,
    page: int = 1,
    limit: int = 10,
    empty_page_not_found: bool = True,
) -> Dict[str, Any]:
    """One page of the owner's tasks, ordered by id.

    The total is computed by the same statement (window count), so it is 0
    when the page is past the end even if the owner has tasks.
    """
    page = min(max(1, int(page)), MAX_PAGE)
    limit = min(max(1, int(limit)), MAX_LIMIT)
    offset = (page - 1) * limit

    rows = conn.execute(
        """
        SELECT *, COUNT(*) OVER() AS total_count
        FROM tasks
        WHERE user_id=?
        ORDER BY id ASC
        LIMIT ? OFFSET ?
        """,
        (int(user_id), limit, offset),
    ).fetchall()

    if not rows and empty_page_not_found:
        raise NotFound("No tasks found")

    total = int(rows[0]["total_count"]) if rows else 0
    return {
        "page": page,
        "limit": limit,
        "data": [public_task(r) for r in rows],
        "total_count": total,
    }


def get_task(conn: Any, *, user_id: int, task_id: int) -> Dict[str, Any]:
    row = conn.execute(
        "SELECT * FROM tasks WHERE user_id=? AND id=?",
        (int(user_id), int(task_id)),
    ).fetchone()
    if row is None:
        raise NotFound(TASK_NOT_FOUND)
    return public_task(row)


def create_task(
    conn: Any,
    *,
    user_id: int,
    title: str,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    row = fetch_returning(conn.execute(
        """
        INSERT INTO tasks (title, description, completed, user_id)
        VALUES (?,?,?,?)
        RETURNING *
        """,
        (title, description, 0, int(user_id)),
    ))
    assert row is not None
    return public_task(row)


def update_task(
    conn: Any,
    *,
    user_id: int,
    task_id: int,
    updates: Mapping[str, Any],
) -> Dict[str, Any]:
    """Apply a partial update to an owned task.

    Keys outside UPDATABLE_FIELDS are ignored; if nothing updatable remains no
    statement is issued.
    """
    # Build dynamic SQL so we only touch provided fields.
    fields: List[tuple[str, Any]] = []
    for k in UPDATABLE_FIELDS:
        if k not in updates:
            continue
        v = updates[k]
        if k == "completed":
            v = 1 if v else 0
        fields.append((k, v))

    if not fields:
        raise BadRequest("At least one field must be provided for an update")

    sets = ", ".join([f"{k}=?" for k, _ in fields])
    params = [v for _, v in fields] + [int(user_id), int(task_id)]
    row = fetch_returning(conn.execute(
        f"UPDATE tasks SET {sets} WHERE user_id=? AND id=? RETURNING *",
        params,
    ))
    if row is None:
        raise NotFound(TASK_NOT_FOUND)
    return public_task(row)


def delete_task(conn: Any, *, user_id: int, task_id: int) -> Dict[str, Any]:
    row = fetch_returning(conn.execute(
        "DELETE FROM tasks WHERE user_id=? AND id=? RETURNING *",
        (int(user_id), int(task_id)),
    ))
    if row is None:
        raise NotFound(TASK_NOT_FOUND)
    return public_task(row)
