"""Task and subtask persistence.

Sort order is assigned as "partition max + 1" from a plain read followed by a
write. Nothing serializes concurrent writers, so two creators racing on the
same (owner, date) partition can end up with equal sort orders.
"""

from datetime import datetime, timezone

from gorevlerim.exceptions import TaskNotFoundError
from gorevlerim.models.tasks import Owner, Task, TaskStatus
from gorevlerim.services import store
from gorevlerim.services.parsing import extract_subtasks

TASKS = "tasks"
SUBTASKS = "subtasks"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _partition(owner: Owner, date: str) -> dict:
    return {"owner_id": owner.id, "owner_type": owner.type.value, "date": date}


def _parse_task(row: dict) -> Task:
    task = Task.model_validate(row)
    task.subtasks.sort(key=lambda s: s.sort_order)
    return task


# --- Reads ---


def list_tasks(owner: Owner, date: str) -> list[Task]:
    """All tasks in a partition with their subtasks, both by sort order."""
    rows = store.select(TASKS, _partition(owner, date), columns="*,subtasks(*)", order="sort_order.asc")
    return [_parse_task(r) for r in rows]


def next_sort_order(owner: Owner, date: str) -> int:
    rows = store.select(
        TASKS, _partition(owner, date), columns="sort_order", order="sort_order.desc", limit=1,
    )
    return rows[0]["sort_order"] + 1 if rows else 0


def get_task_by_number(owner: Owner, date: str, number: int) -> Task:
    """Resolve a 1-based position in the partition against current store state."""
    rows = store.select(
        TASKS, _partition(owner, date), columns="id,title,owner_id,owner_type,date", order="sort_order.asc",
    )
    if number < 1 or number > len(rows):
        raise TaskNotFoundError(number)
    return _parse_task(rows[number - 1])


# --- Writes ---


def create_tasks(
    owner: Owner,
    date: str,
    titles: list[str],
    description: str | None,
    created_by: str,
    subtasks: list[str] | None = None,
) -> list[Task]:
    """Create one task per title at the end of the partition.

    The description and subtasks are only used for a single-title batch. A
    failure stops the batch; tasks created before it are kept.
    """
    single = len(titles) == 1
    description, subtask_titles = extract_subtasks(description)
    subtask_titles += subtasks or []

    next_order = next_sort_order(owner, date)
    created = []
    for title in titles:
        row = store.insert_one(TASKS, {
            **_partition(owner, date),
            "title": title,
            "description": description if single else None,
            "status": TaskStatus.PENDING.value,
            "sort_order": next_order,
            "created_by": created_by,
        })
        next_order += 1
        task = _parse_task(row)
        if single and subtask_titles:
            store.insert(SUBTASKS, [
                {"task_id": task.id, "title": st, "status": TaskStatus.PENDING.value, "sort_order": idx}
                for idx, st in enumerate(subtask_titles)
            ])
        created.append(task)
    return created


def update_task(task_id: str, fields: dict) -> Task:
    """Apply only the given fields. Does not touch subtasks."""
    values = {**fields, "updated_at": _now()}
    return _parse_task(store.update_one(TASKS, values, {"id": task_id}))


def complete_subtasks(task_id: str) -> None:
    store.update(SUBTASKS, {"status": TaskStatus.COMPLETED.value}, {"task_id": task_id})


def complete_task(task_id: str) -> Task:
    return update_task(task_id, {"status": TaskStatus.COMPLETED.value})


def complete_task_by_number(owner: Owner, date: str, number: int, cascade: bool = False) -> Task:
    target = get_task_by_number(owner, date, number)
    task = complete_task(target.id)
    if cascade:
        complete_subtasks(task.id)
    return task


def delete_task(task_id: str) -> Task:
    """Hard delete. Subtasks are removed by the database's cascade."""
    return _parse_task(store.delete_one(TASKS, {"id": task_id}))


def postpone_task_by_number(owner: Owner, date: str, number: int, target_date: str) -> Task:
    """Move the Nth task to the end of target_date, back to pending.

    The target partition uses the task's own owner, not the owner passed in.
    """
    target = get_task_by_number(owner, date, number)
    sort_order = next_sort_order(target.owner, target_date)
    return update_task(target.id, {
        "date": target_date,
        "status": TaskStatus.PENDING.value,
        "sort_order": sort_order,
    })
