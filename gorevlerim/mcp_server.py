from fastmcp import FastMCP

from gorevlerim.config import get_settings
from gorevlerim.exceptions import TODO_ERRORS
from gorevlerim.models.tasks import Task, TaskStatus
from gorevlerim.services import tasks as tasks_service
from gorevlerim.services.dates import normalize_date
from gorevlerim.services.owners import resolve_owner
from gorevlerim.services.parsing import split_titles

mcp = FastMCP("todo-app")

STATUS_EMOJI = {
    TaskStatus.PENDING.value: "⏳",
    TaskStatus.COMPLETED.value: "✅",
    TaskStatus.BLOCKED.value: "🚫",
    TaskStatus.POSTPONED.value: "📅",
}


def _handle_mcp_error(e: Exception) -> str:
    return f"Error: {e}"


def _format_task_line(number: int, task: Task) -> str:
    emoji = STATUS_EMOJI.get(task.status, "❓")
    line = f"{number}. {emoji} {task.title}"
    if task.subtasks:
        done = sum(1 for s in task.subtasks if s.status == TaskStatus.COMPLETED.value)
        line += f" [{done}/{len(task.subtasks)} subtasks]"
    if task.status == TaskStatus.BLOCKED.value and task.block_reason:
        line += f" (Reason: {task.block_reason})"
    return line


@mcp.tool
def list_tasks(date: str | None = None, group_id: str | None = None) -> str:
    """List the tasks for a date.
    date: YYYY-MM-DD, 'today' or 'tomorrow'. Defaults to today.
    group_id: group to list. Uses the personal group when omitted."""
    try:
        date_str = normalize_date(date, include_yesterday=False)
        owner = resolve_owner(group_id, get_settings().todo_user_id)
        tasks = tasks_service.list_tasks(owner, date_str)
    except TODO_ERRORS as e:
        return _handle_mcp_error(e)

    if not tasks:
        return f"No tasks on {date_str}."
    summary = "\n".join(_format_task_line(i, t) for i, t in enumerate(tasks, start=1))
    return f"📋 Tasks for {date_str}:\n\n{summary}"


@mcp.tool
def add_task(
    title: str,
    date: str | None = None,
    description: str | None = None,
    group_id: str | None = None,
) -> str:
    """Add a task. Separate titles with commas to add several at once: 'Groceries, Laundry, Pay bills'.
    description: free text. Start a line with '* ' to make it a subtask (single task only).
    date: YYYY-MM-DD, 'today' or 'tomorrow'. Defaults to today.
    group_id: target group. Uses the personal group when omitted."""
    settings = get_settings()
    try:
        date_str = normalize_date(date, include_yesterday=False)
        owner = resolve_owner(group_id, settings.todo_user_id)
        created = tasks_service.create_tasks(
            owner, date_str, split_titles(title), description, created_by=settings.todo_user_id,
        )
    except TODO_ERRORS as e:
        return _handle_mcp_error(e)

    result = "\n".join(f'✅ "{t.title}" added' for t in created)
    return f"Task(s) added to {date_str}:\n\n{result}"


@mcp.tool
def update_task(
    task_id: str,
    title: str | None = None,
    description: str | None = None,
    status: TaskStatus | None = None,
    block_reason: str | None = None,
    postpone_to: str | None = None,
) -> str:
    """Update a task's title, description or status.
    block_reason: why the task is blocked (with status=blocked).
    postpone_to: move the task to this date (YYYY-MM-DD or 'tomorrow') and reset it to pending."""
    fields = {}
    if title:
        fields["title"] = title
    if description is not None:
        fields["description"] = description
    if status:
        fields["status"] = TaskStatus(status).value
    if block_reason:
        fields["block_reason"] = block_reason
    if postpone_to:
        fields["date"] = normalize_date(postpone_to, include_yesterday=False)
        fields["status"] = TaskStatus.PENDING.value
    try:
        task = tasks_service.update_task(task_id, fields)
    except TODO_ERRORS as e:
        return _handle_mcp_error(e)
    return f'✅ "{task.title}" updated. Status: {task.status}'


@mcp.tool
def complete_task(
    task_number: int | None = None,
    task_id: str | None = None,
    date: str | None = None,
    group_id: str | None = None,
) -> str:
    """Mark a task as completed, by its position in the day's list (starting at 1) or by ID.
    date: day the position refers to. Defaults to today.
    group_id: group the position refers to. Uses the personal group when omitted."""
    try:
        if not task_id and task_number:
            date_str = normalize_date(date, include_yesterday=False)
            owner = resolve_owner(group_id, get_settings().todo_user_id)
            task_id = tasks_service.get_task_by_number(owner, date_str, task_number).id
        if not task_id:
            return "task_number or task_id is required."
        task = tasks_service.complete_task(task_id)
    except TODO_ERRORS as e:
        return _handle_mcp_error(e)
    return f'✅ "{task.title}" completed!'


@mcp.tool
def delete_task(task_id: str) -> str:
    """Delete a task and its subtasks."""
    try:
        task = tasks_service.delete_task(task_id)
    except TODO_ERRORS as e:
        return _handle_mcp_error(e)
    return f'🗑️ "{task.title}" deleted.'


def run_stdio():
    mcp.run()
