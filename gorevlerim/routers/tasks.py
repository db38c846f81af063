from fastapi import APIRouter

from gorevlerim.config import get_settings
from gorevlerim.exceptions import InvalidRequestError
from gorevlerim.models.tasks import (
    CompleteTaskRequest,
    CreatedTask,
    CreateTasksRequest,
    CreateTasksResponse,
    MessageResponse,
    NumberedTask,
    OwnerType,
    PostponeTaskRequest,
    SubtaskInput,
    SubtaskSummary,
    TaskListResponse,
    TaskStatus,
    TaskSummary,
    TaskUpdateResponse,
    UpdateTaskRequest,
)
from gorevlerim.services import tasks as tasks_service
from gorevlerim.services.dates import normalize_date
from gorevlerim.services.owners import request_owner
from gorevlerim.services.parsing import split_titles

router = APIRouter(tags=["tasks"])


@router.get("/", include_in_schema=False)
@router.get("/tasks")
def list_tasks(
    date: str = "today",
    owner_id: str | None = None,
    owner_type: OwnerType | None = None,
) -> TaskListResponse:
    date_str = normalize_date(date)
    owner = request_owner(owner_id, owner_type, get_settings().todo_user_id)
    tasks = tasks_service.list_tasks(owner, date_str)
    return TaskListResponse(
        date=date_str,
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value),
        tasks=[
            NumberedTask(
                number=i,
                id=t.id,
                title=t.title,
                description=t.description,
                status=t.status,
                block_reason=t.block_reason,
                subtasks=[
                    SubtaskSummary(id=s.id, title=s.title, status=s.status, block_reason=s.block_reason)
                    for s in t.subtasks
                ],
            )
            for i, t in enumerate(tasks, start=1)
        ],
    )


@router.post("/", status_code=201, include_in_schema=False)
@router.post("/tasks", status_code=201)
def create_tasks(request: CreateTasksRequest) -> CreateTasksResponse:
    settings = get_settings()
    if request.titles is not None:
        titles = request.titles
    elif request.title:
        titles = split_titles(request.title)
    else:
        raise InvalidRequestError("title or titles required")

    date_str = normalize_date(request.date)
    owner = request_owner(request.owner_id, request.owner_type, settings.todo_user_id)
    extra_subtasks = [
        st.title if isinstance(st, SubtaskInput) else st
        for st in request.subtasks or []
    ]
    created = tasks_service.create_tasks(
        owner,
        date_str,
        titles,
        request.description,
        created_by=request.created_by or settings.todo_user_id,
        subtasks=extra_subtasks,
    )
    return CreateTasksResponse(
        message=f"{len(created)} task(s) created",
        date=date_str,
        created=[CreatedTask(id=t.id, title=t.title) for t in created],
    )


@router.post("/tasks/complete")
def complete_task(request: CompleteTaskRequest) -> TaskUpdateResponse:
    if not request.task_number:
        raise InvalidRequestError("task_number required")
    date_str = normalize_date(request.date)
    owner = request_owner(request.owner_id, request.owner_type, get_settings().todo_user_id)
    task = tasks_service.complete_task_by_number(owner, date_str, request.task_number, cascade=True)
    return TaskUpdateResponse(
        message=f'"{task.title}" completed!',
        task=TaskSummary(id=task.id, title=task.title, status=TaskStatus.COMPLETED.value),
    )


@router.post("/tasks/postpone")
def postpone_task(request: PostponeTaskRequest) -> MessageResponse:
    if not request.task_number:
        raise InvalidRequestError("task_number required")
    date_str = normalize_date(request.date)
    target_date = normalize_date(request.target_date or "tomorrow")
    owner = request_owner(request.owner_id, request.owner_type, get_settings().todo_user_id)
    task = tasks_service.postpone_task_by_number(owner, date_str, request.task_number, target_date)
    return MessageResponse(message=f'"{task.title}" postponed to {target_date}')


@router.patch("/tasks/{task_id}")
def update_task(task_id: str, request: UpdateTaskRequest) -> TaskUpdateResponse:
    fields = request.model_dump(mode="json", exclude_unset=True)
    if "date" in fields:
        fields["date"] = normalize_date(fields["date"])
    task = tasks_service.update_task(task_id, fields)
    if request.status == TaskStatus.COMPLETED:
        tasks_service.complete_subtasks(task_id)
    return TaskUpdateResponse(
        message=f'"{task.title}" updated',
        task=TaskSummary(id=task.id, title=task.title, status=task.status),
    )


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str) -> MessageResponse:
    task = tasks_service.delete_task(task_id)
    return MessageResponse(message=f'"{task.title}" deleted')
