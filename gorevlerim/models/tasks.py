from enum import Enum

from pydantic import BaseModel


class OwnerType(str, Enum):
    USER = "user"
    GROUP = "group"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    POSTPONED = "postponed"


class Owner(BaseModel):
    id: str
    type: OwnerType


class Subtask(BaseModel):
    id: str
    task_id: str | None = None
    title: str
    status: str = TaskStatus.PENDING.value
    block_reason: str | None = None
    sort_order: int = 0


class Task(BaseModel):
    id: str
    owner_id: str
    owner_type: OwnerType
    date: str
    title: str
    description: str | None = None
    status: str = TaskStatus.PENDING.value  # kept as str so unknown values still list
    block_reason: str | None = None
    sort_order: int = 0
    created_by: str | None = None
    updated_at: str | None = None
    subtasks: list[Subtask] = []

    @property
    def owner(self) -> Owner:
        return Owner(id=self.owner_id, type=self.owner_type)


# --- HTTP requests ---


class SubtaskInput(BaseModel):
    title: str


class CreateTasksRequest(BaseModel):
    title: str | None = None
    titles: list[str] | None = None
    date: str | None = None
    description: str | None = None
    owner_id: str | None = None
    owner_type: OwnerType | None = None
    created_by: str | None = None
    subtasks: list[str | SubtaskInput] | None = None


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    block_reason: str | None = None
    date: str | None = None


class CompleteTaskRequest(BaseModel):
    date: str | None = None
    owner_id: str | None = None
    owner_type: OwnerType | None = None
    task_number: int | None = None


class PostponeTaskRequest(BaseModel):
    date: str | None = None
    target_date: str | None = None
    owner_id: str | None = None
    owner_type: OwnerType | None = None
    task_number: int | None = None


# --- HTTP responses ---


class SubtaskSummary(BaseModel):
    id: str
    title: str
    status: str
    block_reason: str | None = None


class NumberedTask(BaseModel):
    number: int
    id: str
    title: str
    description: str | None = None
    status: str
    block_reason: str | None = None
    subtasks: list[SubtaskSummary]


class TaskListResponse(BaseModel):
    date: str
    total: int
    completed: int
    tasks: list[NumberedTask]


class CreatedTask(BaseModel):
    id: str
    title: str


class CreateTasksResponse(BaseModel):
    message: str
    date: str
    created: list[CreatedTask]


class TaskSummary(BaseModel):
    id: str
    title: str
    status: str


class TaskUpdateResponse(BaseModel):
    message: str
    task: TaskSummary


class MessageResponse(BaseModel):
    message: str
