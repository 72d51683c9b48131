from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


class TaskItem(BaseModel):
    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    description: str
    deadline: str
    status: TaskStatus = TaskStatus.PENDING


class TaskGroup(BaseModel):
    """Tasks assigned on the same date."""

    date: str
    tasks: list[TaskItem] = Field(default_factory=list)


class Task(Document):
    user: Indexed(PydanticObjectId, unique=True)
    task: list[TaskGroup] = Field(default_factory=list)

    class Settings:
        name = "tasks"
        use_state_management = True
        use_revision = True

    def find_group(self, date: str) -> Optional[TaskGroup]:
        for group in self.task:
            if group.date == date:
                return group
        return None

    def add_task(self, date: str, item: TaskItem) -> TaskItem:
        group = self.find_group(date)
        if group is None:
            group = TaskGroup(date=date)
            self.task.append(group)
        group.tasks.append(item)
        return item

    def find_task(self, task_id: PydanticObjectId) -> Optional[tuple[TaskGroup, TaskItem]]:
        for group in self.task:
            for item in group.tasks:
                if item.id == task_id:
                    return group, item
        return None

    def remove_task(self, task_id: PydanticObjectId) -> Optional[TaskItem]:
        """Drop a task; a date group left without tasks is dropped too."""
        found = self.find_task(task_id)
        if found is None:
            return None
        group, item = found
        group.tasks.remove(item)
        if not group.tasks:
            self.task.remove(group)
        return item

    def move_task(self, task_id: PydanticObjectId, date: str) -> Optional[TaskItem]:
        found = self.find_task(task_id)
        if found is None:
            return None
        group, item = found
        if group.date == date:
            return item
        self.remove_task(task_id)
        return self.add_task(date, item)


class AssignTaskRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    user_id: PydanticObjectId
    description: str = Field(min_length=1)
    date: str = Field(min_length=1)
    deadline: str = Field(min_length=1)


class EditTaskRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    description: str = Field(min_length=1)
    deadline: str = Field(min_length=1)
    date: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING


class TaskStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    status: TaskStatus = TaskStatus.COMPLETED


class TaskItemOut(BaseModel):
    id: str
    description: str
    deadline: str
    status: TaskStatus


class TaskGroupOut(BaseModel):
    date: str
    tasks: list[TaskItemOut]


class TaskOut(BaseModel):
    id: str
    user: str
    task: list[TaskGroupOut]


def task_item_out(item: TaskItem) -> TaskItemOut:
    return TaskItemOut(id=str(item.id), description=item.description, deadline=item.deadline, status=item.status)


def task_groups_out(record: Task) -> list[TaskGroupOut]:
    return [
        TaskGroupOut(date=g.date, tasks=[task_item_out(t) for t in g.tasks])
        for g in record.task
    ]


def task_out(record: Task) -> TaskOut:
    return TaskOut(id=str(record.id), user=str(record.user), task=task_groups_out(record))
