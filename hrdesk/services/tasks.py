"""Task assignment: tasks grouped per user by date."""
from __future__ import annotations

from typing import Optional

from beanie import PydanticObjectId

from hrdesk.errors import Forbidden, NotFound
from hrdesk.models.task import Task, TaskItem, TaskStatus
from hrdesk.models.user import User
from hrdesk.services.records import find_record_with, get_or_create_record, get_record, save_record

TASK_PATH = "task.tasks"


async def assign_task(user_id: PydanticObjectId, date: str, description: str, deadline: str) -> tuple[Task, TaskItem]:
    if not await User.get(user_id):
        raise NotFound("User not found")
    record = await get_or_create_record(Task, user_id)
    item = record.add_task(date, TaskItem(description=description, deadline=deadline))
    await save_record(record)
    return record, item


async def _record_for_task(task_id: PydanticObjectId) -> Task:
    record = await find_record_with(Task, TASK_PATH, task_id)
    if not record or record.find_task(task_id) is None:
        raise NotFound("Task not found")
    return record


async def edit_task(
    task_id: PydanticObjectId,
    description: str,
    deadline: str,
    status: TaskStatus = TaskStatus.PENDING,
    date: Optional[str] = None,
) -> TaskItem:
    record = await _record_for_task(task_id)
    _, item = record.find_task(task_id)
    item.description = description
    item.deadline = deadline
    item.status = status
    if date:
        record.move_task(task_id, date)
    await save_record(record)
    return item


async def update_task_status(
    task_id: PydanticObjectId,
    status: TaskStatus = TaskStatus.COMPLETED,
    owner_id: Optional[PydanticObjectId] = None,
) -> TaskItem:
    """Set a task's status. With ``owner_id`` the task must belong to that user."""
    record = await _record_for_task(task_id)
    if owner_id is not None and record.user != owner_id:
        raise Forbidden("You can update only your own tasks")
    _, item = record.find_task(task_id)
    item.status = status
    await save_record(record)
    return item


async def delete_task(task_id: PydanticObjectId) -> Task:
    record = await _record_for_task(task_id)
    record.remove_task(task_id)
    await save_record(record)
    return record


async def get_user_tasks(user_id: PydanticObjectId) -> Optional[Task]:
    return await get_record(Task, user_id)


async def list_tasks() -> list[Task]:
    return await Task.find_all().to_list()
