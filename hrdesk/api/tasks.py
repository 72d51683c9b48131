from beanie import PydanticObjectId
from fastapi import APIRouter, status

from hrdesk.api.deps import AdminOnly, CurrentIdentity
from hrdesk.api.responses import ok
from hrdesk.models.task import (
    AssignTaskRequest,
    EditTaskRequest,
    TaskStatusRequest,
    task_groups_out,
    task_item_out,
    task_out,
)
from hrdesk.services import tasks as task_service

router = APIRouter()


@router.post("/assign", status_code=status.HTTP_201_CREATED)
async def assign_task(data: AssignTaskRequest, admin: AdminOnly):
    """Assign a task to a user under the given date (Admin only)."""
    record, _ = await task_service.assign_task(data.user_id, data.date, data.description, data.deadline)
    return ok("Task assigned successfully", task_groups_out(record))


@router.put("/edit-task/{task_id}")
async def edit_task(task_id: PydanticObjectId, data: EditTaskRequest, admin: AdminOnly):
    item = await task_service.edit_task(
        task_id, data.description, data.deadline, status=data.status, date=data.date
    )
    return ok("Task updated successfully", task_item_out(item))


@router.put("/update-status/{task_id}")
async def update_task_status(task_id: PydanticObjectId, identity: CurrentIdentity, data: TaskStatusRequest | None = None):
    """Mark a task done (or set ``status``). Users may only touch their own tasks."""
    new_status = data.status if data else TaskStatusRequest().status
    owner_id = None if identity.is_admin else PydanticObjectId(identity.id)
    item = await task_service.update_task_status(task_id, new_status, owner_id=owner_id)
    return ok("Task status updated successfully", task_item_out(item))


@router.get("/get-task")
async def get_own_tasks(identity: CurrentIdentity):
    record = await task_service.get_user_tasks(PydanticObjectId(identity.id))
    return ok("Tasks retrieved successfully", task_groups_out(record) if record else [])


@router.get("/")
async def list_tasks(admin: AdminOnly):
    records = await task_service.list_tasks()
    return ok("Tasks retrieved successfully", [task_out(r) for r in records])


@router.delete("/{task_id}")
async def delete_task(task_id: PydanticObjectId, admin: AdminOnly):
    await task_service.delete_task(task_id)
    return ok("Task deleted successfully")
