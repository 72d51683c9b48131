"""Leave applications, approvals and the leave category list."""
from __future__ import annotations

from typing import Optional

from beanie import PydanticObjectId

from hrdesk.errors import Conflict, Forbidden, NotFound
from hrdesk.models.leave import (
    Leave,
    LeaveApplication,
    LeaveCategoryItem,
    LeaveEntry,
    LeaveStatus,
)
from hrdesk.models.user import User
from hrdesk.services.records import (
    find_record_with,
    get_categories,
    get_or_create_record,
    get_record,
    save_record,
)

LEAVE_PATH = "leaves"


async def apply_leave(user: User, applications: list[LeaveApplication]) -> Leave:
    categories = await get_categories()
    if categories.categories:
        for application in applications:
            if not categories.has(application.category):
                raise NotFound(f"Leave category {application.category} not found")

    record = await get_or_create_record(Leave, user.id)
    for application in applications:
        record.leaves.append(LeaveEntry(user_name=user.display_name, **application.model_dump()))
    await save_record(record)
    return record


async def get_user_leave(user_id: PydanticObjectId) -> Optional[Leave]:
    return await get_record(Leave, user_id)


async def list_leaves() -> list[Leave]:
    return await Leave.find_all().to_list()


async def _record_for_leave(leave_id: PydanticObjectId) -> Leave:
    record = await find_record_with(Leave, LEAVE_PATH, leave_id)
    if not record or record.find_entry(leave_id) is None:
        raise NotFound("Leave entry not found.")
    return record


async def set_leave_status(leave_id: PydanticObjectId, status: LeaveStatus) -> Leave:
    record = await _record_for_leave(leave_id)
    record.set_status(leave_id, status)
    await save_record(record)
    return record


async def withdraw_leave(leave_id: PydanticObjectId, owner_id: Optional[PydanticObjectId] = None) -> LeaveEntry:
    """Delete a leave entry. With ``owner_id`` only the owner's pending leave may go."""
    record = await _record_for_leave(leave_id)
    entry = record.find_entry(leave_id)
    if owner_id is not None:
        if record.user != owner_id:
            raise Forbidden("You can withdraw only your own leave")
        if entry.status != LeaveStatus.PENDING:
            raise Forbidden("Only pending leave can be withdrawn")
    record.remove_entry(leave_id)
    await save_record(record)
    return entry


async def list_categories() -> list[LeaveCategoryItem]:
    return (await get_categories()).categories


async def add_category(name: str) -> LeaveCategoryItem:
    categories = await get_categories()
    item = categories.add(name)
    if item is None:
        raise Conflict(f"Category {name} already exists")
    await save_record(categories)
    return item


async def delete_category(category_id: PydanticObjectId) -> LeaveCategoryItem:
    categories = await get_categories()
    item = categories.remove(category_id)
    if item is None:
        raise NotFound("Leave category not found")
    await save_record(categories)
    return item
