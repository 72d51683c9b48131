from beanie import PydanticObjectId
from fastapi import APIRouter, status

from hrdesk.api.deps import AdminOnly, CurrentIdentity, CurrentUser
from hrdesk.api.responses import ok
from hrdesk.models.leave import (
    ApplyLeaveRequest,
    LeaveCategoryCreate,
    LeaveStatusRequest,
    leave_category_out,
    leave_entry_out,
    leave_out,
)
from hrdesk.services import leaves as leave_service

router = APIRouter()


@router.post("/apply-leave", status_code=status.HTTP_201_CREATED)
async def apply_leave(data: ApplyLeaveRequest, user: CurrentUser):
    record = await leave_service.apply_leave(user, data.leaves)
    return ok("Leave applied successfully", leave_out(record).leaves)


@router.get("/get-leave")
async def get_own_leave(identity: CurrentIdentity):
    record = await leave_service.get_user_leave(PydanticObjectId(identity.id))
    return ok("Leave retrieved successfully", [leave_out(record)] if record else [])


@router.get("/")
async def list_leaves(admin: AdminOnly):
    records = await leave_service.list_leaves()
    return ok("Leave retrieved successfully", [leave_out(r) for r in records])


@router.get("/category")
async def list_categories(identity: CurrentIdentity):
    categories = await leave_service.list_categories()
    return ok("Leave categories retrieved successfully", [leave_category_out(c) for c in categories])


@router.post("/category", status_code=status.HTTP_201_CREATED)
async def add_category(data: LeaveCategoryCreate, admin: AdminOnly):
    item = await leave_service.add_category(data.category)
    return ok("Leave category added successfully", leave_category_out(item))


@router.delete("/category/{category_id}")
async def delete_category(category_id: PydanticObjectId, admin: AdminOnly):
    await leave_service.delete_category(category_id)
    return ok("Leave category deleted successfully")


@router.patch("/{leave_id}")
async def update_leave_status(leave_id: PydanticObjectId, data: LeaveStatusRequest, admin: AdminOnly):
    """Approve or reject a leave entry (Admin only)."""
    record = await leave_service.set_leave_status(leave_id, data.new_status)
    return ok("Leave status updated successfully", leave_out(record))


@router.delete("/{leave_id}")
async def withdraw_leave(leave_id: PydanticObjectId, identity: CurrentIdentity):
    """Admins may delete any leave; users only their own pending leave."""
    owner_id = None if identity.is_admin else PydanticObjectId(identity.id)
    entry = await leave_service.withdraw_leave(leave_id, owner_id=owner_id)
    return ok("Leave deleted successfully", leave_entry_out(entry))
