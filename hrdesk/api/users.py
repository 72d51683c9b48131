"""User accounts: profile CRUD and password workflows."""
import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, Header
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pymongo.errors import DuplicateKeyError

from hrdesk.api.deps import (
    AdminOnly,
    CurrentIdentity,
    CurrentUser,
    MailerDep,
    Tokens,
    bearer_token,
    ensure_self_or_admin,
    get_password_hash,
    verify_password,
)
from hrdesk.api.responses import ok
from hrdesk.errors import Conflict, Forbidden, NotFound, Unauthorized
from hrdesk.models.user import User, UserUpdate, user_out
from hrdesk.services.records import delete_user_records

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_PURPOSE = "reset"


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    old_password: str
    new_password: str = Field(min_length=6)


class ForgotPasswordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    new_password: str = Field(min_length=6)


async def _get_user(user_id: PydanticObjectId) -> User:
    user = await User.get(user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/")
async def list_users(admin: AdminOnly, new: bool = False):
    """List all users, or only the five newest with ``?new=true``."""
    query = User.find_all().sort("-_id")
    if new:
        query = query.limit(5)
    users = await query.to_list()
    return ok("Users fetched successfully", [user_out(u) for u in users])


@router.get("/stats")
async def user_stats(admin: AdminOnly):
    """Number of accounts created per calendar month."""
    data = await User.aggregate(
        [
            {"$project": {"month": {"$month": "$created_at"}}},
            {"$group": {"_id": "$month", "total": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]
    ).to_list()
    return ok("User stats fetched successfully", [{"month": d["_id"], "total": d["total"]} for d in data])


@router.post("/change-password")
async def change_password(data: ChangePasswordRequest, user: CurrentUser):
    if not verify_password(data.old_password, user.hashed_password):
        raise Unauthorized("Incorrect old password")
    user.hashed_password = get_password_hash(data.new_password)
    user.updated_at = datetime.now(timezone.utc)
    await user.save()
    return ok("Password changed successfully")


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, tokens: Tokens, mailer: MailerDep):
    user = await User.find_one(User.email == data.email)
    if not user:
        raise NotFound("User not found")
    token = tokens.issue_purpose_token(str(user.id), RESET_PURPOSE)
    await mailer.send_password_reset(user.email, token)
    return ok("Password reset email sent")


@router.post("/reset-password")
async def reset_password(
    data: ResetPasswordRequest,
    tokens: Tokens,
    authorization: Annotated[Optional[str], Header()] = None,
):
    """Set a new password using the token from the reset mail as bearer token."""
    user_id = tokens.decode_purpose(bearer_token(authorization), RESET_PURPOSE)
    user = await _get_user(PydanticObjectId(user_id))
    user.hashed_password = get_password_hash(data.new_password)
    user.updated_at = datetime.now(timezone.utc)
    await user.save()
    logger.info("Password reset for user %s", user.id)
    return ok("Password reset successfully")


@router.get("/{user_id}")
async def get_user(user_id: PydanticObjectId, identity: CurrentIdentity):
    ensure_self_or_admin(identity, user_id, "You can view only your account")
    return ok("User fetched successfully", user_out(await _get_user(user_id)))


@router.put("/{user_id}")
async def update_user(user_id: PydanticObjectId, data: UserUpdate, identity: CurrentIdentity):
    ensure_self_or_admin(identity, user_id, "You can update only your account")
    user = await _get_user(user_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in update_data and not identity.is_admin:
        raise Forbidden("Only admins can change roles")
    if "email" in update_data and update_data["email"] != user.email:
        if await User.find_one(User.email == update_data["email"]):
            raise Conflict(f"Email {update_data['email']} already exists")
    if "password" in update_data:
        user.hashed_password = get_password_hash(update_data.pop("password"))

    for key, value in update_data.items():
        setattr(user, key, value)
    user.updated_at = datetime.now(timezone.utc)
    try:
        await user.save()
    except DuplicateKeyError:
        raise Conflict(f"Email {user.email} already exists")
    return ok("User updated successfully", user_out(user))


@router.delete("/{user_id}")
async def delete_user(user_id: PydanticObjectId, identity: CurrentIdentity):
    ensure_self_or_admin(identity, user_id, "You can delete only your account")
    user = await _get_user(user_id)
    await delete_user_records(user.id)
    await user.delete()
    logger.info("User %s deleted by %s", user_id, identity.id)
    return ok("Account Deleted")
