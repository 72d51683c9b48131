"""Find-or-create and revision-checked saves for per-user aggregates.

Attendance, task and leave records are one document per user. Each
mutation reads the document, changes it in memory and saves it back with
Beanie's revision check, so a concurrent writer that saved in between
causes a ``Conflict`` instead of a silently lost update.
"""
from __future__ import annotations

import logging
from typing import Optional, TypeVar

from beanie import Document, PydanticObjectId
from beanie.exceptions import RevisionIdWasChanged
from pymongo.errors import DuplicateKeyError

from hrdesk.errors import Conflict
from hrdesk.models import Attendance, Leave, LeaveCategory, Task

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Document)

USER_RECORD_MODELS: list[type[Document]] = [Attendance, Task, Leave]


async def get_record(model: type[RecordT], user_id: PydanticObjectId) -> Optional[RecordT]:
    return await model.find_one({"user": user_id})


async def get_or_create_record(model: type[RecordT], user_id: PydanticObjectId) -> RecordT:
    """Return the user's aggregate, inserting an empty one on first write."""
    record = await get_record(model, user_id)
    if record:
        return record
    record = model(user=user_id)
    try:
        await record.insert()
    except DuplicateKeyError:
        # another request created it first; the unique index on ``user`` kept it single
        record = await get_record(model, user_id)
    return record


async def save_record(record: Document) -> None:
    try:
        await record.save()
    except RevisionIdWasChanged:
        logger.warning("Concurrent update on %s %s", record.get_settings().name, record.id)
        raise Conflict("The record was modified by another request, please retry")


async def find_record_with(model: type[RecordT], path: str, sub_id: PydanticObjectId) -> Optional[RecordT]:
    """Find the aggregate holding the sub-entry ``sub_id`` at ``path``."""
    return await model.find_one({f"{path}.id": sub_id})


async def get_categories() -> LeaveCategory:
    categories = await LeaveCategory.find_one(LeaveCategory.key == "default")
    if categories:
        return categories
    categories = LeaveCategory()
    try:
        await categories.insert()
    except DuplicateKeyError:
        categories = await LeaveCategory.find_one(LeaveCategory.key == "default")
    return categories


async def delete_user_records(user_id: PydanticObjectId) -> None:
    for model in USER_RECORD_MODELS:
        await model.find({"user": user_id}).delete()
