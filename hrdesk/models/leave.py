"""Leave applications and the global leave category list."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class LeaveEntry(BaseModel):
    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    user_name: str
    compensatory: bool = False
    date: str
    category: str
    reason: str
    upto: Optional[str] = None
    status: LeaveStatus = LeaveStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Leave(Document):
    user: Indexed(PydanticObjectId, unique=True)
    leaves: list[LeaveEntry] = Field(default_factory=list)

    class Settings:
        name = "leaves"
        use_state_management = True
        use_revision = True

    def find_entry(self, leave_id: PydanticObjectId) -> Optional[LeaveEntry]:
        for entry in self.leaves:
            if entry.id == leave_id:
                return entry
        return None

    def set_status(self, leave_id: PydanticObjectId, status: LeaveStatus) -> Optional[LeaveEntry]:
        entry = self.find_entry(leave_id)
        if entry is None:
            return None
        entry.status = status
        entry.updated_at = datetime.now(timezone.utc)
        return entry

    def remove_entry(self, leave_id: PydanticObjectId) -> Optional[LeaveEntry]:
        entry = self.find_entry(leave_id)
        if entry is not None:
            self.leaves.remove(entry)
        return entry


class LeaveCategoryItem(BaseModel):
    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    category: str


class LeaveCategory(Document):
    """The one global document listing the leave categories."""

    key: Indexed(str, unique=True) = "default"
    categories: list[LeaveCategoryItem] = Field(default_factory=list)

    class Settings:
        name = "leave_categories"
        use_state_management = True
        use_revision = True

    def has(self, name: str) -> bool:
        return any(c.category == name for c in self.categories)

    def add(self, name: str) -> Optional[LeaveCategoryItem]:
        """Append ``name``; returns None when it already exists (exact match)."""
        if self.has(name):
            return None
        item = LeaveCategoryItem(category=name)
        self.categories.append(item)
        return item

    def remove(self, category_id: PydanticObjectId) -> Optional[LeaveCategoryItem]:
        for item in self.categories:
            if item.id == category_id:
                self.categories.remove(item)
                return item
        return None


class LeaveApplication(BaseModel):
    model_config = ConfigDict(extra="forbid")
    compensatory: bool = False
    date: str = Field(min_length=1)
    category: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    upto: Optional[str] = None


class ApplyLeaveRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    leaves: list[LeaveApplication] = Field(min_length=1)


class LeaveStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    new_status: LeaveStatus


class LeaveCategoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    category: str = Field(min_length=1)


class LeaveEntryOut(BaseModel):
    id: str
    user_name: str
    compensatory: bool
    date: str
    category: str
    reason: str
    upto: Optional[str] = None
    status: LeaveStatus
    created_at: datetime
    updated_at: datetime


class LeaveOut(BaseModel):
    id: str
    user: str
    leaves: list[LeaveEntryOut]


class LeaveCategoryOut(BaseModel):
    id: str
    category: str


def leave_entry_out(entry: LeaveEntry) -> LeaveEntryOut:
    return LeaveEntryOut(id=str(entry.id), **entry.model_dump(exclude={"id"}))


def leave_out(record: Leave) -> LeaveOut:
    return LeaveOut(id=str(record.id), user=str(record.user), leaves=[leave_entry_out(e) for e in record.leaves])


def leave_category_out(item: LeaveCategoryItem) -> LeaveCategoryOut:
    return LeaveCategoryOut(id=str(item.id), category=item.category)
