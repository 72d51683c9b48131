"""Beanie document models and Pydantic schemas."""
from hrdesk.models.user import User, UserRole, UserCreate, UserUpdate, UserOut
from hrdesk.models.attendance import Attendance, AttendanceEntry
from hrdesk.models.task import Task, TaskGroup, TaskItem, TaskStatus
from hrdesk.models.leave import Leave, LeaveEntry, LeaveStatus, LeaveCategory, LeaveCategoryItem

DOCUMENT_MODELS = [User, Attendance, Task, Leave, LeaveCategory]

__all__ = [
    "User",
    "UserRole",
    "UserCreate",
    "UserUpdate",
    "UserOut",
    "Attendance",
    "AttendanceEntry",
    "Task",
    "TaskGroup",
    "TaskItem",
    "TaskStatus",
    "Leave",
    "LeaveEntry",
    "LeaveStatus",
    "LeaveCategory",
    "LeaveCategoryItem",
    "DOCUMENT_MODELS",
]
