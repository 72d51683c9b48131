"""Attendance marking and lookups."""
from __future__ import annotations

from typing import Optional

from beanie import PydanticObjectId

from hrdesk.errors import NotFound
from hrdesk.models.attendance import Attendance, AttendanceEntry
from hrdesk.services.records import get_or_create_record, get_record, save_record


async def mark_attendance(
    user_id: PydanticObjectId,
    date: str,
    status: str,
    in_time: Optional[str] = None,
    out_time: Optional[str] = None,
) -> tuple[Attendance, AttendanceEntry, bool]:
    """Record the user's attendance for ``date``; marking the same date again overwrites it."""
    record = await get_or_create_record(Attendance, user_id)
    entry, created = record.upsert_entry(date, status, in_time, out_time)
    await save_record(record)
    return record, entry, created


async def update_attendance(
    user_id: PydanticObjectId,
    date: str,
    status: str,
    in_time: Optional[str] = None,
    out_time: Optional[str] = None,
) -> AttendanceEntry:
    """Correct an existing entry. Unlike marking, never appends."""
    record = await get_record(Attendance, user_id)
    if not record or record.find_entry(date) is None:
        raise NotFound("Attendance record not found for the specified user and date")
    entry, _ = record.upsert_entry(date, status, in_time, out_time)
    await save_record(record)
    return entry


async def get_user_attendance(user_id: PydanticObjectId) -> Attendance:
    record = await get_record(Attendance, user_id)
    if not record:
        raise NotFound("Attendance record not found for the specified user")
    return record


async def list_attendance() -> list[Attendance]:
    return await Attendance.find_all().to_list()


async def attendance_on(day: str) -> list[tuple[Attendance, AttendanceEntry]]:
    """Every user's entry for ``day`` (YYYY-MM-DD)."""
    rows = []
    for record in await list_attendance():
        for entry in record.entries_on(day)[:1]:
            rows.append((record, entry))
    return rows


async def attendance_between(from_date: str, to_date: str) -> list[tuple[Attendance, AttendanceEntry]]:
    """Entries whose date falls in [from_date, to_date], both YYYY-MM-DD."""
    rows = []
    for record in await list_attendance():
        for entry in record.attendance:
            day = entry.date.split("T")[0]
            if from_date <= day <= to_date:
                rows.append((record, entry))
    return rows
