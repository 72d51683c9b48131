from datetime import date
from typing import Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from hrdesk.api.deps import AdminOnly, CurrentIdentity, CurrentUser, EmployeeOnly
from hrdesk.api.responses import ok
from hrdesk.errors import NotFound
from hrdesk.models.attendance import (
    AttendanceUpdateRequest,
    DailyAttendanceOut,
    MarkAttendanceRequest,
    attendance_entry_out,
    attendance_out,
)
from hrdesk.models.user import User
from hrdesk.services import attendance as attendance_service
from hrdesk.services import reports

router = APIRouter()


def _parse_day(value: str) -> str:
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format (YYYY-MM-DD)")


@router.post("/mark-attendance", status_code=status.HTTP_201_CREATED)
async def mark_attendance(data: MarkAttendanceRequest, identity: EmployeeOnly, user: CurrentUser):
    """Mark the caller's attendance for a date (Users only). Marking a date again overwrites it."""
    record, _, _ = await attendance_service.mark_attendance(
        user.id,
        data.date,
        data.attendance,
        in_time=data.in_time,
        out_time=data.out_time,
    )
    return ok("Attendance marked successfully", attendance_out(record).attendance)


@router.get("/get-attendance")
async def get_own_attendance(identity: CurrentIdentity):
    record = await attendance_service.get_user_attendance(PydanticObjectId(identity.id))
    return ok("Attendance fetched successfully", attendance_out(record))


@router.get("/report")
async def download_attendance_report(
    from_date: str,
    to_date: str,
    admin: AdminOnly,
    format: str = Query("csv", enum=["csv", "excel"]),
):
    """Download every user's attendance between two dates (Admin only)."""
    d_from = _parse_day(from_date)
    d_to = _parse_day(to_date)

    rows = await attendance_service.attendance_between(d_from, d_to)
    if not rows:
        raise NotFound("No records found for the given criteria")
    users = {str(u.id): u for u in await User.find_all().to_list()}
    df = reports.attendance_frame(rows, users)

    filename = f"attendance_{d_from}_{d_to}"
    if format == "csv":
        return StreamingResponse(
            iter([reports.to_csv(df)]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}.csv"},
        )
    return StreamingResponse(
        reports.to_excel(df),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}.xlsx"},
    )


@router.put("/{user_id}")
async def update_attendance(user_id: PydanticObjectId, data: AttendanceUpdateRequest, admin: AdminOnly):
    """Correct a user's existing entry for a date (Admin only)."""
    entry = await attendance_service.update_attendance(
        user_id, data.date, data.status, in_time=data.in_time, out_time=data.out_time
    )
    return ok("Attendance updated successfully", attendance_entry_out(entry))


@router.get("/{user_id}")
async def get_user_attendance(user_id: PydanticObjectId, admin: AdminOnly):
    record = await attendance_service.get_user_attendance(user_id)
    return ok("Attendance fetched successfully", attendance_out(record))


@router.get("/")
async def list_attendance(admin: AdminOnly, date: Optional[str] = None):
    """All attendance records, or each user's entry for one ``date``."""
    if not date:
        records = await attendance_service.list_attendance()
        return ok("Attendance fetched successfully", [attendance_out(r) for r in records])

    day = _parse_day(date)
    rows = await attendance_service.attendance_on(day)
    return ok(
        "Attendance fetched successfully",
        [
            DailyAttendanceOut(
                user_id=str(record.user),
                attendance_id=str(entry.id),
                date=entry.date,
                status=entry.status,
                in_time=entry.in_time,
                out_time=entry.out_time,
            )
            for record, entry in rows
        ],
    )
