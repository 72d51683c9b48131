from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class AttendanceEntry(BaseModel):
    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    date: str
    status: str
    in_time: Optional[str] = None
    out_time: Optional[str] = None


class Attendance(Document):
    """All attendance entries of one user, in the order they were marked."""

    user: Indexed(PydanticObjectId, unique=True)
    attendance: list[AttendanceEntry] = Field(default_factory=list)

    class Settings:
        name = "attendance"
        use_state_management = True
        use_revision = True

    def find_entry(self, date: str) -> Optional[AttendanceEntry]:
        for entry in self.attendance:
            if entry.date == date:
                return entry
        return None

    def upsert_entry(
        self,
        date: str,
        status: str,
        in_time: Optional[str] = None,
        out_time: Optional[str] = None,
    ) -> tuple[AttendanceEntry, bool]:
        """Overwrite the entry for ``date`` or append a new one.

        Returns the entry and whether it was created. Times left as None
        keep their stored value.
        """
        entry = self.find_entry(date)
        if entry is None:
            entry = AttendanceEntry(date=date, status=status, in_time=in_time, out_time=out_time)
            self.attendance.append(entry)
            return entry, True
        entry.status = status
        if in_time is not None:
            entry.in_time = in_time
        if out_time is not None:
            entry.out_time = out_time
        return entry, False

    def entries_on(self, day: str) -> list[AttendanceEntry]:
        # stored dates may carry a time part ("2024-01-01T09:00:00")
        return [e for e in self.attendance if e.date.split("T")[0] == day]


class MarkAttendanceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    date: str = Field(min_length=1)
    attendance: str = Field(min_length=1)
    in_time: Optional[str] = None
    out_time: Optional[str] = None


class AttendanceUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    date: str = Field(min_length=1)
    status: str = Field(min_length=1)
    in_time: Optional[str] = None
    out_time: Optional[str] = None


class AttendanceEntryOut(BaseModel):
    id: str
    date: str
    status: str
    in_time: Optional[str] = None
    out_time: Optional[str] = None


class AttendanceOut(BaseModel):
    id: str
    user: str
    attendance: list[AttendanceEntryOut]


class DailyAttendanceOut(BaseModel):
    user_id: str
    attendance_id: str
    date: str
    status: str
    in_time: Optional[str] = None
    out_time: Optional[str] = None


def attendance_entry_out(entry: AttendanceEntry) -> AttendanceEntryOut:
    return AttendanceEntryOut(
        id=str(entry.id),
        date=entry.date,
        status=entry.status,
        in_time=entry.in_time,
        out_time=entry.out_time,
    )


def attendance_out(record: Attendance) -> AttendanceOut:
    return AttendanceOut(
        id=str(record.id),
        user=str(record.user),
        attendance=[attendance_entry_out(e) for e in record.attendance],
    )
