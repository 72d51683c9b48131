"""Attendance report export as CSV or Excel."""
import io

import pandas as pd

from hrdesk.models.attendance import Attendance, AttendanceEntry
from hrdesk.models.user import User

REPORT_COLUMNS = ["Date", "User ID", "Name", "Email", "Status", "In Time", "Out Time"]


def attendance_frame(rows: list[tuple[Attendance, AttendanceEntry]], users: dict[str, User]) -> pd.DataFrame:
    data = []
    for record, entry in rows:
        user = users.get(str(record.user))
        data.append(
            {
                "Date": entry.date,
                "User ID": str(record.user),
                "Name": user.display_name if user else "Unknown",
                "Email": user.email if user else "",
                "Status": entry.status,
                "In Time": entry.in_time or "",
                "Out Time": entry.out_time or "",
            }
        )
    df = pd.DataFrame(data, columns=REPORT_COLUMNS)
    return df.sort_values(["Date", "Name"], kind="stable").reset_index(drop=True)


def to_csv(df: pd.DataFrame) -> str:
    stream = io.StringIO()
    df.to_csv(stream, index=False)
    return stream.getvalue()


def to_excel(df: pd.DataFrame) -> io.BytesIO:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    output.seek(0)
    return output
