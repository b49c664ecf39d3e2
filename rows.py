from dataclasses import dataclass, fields
from datetime import datetime
from zoneinfo import ZoneInfo


# -----------------------------------------------------------------------------------
# Status & attendance
# -----------------------------------------------------------------------------------

class Status:
    CREATED = "Created"
    VIEWED = "Viewed"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"

    ALL = (CREATED, VIEWED, ACCEPTED, DECLINED)


ATTENDANCE_TEXT = {
    "yes": "Обязательно буду!",
    "no": "На этот раз без меня",
}


def status_for_attendance(attendance: str) -> str:
    return Status.ACCEPTED if attendance == "yes" else Status.DECLINED


def status_after_view(current: str) -> str:
    """Only a fresh invitation moves to Viewed; later states are kept."""
    if current in (Status.VIEWED, Status.ACCEPTED, Status.DECLINED):
        return current
    return Status.VIEWED


def format_timestamp(tz_name="Asia/Almaty", now=None) -> str:
    if now is None:
        now = datetime.now(ZoneInfo(tz_name))
    return now.strftime("%d.%m.%Y, %H:%M")


# -----------------------------------------------------------------------------------
# Record
# -----------------------------------------------------------------------------------

PUBLIC_FIELDS = ("status", "name", "guest", "message")
INTERNAL_FIELDS = ("timestamp", "admin_name", "admin_comment", "uuid", "invite_link")


@dataclass
class InvitationRecord:
    status: str = ""
    timestamp: str = ""
    attendance: str = ""
    admin_name: str = ""
    admin_comment: str = ""
    name: str = ""
    guest: str = ""
    message: str = ""
    uuid: str = ""
    invite_link: str = ""

    def public_view(self):
        return {
            "status": self.status,
            "name": self.name,
            "guest": self.guest,
            "message": self.message,
        }

    def internal_view(self):
        return {field: getattr(self, field) for field in INTERNAL_FIELDS}


# -----------------------------------------------------------------------------------
# Sheet schemas
# -----------------------------------------------------------------------------------

class SheetSchema:
    def __init__(self, name, columns):
        record_fields = {f.name for f in fields(InvitationRecord)}
        unknown = [c for c in columns if c not in record_fields]
        if unknown:
            raise ValueError(f"Unknown columns in schema {name}: {unknown}")

        self.name = name
        self.columns = tuple(columns)

    @property
    def width(self):
        return len(self.columns)

    @property
    def has_invitations(self):
        return "uuid" in self.columns

    def column_index(self, field):
        return self.columns.index(field)

    def to_row(self, record):
        return [getattr(record, column) or "" for column in self.columns]

    def from_row(self, row):
        # The Sheets API drops trailing empty cells
        padded = list(row) + [""] * (self.width - len(row))
        return InvitationRecord(**{column: str(padded[i]) for i, column in enumerate(self.columns)})

    def __repr__(self):
        return f"<SheetSchema {self.name}>"


SCHEMAS = {
    "rsvp": SheetSchema("rsvp", ["timestamp", "attendance", "name", "guest", "message"]),
    "invite": SheetSchema("invite", [
        "status", "timestamp", "name", "guest", "message", "uuid", "invite_link",
    ]),
    "invite_admin": SheetSchema("invite_admin", [
        "status", "timestamp", "admin_name", "admin_comment",
        "name", "guest", "message", "uuid", "invite_link",
    ]),
}


def get_schema(name):
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ValueError(f"Unknown sheet schema: {name!r}") from None


def build_invite_link(base_url, invite_uuid):
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}uuid={invite_uuid}"
