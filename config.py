import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


@dataclass
class Config:
    sheets_id: Optional[str] = None
    sheet_name: str = "Sheet1"
    sheet_schema: str = "invite_admin"

    # Either a JSON credential blob, or an email + PEM private key pair
    service_account_json: Optional[str] = None
    service_account_email: Optional[str] = None
    private_key: Optional[str] = None

    invite_base_url: str = "http://localhost:5000/"
    timezone: str = "Asia/Almaty"
    sheets_timeout: float = 10
    rsvp_logger_url: Optional[str] = None

    @classmethod
    def from_env(cls):
        load_dotenv(os.path.join(basedir, ".env"))

        private_key = os.environ.get("GOOGLE_PRIVATE_KEY")
        if private_key:
            # Keys pasted into env files usually carry literal "\n" escapes
            private_key = private_key.replace("\\n", "\n")

        return cls(
            sheets_id=os.environ.get("GOOGLE_SHEETS_ID"),
            sheet_name=os.environ.get("GOOGLE_SHEET_NAME", "Sheet1"),
            sheet_schema=os.environ.get("SHEET_SCHEMA", "invite_admin"),
            service_account_json=os.environ.get("GOOGLE_SERVICE_ACCOUNT_JSON"),
            service_account_email=os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL"),
            private_key=private_key,
            invite_base_url=os.environ.get("INVITE_BASE_URL", "http://localhost:5000/"),
            timezone=os.environ.get("TIMEZONE", "Asia/Almaty"),
            sheets_timeout=float(os.environ.get("SHEETS_TIMEOUT", "10")),
            rsvp_logger_url=os.environ.get("RSVP_LOGGER_URL") or None,
        )
