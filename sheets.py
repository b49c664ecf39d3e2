import logging
from typing import NamedTuple, Optional
from urllib.parse import quote

import requests
from flask import g, has_app_context

from config import SHEETS_API_BASE

logger = logging.getLogger(__name__)


class SheetsResult(NamedTuple):
    success: bool
    values: Optional[list] = None
    error: Optional[str] = None


def column_letter(n: int) -> str:
    letters = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


class SheetsClient:
    """Thin client for the Sheets v4 values API, scoped to one sheet tab."""

    def __init__(self, spreadsheet_id, sheet_name, token_provider, schema, session=None, timeout=10):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.token_provider = token_provider
        self.schema = schema
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, range_, suffix=""):
        return f"{SHEETS_API_BASE}/{self.spreadsheet_id}/values/{quote(range_)}{suffix}"

    def _access_token(self):
        """One token exchange per request; a failed exchange is not retried."""
        if not has_app_context():
            return self.token_provider.get_token()

        tokens = g.setdefault("sheets_tokens", {})
        key = id(self.token_provider)
        if key not in tokens:
            tokens[key] = self.token_provider.get_token()
        return tokens[key]

    def _request(self, method, url, **kwargs):
        if not self.spreadsheet_id:
            return SheetsResult(False, error="Spreadsheet id is not configured")

        access_token = self._access_token()
        if not access_token:
            return SheetsResult(False, error="Failed to get access token")

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("Sheets request %s %s failed: %s", method, url, e)
            return SheetsResult(False, error=str(e))

        if not response.ok:
            logger.error("Sheets API error: %s %s", response.status_code, response.text)
            return SheetsResult(False, error=f"API error: {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            logger.error("Sheets API returned a non-JSON body for %s %s", method, url)
            return SheetsResult(False, error="Malformed API response")

        return SheetsResult(True, values=body.get("values", []) if isinstance(body, dict) else None)

    def append_row(self, row):
        return self._request(
            "POST",
            self._url(self.sheet_name, ":append"),
            params={"valueInputOption": "RAW"},
            json={"values": [row], "majorDimension": "ROWS"},
        )

    def get_all_rows(self):
        result = self._request("GET", self._url(self.sheet_name))
        if result.success and result.values is None:
            return SheetsResult(False, error="Malformed API response")
        return result

    def update_row(self, row_number, row):
        last_col = column_letter(len(row))
        range_ = f"{self.sheet_name}!A{row_number}:{last_col}{row_number}"
        return self._request(
            "PUT",
            self._url(range_),
            params={"valueInputOption": "RAW"},
            json={"values": [row], "majorDimension": "ROWS"},
        )


def find_row(client, invite_uuid):
    """Full scan for the row carrying invite_uuid.

    Returns (result, row_number, row). row_number is the 1-based sheet row,
    both are None when the uuid is absent or the read failed.
    """
    result = client.get_all_rows()
    if not result.success:
        return result, None, None

    uuid_col = client.schema.column_index("uuid")
    for index, row in enumerate(result.values):
        if len(row) > uuid_col and row[uuid_col] == invite_uuid:
            return result, index + 1, row

    return result, None, None
