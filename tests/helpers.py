from credentials import TokenProvider
from sheets import SheetsResult


class FakeTokenProvider(TokenProvider):
    def __init__(self, token="test-token"):
        self.token = token
        self.calls = 0

    def get_token(self):
        self.calls += 1
        return self.token


class InMemorySheets:
    """Stands in for SheetsClient; rows live in a list of lists."""

    def __init__(self, schema, rows=None):
        self.schema = schema
        self.rows = [list(r) for r in rows or []]
        self.calls = []

    def append_row(self, row):
        self.calls.append(("append", list(row)))
        self.rows.append(list(row))
        return SheetsResult(True, values=[])

    def get_all_rows(self):
        self.calls.append(("get",))
        values = []
        for row in self.rows:
            # Mimic the API, which trims trailing empty cells
            trimmed = list(row)
            while trimmed and trimmed[-1] == "":
                trimmed.pop()
            values.append(trimmed)
        return SheetsResult(True, values=values)

    def update_row(self, row_number, row):
        self.calls.append(("update", row_number, list(row)))
        self.rows[row_number - 1] = list(row)
        return SheetsResult(True, values=[])


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.body = body
        self.text = text if text is not None else str(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.body is None:
            raise ValueError("No JSON object could be decoded")
        return self.body


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self):
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self._next()

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


def make_invite_row(invite_uuid, status="Created", admin_name="Aigerim", comment="family", timestamp="01.06.2026, 10:00"):
    return [
        status, timestamp, admin_name, comment, "", "", "", invite_uuid,
        f"https://wedding.test/?uuid={invite_uuid}",
    ]
