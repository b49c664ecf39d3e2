import uuid

from rows import INTERNAL_FIELDS
from tests.helpers import make_invite_row

def create_invite(client, name="Aigerim", comment="bride's side"):
    res = client.post("/create-invite", json={"name": name, "comment": comment})
    assert res.status_code == 200
    return res.get_json()

def test_create_invite_appends_created_row(client, sheets):
    body = create_invite(client)

    assert body["success"] is True
    assert body["message"] == "Приглашение создано"
    uuid.UUID(body["uuid"])
    assert body["inviteLink"] == f"https://wedding.test/?uuid={body['uuid']}"

    record = sheets.schema.from_row(sheets.rows[0])
    assert record.status == "Created"
    assert record.admin_name == "Aigerim"
    assert record.admin_comment == "bride's side"
    assert record.uuid == body["uuid"]
    assert record.invite_link == body["inviteLink"]
    assert record.timestamp

def test_create_invite_requires_name(client, sheets):
    res = client.post("/create-invite", json={"comment": "no name"})
    assert res.status_code == 400
    assert res.get_json()["fields"] == ["name"]
    assert sheets.calls == []

def test_create_invite_regenerates_colliding_uuid(client, sheets, monkeypatch):
    taken = uuid.UUID("11111111-1111-4111-8111-111111111111")
    fresh = uuid.UUID("22222222-2222-4222-8222-222222222222")
    sheets.rows.append(make_invite_row(str(taken)))

    generated = iter([taken, fresh])
    monkeypatch.setattr("app.uuid4", lambda: next(generated))

    body = create_invite(client)
    assert body["uuid"] == str(fresh)
    assert len(sheets.rows) == 2

def test_view_twice_marks_viewed_then_only_refreshes_timestamp(client, sheets, monkeypatch):
    sheets.rows.append(make_invite_row("abc-123"))

    stamps = iter(["02.06.2026, 12:00", "02.06.2026, 12:05"])
    monkeypatch.setattr("app.format_timestamp", lambda tz: next(stamps))

    first = client.get("/invite/abc-123")
    assert first.status_code == 200
    assert first.get_json()["invitation"]["status"] == "Viewed"
    record = sheets.schema.from_row(sheets.rows[0])
    assert (record.status, record.timestamp) == ("Viewed", "02.06.2026, 12:00")

    second = client.get("/invite/abc-123")
    assert second.status_code == 200
    assert second.get_json()["invitation"]["status"] == "Viewed"
    record = sheets.schema.from_row(sheets.rows[0])
    assert (record.status, record.timestamp) == ("Viewed", "02.06.2026, 12:05")

def test_view_keeps_terminal_status(client, sheets):
    sheets.rows.append(make_invite_row("abc-123", status="Accepted"))

    res = client.get("/invite/abc-123")
    assert res.get_json()["invitation"]["status"] == "Accepted"
    assert sheets.schema.from_row(sheets.rows[0]).status == "Accepted"

def test_view_unknown_uuid_is_not_found(client, sheets):
    sheets.rows.append(make_invite_row("abc-123"))

    res = client.get("/invite/missing")
    assert res.status_code == 404
    assert res.get_json() == {"success": False, "error": "Приглашение не найдено"}
    assert not [c for c in sheets.calls if c[0] == "update"]

def test_public_invitation_hides_internal_fields(client, sheets):
    body = create_invite(client, name="Aigerim and family", comment="secret admin note")

    res = client.get(f"/invite/{body['uuid']}")
    invitation = res.get_json()["invitation"]

    assert set(invitation) == {"status", "name", "guest", "message"}
    for field in INTERNAL_FIELDS:
        assert field not in invitation
    raw = res.get_data(as_text=True)
    assert body["uuid"] not in raw
    assert "secret admin note" not in raw
    assert "Aigerim and family" not in raw
    assert invitation["name"] == ""

def test_created_invitation_round_trips_through_lookup(client, sheets):
    body = create_invite(client, name="Aigerim")

    invitation = client.get(f"/invite/{body['uuid']}").get_json()["invitation"]
    assert (invitation["name"], invitation["guest"], invitation["message"]) == ("", "", "")

    client.post("/", json={
        "attendance": "yes",
        "name": "Aigerim B.",
        "guest": "Arman",
        "message": "Congratulations!",
        "uuid": body["uuid"],
    })

    invitation = client.get(f"/invite/{body['uuid']}").get_json()["invitation"]
    assert invitation == {
        "status": "Accepted",
        "name": "Aigerim B.",
        "guest": "Arman",
        "message": "Congratulations!",
    }

def test_status_change_notifies_logger(config, sheets, monkeypatch):
    from app import create_app

    config.rsvp_logger_url = "https://logger.test/log"
    posted = []
    monkeypatch.setattr("app.requests.post", lambda url, json, timeout: posted.append((url, json)))

    client = create_app(config, sheets=sheets).test_client()
    body = client.post("/create-invite", json={"name": "Aigerim"}).get_json()
    client.get(f"/invite/{body['uuid']}")
    client.get(f"/invite/{body['uuid']}")

    assert [p[1]["new_status"] for p in posted] == ["Created", "Viewed"]
    assert posted[0][0] == "https://logger.test/log"
    assert posted[0][1]["uuid"] == body["uuid"]

def test_create_invite_on_rsvp_only_sheet_is_a_configuration_error(config, caplog):
    from app import create_app
    from rows import get_schema
    from tests.helpers import InMemorySheets

    sheets = InMemorySheets(get_schema("rsvp"))
    client = create_app(config, sheets=sheets).test_client()

    res = client.post("/create-invite", json={"name": "Aigerim"})
    assert res.status_code == 500
    assert res.get_json() == {"success": False, "error": "Ошибка обработки запроса. Попробуйте еще раз."}
    assert sheets.calls == []
    assert "Configuration error: SHEET_SCHEMA=rsvp has no invitation columns" in caplog.text
    assert "Google Sheets error" not in caplog.text
