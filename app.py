# -----------------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------------

from uuid import uuid4

import requests
from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from credentials import token_provider_from_config
from errors import MESSAGES, ConfigurationError, HandlerError, InvitationNotFound, UpstreamError
from rows import (
    ATTENDANCE_TEXT,
    InvitationRecord,
    Status,
    build_invite_link,
    format_timestamp,
    get_schema,
    status_after_view,
    status_for_attendance,
)
from sheets import SheetsClient, find_row
from validation import InviteSubmission, RsvpSubmission, validate_body

bp = Blueprint("rsvp", __name__)


# -----------------------------------------------------------------------------------
# Functions (helpers, integrations)
# -----------------------------------------------------------------------------------

def get_config() -> Config:
    return current_app.extensions["rsvp_config"]

def get_sheets() -> SheetsClient:
    return current_app.extensions["sheets"]

def require_success(result, action):
    if not result.success:
        current_app.logger.error("Google Sheets error while trying to %s: %s", action, result.error)
        raise UpstreamError(f"{action}: {result.error}")
    return result

def lookup_invitation(sheets, invite_uuid):
    result, row_number, row = find_row(sheets, invite_uuid)
    require_success(result, "look up invitation")
    if row_number is None:
        raise InvitationNotFound(invite_uuid)
    return row_number, sheets.schema.from_row(row)

def notify_status_change(record):
    url = get_config().rsvp_logger_url
    if not url:
        return

    payload = {
        "uuid": record.uuid,
        "name": record.name or record.admin_name,
        "new_status": record.status,
    }

    try:
        requests.post(url, json=payload, timeout=3)
    except requests.RequestException as e:
        current_app.logger.warning("RSVP logger call failed: %s", e)

def json_response(data, status=200):
    return jsonify(data), status


# -----------------------------------------------------------------------------------
# CORS & error normalisation
# -----------------------------------------------------------------------------------

@bp.before_app_request
def cors_preflight():
    if request.method == "OPTIONS":
        return "", 200, {
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
        }

@bp.after_app_request
def allow_any_origin(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response

@bp.app_errorhandler(404)
@bp.app_errorhandler(405)
def method_not_allowed(e):
    return "Method not allowed", 405, {"Content-Type": "text/plain; charset=utf-8"}

@bp.app_errorhandler(HandlerError)
def handler_error(e):
    if isinstance(e, ConfigurationError):
        current_app.logger.error("Configuration error: %s", e)
    elif e.status_code >= 500:
        current_app.logger.error("Request failed: %s", e)
    return json_response(e.to_dict(), e.status_code)

@bp.app_errorhandler(Exception)
def unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    current_app.logger.exception("Unhandled error while processing request")
    return json_response({"success": False, "error": MESSAGES["internal"]}, 500)


# -----------------------------------------------------------------------------------
# Routes: Invitations (admin)
# -----------------------------------------------------------------------------------

@bp.route("/create-invite", methods=["POST"])
def create_invite():
    submission = validate_body(InviteSubmission, request.get_json(silent=True))
    config = get_config()
    sheets = get_sheets()
    schema = sheets.schema

    if not schema.has_invitations:
        raise ConfigurationError(f"SHEET_SCHEMA={schema.name} has no invitation columns")

    existing_rows = require_success(sheets.get_all_rows(), "read existing invitations").values
    uuid_col = schema.column_index("uuid")
    taken = {row[uuid_col] for row in existing_rows if len(row) > uuid_col}

    # Regenerate on the (practically impossible) chance of a collision
    while True:
        invite_uuid = str(uuid4())
        if invite_uuid not in taken:
            break

    record = InvitationRecord(
        status=Status.CREATED,
        timestamp=format_timestamp(config.timezone),
        admin_name=submission.name,
        admin_comment=submission.comment,
        uuid=invite_uuid,
        invite_link=build_invite_link(config.invite_base_url, invite_uuid),
    )
    # Schemas without admin columns address the guest by the user name column
    if "admin_name" not in schema.columns:
        record.name = submission.name

    require_success(sheets.append_row(schema.to_row(record)), "append invitation")
    current_app.logger.info("Created invitation %s", invite_uuid)
    notify_status_change(record)

    return json_response({
        "success": True,
        "message": MESSAGES["invite_created"],
        "uuid": invite_uuid,
        "inviteLink": record.invite_link,
    })


# -----------------------------------------------------------------------------------
# Routes: Invitations (guest view)
# -----------------------------------------------------------------------------------

@bp.route("/invite/<invite_uuid>", methods=["GET"])
def view_invite(invite_uuid):
    sheets = get_sheets()
    if not sheets.schema.has_invitations:
        raise InvitationNotFound(invite_uuid)

    row_number, record = lookup_invitation(sheets, invite_uuid)

    previous_status = record.status
    record.status = status_after_view(record.status)
    record.timestamp = format_timestamp(get_config().timezone)

    require_success(sheets.update_row(row_number, sheets.schema.to_row(record)), "mark invitation viewed")
    if record.status != previous_status:
        notify_status_change(record)

    return json_response({"success": True, "invitation": record.public_view()})


# -----------------------------------------------------------------------------------
# Routes: RSVP submission
# -----------------------------------------------------------------------------------

@bp.route("/", methods=["POST"])
def submit_rsvp():
    submission = validate_body(RsvpSubmission, request.get_json(silent=True))
    sheets = get_sheets()
    schema = sheets.schema

    status = status_for_attendance(submission.attendance)
    timestamp = format_timestamp(get_config().timezone)

    if submission.uuid:
        if not schema.has_invitations:
            raise InvitationNotFound(submission.uuid)

        row_number, record = lookup_invitation(sheets, submission.uuid)
        record.status = status
        record.timestamp = timestamp
        record.attendance = ATTENDANCE_TEXT[submission.attendance]
        record.name = submission.name
        record.guest = submission.guest
        record.message = submission.message

        require_success(sheets.update_row(row_number, schema.to_row(record)), "save RSVP")
        notify_status_change(record)
    else:
        record = InvitationRecord(
            status=status,
            timestamp=timestamp,
            attendance=ATTENDANCE_TEXT[submission.attendance],
            name=submission.name,
            guest=submission.guest,
            message=submission.message,
        )
        require_success(sheets.append_row(schema.to_row(record)), "save RSVP")

    current_app.logger.info("RSVP saved: %s", status)
    return json_response({"success": True, "message": MESSAGES["rsvp_saved"]})


# -----------------------------------------------------------------------------------
# Setup
# -----------------------------------------------------------------------------------

def create_app(config=None, sheets=None, token_provider=None):
    if config is None:
        config = Config.from_env()

    app = Flask(__name__)
    app.json.ensure_ascii = False

    if sheets is None:
        sheets = SheetsClient(
            config.sheets_id,
            config.sheet_name,
            token_provider or token_provider_from_config(config),
            get_schema(config.sheet_schema),
            timeout=config.sheets_timeout,
        )

    app.extensions["rsvp_config"] = config
    app.extensions["sheets"] = sheets
    app.register_blueprint(bp)

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
