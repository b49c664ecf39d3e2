from google.cloud import firestore
from datetime import datetime, timezone
import json

db = firestore.Client()

def log_invitation_status(request):
    """
    HTTP Cloud Function to log invitation status changes
    """
    if request.method != "POST":
        return ("Method Not Allowed", 405)

    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get("uuid"):
        return ("Invalid JSON", 400)

    log_entry = {
        "action": "INVITATION_STATUS_CHANGED",
        "uuid": data.get("uuid"),
        "name": data.get("name"),
        "new_status": data.get("new_status"),
        "timestamp": datetime.now(timezone.utc)
    }

    db.collection("activity_logs").add(log_entry)

    return json.dumps({"status": "logged"}), 200
