from flask import Blueprint, jsonify, current_app
from pymongo.errors import PyMongoError

from inspect_schema import inspect_schema
from manifest import BUDGET_TRACKER_MANIFEST

# Blueprint for liveness / schema drift checks
bp = Blueprint("health", __name__, url_prefix="/api")


@bp.get("/health")
def health():
    """
    Report database reachability and schema drift.
    200 when every manifest collection and index is in place, 503 otherwise.
    """
    db = current_app.extensions["budget_db"]
    try:
        status = inspect_schema(db, BUDGET_TRACKER_MANIFEST)
    except PyMongoError as e:
        return jsonify({"ok": False, "error": f"Database error: {str(e)}"}), 500

    body = {"ok": status.in_sync, "database": db.name, "schema": status.to_dict()}
    return jsonify(body), (200 if status.in_sync else 503)
