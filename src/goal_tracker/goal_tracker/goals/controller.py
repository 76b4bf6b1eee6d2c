from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    LockedForEditingError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (LockedForEditingError, 423),
)


def register(app: Flask, container) -> None:
    goals = container.goal_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _principal() -> dict:
        try:
            role = Role(session.get("role") or Role.STAFF.value)
        except ValueError:
            role = Role.STAFF
        return {"current_user_id": int(session["user_id"]), "current_role": role}

    def _payload() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _optional_int(value, field_name: str):
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValidationError(f"{field_name} must be an integer")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} must be an integer")

    def _error(e: Exception):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                if isinstance(e, LockedForEditingError):
                    app.logger.info("progress update refused: %s", e)
                return jsonify({"success": False, "message": str(e)}), status

        app.logger.exception("goal request failed")
        if isinstance(e, DomainError) and bool(app.config.get("DEBUG", False)):
            return jsonify({"success": False, "message": f"Action failed: {e}"}), 500
        return jsonify({"success": False, "message": "Action failed"}), 500

    @app.route("/api/goals", methods=["GET"], endpoint="list_goals")
    @login_required
    def list_goals():
        try:
            owner_id = _optional_int(request.args.get("owner_id"), "owner_id")
            data = goals.list_view(owner_id=owner_id, **_principal())
            return jsonify({"success": True, **data})
        except Exception as e:
            return _error(e)

    @app.route("/api/goals", methods=["POST"], endpoint="create_goal")
    @login_required
    def create_goal():
        try:
            data = _payload()
            principal = _principal()
            goal_id = goals.create_objective(
                current_user_id=principal["current_user_id"],
                objective=data.get("objective", ""),
                key_results=data.get("keyResult") or data.get("key_results") or [],
                duedate=data.get("duedate"),
                priority=data.get("priority") or "Medium",
                category=data.get("category", ""),
            )
            obj = goals.get_objective(goal_id=goal_id, **principal)
            return jsonify({"success": True, "goal": goals.to_view(obj)}), 201
        except Exception as e:
            return _error(e)

    @app.route("/api/goals/<int:goal_id>", methods=["GET"], endpoint="get_goal")
    @login_required
    def get_goal(goal_id: int):
        try:
            obj = goals.get_objective(goal_id=goal_id, **_principal())
            return jsonify({"success": True, "goal": goals.to_view(obj)})
        except Exception as e:
            return _error(e)

    @app.route("/api/goals/<int:goal_id>", methods=["PUT"], endpoint="edit_goal")
    @login_required
    def edit_goal(goal_id: int):
        try:
            data = _payload()
            obj = goals.edit_objective(
                goal_id=goal_id,
                objective=data.get("objective", ""),
                key_results=data.get("keyResult") or data.get("key_results") or [],
                priority=data.get("priority"),
                status=data.get("status"),
                duedate=data.get("duedate"),
                category=data.get("category", ""),
                progress=data.get("progress", 0),
                expected_version=_optional_int(data.get("version"), "version"),
                **_principal(),
            )
            return jsonify({"success": True, "goal": goals.to_view(obj)})
        except Exception as e:
            return _error(e)

    @app.route("/api/goals/<int:goal_id>", methods=["DELETE"], endpoint="delete_goal")
    @login_required
    def delete_goal(goal_id: int):
        try:
            goals.delete_objective(goal_id=goal_id, **_principal())
            return jsonify({"success": True})
        except Exception as e:
            return _error(e)

    @app.route("/api/goals/<int:goal_id>/progress", methods=["POST"], endpoint="log_goal_progress")
    @login_required
    def log_goal_progress(goal_id: int):
        try:
            data = _payload()
            key_index = _optional_int(data.get("keyIndex", data.get("key_index")), "keyIndex")
            if key_index is None:
                raise ValidationError("keyIndex is required")

            result = goals.log_progress(
                goal_id=goal_id,
                key_index=key_index,
                progress=data.get("progress"),
                **_principal(),
            )
            return (
                jsonify({"success": True, "log_id": result.log_id, "goal": goals.to_view(result.objective)}),
                201,
            )
        except Exception as e:
            return _error(e)

    @app.route("/api/goals/<int:goal_id>/progress", methods=["GET"], endpoint="goal_progress_log")
    @login_required
    def goal_progress_log(goal_id: int):
        try:
            limit = _optional_int(request.args.get("limit"), "limit")
            entries = goals.get_progress_log(goal_id=goal_id, limit=limit, **_principal())
            return jsonify({"success": True, "entries": [goals.log_entry_view(e) for e in entries]})
        except Exception as e:
            return _error(e)
