from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..auth.controller import load_session_context, login_required
from ..common.validators import FIELD_FILTERS, accepts_field
from ..container import Container
from ..core.constants import MONTH_NAMES
from ..core.enums import ServiceType
from ..core.exceptions import DeliveryError, SubmissionInProgressError, ValidationError
from .service import AttendanceWorkspace


def register(app: Flask, container: Container) -> None:
    def _workspace() -> AttendanceWorkspace:
        return container.workspaces.get(load_session_context().user_id)

    def _apply_location(ws: AttendanceWorkspace) -> None:
        if "district" in request.form or "congregation" in request.form:
            ws.set_location(
                district=request.form.get("district", ws.location.district),
                congregation=request.form.get("congregation", ws.location.congregation),
            )

    @app.route("/attendance", methods=["GET"], endpoint="attendance")
    @login_required
    def attendance():
        ws = _workspace()
        return render_template(
            "attendance/sheet.html",
            location=ws.location,
            draft=ws.draft,
            entries=ws.ledger.entries,
            sheet_numbers=ws.ledger.sheet_numbers(),
            totals=ws.totals(),
            state=ws.state,
            month_names=MONTH_NAMES,
            service_types=list(ServiceType),
            active_page="attendance",
        )

    @app.route("/attendance/location", methods=["POST"], endpoint="attendance_location")
    @login_required
    def attendance_location():
        _apply_location(_workspace())
        return redirect(url_for("attendance"))

    @app.route("/attendance/entries", methods=["POST"], endpoint="attendance_add_entry")
    @login_required
    def attendance_add_entry():
        ws = _workspace()
        try:
            _apply_location(ws)
            rejected = ws.update_draft(request.form)
            if rejected:
                raise ValidationError(f"Invalid input for: {', '.join(rejected)}")
            entry = ws.add_current_entry()
            flash(f"Entry added for Day {entry.day}", "success")
        except (ValidationError, SubmissionInProgressError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Adding attendance entry failed")
            flash("System error while adding the entry", "danger")
        return redirect(url_for("attendance"))

    @app.route("/attendance/entries/<int:entry_id>/delete", methods=["POST"], endpoint="attendance_remove_entry")
    @login_required
    def attendance_remove_entry(entry_id: int):
        try:
            if _workspace().remove_entry(entry_id):
                flash("Entry removed", "info")
        except SubmissionInProgressError as e:
            flash(str(e), "danger")
        return redirect(url_for("attendance"))

    @app.route("/attendance/clear", methods=["POST"], endpoint="attendance_clear")
    @login_required
    def attendance_clear():
        try:
            _workspace().clear_sheet()
            flash("Monthly sheet cleared", "info")
        except SubmissionInProgressError as e:
            flash(str(e), "danger")
        return redirect(url_for("attendance"))

    @app.route("/attendance/submit", methods=["POST"], endpoint="attendance_submit")
    @login_required
    def attendance_submit():
        ws = _workspace()
        ctx = load_session_context()
        try:
            _apply_location(ws)
            snapshot = ws.submit(submitted_by=ctx.current.label)
            loc = snapshot.location
            flash(
                f"Monthly sheet submitted! {snapshot.totals.entry_count} entries sent for "
                f"{loc.district} - {loc.congregation}",
                "success",
            )
        except (ValidationError, SubmissionInProgressError) as e:
            flash(str(e), "danger")
        except DeliveryError as e:
            flash(f"{e} Your entries were kept.", "danger")
        except Exception:
            app.logger.exception("Monthly sheet submission failed")
            flash("System error while submitting the monthly sheet", "danger")
        finally:
            ws.acknowledge()
        return redirect(url_for("attendance"))

    @app.route("/api/attendance/totals", methods=["GET"], endpoint="api_attendance_totals")
    @login_required
    def api_attendance_totals():
        ws = _workspace()
        return jsonify({"success": True, "state": ws.state.value, "totals": ws.totals().as_dict()})

    @app.route("/api/attendance/draft", methods=["POST"], endpoint="api_attendance_draft")
    @login_required
    def api_attendance_draft():
        data = request.get_json(silent=True) or {}
        name = str(data.get("field", ""))
        accepted = _workspace().update_field(name, data.get("value"))
        return jsonify({"success": True, "field": name, "accepted": accepted})

    @app.route("/api/fields/<field>/check", methods=["POST"], endpoint="api_field_check")
    def api_field_check(field: str):
        if field not in FIELD_FILTERS:
            return jsonify({"success": False, "message": f"Unknown field: {field}"}), 404
        data = request.get_json(silent=True) or {}
        value = str(data.get("value", ""))
        return jsonify({"success": True, "field": field, "value": value, "accepted": accepts_field(field, value)})
