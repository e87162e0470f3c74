from __future__ import annotations

from dataclasses import asdict

from flask import Flask, flash, redirect, render_template, request, url_for
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from ..auth.controller import load_session_context, login_required
from ..container import Container
from ..core.enums import ReturnReason, Urgency
from ..core.exceptions import DeliveryError, ValidationError
from .model import Attachment
from .service import ReturnForm


def _uploaded_attachments() -> list[Attachment]:
    attachments = []
    for f in request.files.getlist("files"):
        if not f or not f.filename:
            continue
        attachments.append(
            Attachment(
                filename=secure_filename(f.filename) or "attachment",
                content_type=f.mimetype or "application/octet-stream",
                data=f.read(),
            )
        )
    return attachments


def register(app: Flask, container: Container) -> None:
    def _render(form: ReturnForm, status: int = 200):
        return (
            render_template(
                "returns/form.html",
                form=asdict(form),
                reasons=list(ReturnReason),
                urgencies=list(Urgency),
                max_attachments=app.config.get("MAX_ATTACHMENTS", 10),
                active_page="returns",
            ),
            status,
        )

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        flash("Attachments exceed the 10MB total limit", "danger")
        return redirect(url_for("returns"))

    @app.route("/returns", methods=["GET", "POST"], endpoint="returns")
    @login_required
    def returns():
        if request.method == "GET":
            return _render(ReturnForm())

        form = ReturnForm.from_mapping(request.form)
        try:
            container.returns_service.submit(
                form,
                _uploaded_attachments(),
                submitted_by=load_session_context().current.label,
            )
            flash("Return submitted successfully! Documents will be emailed shortly.", "success")
            return redirect(url_for("returns"))
        except (ValidationError, DeliveryError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Return submission failed")
            flash("System error while submitting the return", "danger")
        return _render(form, 400)
