from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import Flask, flash, g, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError
from .model import AuthSession
from .session import SessionContext

SESSION_KEY = "auth"


def _persist(auth_session: Optional[AuthSession]) -> None:
    if auth_session is None:
        session.pop(SESSION_KEY, None)
        return
    data = auth_session.to_dict()
    if session.get(SESSION_KEY) != data:
        session[SESSION_KEY] = data


def load_session_context() -> SessionContext:
    """Session context for the current request, backed by the session cookie."""
    ctx = g.get("session_context")
    if ctx is None:
        ctx = SessionContext(AuthSession.from_dict(session.get(SESSION_KEY)))
        ctx.on_session_change(_persist)
        g.session_context = ctx
    return ctx


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not load_session_context().is_authenticated:
            flash("Please sign in to continue", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def register(app: Flask, container: Container) -> None:
    @app.context_processor
    def inject_current_user():
        return {"current_user": load_session_context().current}

    def _render_auth(mode: str, status: int = 200):
        return render_template("auth.html", mode=mode, form=request.form), status

    @app.route("/", methods=["GET"], endpoint="login")
    def login():
        if load_session_context().is_authenticated:
            return redirect(url_for("dashboard"))
        mode = "signup" if request.args.get("mode") == "signup" else "login"
        return _render_auth(mode)

    @app.route("/login", methods=["POST"], endpoint="login_submit")
    def login_submit():
        ctx = load_session_context()
        try:
            container.auth_service.sign_in(
                ctx,
                request.form.get("email", ""),
                request.form.get("password", ""),
            )
            flash("Signed in successfully", "success")
            return redirect(url_for("dashboard"))
        except (ValidationError, AuthenticationError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Sign-in failed")
            flash("System error while signing in", "danger")
        return _render_auth("login", 400)

    @app.route("/signup", methods=["POST"], endpoint="signup_submit")
    def signup_submit():
        ctx = load_session_context()
        try:
            container.auth_service.sign_up(
                ctx,
                name=request.form.get("name", ""),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                confirm_password=request.form.get("confirm_password", ""),
            )
            flash("Account created", "success")
            return redirect(url_for("dashboard"))
        except (ValidationError, AuthenticationError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("Sign-up failed")
            flash("System error while creating the account", "danger")
        return _render_auth("signup", 400)

    @app.route("/logout", endpoint="logout")
    def logout():
        ctx = load_session_context()
        user_id = ctx.user_id

        def _drop_workspace(auth_session: Optional[AuthSession]) -> None:
            if auth_session is None and user_id:
                container.workspaces.discard(user_id)

        ctx.on_session_change(_drop_workspace)
        container.auth_service.sign_out(ctx)
        flash("Signed out", "info")
        return redirect(url_for("login"))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        return render_template("dashboard.html", active_page="dashboard")
