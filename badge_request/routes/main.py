from flask import Blueprint, render_template, redirect, url_for, request, flash

from badge_request.services.entries import ErrorKind
from badge_request.services.form_sessions import current_form, peek_form, release_form

bp = Blueprint("main", __name__)

FORM_FIELDS = ("requester_name", "company", "employee_name", "id_kind", "ldap", "ain")

ERROR_STATUS = {
    ErrorKind.BUSY: 409,
    ErrorKind.PERSISTENCE: 502,
    ErrorKind.NOTIFICATION: 502,
}


def _apply_form_edits(form):
    """Copy the posted field values into the form controller."""
    changes = {name: request.form[name] for name in FORM_FIELDS if name in request.form}
    form.on_edit(**changes)


def _render_rejected(form, outcome):
    error = outcome.error
    if error.field is None:
        flash(error.message, "warning" if error.kind == ErrorKind.PARTIAL_INPUT else "error")
    status = ERROR_STATUS.get(error.kind, 400)
    return render_template("form/index.html", **form.view()), status


@bp.route("/")
def index():
    """Badge request form."""
    form = peek_form()
    return render_template("form/index.html", **form.view())


@bp.route("/edit", methods=["POST"])
def edit():
    """Apply field changes and redraw the form without adding anything."""
    form = current_form()
    _apply_form_edits(form)
    return render_template("form/index.html", **form.view())


@bp.route("/entries", methods=["POST"])
def add_entry():
    """Validate, save and keep one employee entry."""
    form = current_form()
    _apply_form_edits(form)

    outcome = form.on_add()
    if not outcome.accepted:
        return _render_rejected(form, outcome)

    flash(f"Added {outcome.entry.employee_name}", "success")
    return redirect(url_for("main.index"))


@bp.route("/submit", methods=["POST"])
def submit():
    """Send all entries to the IT coordinator."""
    form = current_form()
    _apply_form_edits(form)

    outcome = form.on_submit()
    if not outcome.accepted:
        return _render_rejected(form, outcome)

    release_form()
    flash("Your badge request has been sent.", "success")
    return redirect(url_for("main.index"))


@bp.route("/reset", methods=["POST"])
def reset():
    """Discard the entries collected in this session."""
    form = current_form()
    outcome = form.reset()
    if not outcome.accepted:
        return _render_rejected(form, outcome)

    release_form()
    flash("Form cleared", "info")
    return redirect(url_for("main.index"))
