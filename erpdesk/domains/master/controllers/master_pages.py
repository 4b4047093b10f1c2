"""Master data HTML pages."""

from __future__ import annotations

from flask import Blueprint, redirect, render_template, request, url_for

from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.roles import Role
from erpdesk.core.auth.services import get_auth_client
from erpdesk.core.pages.crud import CrudViews, end_session, notify
from erpdesk.core.pages.forms import FORM_ERROR_KEY, validate_form
from erpdesk.core.utils.decorators import csrf_protected
from erpdesk.domains.master.resources import companies, items, suppliers, users
from erpdesk.domains.master.schemas.master_schemas import UserRegisterForm
from erpdesk.domains.master.services.user_service import register_user

master_pages_bp = Blueprint("master_pages", __name__)

CrudViews(companies).register(master_pages_bp, "/companies")
CrudViews(items).register(master_pages_bp, "/items")
CrudViews(suppliers).register(master_pages_bp, "/suppliers")
CrudViews(users, list_template="master/users.html").register(master_pages_bp, "/users")


@master_pages_bp.route("/users/register", methods=["GET", "POST"])
@auth_guard(Role.ADMIN)
@csrf_protected
def register_user_page():
    values = {k: v for k, v in request.form.items() if "password" not in k.lower()}
    if request.method == "GET":
        return render_template("master/register_user.html", values={"role": Role.USER.value}, errors={}, roles=list(Role))

    form, errors = validate_form(UserRegisterForm, request.form)
    if form is None:
        return render_template("master/register_user.html", values=values, errors=errors, roles=list(Role)), 400

    client = get_auth_client()
    note = register_user(client, form)
    if not client.is_authenticated():
        return end_session()
    if not note.ok:
        errors = {FORM_ERROR_KEY: note.message}
        return render_template("master/register_user.html", values=values, errors=errors, roles=list(Role)), 400

    notify(note)
    return redirect(url_for("master_pages.users_list"))
