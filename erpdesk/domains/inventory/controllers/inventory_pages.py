"""Inventory HTML pages."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, flash, redirect, render_template, request, url_for

from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.services import get_auth_client
from erpdesk.core.pages.crud import CrudViews, end_session
from erpdesk.core.pages.forms import FORM_ERROR_KEY, line_rows, validate_form
from erpdesk.core.pages.lookups import item_options, warehouse_options
from erpdesk.core.utils.decorators import csrf_protected
from erpdesk.domains.inventory.resources import incoming, inventory_status, outgoing
from erpdesk.domains.inventory.schemas.inventory_schemas import IssueForm

inventory_pages_bp = Blueprint("inventory_pages", __name__)

CrudViews(incoming, list_template="inventory/transactions.html").register(inventory_pages_bp, "/incoming")
CrudViews(outgoing, list_template="inventory/transactions.html").register(inventory_pages_bp, "/outgoing")
CrudViews(inventory_status).register(inventory_pages_bp, "/status")


def _issue_form(values: Dict[str, Any], errors: Dict[str, str], status: int = 200):
    client = get_auth_client()
    return (
        render_template(
            "inventory/issue_form.html",
            values=values,
            errors=errors,
            warehouses=warehouse_options(client),
            items=item_options(client),
            line_rows=line_rows(values),
        ),
        status,
    )


@inventory_pages_bp.route("/outgoing/issue", methods=["GET", "POST"])
@auth_guard()
@csrf_protected
def issue_stock():
    if request.method == "GET":
        return _issue_form({}, {})

    values = request.form.to_dict()
    form, errors = validate_form(IssueForm, values)
    if form is None:
        return _issue_form(values, errors, 400)

    client = get_auth_client()
    result = client.request_json("/api/inventory/issue", method="POST", json=form.api_payload())
    if result.is_unauthorized:
        return end_session()
    if not result.ok:
        return _issue_form(values, {FORM_ERROR_KEY: result.message}, 400)

    flash("Stock issued.", "success")
    return redirect(url_for("inventory_pages.outgoing_list"))
