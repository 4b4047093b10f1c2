"""Purchasing HTML pages: requests, approvals, purchase orders and receipts."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, flash, redirect, render_template, request, url_for

from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.roles import Role
from erpdesk.core.auth.services import get_auth_client
from erpdesk.core.pages.crud import CrudViews, controller_for, end_session, notify
from erpdesk.core.pages.forms import FORM_ERROR_KEY, line_rows, validate_form
from erpdesk.core.pages.lookups import item_options, supplier_options, warehouse_options
from erpdesk.core.utils.decorators import csrf_protected
from erpdesk.domains.purchase.resources import pending_requests, purchase_orders, purchase_requests, receipts
from erpdesk.domains.purchase.schemas.purchase_schemas import (
    PRIORITIES,
    ApprovalDecision,
    InspectionForm,
    PurchaseRequestForm,
    PurchaseRequestSubmission,
    ReceiptForm,
)
from erpdesk.domains.purchase.services.purchase_service import order_form_values, reconcile_receipt

purchase_pages_bp = Blueprint("purchase_pages", __name__)


class OrderViews(CrudViews):
    form_template = "purchase/order_form.html"

    def form_values(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return order_form_values(record)

    def form_context(self, values: Dict[str, Any]) -> Dict[str, Any]:
        client = get_auth_client()
        return {
            "suppliers": supplier_options(client),
            "items": item_options(client),
            "line_rows": line_rows(values),
        }


CrudViews(purchase_requests, list_template="purchase/requests.html").register(purchase_pages_bp, "/requests")
CrudViews(pending_requests, list_template="purchase/approvals.html").register(purchase_pages_bp, "/requests/approve")
OrderViews(purchase_orders).register(purchase_pages_bp, "/orders")
CrudViews(receipts, list_template="purchase/receipts.html").register(purchase_pages_bp, "/receipts")


def _after_action(controller, note, endpoint: str):
    if controller.session_expired:
        return end_session()
    notify(note)
    return redirect(url_for(endpoint))


# --- purchase requests ---


@purchase_pages_bp.route("/requests/new", methods=["GET", "POST"])
@auth_guard()
@csrf_protected
def create_request():
    values: Dict[str, Any] = {"priority": "MEDIUM"}
    errors: Dict[str, str] = {}
    status = 200

    if request.method == "POST":
        values = request.form.to_dict()
        submit = values.pop("action", "draft") == "submit"
        form, errors = validate_form(PurchaseRequestSubmission if submit else PurchaseRequestForm, values)
        if form is not None:
            controller = controller_for(purchase_requests)
            note = controller.save(form.api_payload())
            if controller.session_expired:
                return end_session()
            if note.ok:
                flash("Purchase request submitted." if submit else "Purchase request saved as draft.", "success")
                return redirect(url_for("purchase_pages.purchase_requests_list"))
            errors = {FORM_ERROR_KEY: note.message}
        status = 400

    return (
        render_template(
            "purchase/request_form.html",
            values=values,
            errors=errors,
            priorities=PRIORITIES,
            line_rows=line_rows(values),
        ),
        status,
    )


@purchase_pages_bp.post("/requests/<record_id>/submit")
@auth_guard()
@csrf_protected
def submit_request(record_id: str):
    controller = controller_for(purchase_requests)
    note = controller.perform(record_id, "submit", success_message="Purchase request submitted.")
    return _after_action(controller, note, "purchase_pages.purchase_requests_list")


@purchase_pages_bp.post("/requests/<record_id>/decision")
@auth_guard(Role.MANAGER)
@csrf_protected
def decide_request(record_id: str):
    form, errors = validate_form(ApprovalDecision, request.form)
    if form is None:
        flash(next(iter(errors.values())), "error")
        return redirect(url_for("purchase_pages.pending_requests_list"))

    controller = controller_for(pending_requests)
    verb = "approved" if form.decision == "approve" else "rejected"
    note = controller.perform(
        record_id,
        form.decision,
        form.api_payload(),
        success_message=f"Purchase request {verb}.",
    )
    return _after_action(controller, note, "purchase_pages.pending_requests_list")


# --- receipts ---


def _receipt_form(values: Dict[str, Any], errors: Dict[str, str], status: int = 200):
    client = get_auth_client()
    return (
        render_template(
            "purchase/receipt_form.html",
            values=values,
            errors=errors,
            suppliers=supplier_options(client),
            warehouses=warehouse_options(client),
            items=item_options(client),
            line_rows=line_rows(values),
        ),
        status,
    )


@purchase_pages_bp.route("/receipts/new", methods=["GET", "POST"])
@auth_guard()
@csrf_protected
def create_receipt():
    if request.method == "GET":
        return _receipt_form({}, {})

    values = request.form.to_dict()
    form, errors = validate_form(ReceiptForm, values)
    if form is None:
        return _receipt_form(values, errors, 400)

    draft = reconcile_receipt(form)
    if not draft.lines:
        return _receipt_form(values, {FORM_ERROR_KEY: "at least one received item is required"}, 400)

    controller = controller_for(receipts)
    note = controller.save(draft.payload)
    if controller.session_expired:
        return end_session()
    if not note.ok:
        return _receipt_form(values, {FORM_ERROR_KEY: note.message}, 400)

    for warning in draft.warnings:
        flash(warning, "warning")
    flash("Receipt registered.", "success")
    return redirect(url_for("purchase_pages.receipts_list"))


@purchase_pages_bp.post("/receipts/<record_id>/inspect")
@auth_guard()
@csrf_protected
def inspect_receipt(record_id: str):
    form, _ = validate_form(InspectionForm, request.form)
    payload = (form or InspectionForm()).api_payload()
    controller = controller_for(receipts)
    note = controller.perform(record_id, "inspect", payload, success_message="Receipt inspected.")
    return _after_action(controller, note, "purchase_pages.receipts_list")


@purchase_pages_bp.post("/receipts/<record_id>/approve")
@auth_guard(Role.MANAGER)
@csrf_protected
def approve_receipt(record_id: str):
    controller = controller_for(receipts)
    note = controller.perform(record_id, "approve", success_message="Receipt approved.")
    return _after_action(controller, note, "purchase_pages.receipts_list")
