"""Flask views shared by every list/form screen.

``CrudViews(resource).register(bp, "/items")`` adds:

- ``GET  /items``                 table with search, filters and pager
- ``GET  /items/export``          the current filtered page as .xlsx
- ``GET|POST /items/new``         create form (editable resources)
- ``GET|POST /items/<id>/edit``   update form (editable resources)
- ``GET|POST /items/<id>/delete`` confirmation step, then DELETE
"""

from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, List, Optional

from flask import Blueprint, current_app, flash, redirect, render_template, request, send_file, url_for

from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.services import get_auth_client, visitor_session_id
from erpdesk.core.pages.controller import DATE_FROM, DATE_TO, ListQuery, Notification, PageController
from erpdesk.core.pages.forms import FORM_ERROR_KEY, validate_form
from erpdesk.core.pages.resources import Resource
from erpdesk.core.utils.decorators import csrf_protected
from erpdesk.core.utils.excel import XLSX_MIMETYPE, build_workbook, export_filename, filter_by_date_range


def controller_for(resource: Resource) -> PageController:
    return PageController(
        get_auth_client(),
        resource,
        snapshots=current_app.extensions.get("snapshots"),
        session_id=visitor_session_id(),
    )


def list_query(resource: Resource) -> ListQuery:
    return ListQuery.from_args(request.args, resource, limit=current_app.config.get("LIST_PAGE_SIZE", 20))


def visible_rows(controller: PageController, query: ListQuery) -> List[Dict[str, Any]]:
    rows = controller.visible_records(query.search, query.filters)
    date_field = controller.resource.date_field
    if date_field:
        rows = filter_by_date_range(rows, date_field, query.filters.get(DATE_FROM), query.filters.get(DATE_TO))
    return rows  # type: ignore[return-value]


def notify(note: Notification) -> None:
    flash(note.message, note.level)


def end_session():
    """Redirect after the API rejected the token mid-request."""
    flash("Your session has expired. Please sign in again.", "error")
    return redirect(get_auth_client().logout())


def send_workbook(resource: Resource, rows: List[Dict[str, Any]]):
    payload = build_workbook(rows, resource.columns, sheet_name=resource.title[:31])
    return send_file(
        BytesIO(payload),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=export_filename(resource.export_basename),
    )


class CrudViews:
    list_template = "pages/list.html"
    form_template = "pages/form.html"
    confirm_template = "pages/confirm_delete.html"

    def __init__(self, resource: Resource, list_template: Optional[str] = None, form_template: Optional[str] = None):
        self.resource = resource
        if list_template:
            self.list_template = list_template
        if form_template:
            self.form_template = form_template

    def register(self, bp: Blueprint, path: str) -> None:
        name = self.resource.name
        view_guard = auth_guard(self.resource.view_role)
        mutate_guard = auth_guard(self.resource.mutate_role)
        delete_guard = auth_guard(self.resource.deleter_role)

        bp.add_url_rule(path, f"{name}_list", view_guard(self.list_view), methods=["GET"])
        bp.add_url_rule(f"{path}/export", f"{name}_export", view_guard(self.export_view), methods=["GET"])
        if self.resource.editable:
            form = mutate_guard(csrf_protected(self.form_view))
            bp.add_url_rule(f"{path}/new", f"{name}_new", form, methods=["GET", "POST"])
            bp.add_url_rule(f"{path}/<record_id>/edit", f"{name}_edit", form, methods=["GET", "POST"])
        if self.resource.deletable:
            delete = delete_guard(csrf_protected(self.delete_view))
            bp.add_url_rule(f"{path}/<record_id>/delete", f"{name}_delete", delete, methods=["GET", "POST"])

    def _endpoint(self, suffix: str) -> str:
        return f".{self.resource.name}_{suffix}"

    def context(self, controller: PageController, query: ListQuery, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "resource": self.resource,
            "controller": controller,
            "query": query,
            "rows": rows,
            "list_endpoint": self._endpoint("list"),
            "export_endpoint": self._endpoint("export"),
        }

    def form_values(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Map an API record onto form input names."""
        return record

    def form_context(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def list_view(self):
        controller = controller_for(self.resource)
        query = list_query(self.resource)
        controller.load(query)
        if controller.session_expired:
            return end_session()
        rows = visible_rows(controller, query)
        return render_template(self.list_template, **self.context(controller, query, rows))

    def export_view(self):
        controller = controller_for(self.resource)
        query = list_query(self.resource)
        controller.load(query)
        if controller.session_expired:
            return end_session()
        if controller.error and not controller.records:
            flash(controller.error, "error")
            return redirect(url_for(self._endpoint("list"), **query.args()))
        return send_workbook(self.resource, visible_rows(controller, query))

    def form_view(self, record_id: Optional[str] = None):
        controller = controller_for(self.resource)
        values: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        status = 200

        if request.method == "POST":
            values = request.form.to_dict()
            form, errors = validate_form(self.resource.form_schema, values)
            if form is not None:
                note = controller.save(form.api_payload(), record_id)
                if controller.session_expired:
                    return end_session()
                if note.ok:
                    notify(note)
                    return redirect(url_for(self._endpoint("list")))
                errors = {FORM_ERROR_KEY: note.message}
            status = 400
        elif record_id:
            result = controller.fetch_record(record_id)
            if result.is_unauthorized:
                return end_session()
            if not result.ok:
                flash(result.message, "error")
                return redirect(url_for(self._endpoint("list")))
            values = self.form_values(result.value or {})

        return (
            render_template(
                self.form_template,
                resource=self.resource,
                record_id=record_id,
                values=values,
                errors=errors,
                list_endpoint=self._endpoint("list"),
                **self.form_context(values),
            ),
            status,
        )

    def delete_view(self, record_id: str):
        controller = controller_for(self.resource)
        if request.method == "GET":
            return render_template(
                self.confirm_template,
                resource=self.resource,
                record=controller.find(record_id) or {},
                record_id=record_id,
                list_endpoint=self._endpoint("list"),
            )
        confirmed = request.form.get("confirm") == "yes"
        note = controller.delete(record_id, confirmed=confirmed)
        if controller.session_expired:
            return end_session()
        notify(note)
        return redirect(url_for(self._endpoint("list")))
