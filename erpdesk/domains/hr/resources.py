"""HR collections."""

from __future__ import annotations

from erpdesk.core.auth.roles import Role
from erpdesk.core.pages.resources import Choice, Column, FormField, Resource, registry
from erpdesk.domains.hr.schemas.hr_schemas import EMPLOYEE_STATUSES, GENDERS, EmployeeForm

employees = registry.register(
    Resource(
        name="employees",
        title="Employee",
        endpoint="/api/employees",
        collection_key="employees",
        item_key="employee",
        columns=(
            Column("employeeNumber", "Employee No.", 15),
            Column("name", "Name", 15),
            Column("nameEng", "English name", 20),
            Column("department", "Department", 15),
            Column("position", "Position", 15),
            Column("rank", "Rank", 10),
            Column("email", "Email", 25),
            Column("phone", "Phone", 15),
            Column("hireDate", "Hired", 12),
            Column("status", "Status", 10),
            Column("manager.name", "Manager", 15),
        ),
        search_fields=("name", "employeeNumber", "email", "nameEng"),
        filters=(Choice("status", "Status", EMPLOYEE_STATUSES, remote=True),),
        remote_filters=("department",),
        deletable=True,
        update_method="PUT",
        mutate_role=Role.MANAGER,
        form_schema=EmployeeForm,
        form_fields=(
            FormField("name", "Name", required=True),
            FormField("nameEng", "English name"),
            FormField("email", "Email", kind="email", required=True),
            FormField("phone", "Phone"),
            FormField("department", "Department", required=True),
            FormField("position", "Position", required=True),
            FormField("rank", "Rank"),
            FormField("hireDate", "Hire date", kind="date"),
            FormField("birthDate", "Birth date", kind="date"),
            FormField("gender", "Gender", kind="select", choices=GENDERS),
            FormField("status", "Status", kind="select", choices=EMPLOYEE_STATUSES),
        ),
    )
)
