"""Master data collections."""

from __future__ import annotations

from erpdesk.core.auth.roles import Role
from erpdesk.core.pages.resources import Choice, Column, FormField, Resource, registry
from erpdesk.domains.master.schemas.master_schemas import (
    COMPANY_TYPES,
    ITEM_CATEGORIES,
    CompanyForm,
    ItemForm,
    SupplierForm,
)

COMPANY_COLUMNS = (
    Column("name", "Name", 25),
    Column("businessNumber", "Business No.", 18),
    Column("ceo", "CEO"),
    Column("type", "Type", 12),
    Column("phone", "Phone"),
    Column("email", "Email", 25),
    Column("address", "Address", 40),
    Column("isActive", "Active", 8),
)

COMPANY_FIELDS = (
    FormField("name", "Name", required=True),
    FormField("businessNumber", "Business number", required=True),
    FormField("ceo", "CEO"),
    FormField("phone", "Phone"),
    FormField("email", "Email", kind="email"),
    FormField("address", "Address", kind="textarea"),
    FormField("isActive", "Active", kind="checkbox"),
)

companies = registry.register(
    Resource(
        name="companies",
        title="Company",
        endpoint="/api/companies",
        collection_key="companies",
        item_key="company",
        columns=COMPANY_COLUMNS,
        search_fields=("name", "businessNumber", "ceo"),
        filters=(Choice("type", "Type", COMPANY_TYPES, remote=True),),
        deletable=True,
        mutate_role=Role.MANAGER,
        delete_role=Role.ADMIN,
        form_schema=CompanyForm,
        form_fields=COMPANY_FIELDS[:3] + (FormField("type", "Type", kind="select", choices=COMPANY_TYPES),) + COMPANY_FIELDS[3:],
    )
)

suppliers = registry.register(
    Resource(
        name="suppliers",
        title="Supplier",
        endpoint="/api/companies",
        collection_key="companies",
        item_key="company",
        columns=tuple(c for c in COMPANY_COLUMNS if c.key != "type"),
        search_fields=("name", "businessNumber", "ceo"),
        fixed_params={"type": "SUPPLIER"},
        paginated=False,
        deletable=True,
        mutate_role=Role.MANAGER,
        delete_role=Role.ADMIN,
        form_schema=SupplierForm,
        form_fields=COMPANY_FIELDS,
    )
)

items = registry.register(
    Resource(
        name="items",
        title="Item",
        endpoint="/api/items",
        collection_key="items",
        item_key="item",
        columns=(
            Column("code", "Code", 14),
            Column("name", "Name", 25),
            Column("category", "Category", 18),
            Column("supplierId.name", "Supplier", 20),
            Column("unit", "Unit", 8),
            Column("price", "Price", 12),
            Column("cost", "Cost", 12),
            Column("minStock", "Min stock", 10),
            Column("maxStock", "Max stock", 10),
            Column("safetyStock", "Safety stock", 12),
            Column("isActive", "Active", 8),
        ),
        search_fields=("name", "code"),
        filters=(Choice("category", "Category", ITEM_CATEGORIES),),
        paginated=False,
        deletable=True,
        mutate_role=Role.MANAGER,
        delete_role=Role.ADMIN,
        form_schema=ItemForm,
        form_fields=(
            FormField("code", "Code", required=True),
            FormField("name", "Name", required=True),
            FormField("category", "Category", kind="select", required=True, choices=ITEM_CATEGORIES),
            FormField("unit", "Unit"),
            FormField("price", "Price", kind="number"),
            FormField("cost", "Cost", kind="number"),
            FormField("minStock", "Min stock", kind="number"),
            FormField("maxStock", "Max stock", kind="number"),
            FormField("safetyStock", "Safety stock", kind="number"),
            FormField("leadTime", "Lead time (days)", kind="number"),
            FormField("specification", "Specification"),
            FormField("description", "Description", kind="textarea"),
        ),
    )
)

users = registry.register(
    Resource(
        name="users",
        title="User",
        endpoint="/api/users",
        collection_key="users",
        item_key="user",
        columns=(
            Column("name", "Name", 20),
            Column("email", "Email", 28),
            Column("role", "Role", 10),
            Column("department", "Department", 18),
            Column("position", "Position", 15),
            Column("isActive", "Active", 8),
            Column("createdAt", "Created", 12),
        ),
        search_fields=("name", "email", "department"),
        filters=(Choice("role", "Role", tuple(r.value for r in Role)),),
        view_role=Role.ADMIN,
        mutate_role=Role.ADMIN,
    )
)
