"""Sidebar menu, filtered by the signed-in user's role."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from erpdesk.core.auth.roles import Role, role_satisfies


class NavLink(NamedTuple):
    label: str
    href: str
    role: Optional[Role] = None


class NavSection(NamedTuple):
    title: str
    links: Tuple[NavLink, ...]


MENU: Tuple[NavSection, ...] = (
    NavSection("Dashboard", (NavLink("Overview", "/dashboard"),)),
    NavSection(
        "Master data",
        (
            NavLink("Companies", "/master/companies"),
            NavLink("Items", "/master/items"),
            NavLink("Suppliers", "/master/suppliers"),
            NavLink("Users", "/master/users", Role.ADMIN),
        ),
    ),
    NavSection(
        "Purchasing",
        (
            NavLink("Purchase requests", "/purchase/requests"),
            NavLink("Approvals", "/purchase/requests/approve", Role.MANAGER),
            NavLink("Purchase orders", "/purchase/orders"),
            NavLink("Receipts", "/purchase/receipts"),
        ),
    ),
    NavSection(
        "Inventory",
        (
            NavLink("Incoming", "/inventory/incoming"),
            NavLink("Outgoing", "/inventory/outgoing"),
            NavLink("Stock status", "/inventory/status"),
        ),
    ),
    NavSection("Production", (NavLink("Work orders", "/production/work-orders"),)),
    NavSection("Quality", (NavLink("Inspections", "/quality/inspections"),)),
    NavSection("Sales", (NavLink("Sales orders", "/sales/orders"),)),
    NavSection("HR", (NavLink("Employees", "/hr/employees"),)),
)


def navigation_for(role: Optional[Role]) -> List[NavSection]:
    """Sections visible to ``role``; anonymous visitors get no menu."""
    if role is None:
        return []
    sections = []
    for section in MENU:
        links = tuple(link for link in section.links if link.role is None or role_satisfies(role, link.role))
        if links:
            sections.append(NavSection(section.title, links))
    return sections
