"""
CargoDesk - Role-Based Navigation

Sidebar items for the admin interface. An item is listed only when the
user's role can read its module, and its "Create New" link only when the
role can also create.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from cargodesk.permissions import CanAccessModule, CanCreate, ResolveRole


@dataclass(frozen=True)
class NavItem:
    module: str
    label: str
    href: str
    group: str
    creatable: bool = True


NAV_ITEMS: Tuple[NavItem, ...] = (
    NavItem("dashboard", "Dashboard", "/admin/dashboard", "Overview", creatable=False),
    NavItem("jobs", "Jobs", "/admin/jobs", "Operations"),
    NavItem("master-awbs", "Master AWB", "/admin/master-awbs", "Operations"),
    NavItem("house-awbs", "House AWB", "/admin/house-awbs", "Operations"),
    NavItem("parties", "Parties", "/admin/parties", "Master Data"),
    NavItem("countries", "Countries", "/admin/countries", "Master Data"),
    NavItem("cities", "Cities", "/admin/cities", "Master Data"),
    NavItem("ports-airports", "Ports & Airports", "/admin/ports-airports", "Master Data"),
    NavItem("carriers", "Carriers", "/admin/carriers", "Master Data"),
    NavItem("commodities", "Commodities", "/admin/commodities", "Master Data"),
    NavItem("users", "Users", "/admin/users", "Administration"),
)


def VisibleNavItems(user: Optional[dict], active_module: Optional[str] = None) -> List[dict]:
    """
    Navigation rows the user may see

    Args:
        user: Signed-in user record
        active_module: Module of the current page, highlighted in the sidebar

    Returns:
        List of dicts with label, href, group, active and create_href
    """
    role = ResolveRole(user)
    rows = []
    for item in NAV_ITEMS:
        if not CanAccessModule(role, item.module):
            continue
        rows.append({
            "module": item.module,
            "label": item.label,
            "href": item.href,
            "group": item.group,
            "active": item.module == active_module,
            "create_href": f"{item.href}/create" if item.creatable and CanCreate(role, item.module) else None,
        })
    return rows
