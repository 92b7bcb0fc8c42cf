"""
Tests for role-based navigation and session notifications
"""

from cargodesk.admin_sessions import CreateSession
from cargodesk.navigation import NAV_ITEMS, VisibleNavItems
from cargodesk.notifications import NotifyFailure, NotifySuccess, PopNotifications

from fakes import ADMIN_USER


def Modules(rows):
    return [row["module"] for row in rows]


def test_admin_sees_every_item():
    assert Modules(VisibleNavItems({"role": "admin"})) == [item.module for item in NAV_ITEMS]


def test_customer_sees_dashboard_and_jobs_read_only():
    rows = VisibleNavItems({"role": "customer"})
    assert Modules(rows) == ["dashboard", "jobs"]
    assert all(row["create_href"] is None for row in rows)


def test_operations_has_no_user_administration():
    modules = Modules(VisibleNavItems({"user": {"role": "operations"}}))
    assert "users" not in modules
    assert "carriers" in modules


def test_accounts_may_create_parties_but_not_jobs():
    rows = {row["module"]: row for row in VisibleNavItems({"role": "accounts"})}
    assert rows["parties"]["create_href"] == "/admin/parties/create"
    assert rows["jobs"]["create_href"] is None


def test_active_item_and_missing_user():
    rows = VisibleNavItems({"role": "admin"}, active_module="carriers")
    assert [row["module"] for row in rows if row["active"]] == ["carriers"]
    assert VisibleNavItems(None) == []


def test_notifications_are_shown_once():
    session = CreateSession(dict(ADMIN_USER), "token")
    NotifySuccess(session, "Carrier created successfully!")
    NotifyFailure(session, 'Failed to delete carrier "FedEx"', "Carrier is used by 3 jobs")

    pending = PopNotifications(session)
    assert [(n.kind, n.title, n.description) for n in pending] == [
        ("success", "Carrier created successfully!", None),
        ("error", 'Failed to delete carrier "FedEx"', "Carrier is used by 3 jobs"),
    ]
    assert PopNotifications(session) == []
    assert PopNotifications(None) == []
