"""Integration tests for admin oversight endpoints."""

from datetime import date, timedelta

ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}
CLIENT = {"X-User-Id": "client-001", "X-User-Role": "client"}

NEXT_WEEK = date.today() + timedelta(days=7)


def _book(client, consultant_id, category_id, on_date=NEXT_WEEK, start_time="09:00"):
    response = client.post(
        "/bookings",
        json={
            "consultant": consultant_id,
            "category": category_id,
            "date": on_date.isoformat(),
            "startTime": start_time,
            "duration": 60,
        },
        headers=CLIENT,
    )
    assert response.status_code == 201
    return response.json()["data"]["booking"]["id"]


class TestAdminAccess:
    def test_non_admin_is_403(self, client):
        assert client.get("/admin/dashboard", headers=CLIENT).status_code == 403

    def test_anonymous_is_401(self, client):
        assert client.get("/admin/dashboard").status_code == 401


class TestDashboardAPI:
    def test_totals_and_leaderboards(self, client, category_id, consultant_id):
        booking_id = _book(client, consultant_id, category_id)
        client.put(f"/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=ADMIN)

        data = client.get("/admin/dashboard", headers=ADMIN).json()["data"]
        assert data["stats"] == {"totalConsultants": 1, "totalCategories": 1, "totalBookings": 1}
        assert data["bookingStats"]["confirmed"] == 1
        assert data["bookingStats"]["pending"] == 0
        assert [b["id"] for b in data["recentBookings"]] == [booking_id]
        assert [c["id"] for c in data["topCategories"]] == [category_id]
        assert [c["id"] for c in data["topConsultants"]] == [consultant_id]


class TestAdminConsultantsAPI:
    def test_verify(self, client, consultant_id):
        response = client.put(f"/admin/consultants/{consultant_id}/verify", json={"isVerified": True}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"]["consultant"]["isVerified"] is True

        listed = client.get("/admin/consultants", params={"verified": "true"}, headers=ADMIN).json()["data"]
        assert [c["id"] for c in listed["consultants"]] == [consultant_id]

    def test_unverified_filter(self, client, consultant_id):
        listed = client.get("/admin/consultants", params={"verified": "true"}, headers=ADMIN).json()["data"]
        assert listed["consultants"] == []


class TestAdminBookingsAPI:
    def test_date_range_filter(self, client, category_id, consultant_id):
        near = _book(client, consultant_id, category_id)
        far = _book(client, consultant_id, category_id, on_date=NEXT_WEEK + timedelta(days=30))

        params = {"dateFrom": NEXT_WEEK.isoformat(), "dateTo": (NEXT_WEEK + timedelta(days=1)).isoformat()}
        data = client.get("/admin/bookings", params=params, headers=ADMIN).json()["data"]
        assert [b["id"] for b in data["bookings"]] == [near]

        everything = client.get("/admin/bookings", headers=ADMIN).json()["data"]
        assert {b["id"] for b in everything["bookings"]} == {near, far}

    def test_status_override_is_attributed_to_admin(self, client, category_id, consultant_id):
        booking_id = _book(client, consultant_id, category_id)
        response = client.put(f"/admin/bookings/{booking_id}/status", json={"status": "cancelled"}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"]["booking"]["cancelledBy"] == "admin"


class TestReconcileAPI:
    def test_reconcile_reports_fixes(self, client, category_id, consultant_id):
        response = client.post("/admin/reconcile", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"] == {"categoriesFixed": 0, "consultantsFixed": 0}
