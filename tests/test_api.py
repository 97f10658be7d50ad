"""HTTP-level tests: routing, auth and error mapping."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from appointly.api.dependencies import create_access_token
from appointly.api.middleware.rate_limit_middleware import RateLimitMiddleware
from appointly.models.booking_form import BookingForm
from tests.conftest import MONDAY, make_service

WEEK = [
    {"day_of_week": 1, "is_enabled": True, "intervals": [{"start": "09:00", "end": "12:00"}]},
    {"day_of_week": 0, "is_enabled": False, "intervals": []},
]


def put_week(api, headers, week=None):
    return api.put("/api/v1/availability", json=week or WEEK, headers=headers)


class TestAuth:
    def test_bad_token_rejected(self, api):
        response = api.get("/api/v1/availability", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_token_for_unknown_provider_rejected(self, api, provider):
        token = create_access_token({"sub": "9999"})
        response = api.get("/api/v1/availability", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestAvailabilityEndpoints:
    def test_replace_and_read_week(self, api, auth_headers):
        response = put_week(api, auth_headers)
        assert response.status_code == 200
        assert [r["day_of_week"] for r in response.json()] == [0, 1]

        stored = api.get("/api/v1/availability", headers=auth_headers).json()
        assert stored[1]["intervals"] == [{"start": "09:00", "end": "12:00"}]
        assert stored[0]["intervals"] == []

    def test_overlapping_week_is_400(self, api, auth_headers):
        put_week(api, auth_headers)
        bad = [{
            "day_of_week": 1,
            "is_enabled": True,
            "intervals": [{"start": "09:00", "end": "11:00"}, {"start": "10:00", "end": "12:00"}],
        }]

        response = put_week(api, auth_headers, bad)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_availability"
        stored = api.get("/api/v1/availability", headers=auth_headers).json()
        assert [r["day_of_week"] for r in stored] == [0, 1]

    def test_malformed_time_is_validation_error(self, api, auth_headers):
        bad = [{"day_of_week": 1, "intervals": [{"start": "9am", "end": "12:00"}]}]
        response = put_week(api, auth_headers, bad)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_slots_exclude_booked_times(self, api, auth_headers, db, provider, service, customer):
        put_week(api, auth_headers)
        api.post("/api/v1/appointments", headers=auth_headers, json={
            "client_id": customer.id,
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        })

        response = api.get(
            "/api/v1/availability/slots",
            params={"date": MONDAY.isoformat(), "serviceId": service.id},
            headers=auth_headers,
        )

        assert response.status_code == 200
        starts = [slot["start"] for slot in response.json()["slots"]]
        assert starts == ["09:00", "09:30", "10:30", "11:00", "11:30"]

    def test_slots_for_unknown_service_is_404(self, api, auth_headers):
        response = api.get(
            "/api/v1/availability/slots",
            params={"date": MONDAY.isoformat(), "serviceId": 9999},
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


class TestAppointmentEndpoints:
    def create(self, api, headers, customer, service, time="10:00"):
        return api.post("/api/v1/appointments", headers=headers, json={
            "client_id": customer.id,
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": time,
            "notes": "first visit",
        })

    def test_create_returns_serialized_appointment(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        response = self.create(api, auth_headers, customer, service)

        assert response.status_code == 201
        body = response.json()
        assert body["date"] == "2026-10-19"
        assert body["time"] == "10:00"
        assert body["end_time"] == "10:30"
        assert body["status"] == "pending"
        assert body["client"]["email"] == customer.email
        assert body["service"]["duration"] == 30

    def test_conflict_is_409(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        self.create(api, auth_headers, customer, service, "10:00")

        response = self.create(api, auth_headers, customer, service, "10:15")

        assert response.status_code == 409
        assert response.json()["kind"] == "booking_conflict"
        assert "message" in response.json()

    def test_outside_hours_is_400(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        response = self.create(api, auth_headers, customer, service, "15:00")
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_slot"

    def test_bad_time_format_is_400(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        response = self.create(api, auth_headers, customer, service, "25:99")
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_unknown_client_is_404(self, api, auth_headers, service):
        put_week(api, auth_headers)
        response = api.post("/api/v1/appointments", headers=auth_headers, json={
            "client_id": 9999,
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        })
        assert response.status_code == 404

    def test_list_filters_by_date_and_status(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        first = self.create(api, auth_headers, customer, service, "09:00").json()
        self.create(api, auth_headers, customer, service, "11:00")
        api.patch(f"/api/v1/appointments/{first['id']}", headers=auth_headers, json={"status": "confirmed"})

        listing = api.get(
            "/api/v1/appointments",
            params={"date": MONDAY.isoformat(), "status": "confirmed"},
            headers=auth_headers,
        ).json()

        assert listing["total_appointments"] == 1
        assert listing["appointments"][0]["id"] == first["id"]

    def test_patch_status_transition(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        created = self.create(api, auth_headers, customer, service).json()

        response = api.patch(
            f"/api/v1/appointments/{created['id']}", headers=auth_headers, json={"status": "completed"}
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_transition"

        response = api.patch(
            f"/api/v1/appointments/{created['id']}", headers=auth_headers, json={"status": "confirmed"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

    def test_patch_reschedule_conflict_keeps_original(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        moving = self.create(api, auth_headers, customer, service, "09:00").json()
        self.create(api, auth_headers, customer, service, "11:00")

        response = api.patch(
            f"/api/v1/appointments/{moving['id']}",
            headers=auth_headers,
            json={"date": MONDAY.isoformat(), "time": "11:00"},
        )
        assert response.status_code == 409

        fetched = api.get(f"/api/v1/appointments/{moving['id']}", headers=auth_headers).json()
        assert fetched["time"] == "09:00"
        assert fetched["status"] == "pending"

    def test_patch_reschedule_success(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        moving = self.create(api, auth_headers, customer, service, "09:00").json()

        response = api.patch(
            f"/api/v1/appointments/{moving['id']}",
            headers=auth_headers,
            json={"date": MONDAY.isoformat(), "time": "10:30"},
        )
        assert response.status_code == 200
        assert response.json()["time"] == "10:30"
        assert response.json()["status"] == "rescheduled"

    def test_patch_move_with_illegal_status_changes_nothing(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        moving = self.create(api, auth_headers, customer, service, "09:00").json()

        response = api.patch(
            f"/api/v1/appointments/{moving['id']}",
            headers=auth_headers,
            json={"status": "pending", "date": MONDAY.isoformat(), "time": "11:00"},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_transition"

        fetched = api.get(f"/api/v1/appointments/{moving['id']}", headers=auth_headers).json()
        assert fetched["time"] == "09:00"
        assert fetched["status"] == "pending"

    def test_patch_move_and_confirm_together(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        moving = self.create(api, auth_headers, customer, service, "09:00").json()

        response = api.patch(
            f"/api/v1/appointments/{moving['id']}",
            headers=auth_headers,
            json={"status": "confirmed", "date": MONDAY.isoformat(), "time": "11:00"},
        )
        assert response.status_code == 200
        assert response.json()["time"] == "11:00"
        assert response.json()["status"] == "confirmed"

    def test_patch_requires_date_and_time_together(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        created = self.create(api, auth_headers, customer, service).json()

        response = api.patch(
            f"/api/v1/appointments/{created['id']}", headers=auth_headers, json={"time": "11:00"}
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_delete(self, api, auth_headers, service, customer):
        put_week(api, auth_headers)
        created = self.create(api, auth_headers, customer, service).json()

        assert api.delete(f"/api/v1/appointments/{created['id']}", headers=auth_headers).status_code == 200
        assert api.get(f"/api/v1/appointments/{created['id']}", headers=auth_headers).status_code == 404


class TestPublicEndpoints:
    def test_public_booking_and_conflict(self, api, auth_headers, provider, service):
        put_week(api, auth_headers)
        payload = {
            "name": "Sam Visitor",
            "email": "sam@mailbox.org",
            "phone": "555-0199",
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        }

        created = api.post(f"/api/v1/public/appointments/{provider.id}", json=payload)
        assert created.status_code == 201
        assert created.json()["status"] == "pending"

        again = api.post(f"/api/v1/public/appointments/{provider.id}", json={**payload, "time": "10:15"})
        assert again.status_code == 409
        assert again.json() == {"message": again.json()["message"], "kind": "booking_conflict"}

    def test_public_booking_unknown_provider(self, api, service):
        response = api.post("/api/v1/public/appointments/9999", json={
            "name": "Sam",
            "email": "sam@mailbox.org",
            "phone": "555",
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        })
        assert response.status_code == 404

    def test_public_booking_missing_field(self, api, provider, service):
        response = api.post(f"/api/v1/public/appointments/{provider.id}", json={
            "name": "Sam",
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        })
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_public_slots_hide_inactive_services(self, api, auth_headers, db, provider):
        put_week(api, auth_headers)
        retired = make_service(db, provider, is_active=False, name="Retired")

        response = api.get(
            f"/api/v1/public/{provider.id}/slots",
            params={"date": MONDAY.isoformat(), "serviceId": retired.id},
        )
        assert response.status_code == 404

    def test_public_slots(self, api, auth_headers, provider, service):
        put_week(api, auth_headers)
        response = api.get(
            f"/api/v1/public/{provider.id}/slots",
            params={"date": MONDAY.isoformat(), "serviceId": service.id},
        )
        assert response.status_code == 200
        assert len(response.json()["slots"]) == 6

    def test_booking_form_public_view(self, api, auth_headers, db, provider, service):
        make_service(db, provider, is_active=False, name="Retired")
        update = api.put("/api/v1/booking-form", headers=auth_headers, json={"title": "Book with Ana"})
        assert update.status_code == 200

        response = api.get(f"/api/v1/public/booking-form/{provider.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["form"]["title"] == "Book with Ana"
        assert body["form"]["button_color"] == "#10B981"
        assert [s["name"] for s in body["services"]] == ["Haircut"]

    def test_inactive_booking_form_is_404(self, api, db, provider):
        db.add(BookingForm(provider_id=provider.id, is_active=False))
        db.commit()

        assert api.get(f"/api/v1/public/booking-form/{provider.id}").status_code == 404

    def test_switched_off_page_refuses_bookings(self, api, auth_headers, provider, service):
        put_week(api, auth_headers)
        api.put("/api/v1/booking-form", headers=auth_headers, json={"is_active": False})

        response = api.post(f"/api/v1/public/appointments/{provider.id}", json={
            "name": "Sam",
            "email": "sam@mailbox.org",
            "phone": "555",
            "service_id": service.id,
            "date": MONDAY.isoformat(),
            "time": "10:00",
        })
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


class TestHealth:
    def test_health(self, api):
        assert api.get("/health").json()["status"] == "healthy"

    def test_detailed_health(self, api):
        assert api.get("/health/detailed").json()["database"] == "healthy"

    def test_detailed_health_reports_lock_backend(self, api):
        body = api.get("/health/detailed").json()
        assert body["booking_lock_backend"] == "memory"
        assert body["overall"] == "healthy"


class TestMiddleware:
    def test_correlation_id_is_echoed(self, api):
        response = api.get("/health", headers={"X-Correlation-ID": "abc123"})
        assert response.headers["X-Correlation-ID"] == "abc123"

    def test_correlation_id_is_minted(self, api):
        assert api.get("/health").headers["X-Correlation-ID"]

    def test_public_routes_are_rate_limited(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, requests_per_second=2)

        @app.get("/api/v1/public/ping")
        def ping():
            return {"ok": True}

        @app.get("/api/v1/private")
        def private():
            return {"ok": True}

        client = TestClient(app)
        statuses = [client.get("/api/v1/public/ping").status_code for _ in range(3)]
        assert statuses == [200, 200, 429]

        limited = client.get("/api/v1/public/ping")
        assert limited.json()["kind"] == "rate_limited"
        assert limited.headers["Retry-After"] == "1"

        assert all(client.get("/api/v1/private").status_code == 200 for _ in range(5))
