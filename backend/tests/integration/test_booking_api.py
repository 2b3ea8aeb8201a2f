"""
Integration tests for the public booking API.

Tests the /api/booking endpoints end to end against an in-memory database,
with the calendar clock backed by an in-memory configuration source.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_calendar_clock
from core.database import get_db
from main import app
from models import Appointment, DiscountRule, Location, LocationAvailability
from services.calendar_clock import CalendarClock


@pytest.fixture
def client(db_session, fake_source):
    """Create test client with database session and calendar clock overrides."""
    clock = CalendarClock(fake_source)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_calendar_clock] = lambda: clock

    yield TestClient(app)

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_calendar_clock, None)


@pytest.fixture
def two_locations(db_session, sample_location):
    """Tefé open for three days, Alvarães open on the middle day only."""
    other = Location(city_name="Alvarães-AM", clinic_name="Clínica Alvarães", display_order=0)
    db_session.add(other)
    db_session.flush()
    db_session.add_all([
        LocationAvailability(location_id=sample_location.id, start_date="2030-01-10", end_date="2030-01-12"),
        LocationAvailability(location_id=other.id, start_date="2030-01-11", color="bg-amber-500"),
    ])
    db_session.commit()
    return sample_location, other


class TestCpfValidation:
    """Test POST /api/booking/cpf/validate."""

    def test_valid_cpf(self, client: TestClient):
        response = client.post("/api/booking/cpf/validate", json={"cpf": "52998224725"})

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "cleaned": "52998224725",
            "formatted": "529.982.247-25",
            "masked": "529.***.**7-25",
        }

    def test_invalid_cpf_is_not_an_error(self, client: TestClient):
        response = client.post("/api/booking/cpf/validate", json={"cpf": "123"})

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["formatted"] == "123"
        assert data["masked"] == "123"


class TestAvailability:
    """Test GET /api/booking/availability."""

    def test_single_location_open(self, client: TestClient, two_locations):
        tefe, _ = two_locations

        response = client.get("/api/booking/availability", params={"date": "2030-01-12"})

        assert response.status_code == 200
        data = response.json()
        assert data["display_date"] == "12/01/2030"
        assert data["location_ids"] == [tefe.id]
        assert data["colors"] == {str(tefe.id): "bg-green-500"}

    def test_several_locations_follow_stable_order(self, client: TestClient, two_locations):
        tefe, alvaraes = two_locations

        response = client.get("/api/booking/availability", params={"date": "2030-01-11"})

        data = response.json()
        assert data["location_ids"] == [alvaraes.id, tefe.id]
        assert data["colors"][str(alvaraes.id)] == "bg-amber-500"
        assert len(data["periods"]) == 2

    def test_closed_day(self, client: TestClient, two_locations):
        response = client.get("/api/booking/availability", params={"date": "2030-01-13"})

        data = response.json()
        assert data["location_ids"] == []
        assert data["periods"] == []

    def test_defaults_to_today(self, client: TestClient):
        response = client.get("/api/booking/availability")

        assert response.status_code == 200
        assert len(response.json()["date"]) == 10

    def test_invalid_date(self, client: TestClient):
        response = client.get("/api/booking/availability", params={"date": "12/01/2030"})

        assert response.status_code == 400


class TestAvailableTimes:
    """Test GET /api/booking/times."""

    def test_booked_slots_are_removed(self, client: TestClient, db_session, two_locations, sample_procedure):
        tefe, _ = two_locations
        db_session.add(Appointment(
            client_name="Ana", client_phone="97981234567", procedure_id=sample_procedure.id,
            location_id=tefe.id, appointment_date="2030-01-10", appointment_time="09:00",
        ))
        db_session.commit()

        response = client.get("/api/booking/times", params={
            "date": "2030-01-10", "location_id": tefe.id, "procedure_id": sample_procedure.id,
        })

        assert response.status_code == 200
        times = response.json()["times"]
        assert times[:2] == ["08:00", "10:00"]
        assert "08:30" not in times and "09:30" not in times
        assert times[-1] == "17:30"

    def test_cancelled_appointments_free_their_slot(self, client: TestClient, db_session, two_locations,
                                                    sample_procedure):
        tefe, _ = two_locations
        db_session.add(Appointment(
            client_name="Ana", client_phone="97981234567", procedure_id=sample_procedure.id,
            location_id=tefe.id, appointment_date="2030-01-10", appointment_time="09:00", status="cancelado",
        ))
        db_session.commit()

        response = client.get("/api/booking/times", params={"date": "2030-01-10", "location_id": tefe.id})

        assert "09:00" in response.json()["times"]

    def test_closed_location_has_no_times(self, client: TestClient, two_locations):
        _, alvaraes = two_locations

        response = client.get("/api/booking/times", params={"date": "2030-01-10", "location_id": alvaraes.id})

        assert response.status_code == 200
        assert response.json()["times"] == []

    def test_unknown_procedure(self, client: TestClient, two_locations):
        tefe, _ = two_locations

        response = client.get("/api/booking/times", params={
            "date": "2030-01-10", "location_id": tefe.id, "procedure_id": 999,
        })

        assert response.status_code == 404


class TestQuote:
    """Test POST /api/booking/quote."""

    @pytest.fixture
    def tiers(self, db_session, sample_procedure):
        db_session.add_all([
            DiscountRule(procedure_id=sample_procedure.id, min_groups=1, max_groups=1, discount_percentage=0),
            DiscountRule(procedure_id=sample_procedure.id, min_groups=2, max_groups=None, discount_percentage=10),
        ])
        db_session.commit()
        return sample_procedure

    def test_quote_with_discount(self, client: TestClient, tiers):
        response = client.post("/api/booking/quote", json={
            "procedure_id": tiers.id,
            "selections": [
                {"kind": "area", "id": "axilas", "unit_price": 100},
                {"kind": "area", "id": "buco", "unit_price": 100},
                {"kind": "spec", "id": "retoque", "unit_price": 50},
            ],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["group_count"] == 2
        assert data["subtotal"] == 250
        assert data["discount"] == pytest.approx(25)
        assert data["final_total"] == pytest.approx(225)
        assert data["applied_rule"]["min_groups"] == 2

    def test_quote_without_selections(self, client: TestClient, tiers):
        response = client.post("/api/booking/quote", json={"procedure_id": tiers.id})

        data = response.json()
        assert data["final_total"] == 0
        assert data["applied_rule"] is None

    def test_negative_price_is_rejected(self, client: TestClient, tiers):
        response = client.post("/api/booking/quote", json={
            "procedure_id": tiers.id,
            "selections": [{"kind": "area", "id": "axilas", "unit_price": -1}],
        })

        assert response.status_code == 422

    def test_unknown_procedure(self, client: TestClient):
        response = client.post("/api/booking/quote", json={"procedure_id": 999})

        assert response.status_code == 404
