"""
Unit tests for the package service.

Tests session metadata, payment status mirroring through the anchor
session, counted values and session renumbering.
"""

import pytest
from unittest.mock import Mock
from fastapi import HTTPException
from hypothesis import given, strategies as st

from models import Appointment, Procedure
from services.package_service import (
    PackageService,
    describe,
    format_session_progress,
    package_value,
    renumber_package_sessions,
    resolve_payment_status,
    resolve_value,
)
from shared_types.booking import AppointmentSnapshot


def make_snapshot(**overrides) -> AppointmentSnapshot:
    values = {
        "id": 10,
        "date": "2025-10-18",
        "time": "09:00",
        "procedure_id": 1,
        "procedure_name": "Laser",
        "procedure_price": 200.0,
    }
    values.update(overrides)
    return AppointmentSnapshot(**values)


class TestDescribe:
    """Test package session metadata."""

    def test_single_session(self):
        info = describe(make_snapshot())
        assert info.is_package is False
        assert info.is_first_session is True
        assert info.display_name == "Laser"
        assert info.should_count_value is True

    def test_anchor_session_keeps_name(self):
        info = describe(make_snapshot(session_number=1, total_sessions=5))
        assert info.is_package is True
        assert info.display_name == "Laser"
        assert info.should_count_value is True

    def test_return_session_display_name(self):
        info = describe(make_snapshot(session_number=3, total_sessions=5))
        assert info.is_first_session is False
        assert info.display_name == "Laser - Retorno - 3/5"
        assert info.should_count_value is False

    @given(st.integers(min_value=1, max_value=50), st.integers(min_value=1, max_value=50))
    def test_counts_value_iff_first_session(self, session_number, total_sessions):
        info = describe(make_snapshot(session_number=session_number, total_sessions=total_sessions))
        assert info.should_count_value == (session_number == 1)


class TestResolvePaymentStatus:
    """Test payment status mirroring."""

    def test_own_status_without_parent(self):
        lookup = Mock()
        assert resolve_payment_status(make_snapshot(payment_status="pago"), lookup) == "pago"
        lookup.assert_not_called()

    def test_default_status(self):
        assert resolve_payment_status(make_snapshot(), Mock()) == "aguardando"

    def test_mirrors_parent_with_one_lookup(self):
        parent = make_snapshot(id=1, payment_status="pago")
        lookup = Mock(return_value=parent)
        child = make_snapshot(id=2, session_number=2, total_sessions=3, package_parent_id=1, payment_status="aguardando")

        assert resolve_payment_status(child, lookup) == "pago"
        lookup.assert_called_once_with(1)

    def test_parent_without_status_defaults(self):
        lookup = Mock(return_value=make_snapshot(id=1))
        child = make_snapshot(id=2, package_parent_id=1, payment_status="pago")
        assert resolve_payment_status(child, lookup) == "aguardando"

    def test_lookup_failure_falls_back_to_own_status(self):
        lookup = Mock(side_effect=RuntimeError("store offline"))
        child = make_snapshot(id=2, package_parent_id=1, payment_status="parcial")

        assert resolve_payment_status(child, lookup) == "parcial"
        lookup.assert_called_once_with(1)

    def test_missing_parent_falls_back_to_own_status(self):
        lookup = Mock(return_value=None)
        child = make_snapshot(id=2, package_parent_id=99, payment_status="pago")

        assert resolve_payment_status(child, lookup) == "pago"
        lookup.assert_called_once_with(99)

    def test_missing_parent_without_own_status(self):
        child = make_snapshot(id=2, package_parent_id=99)
        assert resolve_payment_status(child, lambda _id: None) == "aguardando"


class TestValues:
    """Test counted values and progress labels."""

    def test_resolve_value_prefers_payment_value(self):
        assert resolve_value(make_snapshot(payment_value=180.0)) == 180.0
        assert resolve_value(make_snapshot(payment_value=0.0)) == 0.0

    def test_resolve_value_falls_back_to_price(self):
        assert resolve_value(make_snapshot()) == 200.0
        assert resolve_value(make_snapshot(procedure_price=None)) == 0.0

    def test_package_value(self):
        assert package_value(make_snapshot(session_number=1, total_sessions=3)) == 200.0
        assert package_value(make_snapshot(session_number=2, total_sessions=3)) == 0.0
        assert package_value(make_snapshot(return_of_appointment_id=5)) == 0.0

    def test_session_progress(self):
        assert format_session_progress(make_snapshot(session_number=2, total_sessions=5)) == "2/5 sessões"
        assert format_session_progress(make_snapshot()) == ""


class TestRenumberPackageSessions:
    """Test session renumbering."""

    def test_orders_by_date_time_and_creation(self):
        appointments = [
            make_snapshot(id=3, date="2025-11-01", time="10:00"),
            make_snapshot(id=1, date="2025-10-18", time=None, created_at="2025-10-01T10:00:00"),
            make_snapshot(id=2, date="2025-10-18", time=None, created_at="2025-10-01T09:00:00"),
            make_snapshot(id=4, date="2025-10-18", time="08:00"),
        ]

        updates = renumber_package_sessions(appointments, 4)

        assert [u.appointment_id for u in updates] == [2, 1, 4, 3]
        assert [u.session_number for u in updates] == [1, 2, 3, 4]
        assert updates[0].package_parent_id is None
        assert all(u.package_parent_id == 2 for u in updates[1:])
        assert all(u.total_sessions == 4 for u in updates)

    def test_no_op_for_single_session(self):
        assert renumber_package_sessions([make_snapshot()], 1) == []

    def test_no_op_without_appointments(self):
        assert renumber_package_sessions([], 3) == []


class TestPackageServiceDatabase:
    """Test database-backed package operations."""

    def _package(self, db_session, location):
        procedure = Procedure(name="Laser", price=300.0, sessions=3)
        db_session.add(procedure)
        db_session.flush()
        rows = [
            Appointment(client_name="Ana", client_phone="97981234567", procedure_id=procedure.id,
                        location_id=location.id, appointment_date=day, appointment_time="09:00",
                        status=status, payment_status=payment)
            for day, status, payment in [
                ("2025-11-10", "confirmado", None),
                ("2025-10-18", "confirmado", "pago"),
                ("2025-10-25", "cancelado", None),
                ("2025-11-01", "confirmado", None),
            ]
        ]
        db_session.add_all(rows)
        db_session.commit()
        return procedure, rows

    def test_recalculate_package_sessions(self, db_session, sample_location):
        procedure, rows = self._package(db_session, sample_location)

        updates = PackageService.recalculate_package_sessions(db_session, "97981234567", procedure.id, 3)
        db_session.commit()

        anchor, cancelled = rows[1], rows[2]
        assert [u.appointment_id for u in updates] == [rows[1].id, rows[3].id, rows[0].id]
        assert anchor.session_number == 1 and anchor.package_parent_id is None
        assert rows[3].session_number == 2 and rows[3].package_parent_id == anchor.id
        assert rows[0].session_number == 3 and rows[0].package_parent_id == anchor.id
        assert cancelled.package_parent_id is None

    def test_summary_mirrors_anchor_payment(self, db_session, sample_location):
        procedure, rows = self._package(db_session, sample_location)
        PackageService.recalculate_package_sessions(db_session, "97981234567", procedure.id, 3)
        db_session.commit()

        summary = PackageService.get_package_summary(db_session, rows[3].id)

        assert summary["payment_status"] == "pago"
        assert summary["info"].display_name == "Laser - Retorno - 2/3"
        assert summary["counted_value"] == 0.0
        assert summary["value"] == 300.0
        assert summary["progress"] == "2/3 sessões"

    def test_summary_unknown_appointment(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            PackageService.get_package_summary(db_session, 999)
        assert exc_info.value.status_code == 404
