"""
Tests for the soft-delete lifecycle service.
"""

from datetime import datetime, timedelta, timezone

import pytest

from cms_api.models import Appointment, Customer, Product, Service, Testimonial
from cms_api.repositories import BaseRepository, OrderedRepository
from cms_api.services import (
    APPOINTMENTS,
    CUSTOMERS,
    FAQS,
    PRODUCTS,
    SERVICES,
    TESTIMONIALS,
    OrderedCollectionService,
    SoftDeleteService,
    lifecycle_breaches,
)
from shared.utils.exceptions import ErrorKind


@pytest.fixture
def testimonial(db_session):
    result = SoftDeleteService(db_session, TESTIMONIALS).create(
        {"name": "Marie Curie", "message": "Great service and friendly staff", "rating": 5}
    )
    assert result.success, result.error
    return result.data


@pytest.fixture
def customer(db_session):
    result = SoftDeleteService(db_session, CUSTOMERS).create(
        {"first_name": "Ada", "last_name": "Lovelace", "email": "  Ada@Example.COM "}
    )
    assert result.success, result.error
    return result.data


class TestSoftDelete:
    def test_soft_delete_then_activate_scenario(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        assert testimonial.is_active and not testimonial.is_deleted

        deleted = service.soft_delete(testimonial.id)

        assert deleted.success
        assert deleted.data.is_active is False
        assert deleted.data.is_deleted is True
        assert deleted.data.deleted_at is not None

        activated = service.set_active(testimonial.id, True)

        assert not activated.success
        assert activated.error_kind == ErrorKind.INVARIANT_VIOLATION
        row = db_session.get(Testimonial, testimonial.id)
        assert row.is_active is False
        assert row.is_deleted is True
        assert row.deleted_at is not None

    def test_double_delete_is_rejected_without_changes(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        first = service.soft_delete(testimonial.id)

        second = service.soft_delete(testimonial.id)

        assert second.error_kind == ErrorKind.INVARIANT_VIOLATION
        row = db_session.get(Testimonial, testimonial.id)
        assert row.deleted_at.replace(tzinfo=None) == first.data.deleted_at.replace(tzinfo=None)

    def test_soft_delete_unknown_id(self, db_session):
        result = SoftDeleteService(db_session, TESTIMONIALS).soft_delete("missing")

        assert result.error_kind == ErrorKind.NOT_FOUND

    def test_deleted_records_leave_active_list_and_enter_trash(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        service.soft_delete(testimonial.id)

        assert service.list_active().data == []
        assert [t.id for t in service.list_deleted().data] == [testimonial.id]


class TestRestore:
    def test_restore_keeps_record_inactive(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        service.soft_delete(testimonial.id)

        restored = service.restore(testimonial.id)

        assert restored.success
        assert restored.data.is_deleted is False
        assert restored.data.deleted_at is None
        assert restored.data.is_active is False

        activated = service.set_active(testimonial.id, True)
        assert activated.success
        assert activated.data.is_active is True

    def test_restore_live_record_is_rejected(self, db_session, testimonial):
        result = SoftDeleteService(db_session, TESTIMONIALS).restore(testimonial.id)

        assert result.error_kind == ErrorKind.INVARIANT_VIOLATION

    def test_restored_service_goes_to_the_end(self, db_session):
        ordering = OrderedCollectionService(db_session, SERVICES)
        exam = ordering.append({"name": "Eye exam"}).data
        ordering.append({"name": "Lens fitting"})
        ordering.append({"name": "Frame repair"})
        lifecycle = SoftDeleteService(db_session, SERVICES)

        lifecycle.soft_delete(exam.id)
        assert [s.order for s in ordering.list().data] == [0, 1]

        restored = lifecycle.restore(exam.id)

        assert restored.data.order == 2
        assert [s.name for s in ordering.list().data] == ["Lens fitting", "Frame repair", "Eye exam"]
        assert ordering.check_invariants() == []


class TestPermanentDelete:
    def test_permanent_delete_from_trash(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        service.soft_delete(testimonial.id)

        result = service.permanent_delete(testimonial.id)

        assert result.success
        assert result.data is None
        assert db_session.get(Testimonial, testimonial.id) is None

    def test_permanent_delete_of_live_service_renumbers(self, db_session):
        ordering = OrderedCollectionService(db_session, SERVICES)
        first = ordering.append({"name": "Eye exam"}).data
        ordering.append({"name": "Lens fitting"})

        result = SoftDeleteService(db_session, SERVICES).permanent_delete(first.id)

        assert result.success
        assert [(s.name, s.order) for s in ordering.list().data] == [("Lens fitting", 0)]
        assert db_session.get(Service, first.id) is None

    def test_permanent_delete_unknown_id(self, db_session):
        result = SoftDeleteService(db_session, CUSTOMERS).permanent_delete("missing")

        assert result.error_kind == ErrorKind.NOT_FOUND

    def test_deleting_customer_detaches_appointments(self, db_session, customer):
        appointment = SoftDeleteService(db_session, APPOINTMENTS).create(
            {
                "customer_id": customer.id,
                "full_name": "Ada Lovelace",
                "email": "ada@example.com",
                "scheduled_at": "2026-11-02T10:30:00Z",
            }
        ).data

        SoftDeleteService(db_session, CUSTOMERS).permanent_delete(customer.id)

        assert db_session.get(Customer, customer.id) is None
        assert db_session.get(Appointment, appointment.id).customer_id is None


class TestSetActive:
    def test_deactivate_live_record(self, db_session, testimonial):
        result = SoftDeleteService(db_session, TESTIMONIALS).set_active(testimonial.id, False)

        assert result.success
        assert result.data.is_active is False
        assert result.data.is_deleted is False

    def test_same_state_is_a_no_op(self, db_session, testimonial):
        result = SoftDeleteService(db_session, TESTIMONIALS).set_active(testimonial.id, True)

        assert result.success
        assert result.message == "No changes"

    def test_deactivating_deleted_record_is_allowed(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        service.soft_delete(testimonial.id)

        result = service.set_active(testimonial.id, False)

        assert result.success

    def test_collection_without_active_flag(self, db_session, customer):
        result = SoftDeleteService(db_session, CUSTOMERS).set_active(customer.id, True)

        assert result.error_kind == ErrorKind.VALIDATION


class TestCreate:
    def test_customer_email_is_normalized(self, customer):
        assert customer.email == "ada@example.com"

    def test_appointment_for_unknown_customer(self, db_session):
        result = SoftDeleteService(db_session, APPOINTMENTS).create(
            {
                "customer_id": "missing",
                "full_name": "Ada Lovelace",
                "email": "ada@example.com",
                "scheduled_at": "2026-11-02T10:30:00Z",
            }
        )

        assert result.error_kind == ErrorKind.NOT_FOUND

    def test_invalid_rating(self, db_session):
        result = SoftDeleteService(db_session, TESTIMONIALS).create(
            {"name": "Bob", "message": "Too short?? no, long enough", "rating": 6}
        )

        assert result.error_kind == ErrorKind.VALIDATION
        assert "rating" in result.field_errors

    def test_unknown_source(self, db_session):
        result = SoftDeleteService(db_session, TESTIMONIALS).create(
            {"name": "Bob", "message": "Long enough message", "rating": 4, "source": "myspace"}
        )

        assert "source" in result.field_errors


class TestPurge:
    def test_purge_only_old_trash(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        recent = service.create({"name": "Recent", "message": "Deleted just now", "rating": 3}).data
        service.soft_delete(testimonial.id)
        service.soft_delete(recent.id)
        row = db_session.get(Testimonial, testimonial.id)
        row.deleted_at = datetime.now(timezone.utc) - timedelta(days=90)
        db_session.commit()

        result = service.purge_deleted_before(datetime.now(timezone.utc) - timedelta(days=30))

        assert result.data == 1
        assert [t.id for t in service.list_deleted().data] == [recent.id]


class TestInvariantChecks:
    def test_consistent_records_have_no_breaches(self, db_session, testimonial):
        service = SoftDeleteService(db_session, TESTIMONIALS)
        service.soft_delete(testimonial.id)

        assert service.find_invariant_breaches() == {}

    def test_breaches_are_reported(self):
        record = Testimonial(name="x", message="y", rating=1, is_deleted=True, deleted_at=None, is_active=True)

        problems = lifecycle_breaches(record)

        assert "deleted record has no deleted_at" in problems
        assert "deleted record is still active" in problems


class TestLockOrder:
    """Ordered collections lock their live rows before the record itself."""

    @pytest.fixture
    def lock_log(self, monkeypatch):
        calls = []
        lock_all_ordered = OrderedRepository.lock_all_ordered
        find_by_id = BaseRepository.find_by_id

        def _lock_all_ordered(self):
            calls.append("collection")
            return lock_all_ordered(self)

        def _find_by_id(self, entity_id, **kwargs):
            if kwargs.get("for_update"):
                calls.append("record")
            return find_by_id(self, entity_id, **kwargs)

        monkeypatch.setattr(OrderedRepository, "lock_all_ordered", _lock_all_ordered)
        monkeypatch.setattr(BaseRepository, "find_by_id", _find_by_id)
        return calls

    @pytest.mark.parametrize("operation", ["soft_delete", "restore", "permanent_delete"])
    def test_collection_before_record(self, db_session, lock_log, operation):
        ordering = OrderedCollectionService(db_session, SERVICES)
        exam = ordering.append({"name": "Eye exam"}).data
        ordering.append({"name": "Lens fitting"})
        lifecycle = SoftDeleteService(db_session, SERVICES)
        if operation == "restore":
            lifecycle.soft_delete(exam.id)
        lock_log.clear()

        result = getattr(lifecycle, operation)(exam.id)

        assert result.success, result.error
        assert lock_log == ["collection", "record"]


class TestProducts:
    @pytest.fixture
    def product(self, db_session):
        result = SoftDeleteService(db_session, PRODUCTS).create(
            {"name": "Aviator frame", "description": "Titanium frame", "price": "149.90", "brand": "Ray-Ban"}
        )
        assert result.success, result.error
        return result.data

    def test_trash_round_trip(self, db_session, product):
        service = SoftDeleteService(db_session, PRODUCTS)

        deleted = service.soft_delete(product.id)
        trash = service.list_deleted()
        restored = service.restore(product.id)

        assert deleted.data.is_deleted is True
        assert [p.id for p in trash.data] == [product.id]
        assert restored.data.is_deleted is False
        assert restored.data.deleted_at is None
        assert [p.id for p in service.list_active().data] == [product.id]

    def test_price_is_kept(self, product):
        assert product.price == pytest.approx(149.90)

    def test_products_have_no_active_state(self, db_session, product):
        result = SoftDeleteService(db_session, PRODUCTS).set_active(product.id, False)

        assert result.error_kind == ErrorKind.VALIDATION

    def test_price_must_be_positive(self, db_session):
        result = SoftDeleteService(db_session, PRODUCTS).create(
            {"name": "Case", "description": "Hard case", "price": 0}
        )

        assert "price" in result.field_errors

    def test_permanent_delete(self, db_session, product):
        result = SoftDeleteService(db_session, PRODUCTS).permanent_delete(product.id)

        assert result.success
        assert db_session.get(Product, product.id) is None


def test_service_rejects_collection_without_trash(db_session):
    with pytest.raises(ValueError):
        SoftDeleteService(db_session, FAQS)
