"""
Tests for the trash lifecycle endpoints (testimonials, customers, appointments).
"""

import pytest


@pytest.fixture
def testimonial(client, auth_headers):
    response = client.post(
        "/api/admin/testimonials",
        headers=auth_headers,
        json={"name": "Marie Curie", "message": "Great service and friendly staff", "rating": 5},
    )
    assert response.status_code == 201, response.json()
    return response.json()["data"]


@pytest.fixture
def customer(client, auth_headers):
    response = client.post(
        "/api/admin/customers",
        headers=auth_headers,
        json={"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
    )
    assert response.status_code == 201, response.json()
    return response.json()["data"]


class TestTestimonialLifecycle:
    def test_soft_delete(self, client, auth_headers, testimonial, publisher):
        response = client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_deleted"] is True
        assert data["is_active"] is False
        assert data["deleted_at"] is not None
        assert ("testimonials", ["/testimonials", "/admin/testimonials"]) in publisher.signals

    def test_double_soft_delete_is_a_conflict(self, client, auth_headers, testimonial):
        client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        response = client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error_kind"] == "invariant_violation"

    def test_trash_and_live_lists(self, client, auth_headers, testimonial):
        client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        live = client.get("/api/admin/testimonials", headers=auth_headers).json()["data"]
        trash = client.get("/api/admin/testimonials/trash", headers=auth_headers).json()["data"]

        assert live == []
        assert [t["id"] for t in trash] == [testimonial["id"]]

    def test_get_hides_deleted_unless_asked(self, client, auth_headers, testimonial):
        client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        hidden = client.get(f"/api/admin/testimonials/{testimonial['id']}", headers=auth_headers)
        shown = client.get(
            f"/api/admin/testimonials/{testimonial['id']}",
            headers=auth_headers,
            params={"include_deleted": "true"},
        )

        assert hidden.status_code == 404
        assert shown.status_code == 200
        assert shown.json()["data"]["is_deleted"] is True

    def test_restore_then_activate(self, client, auth_headers, testimonial):
        item = f"/api/admin/testimonials/{testimonial['id']}"
        client.post(f"{item}/delete", headers=auth_headers)

        restored = client.post(f"{item}/restore", headers=auth_headers)
        activated = client.post(f"{item}/status", headers=auth_headers, json={"is_active": True})

        assert restored.status_code == 200
        assert restored.json()["data"]["is_active"] is False
        assert restored.json()["data"]["deleted_at"] is None
        assert activated.status_code == 200
        assert activated.json()["data"]["is_active"] is True

    def test_activating_deleted_record_is_a_conflict(self, client, auth_headers, testimonial):
        item = f"/api/admin/testimonials/{testimonial['id']}"
        client.post(f"{item}/delete", headers=auth_headers)

        response = client.post(f"{item}/status", headers=auth_headers, json={"is_active": True})

        assert response.status_code == 409
        trash = client.get("/api/admin/testimonials/trash", headers=auth_headers).json()["data"]
        assert trash[0]["is_active"] is False

    def test_permanent_delete(self, client, auth_headers, testimonial):
        item = f"/api/admin/testimonials/{testimonial['id']}"

        response = client.delete(f"{item}/permanent", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["data"] is None
        assert client.get(item, headers=auth_headers, params={"include_deleted": "true"}).status_code == 404

    def test_invalid_rating_has_field_errors(self, client, auth_headers):
        response = client.post(
            "/api/admin/testimonials",
            headers=auth_headers,
            json={"name": "Bob", "message": "Long enough message", "rating": 9},
        )

        assert response.status_code == 400
        assert "rating" in response.json()["field_errors"]

    def test_public_testimonials_hide_deleted_and_inactive(self, client, auth_headers, testimonial):
        hidden = client.post(
            "/api/admin/testimonials",
            headers=auth_headers,
            json={"name": "Hidden", "message": "Not published yet", "rating": 4, "is_active": False},
        ).json()["data"]
        trashed = client.post(
            "/api/admin/testimonials",
            headers=auth_headers,
            json={"name": "Trashed", "message": "Moved to the trash", "rating": 2},
        ).json()["data"]
        client.post(f"/api/admin/testimonials/{trashed['id']}/delete", headers=auth_headers)

        response = client.get("/api/public/testimonials")

        ids = [t["id"] for t in response.json()["data"]]
        assert ids == [testimonial["id"]]
        assert hidden["id"] not in ids


class TestCustomersAndAppointments:
    def test_customer_has_no_status_route(self, client, auth_headers, customer):
        response = client.post(
            f"/api/admin/customers/{customer['id']}/status",
            headers=auth_headers,
            json={"is_active": True},
        )

        assert response.status_code in (404, 405)

    def test_appointment_for_deleted_customer(self, client, auth_headers, customer):
        client.post(f"/api/admin/customers/{customer['id']}/delete", headers=auth_headers)

        response = client.post(
            "/api/admin/appointments",
            headers=auth_headers,
            json={
                "customer_id": customer["id"],
                "full_name": "Ada Lovelace",
                "email": "ada@example.com",
                "scheduled_at": "2026-11-02T10:30:00Z",
            },
        )

        assert response.status_code == 404
        assert response.json()["error_kind"] == "not_found"

    def test_appointment_lifecycle(self, client, auth_headers, customer):
        created = client.post(
            "/api/admin/appointments",
            headers=auth_headers,
            json={
                "customer_id": customer["id"],
                "full_name": "Ada Lovelace",
                "email": "ada@example.com",
                "scheduled_at": "2026-11-02T10:30:00Z",
            },
        )
        assert created.status_code == 201
        item = f"/api/admin/appointments/{created.json()['data']['id']}"

        assert client.post(f"{item}/delete", headers=auth_headers).status_code == 200
        assert client.post(f"{item}/restore", headers=auth_headers).status_code == 200
        assert client.post(f"{item}/restore", headers=auth_headers).status_code == 409


class TestPermissions:
    def test_editor_cannot_delete(self, client, editor_headers, auth_headers, testimonial):
        response = client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=editor_headers)

        assert response.status_code == 403
        assert response.json()["error_kind"] == "authorization"

    def test_editor_can_restore(self, client, editor_headers, auth_headers, testimonial):
        client.post(f"/api/admin/testimonials/{testimonial['id']}/delete", headers=auth_headers)

        response = client.post(f"/api/admin/testimonials/{testimonial['id']}/restore", headers=editor_headers)

        assert response.status_code == 200


@pytest.fixture
def product(client, auth_headers):
    response = client.post(
        "/api/admin/products",
        headers=auth_headers,
        json={"name": "Aviator frame", "description": "Titanium frame", "price": 149.9, "brand": "Ray-Ban"},
    )
    assert response.status_code == 201, response.json()
    return response.json()["data"]


class TestProductTrash:
    def test_trash_and_restore(self, client, auth_headers, product, publisher):
        item = f"/api/admin/products/{product['id']}"

        deleted = client.post(f"{item}/delete", headers=auth_headers)
        trash = client.get("/api/admin/products/trash", headers=auth_headers).json()["data"]
        restored = client.post(f"{item}/restore", headers=auth_headers)

        assert deleted.status_code == 200
        assert [p["id"] for p in trash] == [product["id"]]
        assert restored.status_code == 200
        assert restored.json()["data"]["is_deleted"] is False
        assert ("products", ["/products", "/admin/products", "/admin/products/trash"]) in publisher.signals

    def test_public_products_hide_deleted(self, client, auth_headers, product):
        other = client.post(
            "/api/admin/products",
            headers=auth_headers,
            json={"name": "Lens cloth", "description": "Microfiber cloth", "price": 4.5},
        ).json()["data"]
        client.post(f"/api/admin/products/{other['id']}/delete", headers=auth_headers)

        response = client.get("/api/public/products")

        assert [p["id"] for p in response.json()["data"]] == [product["id"]]

    def test_negative_price(self, client, auth_headers):
        response = client.post(
            "/api/admin/products",
            headers=auth_headers,
            json={"name": "Case", "description": "Hard case", "price": -3},
        )

        assert response.status_code == 400
        assert "price" in response.json()["field_errors"]
