"""
Tests for the admin endpoints of ordered collections.
"""

import pytest


@pytest.fixture
def faqs(client, auth_headers):
    """Three FAQs created through the API: A, B, C."""
    created = []
    for question in ("A", "B", "C"):
        response = client.post(
            "/api/admin/faqs",
            headers=auth_headers,
            json={"question": question, "answer": f"Answer {question}"},
        )
        assert response.status_code == 201, response.json()
        created.append(response.json()["data"])
    return created


class TestOrderedEndpoints:
    """Admin CRUD and ordering of FAQs."""

    def test_create_appends_and_revalidates(self, client, auth_headers, publisher):
        response = client.post(
            "/api/admin/faqs",
            headers=auth_headers,
            json={"question": "<b>Do you repair frames?</b>", "answer": "Yes"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["question"] == "Do you repair frames?"
        assert body["data"]["order"] == 0
        assert publisher.signals == [("faqs", ["/faq", "/admin/content/faq"])]

    def test_list_in_display_order(self, client, auth_headers, faqs):
        response = client.get("/api/admin/faqs", headers=auth_headers)

        assert response.status_code == 200
        assert [item["question"] for item in response.json()["data"]] == ["A", "B", "C"]

    def test_reorder(self, client, auth_headers, faqs):
        a, b, c = (item["id"] for item in faqs)

        response = client.put(
            "/api/admin/faqs/order",
            headers=auth_headers,
            json={"ids": [c, a, b]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [(item["question"], item["order"]) for item in data] == [("C", 0), ("A", 1), ("B", 2)]

    def test_partial_reorder_is_a_conflict(self, client, auth_headers, faqs, publisher):
        a, b, _ = (item["id"] for item in faqs)
        publisher.signals.clear()

        response = client.put(
            "/api/admin/faqs/order",
            headers=auth_headers,
            json={"ids": [b, a]},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "invariant_violation"
        assert [item["question"] for item in body["data"]] == ["A", "B", "C"]
        assert publisher.signals == []

    def test_empty_reorder_is_a_bad_request(self, client, auth_headers, faqs):
        response = client.put("/api/admin/faqs/order", headers=auth_headers, json={"ids": []})

        assert response.status_code == 400
        assert response.json()["error_kind"] == "validation"

    def test_reorder_with_unknown_id(self, client, auth_headers, faqs):
        ids = [item["id"] for item in faqs] + ["does-not-exist"]

        response = client.put("/api/admin/faqs/order", headers=auth_headers, json={"ids": ids})

        assert response.status_code == 404

    def test_remove_renumbers(self, client, auth_headers, faqs):
        response = client.delete(f"/api/admin/faqs/{faqs[1]['id']}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [(item["question"], item["order"]) for item in data] == [("A", 0), ("C", 1)]

    def test_update(self, client, auth_headers, faqs):
        response = client.patch(
            f"/api/admin/faqs/{faqs[0]['id']}",
            headers=auth_headers,
            json={"answer": "Updated"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["answer"] == "Updated"
        assert response.json()["data"]["order"] == 0

    def test_order_field_is_not_accepted(self, client, auth_headers):
        response = client.post(
            "/api/admin/faqs",
            headers=auth_headers,
            json={"question": "Q", "answer": "A", "order": 3},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_kind"] == "validation"
        assert "order" in body["field_errors"]

    def test_home_values_and_about_sections(self, client, auth_headers, publisher):
        home = client.post(
            "/api/admin/home-values",
            headers=auth_headers,
            json={"title": "Expertise", "description": "Certified opticians", "icon": "eye"},
        )
        about = client.post(
            "/api/admin/about-sections",
            headers=auth_headers,
            json={"title": "Our story", "content": "Family run since 1982"},
        )

        assert home.status_code == 201
        assert about.status_code == 201
        assert home.json()["data"]["order"] == 0
        assert about.json()["data"]["order"] == 0
        assert "/admin/content/home" in publisher.paths
        assert "/about" in publisher.paths


class TestServices:
    """Services are ordered and soft-deletable."""

    def _create(self, client, headers, name):
        response = client.post("/api/admin/services", headers=headers, json={"name": name})
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    def test_remove_moves_service_to_trash(self, client, auth_headers):
        exam = self._create(client, auth_headers, "Eye exam")
        self._create(client, auth_headers, "Lens fitting")

        response = client.delete(f"/api/admin/services/{exam['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert [(s["name"], s["order"]) for s in response.json()["data"]] == [("Lens fitting", 0)]

        trash = client.get("/api/admin/services/trash", headers=auth_headers).json()["data"]
        assert [s["id"] for s in trash] == [exam["id"]]
        assert trash[0]["is_active"] is False

    def test_restore_appends_to_the_end(self, client, auth_headers):
        exam = self._create(client, auth_headers, "Eye exam")
        self._create(client, auth_headers, "Lens fitting")
        client.post(f"/api/admin/services/{exam['id']}/delete", headers=auth_headers)

        response = client.post(f"/api/admin/services/{exam['id']}/restore", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["order"] == 1
        assert response.json()["data"]["is_active"] is False

    def test_public_services_hide_inactive(self, client, auth_headers):
        exam = self._create(client, auth_headers, "Eye exam")
        self._create(client, auth_headers, "Lens fitting")
        client.post(
            f"/api/admin/services/{exam['id']}/status",
            headers=auth_headers,
            json={"is_active": False},
        )

        response = client.get("/api/public/services")

        assert response.status_code == 200
        assert [s["name"] for s in response.json()["data"]] == ["Lens fitting"]


def test_public_faqs_need_no_auth(client, auth_headers, faqs):
    response = client.get("/api/public/faqs")

    assert response.status_code == 200
    assert [item["order"] for item in response.json()["data"]] == [0, 1, 2]


def test_about_benefits_reorder(client, auth_headers, publisher):
    ids = []
    for title in ("Free eye exam", "Two-year warranty"):
        response = client.post(
            "/api/admin/about-benefits",
            headers=auth_headers,
            json={"title": title, "description": f"{title} with every pair", "color": "#0a84ff"},
        )
        assert response.status_code == 201, response.json()
        ids.append(response.json()["data"]["id"])

    response = client.put("/api/admin/about-benefits/order", headers=auth_headers, json={"ids": ids[::-1]})
    public = client.get("/api/public/about-benefits").json()["data"]

    assert response.status_code == 200
    assert [(item["title"], item["order"]) for item in public] == [("Two-year warranty", 0), ("Free eye exam", 1)]
    assert ("about-benefits", ["/about", "/admin/content/about"]) in publisher.signals
