"""Tests for materials API endpoints."""

from fastapi.testclient import TestClient

from crm_api.core.errors import StorageCorruptionError
from crm_api.main import create_app


def steel_beam(references, **overrides):
    body = {"name": "Steel Beam", "article": "SB-100", "other_fields": {"grade": "S355"}, **references}
    body.update(overrides)
    return body


class TestPlanningEndpoints:

    def test_lifecycle(self, client, auth_headers, references):
        response = client.post("/api/materials/planning", json=steel_beam(references), headers=auth_headers)
        assert response.status_code == 201
        planning_id = response.json()["id"]

        response = client.get(f"/api/materials/planning/{planning_id}", headers=auth_headers)
        assert response.status_code == 200
        material = response.json()
        assert material["item_id"] == 0
        assert material["company_id"] == 7
        assert material["supplier_name"] == "Acme Metals"
        assert material["other_fields"] == {"grade": "S355"}

        response = client.patch(
            f"/api/materials/planning/{planning_id}", json={"name": "Steel Beam XL"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Steel Beam XL"
        assert response.json()["article"] == "SB-100"

        response = client.post(f"/api/materials/planning/{planning_id}/move", headers=auth_headers)
        assert response.status_code == 200
        purchased_id, item_id = response.json()["id"], response.json()["item_id"]
        assert item_id > 0

        response = client.get(f"/api/materials/planning/{planning_id}", headers=auth_headers)
        assert response.status_code == 404

        response = client.get(f"/api/materials/planning-archive/{planning_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["item_id"] == item_id

        response = client.post(f"/api/materials/planning/{planning_id}/move", headers=auth_headers)
        assert response.status_code == 404

        response = client.post(f"/api/materials/purchased/{purchased_id}/archive", headers=auth_headers)
        assert response.status_code == 204

        response = client.get(f"/api/materials/purchased-archive/{purchased_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["item_id"] == item_id

    def test_list(self, client, auth_headers, stranger_headers, references):
        for name in ["Bolt", "Anchor", "Cable"]:
            client.post("/api/materials/planning", json=steel_beam(references, name=name), headers=auth_headers)

        response = client.get("/api/materials/planning?limit=2", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 3
        assert [m["name"] for m in response.json()["items"]] == ["Anchor", "Bolt"]

        response = client.get("/api/materials/planning", headers=stranger_headers)
        assert response.json() == {"items": [], "total": 0}

    def test_delete(self, client, auth_headers, references):
        planning_id = client.post(
            "/api/materials/planning", json=steel_beam(references), headers=auth_headers
        ).json()["id"]

        response = client.delete(f"/api/materials/planning/{planning_id}", headers=auth_headers)
        assert response.status_code == 204
        response = client.delete(f"/api/materials/planning/{planning_id}", headers=auth_headers)
        assert response.status_code == 404


class TestPurchasedEndpoints:

    def test_create_returns_item_id(self, client, auth_headers, references):
        response = client.post("/api/materials/purchased", json=steel_beam(references), headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["item_id"] > 0

    def test_company_id_cannot_be_patched(self, client, auth_headers, references):
        purchased_id = client.post(
            "/api/materials/purchased", json=steel_beam(references), headers=auth_headers
        ).json()["id"]

        response = client.patch(
            f"/api/materials/purchased/{purchased_id}",
            json={"company_id": 99, "status": "in stock"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["company_id"] == 7
        assert response.json()["status"] == "in stock"


class TestSearch:

    def test_search_across_stages(self, client, auth_headers, references):
        client.post("/api/materials/planning", json=steel_beam(references), headers=auth_headers)
        client.post("/api/materials/purchased", json=steel_beam(references, name="steel pipe"), headers=auth_headers)
        client.post("/api/materials/purchased", json=steel_beam(references, name="Copper"), headers=auth_headers)

        response = client.get("/api/materials/search?query=Steel", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {(item["name"], item["stage"]) for item in body["items"]} == {
            ("Steel Beam", "planning"),
            ("steel pipe", "purchased"),
        }


class TestErrorMapping:

    def test_other_company_is_forbidden(self, client, auth_headers, stranger_headers, references):
        planning_id = client.post(
            "/api/materials/planning", json=steel_beam(references), headers=auth_headers
        ).json()["id"]

        response = client.get(f"/api/materials/planning/{planning_id}", headers=stranger_headers)
        assert response.status_code == 403
        assert response.json() == {"detail": "not allowed"}

        response = client.patch(
            f"/api/materials/planning/{planning_id}", json={"name": "Hacked"}, headers=stranger_headers
        )
        assert response.status_code == 403

    def test_full_access_may_read_other_company(self, client, auth_headers, admin_headers, references):
        planning_id = client.post(
            "/api/materials/planning", json=steel_beam(references), headers=auth_headers
        ).json()["id"]

        response = client.get(f"/api/materials/planning/{planning_id}", headers=admin_headers)
        assert response.status_code == 200

    def test_foreign_warehouse_on_create(self, client, auth_headers, stranger_admin_headers, references):
        foreign = client.post("/api/warehouses", json={"name": "Theirs"}, headers=stranger_admin_headers).json()

        response = client.post(
            "/api/materials/planning",
            json=steel_beam(references, warehouse_id=foreign["id"]),
            headers=auth_headers,
        )
        assert response.status_code == 403

    def test_missing_references(self, client, auth_headers, references):
        response = client.post(
            "/api/materials/planning", json=steel_beam(references, warehouse_id=999), headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json() == {"detail": "warehouse not found"}

        response = client.get("/api/materials/purchased/999", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "material not found"}

    def test_invalid_sort_field(self, client, auth_headers):
        response = client.get("/api/materials/planning?sort_field=password", headers=auth_headers)
        assert response.status_code == 400

    def test_invalid_paging(self, client, auth_headers):
        assert client.get("/api/materials/planning?limit=0", headers=auth_headers).status_code == 422
        assert client.get("/api/materials/planning?offset=-1", headers=auth_headers).status_code == 422
        assert client.get("/api/materials/planning?sort=sideways", headers=auth_headers).status_code == 422

    def test_null_in_patch(self, client, auth_headers, references):
        planning_id = client.post(
            "/api/materials/planning", json=steel_beam(references), headers=auth_headers
        ).json()["id"]

        response = client.patch(f"/api/materials/planning/{planning_id}", json={"name": None}, headers=auth_headers)
        assert response.status_code == 422

    def test_authentication_required(self, client):
        response = client.get("/api/materials/planning")
        assert response.status_code in (401, 403)

        response = client.get("/api/materials/planning", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_internal_errors_hide_details(self):
        app = create_app()

        async def corrupted():
            raise StorageCorruptionError("other_fields of planning_materials#1 is corrupted")

        async def crashed():
            raise RuntimeError("connection string with password")

        app.add_api_route("/corrupted", corrupted)
        app.add_api_route("/crashed", crashed)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/corrupted")
            assert response.status_code == 500
            assert response.json() == {"detail": "internal server error"}

            response = client.get("/crashed")
            assert response.status_code == 500
            assert "password" not in response.text
