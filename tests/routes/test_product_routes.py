"""Tests for master claim brand and product routes."""
from conftest import (
    BRAND_ID,
    MASTER_BRAND_ID,
    OTHER_MASTER_BRAND_ID,
    PRODUCT_ID,
    UNLINKED_MASTER_BRAND_ID,
    auth,
)


class TestMasterClaimBrands:
    """Tests for /api/master-claim-brands."""

    def test_list_filtered_by_access(self, client):
        response = client.get("/api/master-claim-brands", headers=auth("editor"))
        assert [m["id"] for m in response.json()["data"]] == [MASTER_BRAND_ID]

    def test_admin_lists_all(self, client):
        response = client.get("/api/master-claim-brands", headers=auth("admin"))
        assert len(response.json()["data"]) == 3

    def test_create(self, client):
        response = client.post("/api/master-claim-brands", json={"name": "New", "mixerai_brand_id": BRAND_ID},
                               headers=auth("admin"))
        assert response.status_code == 201
        assert response.json()["data"]["mixerai_brand_id"] == BRAND_ID

    def test_duplicate_name(self, client):
        response = client.post("/api/master-claim-brands", json={"name": "Orphan"}, headers=auth("admin"))
        assert response.status_code == 409

    def test_unknown_core_brand(self, client):
        response = client.post("/api/master-claim-brands", json={"name": "X", "mixerai_brand_id": "missing"},
                               headers=auth("admin"))
        assert response.status_code == 400


class TestCreateProduct:
    """Tests for POST /api/products."""

    def test_brand_admin_creates(self, client):
        response = client.post("/api/products", json={
            "name": "  Acme Lemon ",
            "description": "Zesty",
            "master_brand_id": MASTER_BRAND_ID,
        }, headers=auth("brand-admin"))

        assert response.status_code == 201
        assert response.json()["data"]["name"] == "Acme Lemon"

    def test_validation_message(self, client):
        response = client.post("/api/products", json={"master_brand_id": MASTER_BRAND_ID}, headers=auth("admin"))
        assert response.status_code == 400
        assert response.json()["error"] == "Product name is required and must be a non-empty string."

    def test_editor_forbidden(self, client):
        response = client.post("/api/products", json={"name": "X", "master_brand_id": MASTER_BRAND_ID},
                               headers=auth("editor"))
        assert response.status_code == 403

    def test_unlinked_master_brand_forbidden_for_brand_admin(self, client):
        response = client.post("/api/products", json={"name": "X", "master_brand_id": UNLINKED_MASTER_BRAND_ID},
                               headers=auth("brand-admin"))
        assert response.status_code == 403

    def test_duplicate(self, client):
        response = client.post("/api/products", json={"name": "Acme Cola", "master_brand_id": MASTER_BRAND_ID},
                               headers=auth("admin"))
        assert response.status_code == 409
        assert response.json()["error"] == "A product with this name already exists for this brand."

    def test_unknown_master_brand(self, client):
        response = client.post("/api/products", json={"name": "X", "master_brand_id": "missing"},
                               headers=auth("admin"))
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid Master Brand ID. The specified brand does not exist."


class TestProductReadWrite:
    """Tests for product listing and the /api/products/{id} routes."""

    def test_list_visible(self, client, repo):
        repo.insert("products", {"name": "Bolt Cola", "master_brand_id": OTHER_MASTER_BRAND_ID})

        editor = client.get("/api/products", headers=auth("editor")).json()["data"]
        admin = client.get("/api/products", headers=auth("admin")).json()["data"]

        assert [p["id"] for p in editor] == [PRODUCT_ID]
        assert len(admin) == 2

    def test_get_forbidden_for_outsider(self, client):
        assert client.get(f"/api/products/{PRODUCT_ID}", headers=auth("outsider")).status_code == 403
        assert client.get(f"/api/products/{PRODUCT_ID}", headers=auth("viewer")).status_code == 200

    def test_update(self, client):
        response = client.put(f"/api/products/{PRODUCT_ID}", json={"description": "Classic"},
                              headers=auth("brand-admin"))
        assert response.status_code == 200
        assert response.json()["data"]["description"] == "Classic"

    def test_delete(self, client, repo):
        response = client.delete(f"/api/products/{PRODUCT_ID}", headers=auth("brand-admin"))
        assert response.status_code == 200
        assert repo.get_product(PRODUCT_ID) is None

    def test_missing(self, client):
        assert client.get("/api/products/missing", headers=auth("admin")).status_code == 404
