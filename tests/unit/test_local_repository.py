"""Tests for the in-process repository's constraints and RPCs."""
import json

import pytest

from api.repositories.local import LocalRepository
from mixerai.exceptions import ConflictError, ForeignKeyError, NotFoundError
from mixerai.users import AuthUser


@pytest.fixture
def repo():
    repo = LocalRepository()
    repo.insert("brands", {"id": "b1", "name": "Acme", "brand_color": "#ff0000"})
    repo.insert("brands", {"id": "b2", "name": "Bolt"})
    repo.insert("master_claim_brands", {"id": "m1", "name": "Acme Global", "mixerai_brand_id": "b1"})
    repo.insert("products", {"id": "p1", "name": "Acme Cola", "master_brand_id": "m1"})
    return repo


class TestConstraints:
    """Tests for unique and foreign key enforcement."""

    def test_insert_fills_id_and_created_at(self, repo):
        row = repo.insert("brands", {"name": "Citrus"})
        assert row["id"]
        assert row["created_at"]

    def test_duplicate_product_name_per_master_brand(self, repo):
        with pytest.raises(ConflictError) as exc:
            repo.create_product({"name": "Acme Cola", "master_brand_id": "m1"})
        assert exc.value.code == "23505"

    def test_same_product_name_under_other_master_brand(self, repo):
        repo.insert("master_claim_brands", {"id": "m2", "name": "Other"})
        assert repo.create_product({"name": "Acme Cola", "master_brand_id": "m2"})["id"]

    def test_missing_foreign_key(self, repo):
        with pytest.raises(ForeignKeyError) as exc:
            repo.create_product({"name": "Ghost", "master_brand_id": "missing"})
        assert exc.value.code == "23503"

    def test_update_checks_uniqueness_against_other_rows(self, repo):
        repo.create_product({"id": "p2", "name": "Acme Lemon", "master_brand_id": "m1"})

        assert repo.update_product("p2", {"name": "Acme Lemon", "description": "Zesty"})["description"] == "Zesty"
        with pytest.raises(ConflictError):
            repo.update_product("p2", {"name": "Acme Cola"})

    def test_update_missing_row_returns_none(self, repo):
        assert repo.update_brand("missing", {"name": "x"}) is None

    def test_returned_rows_are_copies(self, repo):
        brand = repo.get_brand("b1")
        brand["name"] = "Changed"
        assert repo.get_brand("b1")["name"] == "Acme"


class TestDeleteBrandAndDependents:
    """Tests for the brand cascade RPC."""

    def test_removes_dependents_and_unlinks_master_brands(self, repo):
        repo.insert("content", {"id": "c1", "brand_id": "b1", "title": "Post"})
        repo.insert("content", {"id": "c2", "brand_id": "b2", "title": "Other"})
        repo.insert("workflows", {"id": "w1", "brand_id": "b1"})
        repo.upsert_brand_permissions([{"user_id": "u1", "brand_id": "b1", "role": "editor"}])

        repo.delete_brand_and_dependents("b1")

        assert repo.get_brand("b1") is None
        assert [c["id"] for c in repo.rows("content")] == ["c2"]
        assert repo.rows("workflows") == []
        assert repo.get_brand_permissions("u1") == []
        assert repo.get_master_claim_brand("m1")["mixerai_brand_id"] is None

    def test_missing_brand_raises(self, repo):
        with pytest.raises(NotFoundError):
            repo.delete_brand_and_dependents("missing")


class TestTemplatesAndProducts:
    def test_template_delete_detaches_content(self, repo):
        repo.insert("content_templates", {"id": "t1", "name": "Blog", "fields": {}})
        repo.insert("content", {"id": "c1", "brand_id": "b1", "template_id": "t1"})

        repo.delete_template_and_update_content("t1")

        assert repo.get_template("t1") is None
        assert repo.get_content("c1")["template_id"] is None

    def test_template_delete_missing_raises(self, repo):
        with pytest.raises(NotFoundError):
            repo.delete_template_and_update_content("missing")

    def test_product_delete_cascades_product_claims(self, repo):
        repo.create_claim({"claim_text": "Tasty", "claim_type": "allowed", "level": "product", "product_id": "p1"})

        assert repo.delete_product("p1")
        assert repo.list_claims() == []
        assert not repo.delete_product("p1")


class TestListContent:
    """Tests for content listing filters."""

    @pytest.fixture(autouse=True)
    def content(self, repo):
        repo.insert("content", {"id": "c1", "brand_id": "b1", "title": "Summer Launch", "status": "draft",
                                "created_at": "2024-01-01T00:00:00+00:00"})
        repo.insert("content", {"id": "c2", "brand_id": "b1", "title": "Winter promo", "status": "approved",
                                "created_at": "2024-02-01T00:00:00+00:00"})
        repo.insert("content", {"id": "c3", "brand_id": "b2", "title": "summer sale", "status": "rejected",
                                "created_at": "2024-03-01T00:00:00+00:00"})

    def test_newest_first_with_brand_details(self, repo):
        items = repo.list_content()
        assert [i["id"] for i in items] == ["c3", "c2", "c1"]
        assert items[1]["brand_name"] == "Acme"
        assert items[1]["brand_color"] == "#ff0000"

    def test_active_excludes_approved_and_rejected(self, repo):
        assert [i["id"] for i in repo.list_content(status="active")] == ["c1"]

    def test_status_and_brand_filters(self, repo):
        assert [i["id"] for i in repo.list_content(status="approved")] == ["c2"]
        assert [i["id"] for i in repo.list_content(brand_ids=["b2"])] == ["c3"]
        assert repo.list_content(brand_ids=[]) == []

    def test_title_search_is_case_insensitive(self, repo):
        assert [i["id"] for i in repo.list_content(query="SUMMER")] == ["c3", "c1"]


class TestUsers:
    """Tests for the auth side of the local repository."""

    def test_token_lookup(self):
        repo = LocalRepository()
        repo.add_user(AuthUser(id="u1", email="a@example.com"), token="secret")

        assert repo.get_user_for_token("secret").id == "u1"
        assert repo.get_user_for_token("wrong") is None
        assert repo.get_profiles(["u1"])[0]["email"] == "a@example.com"

    def test_invite_creates_user_and_rejects_duplicates(self):
        repo = LocalRepository()

        invited = repo.invite_user("New@Example.com", {"role": "editor"})

        assert repo.get_user_by_email("new@example.com").id == invited.id
        assert invited.role == "editor"
        with pytest.raises(ConflictError):
            repo.invite_user("new@example.com", {})

    def test_seed_file(self, tmp_path):
        seed = {
            "users": [{"id": "u1", "email": "a@example.com", "user_metadata": {"role": "admin"},
                       "access_token": "tok"}],
            "brands": [{"id": "b1", "name": "Acme"}],
            "user_brand_permissions": [{"user_id": "u1", "brand_id": "b1", "role": "admin"}],
        }
        path = tmp_path / "seed.json"
        path.write_text(json.dumps(seed))

        repo = LocalRepository(seed_path=path)

        assert repo.get_user_for_token("tok").is_global_admin
        assert repo.get_brand("b1")["name"] == "Acme"
        assert repo.get_brand_permissions("u1", "b1")[0]["role"] == "admin"

    def test_missing_seed_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalRepository(seed_path=tmp_path / "nope.json")
