"""Tests for brand admin and agency synchronisation."""
import pytest

from api.repositories.local import LocalRepository
from api.services import brand_service
from mixerai.users import AuthUser

ADMIN = AuthUser(id="admin", email="admin@example.com", user_metadata={"role": "admin"})
ASA_ID = "11111111-1111-4111-8111-111111111111"
CAP_ID = "22222222-2222-4222-8222-222222222222"
FTC_ID = "33333333-3333-4333-8333-333333333333"


@pytest.fixture
def repo():
    repo = LocalRepository()
    repo.add_user(ADMIN)
    repo.add_user(AuthUser(id="alice", email="alice@example.com", user_metadata={"role": "editor"}))
    repo.add_user(AuthUser(id="bob", email="bob@example.com", user_metadata={"role": "editor"}))
    repo.insert("content_vetting_agencies", {"id": ASA_ID, "name": "ASA", "country_code": "GB", "priority": "High"})
    repo.insert("content_vetting_agencies", {"id": CAP_ID, "name": "CAP", "country_code": "GB", "priority": "Medium"})
    repo.insert("content_vetting_agencies", {"id": FTC_ID, "name": "FTC", "country_code": "US", "priority": "Low"})
    repo.insert("brands", {"id": "b1", "name": "Acme", "country": "GB"})
    return repo


class TestCreateBrand:
    """Tests for create_brand."""

    def test_name_required(self, repo):
        with pytest.raises(ValueError, match="Brand name is required"):
            brand_service.create_brand(repo, ADMIN, {"name": "  "})

    def test_derives_columns_and_links_agencies(self, repo):
        brand = brand_service.create_brand(repo, ADMIN, {
            "name": " Bolt ",
            "country": "GB",
            "website_url": "https://www.bolt.co.uk/",
            "selected_agency_ids": ["CAP", "ASA", "FTC"],
        })

        assert brand["name"] == "Bolt"
        assert brand["normalized_website_domain"] == "bolt.co.uk"
        # FTC is a US agency, so the GB brand only gets ASA and CAP
        assert [a["name"] for a in brand["selected_vetting_agencies"]] == ["ASA", "CAP"]
        assert [a["priority"] for a in brand["selected_vetting_agencies"]] == [1, 2]


class TestSyncBrandAdmins:
    """Tests for sync_brand_admins."""

    def test_adds_existing_users_and_invites_unknown(self, repo):
        brand_service.sync_brand_admins(repo, "b1", ["Alice@example.com", "new@example.com"])

        invited = repo.get_user_by_email("new@example.com")
        assert invited.user_metadata == {
            "role": "editor",
            "invited_to_brand": "b1",
            "invited_as_brand_role": "admin",
        }
        admin_ids = {m["user_id"] for m in repo.list_brand_members("b1", ("admin",))}
        assert admin_ids == {"alice", invited.id}

    def test_unlisted_admins_lose_role(self, repo):
        repo.upsert_brand_permissions([
            {"user_id": "alice", "brand_id": "b1", "role": "admin"},
            {"user_id": "bob", "brand_id": "b1", "role": "brand_admin"},
        ])

        brand_service.sync_brand_admins(repo, "b1", ["bob@example.com"])

        assert repo.get_brand_permissions("alice", "b1") == []
        assert repo.get_brand_permissions("bob", "b1")[0]["role"] == "brand_admin"

    def test_failed_invite_is_skipped(self, repo, monkeypatch):
        def fail(email, metadata):
            raise RuntimeError("smtp down")

        monkeypatch.setattr(repo, "invite_user", fail)

        brand_service.sync_brand_admins(repo, "b1", ["ghost@example.com", "bob@example.com"])

        assert [m["user_id"] for m in repo.list_brand_members("b1", ("admin",))] == ["bob"]


class TestUpdateBrand:
    """Tests for update_brand."""

    def test_agencies_untouched_when_not_sent(self, repo):
        repo.add_selected_agencies("b1", [ASA_ID])

        updated = brand_service.update_brand(repo, repo.get_brand("b1"), {"tone_of_voice": "Warm"}, "2024-05-01")

        assert updated["tone_of_voice"] == "Warm"
        assert updated["updated_at"] == "2024-05-01"
        assert [a["id"] for a in updated["selected_vetting_agencies"]] == [ASA_ID]

    def test_empty_agency_list_clears(self, repo):
        repo.add_selected_agencies("b1", [ASA_ID])

        updated = brand_service.update_brand(repo, repo.get_brand("b1"), {"selected_agency_ids": []}, "now")

        assert updated["selected_vetting_agencies"] == []

    def test_uuid_references_skip_invalid_entries(self, repo):
        updated = brand_service.update_brand(
            repo, repo.get_brand("b1"), {"selected_agency_ids": [CAP_ID, "CAP"]}, "now"
        )
        assert [a["id"] for a in updated["selected_vetting_agencies"]] == [CAP_ID]


class TestDeleteBrand:
    def test_requires_cascade_when_dependents_exist(self, repo):
        repo.insert("content", {"brand_id": "b1", "title": "Post"})

        with pytest.raises(brand_service.CascadeRequiredError) as exc:
            brand_service.delete_brand(repo, repo.get_brand("b1"), cascade=False)

        assert str(exc.value) == (
            "Cannot delete brand. It has 1 piece of content and 0 workflows associated. "
            "Use deleteCascade=true to override."
        )
        brand_service.delete_brand(repo, repo.get_brand("b1"), cascade=True)
        assert repo.get_brand("b1") is None
