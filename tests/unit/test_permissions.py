"""Tests for brand, product and claim permission resolution."""
import pytest

from api.repositories.local import LocalRepository
from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser

ADMIN = AuthUser(id="admin", user_metadata={"role": "admin"})
BRAND_ADMIN = AuthUser(id="brand-admin", user_metadata={"role": "editor"})
LEGACY_ADMIN = AuthUser(id="legacy-admin", user_metadata={"role": "editor"})
EDITOR = AuthUser(id="editor", user_metadata={"role": "editor"})
OUTSIDER = AuthUser(id="outsider", user_metadata={"role": "editor"})


@pytest.fixture
def resolver():
    repo = LocalRepository()
    repo.insert("brands", {"id": "b1", "name": "Acme"})
    repo.insert("brands", {"id": "b2", "name": "Bolt"})
    repo.insert("master_claim_brands", {"id": "m1", "name": "Acme Global", "mixerai_brand_id": "b1"})
    repo.insert("master_claim_brands", {"id": "m-unlinked", "name": "Orphan"})
    repo.insert("products", {"id": "p1", "name": "Cola", "master_brand_id": "m1"})
    repo.insert("products", {"id": "p-unlinked", "name": "Orphan Cola", "master_brand_id": "m-unlinked"})
    repo.upsert_brand_permissions([
        {"user_id": "brand-admin", "brand_id": "b1", "role": "admin"},
        {"user_id": "legacy-admin", "brand_id": "b1", "role": "brand_admin"},
        {"user_id": "editor", "brand_id": "b1", "role": "editor"},
        {"user_id": "outsider", "brand_id": "b2", "role": "admin"},
    ])
    return PermissionResolver(repo)


class TestBrandAccess:
    """Tests for brand level checks."""

    def test_global_admin_is_unrestricted(self, resolver):
        assert resolver.accessible_brand_ids(ADMIN) is None
        assert resolver.has_brand_access(ADMIN, "anything")

    def test_accessible_brand_ids(self, resolver):
        assert resolver.accessible_brand_ids(EDITOR) == {"b1"}

    def test_brand_admin_roles(self, resolver):
        assert resolver.can_admin_brand(BRAND_ADMIN, "b1")
        assert resolver.can_admin_brand(LEGACY_ADMIN, "b1")
        assert not resolver.can_admin_brand(EDITOR, "b1")
        assert not resolver.can_admin_brand(BRAND_ADMIN, "b2")

    def test_missing_brand_id_never_grants(self, resolver):
        assert not resolver.has_brand_access(EDITOR, None)
        assert not resolver.is_brand_admin("brand-admin", None)


class TestChainWalking:
    """Tests for resolving the core brand of products and claims."""

    def test_product_and_claim_chains(self, resolver):
        assert resolver.core_brand_for_product_id("p1") == "b1"
        assert resolver.core_brand_for_claim({"level": "brand", "master_brand_id": "m1"}) == "b1"
        assert resolver.core_brand_for_claim({"level": "product", "product_id": "p1"}) == "b1"

    def test_broken_chains_resolve_to_none(self, resolver):
        assert resolver.core_brand_for_product_id("missing") is None
        assert resolver.core_brand_for_product_id("p-unlinked") is None
        assert resolver.core_brand_for_master_brand("missing") is None
        assert resolver.core_brand_for_claim({"level": "ingredient", "ingredient_id": "i1"}) is None


class TestProductPermissions:
    def test_create_requires_brand_admin_of_linked_brand(self, resolver):
        assert resolver.can_create_product(ADMIN, "m-unlinked")
        assert resolver.can_create_product(BRAND_ADMIN, "m1")
        assert not resolver.can_create_product(EDITOR, "m1")
        assert not resolver.can_create_product(BRAND_ADMIN, "m-unlinked")

    def test_read_requires_any_access(self, resolver):
        product = {"id": "p1", "master_brand_id": "m1"}
        assert resolver.can_read_product(EDITOR, product)
        assert not resolver.can_read_product(OUTSIDER, product)


class TestClaimPermissions:
    """Tests for claim read, create and modify checks."""

    BRAND_CLAIM = {"level": "brand", "master_brand_id": "m1", "created_by": "someone"}
    INGREDIENT_CLAIM = {"level": "ingredient", "ingredient_id": "i1", "created_by": "someone"}

    def test_read(self, resolver):
        assert resolver.can_read_claim(EDITOR, self.BRAND_CLAIM)
        assert not resolver.can_read_claim(OUTSIDER, self.BRAND_CLAIM)
        assert resolver.can_read_claim(OUTSIDER, self.INGREDIENT_CLAIM)

    def test_creator_can_always_modify(self, resolver):
        claim = {**self.BRAND_CLAIM, "created_by": "outsider"}
        assert resolver.can_modify_claim(OUTSIDER, claim)

    def test_modify_needs_brand_admin(self, resolver):
        assert resolver.can_modify_claim(BRAND_ADMIN, self.BRAND_CLAIM)
        assert not resolver.can_modify_claim(EDITOR, self.BRAND_CLAIM)

    def test_ingredient_claims_only_admin_or_creator(self, resolver):
        assert resolver.can_modify_claim(ADMIN, self.INGREDIENT_CLAIM)
        assert not resolver.can_modify_claim(BRAND_ADMIN, self.INGREDIENT_CLAIM)
        assert not resolver.can_create_claim(BRAND_ADMIN, self.INGREDIENT_CLAIM)

    def test_create_product_claim(self, resolver):
        assert resolver.can_create_claim(BRAND_ADMIN, {"level": "product", "product_id": "p1"})
        assert not resolver.can_create_claim(EDITOR, {"level": "product", "product_id": "p1"})


class TestContentPermissions:
    def test_delete(self, resolver):
        item = {"brand_id": "b1", "created_by": "editor"}
        assert resolver.can_delete_content(EDITOR, item)
        assert resolver.can_delete_content(BRAND_ADMIN, item)
        assert not resolver.can_delete_content(OUTSIDER, item)
