"""
Shared fixtures for route tests.

The app runs against an in-memory LocalRepository with a fixed cast of
users (one bearer token each) and a fake AI client, so no network or
database is needed.
"""
import pytest
from fastapi.testclient import TestClient

from api.dependencies import AppState, get_app_state
from api.main import create_app
from api.repositories.local import LocalRepository
from mixerai.settings import Settings
from mixerai.users import AuthUser

BRAND_ID = "aaaaaaaa-0000-4000-8000-000000000001"
OTHER_BRAND_ID = "aaaaaaaa-0000-4000-8000-000000000002"
MASTER_BRAND_ID = "bbbbbbbb-0000-4000-8000-000000000001"
OTHER_MASTER_BRAND_ID = "bbbbbbbb-0000-4000-8000-000000000002"
UNLINKED_MASTER_BRAND_ID = "bbbbbbbb-0000-4000-8000-000000000003"
PRODUCT_ID = "cccccccc-0000-4000-8000-000000000001"
ASA_ID = "dddddddd-0000-4000-8000-000000000001"
CAP_ID = "dddddddd-0000-4000-8000-000000000002"
FTC_ID = "dddddddd-0000-4000-8000-000000000003"

USERS = {
    "admin": {"role": "admin"},
    "editor": {"role": "editor"},
    "brand-admin": {"role": "editor"},
    "viewer": {"role": "viewer"},
    "outsider": {"role": "editor"},
}


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer token-{user_id}"}


class FakeAIClient:
    """Stands in for AzureOpenAIClient; replies are set per test."""

    def __init__(self):
        self.text = "A generated description."
        self.json_result = {}
        self.json_error = None
        self.calls = []

    def complete_text(self, system_prompt, user_prompt, max_tokens=500):
        self.calls.append({"kind": "text", "system": system_prompt, "user": user_prompt})
        return self.text

    def complete_json(self, system_prompt, user_content, max_tokens=800):
        self.calls.append({"kind": "json", "system": system_prompt, "user": user_content})
        if self.json_error is not None:
            raise self.json_error
        return self.json_result


class FakeFetcher:
    def __init__(self):
        self.pages = {}

    def fetch_html(self, url):
        if url not in self.pages:
            raise ValueError(f"Unsupported content type for {url}: unknown")
        return self.pages[url]


@pytest.fixture
def repo():
    repo = LocalRepository()
    for user_id, metadata in USERS.items():
        repo.add_user(
            AuthUser(id=user_id, email=f"{user_id}@example.com", user_metadata=dict(metadata)),
            token=f"token-{user_id}",
        )

    repo.insert("brands", {"id": BRAND_ID, "name": "Acme", "country": "GB", "language": "en",
                           "brand_color": "#ff0000"})
    repo.insert("brands", {"id": OTHER_BRAND_ID, "name": "Bolt"})
    repo.insert("content_vetting_agencies", {"id": ASA_ID, "name": "ASA", "country_code": "GB", "priority": "High"})
    repo.insert("content_vetting_agencies", {"id": CAP_ID, "name": "CAP", "country_code": "GB", "priority": "Medium"})
    repo.insert("content_vetting_agencies", {"id": FTC_ID, "name": "FTC", "country_code": "US", "priority": "Low"})
    repo.insert("master_claim_brands", {"id": MASTER_BRAND_ID, "name": "Acme Global", "mixerai_brand_id": BRAND_ID})
    repo.insert("master_claim_brands", {"id": OTHER_MASTER_BRAND_ID, "name": "Bolt Global",
                                        "mixerai_brand_id": OTHER_BRAND_ID})
    repo.insert("master_claim_brands", {"id": UNLINKED_MASTER_BRAND_ID, "name": "Orphan"})
    repo.insert("products", {"id": PRODUCT_ID, "name": "Acme Cola", "master_brand_id": MASTER_BRAND_ID})
    repo.upsert_brand_permissions([
        {"user_id": "editor", "brand_id": BRAND_ID, "role": "editor"},
        {"user_id": "brand-admin", "brand_id": BRAND_ID, "role": "admin"},
        {"user_id": "viewer", "brand_id": BRAND_ID, "role": "viewer"},
        {"user_id": "outsider", "brand_id": OTHER_BRAND_ID, "role": "admin"},
    ])
    return repo


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def fetcher():
    return FakeFetcher()


def build_client(repo, ai_client, fetcher):
    settings = Settings(repository_backend="local", ai_call_delay_seconds=0)
    state = AppState(settings=settings, repository=repo, ai_client=ai_client, web_fetcher=fetcher)
    state.initialize()

    app = create_app()
    app.dependency_overrides[get_app_state] = lambda: state
    return TestClient(app)


@pytest.fixture
def client(repo, ai_client, fetcher):
    return build_client(repo, ai_client, fetcher)


@pytest.fixture
def client_without_ai(repo, fetcher):
    return build_client(repo, None, fetcher)
