"""Tests for the AI copywriting routes."""
from conftest import BRAND_ID, OTHER_BRAND_ID, auth
from mixerai.exceptions import AIServiceError


class TestWorkflowDescription:
    """Tests for POST /api/ai/generate-workflow-description."""

    def test_generates(self, client, ai_client):
        response = client.post("/api/ai/generate-workflow-description", json={
            "workflowName": "Blog approval",
            "brandName": "Acme",
            "stepNames": ["Draft", "Legal review"],
        }, headers=auth("editor"))

        assert response.status_code == 200
        assert response.json() == {"success": True, "description": "A generated description."}
        assert "Draft, Legal review" in ai_client.calls[0]["user"]

    def test_empty_completion(self, client, ai_client):
        ai_client.text = None
        response = client.post("/api/ai/generate-workflow-description", json={"workflowName": "X"},
                               headers=auth("editor"))
        assert response.status_code == 503
        assert response.json()["error"] == "AI failed to generate workflow description. Please try again later."

    def test_workflow_name_required(self, client):
        response = client.post("/api/ai/generate-workflow-description", json={"workflowName": ""},
                               headers=auth("editor"))
        assert response.status_code == 400

    def test_ai_not_configured(self, client_without_ai):
        response = client_without_ai.post("/api/ai/generate-workflow-description", json={"workflowName": "X"},
                                          headers=auth("editor"))
        assert response.status_code == 503
        assert response.json()["error"] == "AI service is not configured."


class TestTemplateDescription:
    def test_generates(self, client):
        response = client.post("/api/ai/generate-template-description", json={
            "templateName": "Blog", "inputFields": ["Topic"], "outputFields": ["Body"],
        }, headers=auth("admin"))
        assert response.json()["description"] == "A generated description."


class TestArticleTitles:
    """Tests for POST /api/content/generate/article-titles."""

    def test_localised_to_brand(self, client, ai_client):
        ai_client.json_result = {"suggestions": ["One", "Two"]}

        response = client.post("/api/content/generate/article-titles",
                               json={"topic": "Summer drinks", "brand_id": BRAND_ID}, headers=auth("editor"))

        assert response.status_code == 200
        assert response.json() == {"success": True, "suggestions": ["One", "Two"]}
        assert "'GB'" in ai_client.calls[0]["system"]
        assert "Brand: Acme" in ai_client.calls[0]["user"]

    def test_topic_required(self, client):
        response = client.post("/api/content/generate/article-titles", json={}, headers=auth("editor"))
        assert response.status_code == 400
        assert response.json()["error"] == "Topic is required in the request body"

    def test_brand_without_locale(self, client):
        response = client.post("/api/content/generate/article-titles",
                               json={"topic": "X", "brand_id": OTHER_BRAND_ID}, headers=auth("editor"))
        assert response.status_code == 400

    def test_unknown_brand_falls_back_to_generic(self, client, ai_client):
        ai_client.json_result = {"suggestions": ["Generic"]}
        response = client.post("/api/content/generate/article-titles",
                               json={"topic": "X", "brand_id": "missing"}, headers=auth("editor"))
        assert response.json()["suggestions"] == ["Generic"]
        assert "'US'" in ai_client.calls[0]["system"]

    def test_ai_failure(self, client, ai_client):
        ai_client.json_error = AIServiceError("quota")
        response = client.post("/api/content/generate/article-titles", json={"topic": "X"}, headers=auth("editor"))
        assert response.status_code == 503
        assert response.json()["error"] == "AI service failed to generate titles"
