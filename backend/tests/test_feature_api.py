"""HTTP tests for ``/api/feature`` and ``/api/sibling/{id}`` on a feature instance."""

from galaxy.constants import get_full_path
from galaxy.dependencies.galaxy import get_feature_handler

FEATURE = get_full_path("/feature")
COVER_URL = "https://coverletter.app/api/generate"


def _sibling(sibling_id):
    return get_full_path(f"/sibling/{sibling_id}")


class TestFeatureEndpoint:
    def test_default_handler_echoes_input(self, feature_client):
        resp = feature_client.post(FEATURE, json={"jobTitle": "SRE"}, headers={"X-User-Id": "user-7"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["featureId"] == "cv-gen"
        assert data["processed"] is True
        assert data["input"] == {"jobTitle": "SRE"}
        assert data["output"]["message"] == "Processed by CV Generator"
        assert data["metadata"] == {"userId": "user-7", "apiVersion": "1.0.0"}

    def test_custom_handler(self, feature_client):
        async def summarise(identity, body, user_id):
            return {"summary": body["text"][:5], "by": identity.id}

        feature_client.app.dependency_overrides[get_feature_handler] = lambda: summarise

        resp = feature_client.post(FEATURE, json={"text": "hello world"})

        assert resp.json() == {"success": True, "data": {"summary": "hello", "by": "cv-gen"}}

    def test_handler_failure_is_500(self, feature_client):
        async def broken(identity, body, user_id):
            raise RuntimeError("model not loaded")

        feature_client.app.dependency_overrides[get_feature_handler] = lambda: broken

        resp = feature_client.post(FEATURE, json={})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Failed to process request", "message": "model not loaded"}

    def test_invalid_json_body_is_500(self, feature_client):
        resp = feature_client.post(FEATURE, content=b"{oops", headers={"Content-Type": "application/json"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to process request"

    def test_core_instance_rejects_feature_calls(self, core_client):
        resp = core_client.post(FEATURE, json={})

        assert resp.status_code == 400
        assert resp.json()["error"] == "This endpoint is only available for feature apps"

    def test_status_document(self, feature_client):
        body = feature_client.get(FEATURE).json()

        assert body["status"] == "healthy"
        assert body["feature"] == "cv-gen"
        assert body["type"] == "feature"
        assert body["apiEndpoint"] == "https://cvgen.ai/api/generate"


class TestSiblingRelay:
    def test_relays_to_sibling(self, feature_client, fake_galaxy):
        fake_galaxy.respond(COVER_URL, 200, {"letter": "Dear team"})

        resp = feature_client.post(_sibling("cover-letter"), json={"tone": "warm"})

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {"letter": "Dear team"}}
        [body] = fake_galaxy.bodies_to(COVER_URL)
        assert body["_caller"]["id"] == "cv-gen"

    def test_unknown_sibling_is_404(self, feature_client):
        resp = feature_client.post(_sibling("ghost"), json={})

        assert resp.status_code == 404
        assert resp.json()["error"] == "Sibling feature ghost not found"

    def test_self_is_not_a_sibling(self, feature_client):
        assert feature_client.post(_sibling("cv-gen"), json={}).status_code == 404

    def test_sibling_without_endpoint_is_400(self, feature_client):
        resp = feature_client.post(_sibling("blog"), json={})

        assert resp.status_code == 400
        assert resp.json()["message"] == "This sibling feature may not support API calls"

    def test_sibling_failure_is_502(self, feature_client, fake_galaxy):
        fake_galaxy.respond(COVER_URL, 500, {"error": "crashed"})

        resp = feature_client.post(_sibling("cover-letter"), json={})

        assert resp.status_code == 502
        assert resp.json() == {"success": False, "error": "crashed"}

    def test_core_cannot_call_siblings(self, core_client, fake_galaxy):
        resp = core_client.post(_sibling("cv-gen"), json={})

        assert resp.status_code == 400
        assert resp.json()["message"] == "Core apps should use orchestration instead"
        assert fake_galaxy.requests == []
