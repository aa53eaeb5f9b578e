"""HTTP tests for ``/api/orchestrate`` on a core instance."""

import pytest

import galaxy.dependencies.auth as auth_dep
from galaxy.constants import get_full_path

ORCHESTRATE = get_full_path("/orchestrate")
CV_URL = "https://cvgen.ai/api/generate"
COVER_URL = "https://coverletter.app/api/generate"


class TestOrchestratePost:
    def test_fan_out_and_response_shape(self, core_client, fake_galaxy):
        fake_galaxy.respond(CV_URL, 200, {"cv": "pdf-url"})
        fake_galaxy.respond(COVER_URL, 502, {"error": "upstream model down"})

        resp = core_client.post(
            ORCHESTRATE,
            json={"features": ["cover-letter", "cv-gen", "blog", "unknown"], "payload": {"jobTitle": "SRE"}},
        )

        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["success"] is True
        assert body["orchestrationId"].startswith("orch_")
        assert body["timestamp"].endswith("Z")
        assert body["summary"] == {"total": 2, "successful": 1, "failed": 1}

        called = body["calledFeatures"]
        # Registry order, not request order
        assert [c["featureId"] for c in called] == ["cv-gen", "cover-letter"]
        assert called[0] == {
            "featureId": "cv-gen",
            "featureName": "CV Generator",
            "endpoint": CV_URL,
            "success": True,
            "data": {"cv": "pdf-url"},
        }
        assert called[1]["success"] is False
        assert called[1]["error"] == "upstream model down"
        assert "data" not in called[1]

    def test_user_id_is_forwarded(self, core_client, fake_galaxy):
        fake_galaxy.respond(CV_URL, 200, {})

        core_client.post(ORCHESTRATE, json={"features": ["cv-gen"], "payload": {}}, headers={"X-User-Id": "user-42"})

        [body] = fake_galaxy.bodies_to(CV_URL)
        assert body["userId"] == "user-42"
        assert body["coreId"] == "galaxy-core"
        assert body["calledFrom"] == "galaxy-core"

    def test_dev_user_when_auth_disabled(self, core_client, fake_galaxy):
        fake_galaxy.respond(CV_URL, 200, {})

        core_client.post(ORCHESTRATE, json={"features": ["cv-gen"]})

        [body] = fake_galaxy.bodies_to(CV_URL)
        assert body["userId"] == auth_dep.DEV_USER_ID

    def test_all_failed_reports_unsuccessful(self, core_client):
        resp = core_client.post(ORCHESTRATE, json={"features": ["cv-gen", "cover-letter"]})

        assert resp.status_code == 200
        assert resp.json()["success"] is False
        assert resp.json()["summary"] == {"total": 2, "successful": 0, "failed": 2}

    def test_unauthenticated(self, core_client, fake_galaxy, monkeypatch):
        monkeypatch.setattr(auth_dep, "AUTH_DISABLED", False)

        resp = core_client.post(ORCHESTRATE, json={"features": ["cv-gen"]})

        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Authentication required"}
        assert fake_galaxy.requests == []

    def test_missing_features(self, core_client):
        resp = core_client.post(ORCHESTRATE, json={"payload": {"x": 1}})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Please provide features array with feature IDs to call"

    @pytest.mark.parametrize("features", [[], ["blog"], ["nope"]])
    def test_nothing_callable(self, core_client, fake_galaxy, features):
        resp = core_client.post(ORCHESTRATE, json={"features": features})

        assert resp.status_code == 400
        assert resp.json()["error"] == "No valid features with API endpoints found"
        assert fake_galaxy.requests == []

    def test_features_must_be_a_list(self, core_client):
        resp = core_client.post(ORCHESTRATE, json={"features": "cv-gen"})
        assert resp.status_code == 422

    def test_feature_instance_cannot_orchestrate(self, feature_client, fake_galaxy):
        resp = feature_client.post(ORCHESTRATE, json={"features": ["cover-letter"]})

        assert resp.status_code == 400
        assert resp.json()["error"] == "This endpoint is only available for core apps"
        assert fake_galaxy.requests == []


class TestOrchestrateList:
    def test_lists_callable_features(self, core_client):
        resp = core_client.get(ORCHESTRATE)

        assert resp.status_code == 200
        body = resp.json()
        assert body["coreId"] == "galaxy-core"
        assert body["coreName"] == "Galaxy Dashboard"
        assert body["totalFeatures"] == 3
        assert body["apiEnabledFeatures"] == 2
        assert [f["id"] for f in body["availableFeatures"]] == ["cv-gen", "cover-letter"]
        assert body["availableFeatures"][0] == {
            "id": "cv-gen",
            "name": "CV Generator",
            "url": "https://cvgen.ai",
            "apiEndpoint": CV_URL,
            "canOrchestrate": True,
        }

    def test_feature_instance_gets_400(self, feature_client):
        assert feature_client.get(ORCHESTRATE).status_code == 400
