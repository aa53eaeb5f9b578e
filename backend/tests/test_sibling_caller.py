"""SiblingCaller and FeatureCaller lookups in front of the executor."""

import pytest

from galaxy.registry import Role
from galaxy.schemas.calls import CallOptions
from galaxy.services.feature_caller import FeatureCaller
from galaxy.services.request_executor import RequestExecutor
from galaxy.services.sibling_caller import SiblingCaller

COVER_URL = "https://coverletter.app/api/generate"
CV_URL = "https://cvgen.ai/api/generate"


def _executor(role, fake_galaxy, fake_sleep):
    return RequestExecutor(role, transport=fake_galaxy.transport, sleep=fake_sleep)


@pytest.fixture
def sibling_caller(registry, fake_galaxy, fake_sleep):
    return SiblingCaller(Role.FEATURE, registry, _executor(Role.FEATURE, fake_galaxy, fake_sleep))


class TestSiblingCaller:
    @pytest.mark.asyncio
    async def test_calls_sibling_with_caller_identity(self, sibling_caller, fake_galaxy):
        fake_galaxy.respond(COVER_URL, 200, {"letter": "Dear team"})

        result = await sibling_caller.call_sibling("cover-letter", {"tone": "warm"}, "cv-gen", "CV Generator")

        assert result.success is True
        assert result.data == {"letter": "Dear team"}
        [body] = fake_galaxy.bodies_to(COVER_URL)
        assert body["tone"] == "warm"
        assert body["_caller"] == {"id": "cv-gen", "name": "CV Generator", "type": "sibling"}
        assert "_metadata" not in body

    @pytest.mark.asyncio
    async def test_unknown_sibling(self, sibling_caller, fake_galaxy):
        result = await sibling_caller.call_sibling("ghost", {}, "cv-gen", "CV Generator")

        assert result.success is False
        assert result.error == "Sibling feature ghost not found"
        assert fake_galaxy.requests == []

    @pytest.mark.asyncio
    async def test_cannot_call_itself(self, sibling_caller, fake_galaxy):
        fake_galaxy.respond(CV_URL, 200, {})

        result = await sibling_caller.call_sibling("cv-gen", {}, "cv-gen", "CV Generator")

        assert result.success is False
        assert result.error == "Sibling feature cv-gen not found"
        assert fake_galaxy.requests == []

    @pytest.mark.asyncio
    async def test_sibling_without_endpoint(self, sibling_caller, fake_galaxy):
        result = await sibling_caller.call_sibling("blog", {}, "cv-gen", "CV Generator")

        assert result.success is False
        assert result.error == "Sibling blog does not have an API endpoint"
        assert fake_galaxy.requests == []

    @pytest.mark.asyncio
    async def test_core_role_is_refused(self, registry, fake_galaxy, fake_sleep):
        caller = SiblingCaller(Role.CORE, registry, _executor(Role.CORE, fake_galaxy, fake_sleep))

        result = await caller.call_sibling("cover-letter", {}, "galaxy-core", "Galaxy Dashboard")

        assert result.success is False
        assert result.error == "Sibling calls are only available for feature apps"
        assert result.message == "Core apps should use orchestration instead"
        assert fake_galaxy.requests == []

    @pytest.mark.asyncio
    async def test_remote_failure_is_returned(self, sibling_caller, fake_galaxy):
        fake_galaxy.respond(COVER_URL, 400, {"error": "tone must be one of warm, formal"})

        result = await sibling_caller.call_sibling("cover-letter", {"tone": "rude"}, "cv-gen", "CV Generator")

        assert result.success is False
        assert result.error == "tone must be one of warm, formal"


class TestFeatureCaller:
    @pytest.mark.asyncio
    async def test_calls_feature_by_id(self, registry, fake_galaxy, fake_sleep):
        fake_galaxy.respond(CV_URL, 200, {"cv": "ok"})
        caller = FeatureCaller(registry, _executor(Role.CORE, fake_galaxy, fake_sleep))

        result = await caller.call_feature("cv-gen", {"name": "Ada"}, CallOptions(max_attempts=2))

        assert result.success is True
        assert fake_galaxy.bodies_to(CV_URL)[0]["_metadata"]["callerType"] == "core"

    @pytest.mark.asyncio
    async def test_unknown_feature(self, registry, fake_galaxy, fake_sleep):
        caller = FeatureCaller(registry, _executor(Role.CORE, fake_galaxy, fake_sleep))

        result = await caller.call_feature("nope", {})

        assert result.error == "Feature nope not found in galaxy config"
        assert result.message == "Please check your galaxy configuration"

    @pytest.mark.asyncio
    async def test_feature_without_endpoint(self, registry, fake_galaxy, fake_sleep):
        caller = FeatureCaller(registry, _executor(Role.CORE, fake_galaxy, fake_sleep))

        result = await caller.call_feature("blog", {})

        assert result.error == "Feature blog does not have an API endpoint configured"
        assert fake_galaxy.requests == []
