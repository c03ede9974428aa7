"""
tests/test_model.py

Tests for model version resolution.

Verifies:
✔ Requested version is picked when listed, otherwise the most recent one
✔ Missing requested version is a warning on the result, not an error
✔ Empty version list raises NotFoundError; fetch errors propagate
✔ Resolution happens once per Model
"""

import logging

import pytest

from replicate_client.errors import ApiError, NotFoundError, ReplicateError
from replicate_client.services.model import Model, resolve_version

VERSIONS = ("GET", "/models/acme/llm/versions")


def versions(*ids):
    return {VERSIONS: [{"results": [{"id": i} for i in ids]}]}


class TestResolveVersion:
    @pytest.mark.asyncio
    async def test_requested_version_found(self, make_client):
        client, _ = make_client(versions("v3", "v2", "v1"))

        resolution = await resolve_version(client, "acme/llm", "v2")

        assert resolution.version.id == "v2"
        assert resolution.warning is None
        assert not resolution.fell_back

    @pytest.mark.asyncio
    async def test_no_version_requested_picks_most_recent(self, make_client):
        client, _ = make_client(versions("v3", "v2"))

        resolution = await resolve_version(client, "acme/llm")

        assert resolution.version.id == "v3"
        assert resolution.requested is None
        assert resolution.warning is None

    @pytest.mark.asyncio
    async def test_missing_version_falls_back_with_warning(self, make_client, caplog):
        client, _ = make_client(versions("v3", "v2"))

        with caplog.at_level(logging.WARNING, logger="replicate_client.services.model"):
            resolution = await resolve_version(client, "acme/llm", "v9")

        assert resolution.version.id == "v3"
        assert resolution.requested == "v9"
        assert resolution.fell_back
        assert "v9" in resolution.warning and "v3" in resolution.warning
        assert any("v9" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_empty_version_list(self, make_client):
        client, _ = make_client({VERSIONS: [{"results": []}]})

        with pytest.raises(NotFoundError):
            await resolve_version(client, "acme/llm", "v1")

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, make_client):
        client, _ = make_client({VERSIONS: [ApiError("GET failed", status=404, body={"detail": "Not found."})]})

        with pytest.raises(ApiError) as exc_info:
            await resolve_version(client, "acme/llm")

        assert exc_info.value.status == 404
        assert not isinstance(exc_info.value, NotFoundError)


class TestModel:
    @pytest.mark.asyncio
    async def test_fetch_resolves_once(self, make_client):
        client, transport = make_client(versions("v3", "v2"))

        model = await Model.fetch("acme/llm", "v2", client=client)
        again = await model.resolve()

        assert model.version_id == "v2"
        assert model.details.id == "v2"
        assert again is model.resolution
        assert transport.count("GET") == 1

    def test_unresolved_model_has_no_version_id(self, make_client):
        client, _ = make_client()
        model = Model("acme/llm", client=client)

        assert model.details is None
        with pytest.raises(ReplicateError):
            model.version_id
