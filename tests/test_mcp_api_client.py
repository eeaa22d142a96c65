"""Tests for the MCP server's REST client, using ``httpx.MockTransport``."""

import asyncio
import json

import httpx
import pytest

from memory_bank_mcp.api_client import MAX_RETRIES, MemoryBankClient


def _client(handler) -> MemoryBankClient:
    return MemoryBankClient(
        base_url="http://test",
        transport=httpx.MockTransport(handler),
        retry_base_delay=0,
    )


def _run(client: MemoryBankClient, coro_factory):
    async def _wrapped():
        try:
            return await coro_factory()
        finally:
            await client.aclose()

    return asyncio.run(_wrapped())


class TestRetry:

    def test_retries_server_errors_then_succeeds(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=[])

        client = _client(handler)
        assert _run(client, client.list_projects) == []
        assert len(calls) == 3

    def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        client = _client(handler)
        with pytest.raises(httpx.HTTPStatusError):
            _run(client, client.list_projects)
        assert len(calls) == MAX_RETRIES

    def test_client_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(409, json={"error": "FILE_ALREADY_EXISTS"})

        client = _client(handler)
        with pytest.raises(httpx.HTTPStatusError):
            _run(client, lambda: client.write_file("proj", "a.md", "x"))
        assert len(calls) == 1


class TestWritesAreNotReplayed:

    def test_revert_not_resent_after_read_timeout(self):
        applied = []

        def handler(request):
            applied.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client(handler)
        with pytest.raises(httpx.ReadTimeout):
            _run(client, lambda: client.revert_to_version("proj", "a.md", 3))
        assert len(applied) == 1

    def test_update_not_resent_after_server_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        client = _client(handler)
        with pytest.raises(httpx.HTTPStatusError):
            _run(client, lambda: client.update_file("proj", "a.md", "x"))
        assert len(calls) == 1

    def test_write_retried_when_connection_failed(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(201, json={"name": "a.md"})

        client = _client(handler)
        assert _run(client, lambda: client.write_file("proj", "a.md", "x")) == {"name": "a.md"}
        assert len(calls) == 2

    def test_reads_still_retry_after_timeout(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"versions": []})

        client = _client(handler)
        assert _run(client, lambda: client.get_versions("proj", "a.md")) == {"versions": []}
        assert len(calls) == 2


class TestRequests:

    def test_missing_version_maps_to_none(self):
        client = _client(lambda request: httpx.Response(404, json={"error": "VERSION_NOT_FOUND"}))
        assert _run(client, lambda: client.get_version("proj", "a.md", 9)) is None

    def test_path_segments_are_quoted(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path.decode())
            return httpx.Response(200, json={"versions": []})

        client = _client(handler)
        _run(client, lambda: client.get_versions("my proj", "a#1.md"))

        assert seen == ["/api/projects/my%20proj/files/a%231.md/versions"]

    def test_compare_sends_query_params(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={})

        client = _client(handler)
        _run(client, lambda: client.compare_versions("proj", "a.md", 1, 2))

        assert seen == [{"version1": "1", "version2": "2"}]

    def test_cleanup_body_omits_unset_limit(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={})

        client = _client(handler)
        _run(client, lambda: client.cleanup_old_versions("proj"))
        _run(client, lambda: client.cleanup_old_versions("proj", 3))

        assert bodies == [{}, {"max_versions_per_file": 3}]
