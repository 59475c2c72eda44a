"""
Supabase REST 网关与请求映射器单元测试
"""

from unittest.mock import AsyncMock

import pytest

from ...adapters.http_client import HttpClient
from ...adapters.postgrest_gateway import PostgrestGateway
from ...adapters.postgrest_request_mapper import PostgrestRequestMapper
from ...exceptions import ConfigurationException, GatewayException


class TestRequestMapper:
    """请求映射器测试"""

    def test_read_request(self):
        params = PostgrestRequestMapper().map_read_request(
            {"professor_id": "prof-1", "deleted_at": None, "active": True},
            "id, status, job_id, jobs(title)",
        )

        assert params == {
            "select": "id,status,job_id,jobs(title)",
            "professor_id": "eq.prof-1",
            "deleted_at": "is.null",
            "active": "eq.true",
        }

    def test_read_request_with_limit(self):
        params = PostgrestRequestMapper().map_read_request(None, "", limit=2)
        assert params == {"select": "*", "limit": "2"}

    def test_upsert_request(self):
        request = PostgrestRequestMapper().map_upsert_request("id")

        assert request["params"] == {"on_conflict": "id"}
        assert "merge-duplicates" in request["headers"]["Prefer"]

    def test_upsert_requires_conflict_key(self):
        with pytest.raises(ValueError):
            PostgrestRequestMapper().map_upsert_request("")

    def test_insert_response(self):
        mapper = PostgrestRequestMapper()

        assert mapper.map_insert_response([{"id": "job-9"}]) == {"id": "job-9"}
        assert mapper.map_insert_response({"id": 4}) == {"id": 4}
        with pytest.raises(ValueError):
            mapper.map_insert_response([])


class TestHttpClient:
    """HTTP 客户端测试"""

    def test_default_headers(self, test_config):
        client = HttpClient(test_config)
        headers = client._default_headers()

        assert headers["apikey"] == "anon-test-key"
        assert headers["Authorization"] == "Bearer anon-test-key"
        assert "Accept-Profile" not in headers

    def test_access_token_and_schema(self, test_config):
        test_config.set("gateway.schema", "hire")
        client = HttpClient(test_config)
        client.set_access_token("user-jwt")

        headers = client._default_headers()

        assert headers["Authorization"] == "Bearer user-jwt"
        assert headers["Accept-Profile"] == "hire"

    def test_extract_error_message(self):
        assert HttpClient._extract_error_message('{"message": "JWT expired"}', 401) == "JWT expired"
        assert HttpClient._extract_error_message("", 503) == "HTTP 503"
        assert "Bearer ***" in HttpClient._extract_error_message("Bearer abc.def", 500)


@pytest.fixture
def http_client(test_config):
    client = HttpClient(test_config)
    client.get = AsyncMock(return_value=[])
    client.post = AsyncMock(return_value=None)
    return client


@pytest.fixture
def remote(test_config, http_client) -> PostgrestGateway:
    return PostgrestGateway(test_config, http_client=http_client)


class TestPostgrestGateway:
    """网关测试"""

    @pytest.mark.asyncio
    async def test_read(self, remote, http_client):
        http_client.get.return_value = [{"status": "Ativo"}]

        rows = await remote.read("contracts", {"professor_id": "prof-1"}, "status")

        assert rows == [{"status": "Ativo"}]
        http_client.get.assert_awaited_once_with(
            "contracts", params={"select": "status", "professor_id": "eq.prof-1"}
        )

    @pytest.mark.asyncio
    async def test_read_empty_body(self, remote, http_client):
        http_client.get.return_value = None
        assert await remote.read("contracts") == []

    @pytest.mark.asyncio
    async def test_read_unexpected_shape(self, remote, http_client):
        http_client.get.return_value = {"status": "Ativo"}

        with pytest.raises(GatewayException, match="Unexpected response shape"):
            await remote.read("contracts")

    @pytest.mark.asyncio
    async def test_read_one(self, remote, http_client):
        http_client.get.return_value = [{"id": "prof-1"}]

        row = await remote.read_one("profiles", {"id": "prof-1"})

        assert row == {"id": "prof-1"}
        assert http_client.get.await_args.kwargs["params"]["limit"] == "2"

    @pytest.mark.asyncio
    async def test_read_one_missing(self, remote):
        assert await remote.read_one("profiles", {"id": "nobody"}) is None

    @pytest.mark.asyncio
    async def test_read_one_multiple_rows(self, remote, http_client):
        http_client.get.return_value = [{"id": "a"}, {"id": "b"}]

        with pytest.raises(GatewayException, match="Multiple rows"):
            await remote.read_one("profiles")
        assert remote.get_statistics()["failed_requests"] == 1

    @pytest.mark.asyncio
    async def test_read_one_unexpected_shape(self, remote, http_client):
        http_client.get.return_value = {"id": "prof-1"}

        with pytest.raises(GatewayException, match="Unexpected response shape"):
            await remote.read_one("profiles", {"id": "prof-1"})
        assert remote.get_statistics()["failed_requests"] == 1

    @pytest.mark.asyncio
    async def test_read_rejects_non_record_items(self, remote, http_client):
        http_client.get.return_value = ["Ativo"]

        with pytest.raises(GatewayException, match="Unexpected response shape"):
            await remote.read("contracts")

    @pytest.mark.asyncio
    async def test_insert(self, remote, http_client):
        http_client.post.return_value = [{"id": "job-1"}]

        created = await remote.insert("jobs", {"title": "Professor"})

        assert created == {"id": "job-1"}
        kwargs = http_client.post.await_args.kwargs
        assert kwargs["data"] == {"title": "Professor"}
        assert kwargs["params"] == {"select": "id"}
        assert kwargs["headers"] == {"Prefer": "return=representation"}

    @pytest.mark.asyncio
    async def test_insert_without_id(self, remote, http_client):
        http_client.post.return_value = []

        with pytest.raises(GatewayException, match="no id"):
            await remote.insert("jobs", {"title": "Professor"})

    @pytest.mark.asyncio
    async def test_upsert(self, remote, http_client):
        await remote.upsert("profiles", {"id": "prof-1", "full_name": "Ana"}, "id")

        kwargs = http_client.post.await_args.kwargs
        assert kwargs["params"] == {"on_conflict": "id"}
        assert kwargs["headers"]["Prefer"] == "resolution=merge-duplicates,return=minimal"
        assert remote.get_statistics()["upserts"] == 1

    @pytest.mark.asyncio
    async def test_gateway_errors_propagate(self, remote, http_client):
        http_client.post.side_effect = GatewayException("duplicate key", collection="profiles", status=409)

        with pytest.raises(GatewayException, match="duplicate key"):
            await remote.upsert("profiles", {"id": "prof-1"}, "id")
        assert remote.get_statistics()["failed_requests"] == 1


def test_http_client_requires_url(test_config):
    test_config.set("gateway.supabase_url", "")

    with pytest.raises(ConfigurationException, match="gateway.supabase_url"):
        HttpClient(test_config)
