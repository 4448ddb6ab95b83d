"""
Unit Tests for core.livingapps.service module.

Tests LivingAppsService request building and error translation.
"""

import httpx
import pytest

from core.livingapps import (
    LivingAppsAPIError,
    LivingAppsConnectionError,
    LivingAppsService,
)

BASE_URL = "https://la.test/rest"
APP_ID = "6940a1b2c3d4e5f601000001"
RECORD_ID = "65f0c0ffee0000000000abcd"


def _status_error(status_code: int, text: str = "error") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", f"{BASE_URL}/apps/{APP_ID}/records")
    response = httpx.Response(status_code, text=text, request=request)
    return httpx.HTTPStatusError("boom", request=request, response=response)


class TestLivingAppsServiceInit:
    """Tests for service construction."""
    
    def test_requires_http_client(self):
        with pytest.raises(ValueError):
            LivingAppsService(http_client=None)
    
    def test_explicit_base_url_strips_slash(self, mock_httpx_client_factory):
        service = LivingAppsService(mock_httpx_client_factory(), base_url=BASE_URL + "/", timeout=3)
        
        assert service.base_url == BASE_URL
    
    def test_loads_base_url_from_config(self, mock_env_vars, mock_httpx_client_factory):
        service = LivingAppsService(mock_httpx_client_factory())
        
        assert service.base_url == "https://la.test/rest"
        assert service._timeout == 5.0


class TestLivingAppsServiceRecords:
    """Tests for record CRUD calls."""
    
    @pytest.fixture
    def make_service(self, mock_httpx_client_factory, mock_httpx_response_factory):
        def _make(json_data=None, side_effect=None, status_code=200):
            response = mock_httpx_response_factory(status_code=status_code, json_data=json_data)
            client = mock_httpx_client_factory(response=response, side_effect=side_effect)
            return LivingAppsService(client, base_url=BASE_URL, timeout=5), client
        return _make
    
    @pytest.mark.asyncio
    async def test_get_records_flattens_keyed_object(self, make_service, livingapps_record_factory):
        body = {
            RECORD_ID: livingapps_record_factory({"raumname": "A1"}),
            "65f0c0ffee0000000000abce": livingapps_record_factory({"raumname": "B2"}),
        }
        service, client = make_service(json_data=body)
        
        records = await service.get_records(APP_ID)
        
        assert [r["record_id"] for r in records] == [RECORD_ID, "65f0c0ffee0000000000abce"]
        assert records[0]["fields"] == {"raumname": "A1"}
        method, url = client.request.call_args.args
        assert method == "GET"
        assert url == f"{BASE_URL}/apps/{APP_ID}/records"
    
    @pytest.mark.asyncio
    async def test_get_records_empty_body(self, make_service):
        service, _ = make_service(json_data=None)
        
        assert await service.get_records(APP_ID) == []
    
    @pytest.mark.asyncio
    async def test_get_record_sets_id(self, make_service, livingapps_record_factory):
        service, client = make_service(json_data=livingapps_record_factory({"name": "x"}))
        
        record = await service.get_record(APP_ID, RECORD_ID)
        
        assert record["record_id"] == RECORD_ID
        assert client.request.call_args.args[1].endswith(f"/records/{RECORD_ID}")
    
    @pytest.mark.asyncio
    async def test_create_record_posts_fields(self, make_service):
        service, client = make_service(json_data={"id": RECORD_ID})
        
        result = await service.create_record(APP_ID, {"raumname": "A1"})
        
        assert result == {"id": RECORD_ID}
        assert client.request.call_args.args[0] == "POST"
        assert client.request.call_args.kwargs["json"] == {"fields": {"raumname": "A1"}}
        assert client.request.call_args.kwargs["timeout"] == 5
    
    @pytest.mark.asyncio
    async def test_update_record_patches(self, make_service):
        service, client = make_service()
        
        await service.update_record(APP_ID, RECORD_ID, {"bezahlt": True})
        
        method, url = client.request.call_args.args
        assert method == "PATCH"
        assert url == f"{BASE_URL}/apps/{APP_ID}/records/{RECORD_ID}"
        assert client.request.call_args.kwargs["json"] == {"fields": {"bezahlt": True}}
    
    @pytest.mark.asyncio
    async def test_delete_record(self, make_service):
        service, client = make_service()
        
        await service.delete_record(APP_ID, RECORD_ID)
        
        assert client.request.call_args.args[0] == "DELETE"
    
    @pytest.mark.asyncio
    async def test_status_error_becomes_api_error(
        self, mock_httpx_client_factory, mock_httpx_response_factory
    ):
        response = mock_httpx_response_factory(
            status_code=404, raise_for_status_error=_status_error(404, "not found")
        )
        service = LivingAppsService(
            mock_httpx_client_factory(response=response), base_url=BASE_URL, timeout=5
        )
        
        with pytest.raises(LivingAppsAPIError) as exc:
            await service.get_records(APP_ID)
        
        assert exc.value.status_code == 404
        assert exc.value.body == "not found"
    
    @pytest.mark.asyncio
    async def test_transport_error_becomes_connection_error(self, make_service):
        service, _ = make_service(side_effect=httpx.ConnectError("refused"))
        
        with pytest.raises(LivingAppsConnectionError):
            await service.create_record(APP_ID, {})


class TestLivingAppsServiceHealth:
    """Tests for check_connection()."""
    
    @pytest.mark.asyncio
    async def test_healthy(self, mock_httpx_client_factory, mock_httpx_response_factory):
        client = mock_httpx_client_factory(get_response=mock_httpx_response_factory(200))
        service = LivingAppsService(client, base_url=BASE_URL, timeout=5)
        
        result = await service.check_connection()
        
        assert result["status"] == "healthy"
        assert result["details"]["Base URL"] == BASE_URL
    
    @pytest.mark.asyncio
    async def test_auth_failure(self, mock_httpx_client_factory, mock_httpx_response_factory):
        client = mock_httpx_client_factory(get_response=mock_httpx_response_factory(401))
        service = LivingAppsService(client, base_url=BASE_URL, timeout=5)
        
        result = await service.check_connection()
        
        assert result["status"] == "error"
        assert result["message"] == "Authentication failed"
    
    @pytest.mark.asyncio
    async def test_server_error_is_warning(self, mock_httpx_client_factory, mock_httpx_response_factory):
        client = mock_httpx_client_factory(get_response=mock_httpx_response_factory(503))
        service = LivingAppsService(client, base_url=BASE_URL, timeout=5)
        
        assert (await service.check_connection())["status"] == "warning"
    
    @pytest.mark.asyncio
    async def test_connection_failure(self, mock_httpx_client_factory):
        client = mock_httpx_client_factory()
        client.get.side_effect = httpx.ConnectError("refused")
        service = LivingAppsService(client, base_url=BASE_URL, timeout=5)
        
        result = await service.check_connection()
        
        assert result["status"] == "error"
        assert result["message"] == "Connection failed"
