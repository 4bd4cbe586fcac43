"""Tests for the REST client: envelopes, refusals and transport failures."""

import json

import httpx
import pytest

from fieldops.tools.technician_api import TechnicianApiError
from tests.conftest import availability_body, make_api


class TestReads:
    @pytest.mark.asyncio
    async def test_availability_envelope_unwrapped(self):
        api = make_api(lambda r: httpx.Response(200, json=availability_body(working_days=["sat"])))
        snap = await api.get_availability()
        assert snap.working_days == frozenset({"sat"})

    @pytest.mark.asyncio
    async def test_bare_availability_accepted(self):
        api = make_api(lambda r: httpx.Response(200, json={"is_online": True, "service_area": "Ajman"}))
        snap = await api.get_availability()
        assert snap.is_online
        assert snap.service_areas == ("Ajman",)

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        api = make_api(lambda r: httpx.Response(500, json={"message": "boom"}))
        with pytest.raises(TechnicianApiError) as exc_info:
            await api.get_availability()
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        api = make_api(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(TechnicianApiError, match="invalid JSON"):
            await api.get_dashboard()

    @pytest.mark.asyncio
    async def test_network_error_raises(self, api, backend):
        backend.fail_next = "network"
        with pytest.raises(TechnicianApiError, match="Network error"):
            await api.get_availability()

    @pytest.mark.asyncio
    async def test_dashboard(self, api):
        dash = await api.get_dashboard()
        assert dash.weekly_kpis.visits_done == 12
        assert dash.employee_id == "TECH-0042"


class TestTaskQueries:
    @pytest.mark.asyncio
    async def test_list_params(self, api, backend):
        page = await api.list_tasks(window="month", page=2, per_page=3, status="pending")
        params = backend.requests[-1].url.params
        assert dict(params) == {"window": "month", "page": "2", "per_page": "3", "status": "pending"}
        assert page.current_page == 2

    @pytest.mark.asyncio
    async def test_default_per_page_from_settings(self, api, backend):
        from fieldops.config import settings

        await api.list_tasks()
        assert backend.requests[-1].url.params["per_page"] == str(settings.tasks.per_page)

    @pytest.mark.asyncio
    async def test_unknown_window(self, api, backend):
        with pytest.raises(ValueError, match="Unknown task window"):
            await api.list_tasks(window="decade")
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_rejected_endpoint(self, api):
        page = await api.list_rejected_jobs(window="year")
        assert [t.id for t in page.items] == ["105"]


class TestCommands:
    @pytest.mark.asyncio
    async def test_client_error_with_body_is_refusal(self):
        api = make_api(lambda r: httpx.Response(422, json={"message": "Nope"}))
        result = await api.accept_task("1")
        assert not result.success
        assert result.message == "Nope"

    @pytest.mark.asyncio
    async def test_client_error_without_body_raises(self):
        api = make_api(lambda r: httpx.Response(404))
        with pytest.raises(TechnicianApiError) as exc_info:
            await api.accept_task("1")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_server_error_with_body_raises(self):
        api = make_api(lambda r: httpx.Response(502, json={"success": False, "message": "Bad gateway"}))
        with pytest.raises(TechnicianApiError):
            await api.reject_task("1", "busy")

    @pytest.mark.asyncio
    async def test_success_without_body(self):
        api = make_api(lambda r: httpx.Response(204))
        result = await api.update_availability({"is_online": True})
        assert result.success
        assert result.message == ""

    @pytest.mark.asyncio
    async def test_single_service_area_adds_legacy_field(self, api, backend):
        result = await api.update_service_areas(["Dubai"])
        assert result.success
        assert json.loads(backend.requests[-1].content) == {
            "service_areas": ["Dubai"], "service_area": "Dubai",
        }

    @pytest.mark.asyncio
    async def test_many_service_areas(self, api, backend):
        await api.update_service_areas(["Dubai", "Sharjah"])
        assert json.loads(backend.requests[-1].content) == {"service_areas": ["Dubai", "Sharjah"]}
        assert backend.availability["service_areas"] == ["Dubai", "Sharjah"]

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, backend):
        from fieldops.tools.technician_api import TechnicianApi

        client = backend.client()
        async with TechnicianApi(client=client):
            pass
        assert client.is_closed
