import pytest
import respx
from httpx import ConnectError, Response
from hubactions.approval.models import CollectionRef
from hubactions.clients.base import PermanentHTTPError, RetryableHTTPError
from hubactions.clients.controller import ControllerClient
from hubactions.clients.hub import HubClient
from hubactions.core.errors import ProviderError
from hubactions.orchestration.models import JobStatus, Target

BASE = "https://aap.example.com"
PROJECTS = f"{BASE}/api/controller/v2/projects/"


@pytest.mark.asyncio
async def test_list_projects_follows_pagination():
    client = ControllerClient(BASE, "test-token")

    with respx.mock:
        first = respx.get(PROJECTS, params={"page": "2"}).mock(
            return_value=Response(200, json={"count": 3, "next": None, "results": [{"id": 3, "name": "c"}]})
        )
        respx.get(PROJECTS).mock(
            return_value=Response(
                200,
                json={
                    "count": 3,
                    "next": "/api/controller/v2/projects/?page=2",
                    "results": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}],
                },
            )
        )

        projects = await client.list_projects()
        await client.aclose()

    assert projects == [Target(1, "a"), Target(2, "b"), Target(3, "c")]
    assert first.called


@pytest.mark.asyncio
async def test_list_projects_sends_bearer_token():
    client = ControllerClient(BASE, "test-token")

    with respx.mock:
        route = respx.get(PROJECTS).mock(return_value=Response(200, json={"count": 0, "results": []}))
        await client.list_projects()
        await client.aclose()

    assert route.calls.last.request.headers["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_list_projects_non_200_is_provider_error():
    client = ControllerClient(BASE, "test-token")

    with respx.mock:
        respx.get(PROJECTS).mock(return_value=Response(401, json={"detail": "no"}))

        with pytest.raises(ProviderError, match="401"):
            await client.list_projects()
        await client.aclose()


@pytest.mark.asyncio
async def test_check_eligible_and_trigger():
    client = ControllerClient(BASE, "test-token")
    target = Target(8, "proj")

    with respx.mock:
        respx.get(f"{PROJECTS}8/update/").mock(return_value=Response(200, json={"can_update": True}))
        post = respx.post(f"{PROJECTS}8/update/").mock(
            return_value=Response(202, json={"project_update": 99, "id": 99})
        )

        assert await client.check_eligible(target) is True
        response = await client.trigger(target)
        await client.aclose()

    assert post.call_count == 1
    assert response.status_code == 202
    assert response.body["project_update"] == 99


@pytest.mark.asyncio
async def test_fetch_status_parses_payload():
    client = ControllerClient(BASE, "test-token")

    with respx.mock:
        respx.get(f"{BASE}/api/controller/v2/project_updates/99/").mock(
            return_value=Response(200, json={"id": 99, "status": "running", "failed": False})
        )
        status = await client.fetch_status(99)
        await client.aclose()

    assert status.job_id == 99
    assert status.status is JobStatus.RUNNING
    assert status.failed is False


@pytest.mark.asyncio
async def test_fetch_status_unknown_status_raises():
    client = ControllerClient(BASE, "test-token")

    with respx.mock:
        respx.get(f"{BASE}/api/controller/v2/project_updates/5/").mock(
            return_value=Response(200, json={"id": 5, "status": "exploded"})
        )
        with pytest.raises(PermanentHTTPError):
            await client.fetch_status(5)
        await client.aclose()


@pytest.mark.asyncio
async def test_client_retry_on_503():
    client = ControllerClient(BASE, "test-token", max_retries=2, backoff_factor=0)

    with respx.mock:
        route = respx.get(f"{PROJECTS}1/update/")
        route.side_effect = [
            Response(503),
            Response(200, json={"can_update": False}),
        ]

        assert await client.check_eligible(Target(1, "a")) is False
        assert route.call_count == 2
        await client.aclose()


@pytest.mark.asyncio
async def test_client_network_error_exhausts_retries():
    client = ControllerClient(BASE, "test-token", max_retries=3, backoff_factor=0)

    with respx.mock:
        route = respx.get(f"{PROJECTS}1/update/").mock(side_effect=ConnectError("refused"))

        with pytest.raises(RetryableHTTPError):
            await client.check_eligible(Target(1, "a"))
        assert route.call_count == 3
        await client.aclose()


@pytest.mark.asyncio
async def test_client_permanent_error_no_retry():
    client = ControllerClient(BASE, "test-token", backoff_factor=0)

    with respx.mock:
        route = respx.get(f"{PROJECTS}1/update/").mock(return_value=Response(404))

        with pytest.raises(PermanentHTTPError):
            await client.check_eligible(Target(1, "a"))

        assert route.call_count == 1
        await client.aclose()


@pytest.mark.asyncio
async def test_hub_client_uses_token_scheme_and_probe():
    client = HubClient(BASE, "hub-token", max_retries=1)

    with respx.mock:
        route = respx.get(f"{BASE}/api/").mock(return_value=Response(404))
        assert await client.has_platform_gateway() is False
        assert route.calls.last.request.headers["Authorization"] == "Token hub-token"

        route.mock(return_value=Response(200, json={}))
        assert await client.has_platform_gateway() is True

        route.mock(side_effect=ConnectError("refused"))
        assert await client.has_platform_gateway() is False
        await client.aclose()


@pytest.mark.asyncio
async def test_hub_client_lookups():
    client = HubClient(BASE, "hub-token")
    ref = CollectionRef("acme", "tools", "1.2.3")

    with respx.mock:
        cv = respx.get(
            f"{BASE}/api/galaxy/pulp/api/v3/content/ansible/collection_versions/",
            params={"namespace": "acme", "name": "tools", "version": "1.2.3"},
        ).mock(return_value=Response(200, json={"count": 1, "results": [{"pulp_href": "/cv/1/"}]}))
        respx.get(f"{BASE}/api/galaxy/pulp/api/v3/repositories/", params={"name": "staging"}).mock(
            return_value=Response(200, json={"count": 0, "results": []})
        )

        assert await client.find_collection_version(ref) == {"pulp_href": "/cv/1/"}
        assert await client.find_repository("staging") is None
        assert cv.called
        await client.aclose()
