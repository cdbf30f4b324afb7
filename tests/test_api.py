import json, pathlib
import pytest, pytest_asyncio, respx, httpx
from appointments_web import config
from appointments_web.api import app
from appointments_web.client import ApiError, AppointmentsClient

FIX = pathlib.Path(__file__).parent / "fixtures"
BACKEND = "http://backend.test"
APPT = json.loads((FIX / "appointment_get.json").read_text())


@pytest.fixture(autouse=True)
def backend_url(monkeypatch):
    monkeypatch.setattr(config, "BACKEND_API_URL", BACKEND)


@pytest_asyncio.fixture
async def web():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://web.test") as client:
        yield client


@pytest.mark.asyncio
async def test_health(web):
    resp = await web.get("/health")
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_list_forwards_query_string(web):
    bundle = json.loads((FIX / "appointments_list.json").read_text())
    with respx.mock(base_url=BACKEND) as m:
        route = m.get("/appointments").respond(200, json=bundle)

        resp = await web.get("/api/appointments", params={"status": "booked", "page": "2", "pageSize": "500"})
        assert resp.status_code == 200
        assert resp.json() == bundle
        # no clamping at the edge
        assert route.calls.last.request.url.params["pageSize"] == "500"


@pytest.mark.asyncio
async def test_list_relays_backend_error_text(web):
    with respx.mock(base_url=BACKEND) as m:
        route = m.get("/appointments")

        route.respond(503, text="backend down")
        resp = await web.get("/api/appointments")
        assert resp.status_code == 503
        assert resp.json() == {"message": "backend down"}

        route.respond(400, content=b"")
        resp = await web.get("/api/appointments")
        assert resp.json() == {"message": "Error fetching appointments"}


@pytest.mark.asyncio
async def test_create_returns_201(web):
    body = {"status": "booked", "participant": [{"status": "accepted"}]}
    with respx.mock(base_url=BACKEND) as m:
        route = m.post("/appointments").respond(200, json=APPT)

        resp = await web.post("/api/appointments", json=body)
        assert resp.status_code == 201
        assert resp.json()["id"] == "appt-123"
        assert json.loads(route.calls.last.request.content) == body


@pytest.mark.asyncio
async def test_create_relays_validation_body(web):
    error = {"message": ["start must be a date"], "error": "Bad Request", "statusCode": 400}
    with respx.mock(base_url=BACKEND) as m:
        m.post("/appointments").respond(400, json=error)

        resp = await web.post("/api/appointments", json={"status": "booked"})
        assert resp.status_code == 400
        assert resp.json() == error


@pytest.mark.asyncio
async def test_get_not_found_fallback_message(web):
    with respx.mock(base_url=BACKEND) as m:
        m.get("/appointments/nope").respond(404, text="Not Found")

        resp = await web.get("/api/appointments/nope")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Appointment not found"}


@pytest.mark.asyncio
async def test_delete_returns_204(web):
    with respx.mock(base_url=BACKEND) as m:
        m.delete("/appointments/appt-123").respond(204)

        resp = await web.delete("/api/appointments/appt-123")
        assert resp.status_code == 204
        assert resp.content == b""


@pytest.mark.asyncio
async def test_patch_status_forwards_body(web):
    with respx.mock(base_url=BACKEND) as m:
        route = m.patch("/appointments/appt-123/status").respond(200, json=dict(APPT, status="arrived"))

        resp = await web.patch("/api/appointments/appt-123/status", json={"status": "arrived"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "arrived"
        assert json.loads(route.calls.last.request.content) == {"status": "arrived"}


@pytest.mark.asyncio
async def test_unreachable_backend_is_500(web):
    with respx.mock(base_url=BACKEND) as m:
        m.get("/appointments/appt-123").mock(side_effect=httpx.ConnectError)

        resp = await web.get("/api/appointments/appt-123")
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_client_through_edge_routes():
    api = AppointmentsClient("http://web.test/api", transport=httpx.ASGITransport(app=app))
    with respx.mock(base_url=BACKEND) as m:
        m.get("/appointments/appt-123").respond(200, json=APPT)
        m.patch("/appointments/appt-123/status").respond(409, json={"message": ["a", "b"]})

        appt = await api.get_by_id("appt-123")
        assert appt.id == "appt-123"

        with pytest.raises(ApiError) as exc:
            await api.update_status("appt-123", "fulfilled")
        assert (exc.value.message, exc.value.status) == ("a, b", 409)


@pytest.mark.asyncio
async def test_logging_configured_on_startup(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "configure_logging", lambda: calls.append(True))

    async with app.router.lifespan_context(app):
        assert calls == [True]
