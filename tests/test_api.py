"""API tests for the CDR and UDR endpoints.

Runs the FastAPI app over an in-memory database with the session and
report exporter dependencies overridden.
"""

import logging
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.middleware import StructuredLogFormatter
from app.core.dependencies import get_db_session, get_report_exporter
from app.main import create_app
from app.models.api import ErrorResponse
from app.models.schemas import CallRecord, CallType
from app.services.report_exporter import CsvReportExporter


A = "71111111111"
B = "72222222222"


@pytest.fixture
def test_app(db_session, tmp_path):
    app = create_app()

    async def override_get_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_report_exporter] = lambda: CsvReportExporter(tmp_path)
    return app


@pytest_asyncio.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def seeded(store, make_record):
    await store.add_records([
        make_record(CallType.OUTGOING, A, B, datetime(2023, 10, 1, 0, 0, 0), seconds=180),
        make_record(CallType.INCOMING, B, A, datetime(2023, 10, 15, 12, 0, 0), seconds=240),
        make_record(CallType.OUTGOING, B, A, datetime(2023, 11, 1, 0, 0, 0), seconds=60),
    ])
    return store


class TestUdrEndpoints:
    @pytest.mark.asyncio
    async def test_get_by_msisdn_month(self, client, seeded):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": A, "month": "2023-10"})

        assert response.status_code == 200
        assert response.json() == {
            "msisdn": A,
            "incoming_call": {"total_time": "00:00:00", "total_seconds": 0},
            "outgoing_call": {"total_time": "00:07:00", "total_seconds": 420},
        }

    @pytest.mark.asyncio
    async def test_get_by_msisdn_all_time(self, client, seeded):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": B})

        assert response.status_code == 200
        body = response.json()
        assert body["incoming_call"]["total_seconds"] == 420
        assert body["outgoing_call"]["total_seconds"] == 60

    @pytest.mark.asyncio
    async def test_get_by_msisdn_invalid_identifier(self, client, seeded):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": "12345"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_identifier"
        assert ErrorResponse.model_validate(response.json()).details["msisdn"] == "12345"

    @pytest.mark.asyncio
    async def test_get_by_msisdn_no_data(self, client, seeded):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": A, "month": "2023-12"})

        assert response.status_code == 404
        assert response.json()["error"] == "no_data"

    @pytest.mark.asyncio
    async def test_get_by_msisdn_bad_month(self, client, seeded):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": A, "month": "2023-13"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_date_format"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", ["9999-12", "0999-01"])
    async def test_extreme_months_are_empty_windows(self, client, seeded, month):
        response = await client.get("/udr/getByMsisdn", params={"msisdn": A, "month": month})
        assert response.status_code == 404
        assert response.json()["error"] == "no_data"

        response = await client.get("/udr/getAllByMonth", params={"month": month})
        assert response.status_code == 404
        assert response.json()["error"] == "no_data"

    @pytest.mark.asyncio
    async def test_get_by_msisdn_requires_msisdn(self, client):
        response = await client.get("/udr/getByMsisdn")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_all_by_month(self, client, seeded):
        response = await client.get("/udr/getAllByMonth", params={"month": "2023-10"})

        assert response.status_code == 200
        body = response.json()
        assert [item["msisdn"] for item in body] == [A, B]
        assert body[0]["outgoing_call"]["total_seconds"] == 420
        assert body[1]["incoming_call"]["total_seconds"] == 420

    @pytest.mark.asyncio
    async def test_get_all_by_month_empty(self, client, seeded):
        response = await client.get("/udr/getAllByMonth", params={"month": "2020-01"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_negative_duration_is_clamped_by_default(self, client, store):
        await store.add_records([
            CallRecord(
                call_type=CallType.OUTGOING,
                phone_one=A,
                phone_two=B,
                start_time=datetime(2023, 10, 2, 23, 59),
                end_time=datetime(2023, 10, 2, 0, 1),
            )
        ])
        response = await client.get("/udr/getAllByMonth", params={"month": "2023-10"})

        assert response.status_code == 200
        assert all(item["outgoing_call"]["total_seconds"] == 0 for item in response.json())


class TestCdrEndpoints:
    @pytest.mark.asyncio
    async def test_all_empty(self, client):
        response = await client.get("/cdr/all")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_all(self, client, seeded):
        response = await client.get("/cdr/all")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 3
        assert body[0] == {
            "call_type": "01",
            "phone_one": A,
            "phone_two": B,
            "start_time": "2023-10-01T00:00:00",
            "end_time": "2023-10-01T00:03:00",
        }

    @pytest.mark.asyncio
    async def test_generate_record(self, client, store):
        response = await client.post("/cdr/generateRecord")

        assert response.status_code == 200
        assert response.json()["generated"] == await store.count_records()
        assert await store.count_subscribers() > 0

    @pytest.mark.asyncio
    async def test_generate_report(self, client, seeded, tmp_path):
        response = await client.post(
            "/cdr/generateReport",
            params={"msisdn": A, "start": "2023-10-01", "end": "2023-10-31"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["records"] == 2
        assert body["file_name"] == f"{A}_{body['uuid']}.csv"
        assert (tmp_path / body["file_name"]).exists()

    @pytest.mark.asyncio
    async def test_generate_report_bad_date(self, client, seeded):
        response = await client.post(
            "/cdr/generateReport",
            params={"msisdn": A, "start": "01.10.2023", "end": "2023-10-31"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_generate_report_through_last_representable_day(self, client, seeded):
        response = await client.post(
            "/cdr/generateReport",
            params={"msisdn": A, "start": "9999-12-30", "end": "9999-12-31"},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "no_data"

    @pytest.mark.asyncio
    async def test_generate_report_no_data(self, client, seeded):
        response = await client.post(
            "/cdr/generateReport",
            params={"msisdn": A, "start": "2022-10-01", "end": "2022-10-31"},
        )
        assert response.status_code == 404


class TestHealthAndMiddleware:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, client, seeded):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["records"] == 3

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_structured_formatter_includes_extras(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "done", None, None)
        record.request_id = "abc"
        record.status_code = 200

        line = StructuredLogFormatter().format(record)

        assert '"request_id": "abc"' in line
        assert '"status_code": 200' in line
        assert '"message": "done"' in line

    @pytest.mark.asyncio
    async def test_openapi_documents_error_bodies(self, client):
        schema = (await client.get("/openapi.json")).json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        get_by_msisdn = schema["paths"]["/udr/getByMsisdn"]["get"]["responses"]
        assert get_by_msisdn["404"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }
