# This project was developed with assistance from AI tools.
"""Health endpoint against a live database."""

import pytest

from localaid import __version__

pytestmark = pytest.mark.integration


async def test_health_reports_api_and_database(client_factory):
    client = await client_factory()
    async with client:
        resp = await client.get("/health/")

    assert resp.status_code == 200
    api, database = resp.json()
    assert api["name"] == "API"
    assert database["name"] == "Database"
    assert database["status"] == "healthy"
    assert database["message"].startswith("PostgreSQL")
    assert {api["version"], database["version"]} == {__version__}
