# This project was developed with assistance from AI tools.
"""Tests for the Zoho contractor import."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError
from tenacity import wait_none

from localaid.services import contractor_sync
from localaid.services.contractor_sync import (
    get_sync_status,
    parse_boolean,
    parse_name,
    parse_services,
    parse_years,
    rehost_photo,
    sync_contractors,
    transform_contact,
    unique_email,
    upsert_contractor,
)
from localaid.services.zoho import ZohoAPIError
from tests.functional.mock_db import make_result

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _contact(id="z-1", **fields):
    return {
        "id": id,
        "First_Name": "Priya",
        "Last_Name": "Nair",
        "Email": "Priya@Example.com",
        **fields,
    }


def _zoho(contacts=None):
    zoho = MagicMock()
    zoho.api_url = "https://api.example.com/crm/v2"
    zoho.get_all_contractors = AsyncMock(return_value=contacts or [])
    zoho.download = AsyncMock(return_value=(b"jpeg", "image/jpeg"))
    return zoho


def _sync_session(*results):
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=list(results))
    session.add = MagicMock()
    session.begin_nested = MagicMock(return_value=MagicMock())
    return session


@pytest.fixture(autouse=True)
def _fast_photo_retries(monkeypatch):
    monkeypatch.setattr(contractor_sync, "_photo_wait", wait_none())


@pytest.fixture
def storage():
    mock_storage = MagicMock()
    mock_storage.upload_file = AsyncMock(side_effect=lambda data, key, ct: f"https://files.example.com/{key}")
    with patch("localaid.services.contractor_sync.get_storage_service", return_value=mock_storage):
        yield mock_storage


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"First_Name": "Priya", "Last_Name": "Nair"}, ("Priya", "Nair")),
        ({"First_Name_1": "Tom", "Last_Name_1": "Walker"}, ("Tom", "Walker")),
        ({"Full_Name": "Grace Mary Lee"}, ("Grace", "Mary Lee")),
        ({"Name": "Lee, Grace"}, ("Grace", "Lee")),
        ({"First_Name": "Nair, Priya"}, ("Nair", "Priya")),
        ({"Last_Name": "Walker"}, ("N/A", "Walker")),
        ({"First_Name": "Tom"}, ("Tom", "N/A")),
        ({}, None),
    ],
)
def test_parse_name(fields, expected):
    assert parse_name(fields) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(True, True), ("Yes", True), (["yes"], True), ("No", False), (["false"], False), ([], None), ("maybe", None)],
)
def test_parse_boolean(value, expected):
    assert parse_boolean(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [("5 years", 5), (" 12", 12), (3, 3), ("", None), (None, None), ("lots", None), ("150", None)],
)
def test_parse_years(value, expected):
    assert parse_years(value) == expected


def test_parse_services_merges_and_dedupes():
    contact = {
        "Primary_Service": "Support Worker",
        "Secondary_Service_s": ["Cleaning Services", "Support Worker"],
        "Services_Offered": "Nursing Services, Cleaning Services",
    }
    assert parse_services(contact) == ["Support Worker", "Cleaning Services", "Nursing Services"]


def test_transform_contact_maps_columns():
    data = transform_contact(
        _contact(
            Phone_1="0400 000 000",
            City="Parramatta",
            State="NSW",
            Postal_Zip_Code="2150",
            Do_you_drive_and_have_access_to_vehicle=["Yes"],
            ABN="12 345 678 901",
            Years_of_Experience="4 yrs",
        )
    )
    assert data["zoho_contact_id"] == "z-1"
    assert data["email"] == "priya@example.com"
    assert data["phone"] == "0400 000 000"
    assert data["state"] == "NSW"
    assert data["has_vehicle"] is True
    assert data["has_abn"] is True
    assert data["years_of_experience"] == 4


def test_transform_contact_without_email_gets_placeholder():
    data = transform_contact({"id": "z-9", "First_Name": "Tom", "Last_Name": "Walker"})
    assert data["email"].startswith("no-email-z-9-")
    assert data["email"].endswith("@placeholder.local")


def test_transform_contact_without_name_is_none():
    assert transform_contact({"id": "z-9", "Email": "x@example.com"}) is None


def test_unique_email():
    assert unique_email("priya@example.com", "z-1") == "priya-z-1@example.com"


# ---------------------------------------------------------------------------
# Photo rehosting
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_rehost_photo_copies_first_attachment(storage):
    zoho = _zoho()
    contact = _contact(
        Photo_Submission=[{"attachment_Id": "att-1", "preview_Url": "/p", "file_Name": "me.jpg"}]
    )

    url = await rehost_photo(zoho, contact)

    zoho.download.assert_awaited_once_with("https://api.example.com/crm/v2/Contacts/z-1/Attachments/att-1")
    assert url.startswith("https://files.example.com/contractors/z-1-profile-")
    assert url.endswith("-me.jpg")


@pytest.mark.asyncio
async def test_rehost_photo_gives_up_after_three_attempts(storage):
    zoho = _zoho()
    zoho.download = AsyncMock(side_effect=ZohoAPIError("boom", status_code=500))
    contact = _contact(Photo_Submission=[{"attachment_Id": "att-1", "download_Url": "/d"}])

    assert await rehost_photo(zoho, contact) is None
    assert zoho.download.await_count == 3
    storage.upload_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_rehost_photo_without_submission(storage):
    assert await rehost_photo(_zoho(), _contact()) is None
    assert await rehost_photo(_zoho(), _contact(Photo_Submission=[{"attachment_Id": "a"}])) is None


# ---------------------------------------------------------------------------
# Upsert and batch sync
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_upsert_creates_new_contractor(storage):
    session = _sync_session(make_result(single=None), make_result(single=None))

    action = await upsert_contractor(session, _zoho(), _contact())

    assert action == "created"
    created = session.add.call_args.args[0]
    assert created.zoho_contact_id == "z-1"
    assert created.email == "priya@example.com"
    assert created.photo_url is None
    assert created.last_synced_at is not None


@pytest.mark.asyncio
async def test_upsert_suffixes_email_owned_by_other_contact(storage):
    session = _sync_session(make_result(single=None), make_result(single="z-other"))

    await upsert_contractor(session, _zoho(), _contact())

    assert session.add.call_args.args[0].email == "priya-z-1@example.com"


@pytest.mark.asyncio
async def test_upsert_updates_existing_and_keeps_photo(storage):
    existing = MagicMock()
    existing.photo_url = "https://files.example.com/contractors/old.jpg"
    session = _sync_session(make_result(single=existing))

    action = await upsert_contractor(session, _zoho(), _contact(City="Penrith"))

    assert action == "updated"
    assert existing.city == "Penrith"
    assert existing.photo_url == "https://files.example.com/contractors/old.jpg"
    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_upsert_rejects_untransformable_contact():
    with pytest.raises(ValueError, match="transform"):
        await upsert_contractor(_sync_session(), _zoho(), {"id": "z-1"})


@pytest.mark.asyncio
async def test_sync_counts_outcomes_and_commits_per_batch(storage):
    existing = MagicMock()
    contacts = [
        _contact("z-1"),
        _contact("z-2"),
        {"First_Name": "No", "Last_Name": "Id"},
        {"id": "z-4"},
    ]
    session = _sync_session(
        make_result(single=None),
        make_result(single=None),
        make_result(single=existing),
    )

    result = await sync_contractors(session, _zoho(contacts), batch_size=2)

    assert result["stats"] == {
        "total": 4, "synced": 2, "created": 1, "updated": 1, "skipped": 1, "errors": 1,
    }
    assert result["error_messages"] == ["Contact z-4: Failed to transform contact data"]
    assert session.commit.await_count == 2
    assert session.begin_nested.call_count == 3


@pytest.mark.asyncio
async def test_sync_database_error_isolated_to_record(storage):
    session = _sync_session(
        IntegrityError("INSERT", {}, Exception("duplicate key")),
        make_result(single=None),
        make_result(single=None),
    )

    result = await sync_contractors(session, _zoho([_contact("z-1"), _contact("z-2")]))

    assert result["stats"]["errors"] == 1
    assert result["stats"]["created"] == 1
    assert result["error_messages"][0].startswith("Contact z-1:")


@pytest.mark.asyncio
async def test_sync_status_reports_last_run(storage):
    await sync_contractors(_sync_session(), _zoho([]))

    latest = MagicMock()
    latest.first_name, latest.last_name = "Priya", "Nair"
    latest.last_synced_at = datetime(2026, 5, 1, tzinfo=UTC)
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=[make_result(count=12), make_result(items=[latest])])

    status = await get_sync_status(session)

    assert status["total_contractors"] == 12
    assert status["last_synced_contractor"] == "Priya Nair"
    assert status["last_run"]["stats"]["total"] == 0
    assert len(status["recent_syncs"]) == 1


@pytest.mark.asyncio
async def test_sync_since_fetches_only_modified_records(storage):
    zoho = _zoho()
    zoho.get_modified_since = AsyncMock(return_value=[_contact("z-9")])
    since = datetime(2026, 5, 1, tzinfo=UTC)

    result = await sync_contractors(_sync_session(make_result(single=None)), zoho, since=since)

    zoho.get_modified_since.assert_awaited_once_with(since)
    zoho.get_all_contractors.assert_not_awaited()
    assert result["stats"]["created"] == 1
