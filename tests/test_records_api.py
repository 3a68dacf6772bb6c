"""Tests for medical record upload, listing and deletion"""

import pytest

from geekcare.domain.records.service import MAX_RECORD_SIZE


@pytest.fixture
def member(seed):
    return seed.member()


def upload(client, headers, filename="blood-test.pdf", body=b"%PDF-1.4 fake", content_type="application/pdf", **form):
    return client.post(
        "/records",
        files={"file": (filename, body, content_type)},
        data=form,
        headers=headers,
    )


def test_upload_record(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, title="Blood panel", type="lab_result")

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Blood panel"
    assert body["type"] == "lab_result"
    assert body["content_type"] == "application/pdf"
    assert body["file_key"].startswith("medical-records/member-1-")
    assert body["file_key"].endswith(".pdf")
    assert body["url"].startswith("https://storage.test/")
    assert body["file_key"] in body["url"]
    assert fake_storage.objects[body["file_key"]]["body"] == b"%PDF-1.4 fake"


def test_title_defaults_to_filename(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, filename="xray-2030.png", content_type="image/png")

    assert response.json()["title"] == "xray-2030"
    assert response.json()["type"] == "document"


def test_list_records_with_download_urls(client, member, member_headers, fake_storage):
    upload(client, member_headers, title="First")
    upload(client, member_headers, title="Second")

    records = client.get("/records", headers=member_headers).json()

    assert [r["title"] for r in records] == ["Second", "First"]
    assert all(r["url"].startswith("https://storage.test/") for r in records)


def test_unknown_record_type_is_rejected(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, type="selfie")

    assert response.status_code == 400
    assert fake_storage.objects == {}


def test_disallowed_file_is_rejected(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, filename="notes.txt", content_type="text/plain")

    assert response.status_code == 400


def test_path_traversal_in_filename_is_rejected(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, filename="..evil.pdf")

    assert response.status_code == 400


def test_oversized_file_is_rejected(client, member, member_headers, fake_storage):
    response = upload(client, member_headers, body=b"0" * (MAX_RECORD_SIZE + 1))

    assert response.status_code == 400
    assert fake_storage.objects == {}


def test_delete_removes_row_and_object(client, member, member_headers, fake_storage):
    record = upload(client, member_headers).json()

    deleted = client.delete(f"/records/{record['id']}", headers=member_headers)

    assert deleted.status_code == 200
    assert record["file_key"] not in fake_storage.objects
    assert client.get("/records", headers=member_headers).json() == []
    assert client.delete(f"/records/{record['id']}", headers=member_headers).status_code == 404


def test_records_are_private_to_the_member(client, member, seed, member_headers, headers_for, fake_storage):
    seed.member(uid="member-2", full_name="Alan Turing")
    record = upload(client, member_headers).json()

    assert client.get("/records", headers=headers_for("member-2")).json() == []
    assert client.delete(f"/records/{record['id']}", headers=headers_for("member-2")).status_code == 404


def test_physicians_have_no_records_endpoint(client, seed, doctor_headers, fake_storage):
    seed.physician()

    assert client.get("/records", headers=doctor_headers).status_code == 403
