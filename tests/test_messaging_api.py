"""Tests for member/physician chat"""

import pytest


@pytest.fixture
def pair(seed):
    seed.member()
    seed.physician()


def open_chat(client, headers, participant_id="doc-1"):
    return client.post("/chats", json={"participant_id": participant_id}, headers=headers)


def send(client, headers, room_id, **payload):
    return client.post(f"/chats/{room_id}/messages", json=payload, headers=headers)


def test_opening_a_chat_is_idempotent(client, pair, member_headers, doctor_headers):
    first = open_chat(client, member_headers)
    again = open_chat(client, member_headers)
    from_physician = open_chat(client, doctor_headers, participant_id="member-1")

    assert first.status_code == 200
    assert first.json()["id"] == again.json()["id"] == from_physician.json()["id"]
    assert first.json()["counterpart_name"] == "Dr. Ada Lovelace"
    assert from_physician.json()["counterpart_name"] == "Grace Hopper"


def test_open_chat_with_unknown_participant(client, pair, member_headers):
    assert open_chat(client, member_headers, participant_id="ghost").status_code == 404


def test_members_cannot_chat_with_members(client, pair, seed, member_headers):
    seed.member(uid="member-2", full_name="Alan Turing")

    assert open_chat(client, member_headers, participant_id="member-2").status_code == 404


def test_messages_are_sanitized_and_ordered(client, pair, member_headers, doctor_headers):
    room_id = open_chat(client, member_headers).json()["id"]

    sent = send(client, member_headers, room_id, content="<b>Hello</b> doctor")
    send(client, doctor_headers, room_id, content="Hi Grace")
    send(client, member_headers, room_id, voice_message_url="https://cdn.test/voice/1.webm")

    assert sent.status_code == 201
    assert sent.json()["content"] == "&lt;b&gt;Hello&lt;/b&gt; doctor"
    assert sent.json()["sender_id"] == "member-1"

    messages = client.get(f"/chats/{room_id}/messages", headers=doctor_headers).json()
    assert [m["sender_id"] for m in messages] == ["member-1", "doc-1", "member-1"]
    assert messages[-1]["voice_message_url"] == "https://cdn.test/voice/1.webm"

    latest_two = client.get(f"/chats/{room_id}/messages?limit=2", headers=doctor_headers).json()
    assert [m["id"] for m in latest_two] == [m["id"] for m in messages[1:]]


def test_last_message_shows_in_chat_list(client, pair, member_headers, doctor_headers):
    room_id = open_chat(client, member_headers).json()["id"]
    send(client, member_headers, room_id, content="First")
    send(client, member_headers, room_id, content="Second")

    chats = client.get("/chats", headers=doctor_headers).json()

    assert len(chats) == 1
    assert chats[0]["counterpart_id"] == "member-1"
    assert chats[0]["last_message"]["content"] == "Second"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"content": "   "},
        {"content": "Hi", "voice_message_url": "https://cdn.test/voice/2.webm"},
        {"voice_message_url": "ftp://cdn.test/voice.webm"},
    ],
)
def test_message_needs_exactly_one_body(client, pair, member_headers, payload):
    room_id = open_chat(client, member_headers).json()["id"]

    assert send(client, member_headers, room_id, **payload).status_code == 422


def test_outsiders_cannot_read_or_write(client, pair, seed, member_headers, headers_for):
    seed.member(uid="member-2", full_name="Alan Turing")
    room_id = open_chat(client, member_headers).json()["id"]
    outsider = headers_for("member-2")

    assert client.get(f"/chats/{room_id}/messages", headers=outsider).status_code == 403
    assert send(client, outsider, room_id, content="Hello?").status_code == 403
    assert client.get("/chats/999/messages", headers=member_headers).status_code == 404


def test_contacts_show_the_other_role(client, pair, seed, member_headers, doctor_headers):
    seed.physician(uid="doc-2", full_name="Dr. Ben Carson")
    seed.member(uid="member-2", full_name="Alan Turing")

    doctors = client.get("/chats/contacts?q=carson", headers=member_headers).json()
    patients = client.get("/chats/contacts", headers=doctor_headers).json()

    assert [(c["id"], c["role"]) for c in doctors] == [("doc-2", "physician")]
    assert [c["full_name"] for c in patients] == ["Alan Turing", "Grace Hopper"]
