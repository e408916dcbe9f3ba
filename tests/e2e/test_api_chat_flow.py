import pytest
from fastapi.testclient import TestClient

from api.app import create_app


@pytest.fixture
def client(context):
    return TestClient(create_app(context))


def _say(client, message, conversation_id=None):
    payload = {"message": message}
    if conversation_id:
        payload["conversation_id"] = conversation_id
    resp = client.post("/api/chat", json=payload)
    assert resp.status_code == 200
    return resp.json()


def test_full_screening_over_http(client):
    first = _say(client, "yes")
    conversation_id = first["conversation_id"]
    assert first["source"] == "fallback"
    assert first["state"]["stage"] == "basic_info"

    for message in ["Jane Doe", "$65000", "yes", "ABC1234, 2026", "yes, 3 years"]:
        last = _say(client, message, conversation_id)

    assert last["state"]["stage"] == "experience_details"
    assert last["state"]["candidateName"] == "Jane Doe"
    assert last["state"]["desiredSalary"] == 65000
    assert last["state"]["experienceYears"] == 3
    assert last["state"]["completed"] is False
    assert "[STATE:" not in last["reply"]

    final = _say(client, "We had a patient crash during shift change and I coordinated the rapid response.", conversation_id)
    assert final["state"]["completed"] is True

    detail = client.get(f"/api/conversations/{conversation_id}").json()
    assert detail["candidate_name"] == "Jane Doe"
    assert len(detail["messages"]) == 14
    assert (detail["messages"][0]["role"], detail["messages"][0]["content"]) == ("user", "yes")


def test_early_exit_over_http(client):
    body = _say(client, "No thanks")
    assert body["state"]["endedEarly"] is True
    assert body["state"]["endReason"] == "Candidate not interested in discussing the role"


def test_empty_message_is_rejected(client):
    assert client.post("/api/chat", json={"message": ""}).status_code == 422


def test_conversation_listing_and_delete(client):
    conversation_id = _say(client, "yes")["conversation_id"]
    listed = client.get("/api/conversations").json()
    assert [item["id"] for item in listed] == [conversation_id]
    assert listed[0]["stage"] == "basic_info"

    assert client.delete(f"/api/conversations/{conversation_id}").status_code == 204
    assert client.get(f"/api/conversations/{conversation_id}").status_code == 404
    assert client.delete(f"/api/conversations/{conversation_id}").status_code == 404


def test_unknown_conversation_is_404(client):
    assert client.get("/api/conversations/does-not-exist").status_code == 404


def test_storage_failure_is_500(client, monkeypatch):
    from storage import StorageError

    def broken(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr("services.turns.upsert_conversation", broken)
    resp = client.post("/api/chat", json={"message": "yes"})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "storage unavailable"}


def test_stream_endpoint_with_fallback(client):
    resp = client.post("/api/chat/stream", json={"message": "yes"})
    assert resp.status_code == 200
    conversation_id = resp.headers["x-conversation-id"]
    assert resp.text == "Great! Could you please tell me your full name?"
    state = client.get(f"/api/conversations/{conversation_id}").json()["state"]
    assert state["stage"] == "basic_info"


def test_stream_endpoint_with_llm(llm_context, fakes):
    llm = fakes.client(stream_response=fakes.response(lines=fakes.sse("Wonderful! ", "Your name?")))
    client = TestClient(create_app(llm_context(llm)))
    resp = client.post("/api/chat/stream", json={"message": "yes", "conversation_id": "s1"})
    assert resp.text == "Wonderful! Your name?"
    messages = client.get("/api/conversations/s1").json()["messages"]
    assert messages[-1]["content"] == "Wonderful! Your name?"
