from unittest import mock

import pytest
import requests

from injurybot import llm


def _response(payload=None, status_code=200):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.text = str(payload)
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    return resp


def test_create_chat_request_defaults_and_whitelist():
    body = llm.create_chat_request([{"role": "user", "content": "hi"}], {"top_p": 0.9, "stream": True})
    assert body["model"] == "gpt-4o-mini"
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 500
    assert body["top_p"] == 0.9
    assert "stream" not in body


def test_create_chat_request_options_override(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
    body = llm.create_chat_request([], {"max_tokens": 50})
    assert body["model"] == "gpt-4o"
    assert body["max_tokens"] == 50


def test_build_messages():
    assert llm.build_messages("hi") == [{"role": "user", "content": "hi"}]
    assert llm.build_messages("hi", "sys")[0] == {"role": "system", "content": "sys"}


def test_mock_reply_without_key():
    result = llm.call_llm(llm.build_messages("hi"))
    assert result["source"] == "mock"


def test_call_llm_returns_answer(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    payload = {"choices": [{"message": {"content": "Hello"}}], "usage": {"total_tokens": 3}}
    with mock.patch("injurybot.llm.requests.post", return_value=_response(payload)) as post:
        result = llm.call_llm(llm.build_messages("hi"))
    assert result["answer"] == "Hello"
    assert result["usage"] == {"total_tokens": 3}
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"


def test_call_llm_http_error(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with mock.patch("injurybot.llm.requests.post", return_value=_response({"error": "slow down"}, 429)):
        with pytest.raises(llm.LLMError) as exc:
            llm.call_llm(llm.build_messages("hi"))
    assert exc.value.status_code == 429


def test_call_llm_transport_error(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with mock.patch("injurybot.llm.requests.post", side_effect=requests.exceptions.ConnectionError("down")):
        with pytest.raises(llm.LLMError) as exc:
            llm.call_llm(llm.build_messages("hi"))
    assert exc.value.status_code is None


def test_call_llm_malformed_payload(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with mock.patch("injurybot.llm.requests.post", return_value=_response({"choices": []})):
        with pytest.raises(llm.LLMError) as exc:
            llm.call_llm(llm.build_messages("hi"))
    assert exc.value.status_code == 502


def test_call_llm_non_json_reply(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    resp = _response()
    resp.text = "<html>gateway</html>"
    resp.json.side_effect = ValueError("Expecting value")
    with mock.patch("injurybot.llm.requests.post", return_value=resp):
        with pytest.raises(llm.LLMError) as exc:
            llm.call_llm(llm.build_messages("hi"))
    assert exc.value.status_code == 502
