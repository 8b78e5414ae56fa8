"""
Tests for text-generation backends.
"""

from types import SimpleNamespace

import pytest
import requests

from slidefix.config import ReviewSettings
from slidefix.errors import CollaboratorUnavailable
from slidefix.llm import AnthropicGenerator, OllamaGenerator, create_generator
from slidefix.llm import ollama as ollama_module


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class FakeMessages:
    def __init__(self, blocks=None, error=None):
        self.blocks = blocks or []
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=self.blocks)


def fake_client(blocks=None, error=None):
    return SimpleNamespace(messages=FakeMessages(blocks, error))


def test_ollama_generate(monkeypatch):
    """Test a chat request is sent and the message content returned."""
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent.update(url=url, json=json, timeout=timeout)
        return FakeResponse(payload={"message": {"role": "assistant", "content": '{"fixes": []}'}})

    monkeypatch.setattr(ollama_module.requests, "post", fake_post)

    generator = OllamaGenerator(base_url="http://ollama:11434/api/", model="mistral", timeout=30)
    assert generator.generate("Review this") == '{"fixes": []}'

    assert sent["url"] == "http://ollama:11434/api/chat"
    assert sent["json"]["model"] == "mistral"
    assert sent["json"]["stream"] is False
    assert sent["json"]["messages"][-1] == {"role": "user", "content": "Review this"}
    assert sent["timeout"] == 30


def test_ollama_http_error(monkeypatch):
    """Test a non-200 answer raises CollaboratorUnavailable."""
    monkeypatch.setattr(
        ollama_module.requests, "post", lambda *a, **k: FakeResponse(500, text="model not found")
    )

    with pytest.raises(CollaboratorUnavailable, match="500"):
        OllamaGenerator().generate("hi")


def test_ollama_timeout(monkeypatch):
    """Test timeouts raise CollaboratorUnavailable."""

    def fake_post(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(ollama_module.requests, "post", fake_post)

    with pytest.raises(CollaboratorUnavailable, match="timed out"):
        OllamaGenerator().generate("hi")


def test_ollama_invalid_json(monkeypatch):
    """Test an unreadable body raises CollaboratorUnavailable."""
    monkeypatch.setattr(ollama_module.requests, "post", lambda *a, **k: FakeResponse(200))

    with pytest.raises(CollaboratorUnavailable, match="Invalid JSON"):
        OllamaGenerator().generate("hi")


def test_ollama_available(monkeypatch):
    """Test the reachability check."""
    monkeypatch.setattr(ollama_module.requests, "get", lambda *a, **k: FakeResponse(200, {}))
    assert OllamaGenerator().available()

    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(ollama_module.requests, "get", refuse)
    assert not OllamaGenerator().available()


def test_anthropic_generate():
    """Test text blocks are joined and the request carries the model settings."""
    client = fake_client(
        blocks=[
            SimpleNamespace(type="text", text='{"fixes": '),
            SimpleNamespace(type="tool_use", id="x"),
            SimpleNamespace(type="text", text="[]}"),
        ]
    )
    generator = AnthropicGenerator(model="claude-test", max_tokens=100, client=client)

    assert generator.generate("Review") == '{"fixes": []}'

    call = client.messages.calls[0]
    assert call["model"] == "claude-test"
    assert call["max_tokens"] == 100
    assert call["messages"] == [{"role": "user", "content": "Review"}]
    assert "valid JSON" in call["system"]


def test_anthropic_api_error():
    """Test SDK errors become CollaboratorUnavailable."""
    import anthropic
    import httpx

    error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com"))
    generator = AnthropicGenerator(client=fake_client(error=error))

    with pytest.raises(CollaboratorUnavailable, match="Anthropic request failed"):
        generator.generate("Review")


def test_anthropic_requires_key(monkeypatch):
    """Test a missing key is reported up front."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(ValueError, match="API key"):
        AnthropicGenerator()


def test_create_generator_auto_prefers_ollama(monkeypatch):
    """Test auto mode uses a reachable Ollama."""
    monkeypatch.setattr(OllamaGenerator, "available", lambda self: True)

    generator = create_generator(ReviewSettings(provider="auto", model="phi3"))

    assert isinstance(generator, OllamaGenerator)
    assert generator.model == "phi3"


def test_create_generator_auto_falls_back(monkeypatch):
    """Test auto mode falls back to Anthropic."""
    monkeypatch.setattr(OllamaGenerator, "available", lambda self: False)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")

    generator = create_generator(ReviewSettings(provider="auto"))

    assert isinstance(generator, AnthropicGenerator)
    assert generator.model == ReviewSettings().anthropic_model


def test_create_generator_explicit_ollama_skips_reachability_check(monkeypatch):
    """Test an explicit provider is used without probing."""

    def fail(self):
        raise AssertionError("reachability check should not run")

    monkeypatch.setattr(OllamaGenerator, "available", fail)

    generator = create_generator(ReviewSettings(provider="ollama"))
    assert generator.model == "llama3.2:latest"


def test_generator_names_follow_class():
    """Test each backend is named after its class."""
    assert OllamaGenerator().name == "ollama"
    assert AnthropicGenerator(client=fake_client()).name == "anthropic"
