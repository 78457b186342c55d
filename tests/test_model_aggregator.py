"""Tests for the provider model aggregation service."""

import logging

import httpx
import pytest

from sitegen.config import Settings
from sitegen.providers.config import get_provider_config
from sitegen.schemas.models import ModelInfo, OpenRouterModel
from sitegen.services import model_aggregator
from sitegen.services.model_aggregator import ModelAggregator, fetch_openrouter_catalog


class StubProvider:
    def __init__(self, provider_id, models):
        self.id = provider_id
        self._models = models

    async def list_models(self):
        return list(self._models)


class FailingProvider:
    def __init__(self, provider_id):
        self.id = provider_id

    async def list_models(self):
        raise httpx.ConnectError("connection refused")


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


def _factory(clients):
    def build(provider_id):
        client = clients[provider_id]
        if isinstance(client, Exception):
            raise client
        return client

    return build


DEEPSEEK_MODELS = [ModelInfo(id="deepseek-chat", name="DeepSeek Chat")]


@pytest.mark.anyio
async def test_no_providers_yields_empty_list():
    aggregator = ModelAggregator(settings=_settings(), client_factory=_factory({}))
    assert await aggregator.aggregate([]) == []


@pytest.mark.anyio
async def test_plain_provider_gets_single_group():
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({"deepseek": StubProvider("deepseek", DEEPSEEK_MODELS)}),
    )
    [group] = await aggregator.aggregate([get_provider_config("deepseek")])
    assert group.provider.id == "deepseek"
    assert group.provider.name == "DeepSeek"
    assert group.provider.examples == ["deepseek-chat", "deepseek-reasoner"]
    assert group.provider.company is None
    assert group.models == DEEPSEEK_MODELS


@pytest.mark.anyio
async def test_failing_provider_is_skipped(caplog):
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({
            "ollama": FailingProvider("ollama"),
            "deepseek": StubProvider("deepseek", DEEPSEEK_MODELS),
        }),
    )
    with caplog.at_level(logging.WARNING, logger="sitegen.services.model_aggregator"):
        groups = await aggregator.aggregate([get_provider_config("ollama"), get_provider_config("deepseek")])

    assert [g.provider.id for g in groups] == ["deepseek"]
    assert "Skipping provider ollama" in caplog.text


@pytest.mark.anyio
async def test_client_construction_failure_is_skipped():
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({"lm_studio": RuntimeError("boom")}),
    )
    [result] = await aggregator.collect_all([get_provider_config("lm_studio")])
    assert not result.ok
    assert result.groups == []
    assert result.skipped_reason == "RuntimeError: boom"


@pytest.mark.anyio
async def test_openrouter_split_by_company(monkeypatch):
    async def fake_catalog(settings, transport=None):
        return [
            OpenRouterModel(id="openai/gpt-4", organization="OpenAI"),
            OpenRouterModel(id="anthropic/claude", provider="Anthropic"),
            OpenRouterModel(id="foo/bar"),
        ]

    monkeypatch.setattr(model_aggregator, "fetch_openrouter_catalog", fake_catalog)
    aggregator = ModelAggregator(
        settings=_settings(openrouter_api_key="key"),
        client_factory=_factory({"openrouter": StubProvider("openrouter", [ModelInfo(id="x", name="x")])}),
    )
    groups = await aggregator.aggregate([get_provider_config("openrouter")])

    assert [g.provider.company for g in groups] == ["OpenAI", "Anthropic", "foo"]
    assert all(g.provider.id == "openrouter" for g in groups)
    assert all(len(g.models) == 1 for g in groups)


@pytest.mark.anyio
async def test_openrouter_catalog_failure_skips_provider(monkeypatch):
    async def broken_catalog(settings, transport=None):
        raise ValueError("not json")

    monkeypatch.setattr(model_aggregator, "fetch_openrouter_catalog", broken_catalog)
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({
            "deepseek": StubProvider("deepseek", DEEPSEEK_MODELS),
            "openrouter": StubProvider("openrouter", [ModelInfo(id="x", name="x")]),
        }),
    )
    groups = await aggregator.aggregate([get_provider_config("deepseek"), get_provider_config("openrouter")])
    assert [g.provider.id for g in groups] == ["deepseek"]


@pytest.mark.anyio
async def test_openrouter_without_data_list_keeps_default_group(monkeypatch):
    async def no_data(settings, transport=None):
        return None

    monkeypatch.setattr(model_aggregator, "fetch_openrouter_catalog", no_data)
    models = [ModelInfo(id="openai/gpt-4o", name="GPT-4o")]
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({"openrouter": StubProvider("openrouter", models)}),
    )
    [group] = await aggregator.aggregate([get_provider_config("openrouter")])
    assert group.provider.name == "OpenRouter"
    assert group.provider.company is None
    assert group.models == models


@pytest.mark.anyio
async def test_all_providers_failing_returns_empty():
    aggregator = ModelAggregator(
        settings=_settings(),
        client_factory=_factory({"deepseek": FailingProvider("deepseek"), "ollama": FailingProvider("ollama")}),
    )
    groups = await aggregator.aggregate([get_provider_config("deepseek"), get_provider_config("ollama")])
    assert groups == []


class TestFetchOpenRouterCatalog:
    @pytest.mark.anyio
    async def test_sends_bearer_token_when_configured(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"data": [{"id": "openai/gpt-4", "organization": "OpenAI"}]})

        entries = await fetch_openrouter_catalog(
            _settings(openrouter_api_key="sk-or-v1-abc"), transport=httpx.MockTransport(handler)
        )
        assert seen["auth"] == "Bearer sk-or-v1-abc"
        assert seen["url"] == "https://openrouter.ai/api/v1/models"
        assert [e.organization for e in entries] == ["OpenAI"]

    @pytest.mark.anyio
    async def test_no_auth_header_without_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"data": []})

        entries = await fetch_openrouter_catalog(_settings(), transport=httpx.MockTransport(handler))
        assert seen["auth"] is None
        assert entries == []

    @pytest.mark.anyio
    async def test_missing_data_list_returns_none(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "nope"}))
        assert await fetch_openrouter_catalog(_settings(), transport=transport) is None

    @pytest.mark.anyio
    async def test_entries_without_id_are_dropped(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"data": [{"name": "ghost"}, "junk", {"id": "a/b"}]})
        )
        entries = await fetch_openrouter_catalog(_settings(), transport=transport)
        assert [e.id for e in entries] == ["a/b"]

    @pytest.mark.anyio
    async def test_http_error_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"error": "down"}))
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_openrouter_catalog(_settings(), transport=transport)
