from __future__ import annotations

from typing import Optional

import pytest

from http_fakes import make_async_client


class SettingsStub:
    openai_api_key = "sk-test-0123456789"
    openai_base_url = "https://api.openai.test/v1"
    http_timeout = 1.0
    lookup_timeout = 1.0
    pubmed_base_url = "https://eutils.test/entrez/eutils"
    pubmed_db = "pubmed"
    drugbank_base_url = "https://go.drugbank.com"
    drugbank_searcher = "drugs"
    drug_reference_relay_url: Optional[str] = None
    voice_enabled = True
    voice_language = "ja"


@pytest.fixture
def stub_settings():
    return SettingsStub()


@pytest.fixture
def fake_http(monkeypatch):
    """Patch httpx.AsyncClient; returns install(handler) -> list of recorded calls."""

    def install(handler):
        calls = []
        monkeypatch.setattr("httpx.AsyncClient", make_async_client(handler, calls))
        return calls

    return install
