import asyncio

import httpx
import pytest

from di_assistant.domain.exceptions import EmptyListError, MissingFieldError
from di_assistant.lookups.literature import PubMedLookup
from http_fakes import INVALID_JSON, FakeResponse


def _pubmed_handler(search_json, summary_json=None):
    def handler(method, url, params, kw):
        if url.endswith("/esearch.fcgi"):
            return FakeResponse(json_data=search_json)
        if url.endswith("/esummary.fcgi"):
            return FakeResponse(json_data=summary_json)
        raise AssertionError(f"unexpected url {url}")

    return handler


@pytest.mark.asyncio
async def test_pubmed_formats_first_id(fake_http, stub_settings):
    calls = fake_http(
        _pubmed_handler(
            {"esearchresult": {"idlist": ["38012345", "37000001"]}},
            {"result": {"uids": ["38012345"], "38012345": {"title": "Low-dose aspirin and bleeding risk"}}},
        )
    )

    result = await PubMedLookup(stub_settings).fetch("aspirin")

    assert result == "PubMed論文（Low-dose aspirin and bleeding risk）\n出典: https://pubmed.ncbi.nlm.nih.gov/38012345"
    assert [c[1] for c in calls] == [
        "https://eutils.test/entrez/eutils/esearch.fcgi",
        "https://eutils.test/entrez/eutils/esummary.fcgi",
    ]
    assert calls[0][2] == {"db": "pubmed", "retmode": "json", "term": "aspirin"}
    assert calls[1][2] == {"db": "pubmed", "retmode": "json", "id": "38012345"}


@pytest.mark.asyncio
async def test_pubmed_empty_idlist_skips_summary(fake_http, stub_settings):
    calls = fake_http(_pubmed_handler({"esearchresult": {"idlist": []}}))

    assert await PubMedLookup(stub_settings).fetch("zzqqxx") == ""
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_pubmed_blank_query_makes_no_request(fake_http, stub_settings):
    calls = fake_http(_pubmed_handler({}))

    assert await PubMedLookup(stub_settings).fetch("   ") == ""
    assert calls == []


@pytest.mark.asyncio
async def test_pubmed_network_error_degrades_to_empty(fake_http, stub_settings):
    def handler(method, url, params, kw):
        raise httpx.ConnectError("connection refused")

    fake_http(handler)
    assert await PubMedLookup(stub_settings).fetch("aspirin") == ""


@pytest.mark.asyncio
async def test_pubmed_timeout_degrades_to_empty(fake_http, stub_settings):
    def handler(method, url, params, kw):
        raise httpx.ReadTimeout("timed out")

    fake_http(handler)
    assert await PubMedLookup(stub_settings).fetch("aspirin") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "search_json, summary_json",
    [
        (INVALID_JSON, None),
        ({"unexpected": {}}, None),
        ({"esearchresult": {"idlist": ["1"]}}, {"result": {}}),
        ({"esearchresult": {"idlist": ["1"]}}, {"result": {"1": {"title": ""}}}),
    ],
)
async def test_pubmed_malformed_payloads_degrade_to_empty(fake_http, stub_settings, search_json, summary_json):
    fake_http(_pubmed_handler(search_json, summary_json))
    assert await PubMedLookup(stub_settings).fetch("aspirin") == ""


@pytest.mark.asyncio
async def test_pubmed_http_error_status_degrades_to_empty(fake_http, stub_settings):
    fake_http(lambda method, url, params, kw: FakeResponse(status_code=503, text="busy"))
    assert await PubMedLookup(stub_settings).fetch("aspirin") == ""


@pytest.mark.asyncio
async def test_pubmed_lookup_raises_named_failures(fake_http, stub_settings):
    lookup = PubMedLookup(stub_settings)

    fake_http(_pubmed_handler({"esearchresult": {"idlist": []}}))
    with pytest.raises(EmptyListError):
        await lookup.lookup("aspirin")

    fake_http(_pubmed_handler({"esearchresult": {}}))
    with pytest.raises(MissingFieldError):
        await lookup.lookup("aspirin")


@pytest.mark.asyncio
async def test_pubmed_bound_covers_both_calls(fake_http, stub_settings):
    async def slow(response):
        await asyncio.sleep(0.15)
        return response

    def handler(method, url, params, kw):
        if url.endswith("/esearch.fcgi"):
            return slow(FakeResponse(json_data={"esearchresult": {"idlist": ["1"]}}))
        return slow(FakeResponse(json_data={"result": {"1": {"title": "T"}}}))

    # 每次调用都在时限内，但两次合计超出
    stub_settings.lookup_timeout = 0.2
    fake_http(handler)

    assert await PubMedLookup(stub_settings).fetch("aspirin") == ""
