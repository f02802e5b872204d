"""PubMed 文献检索。

两步调用 E-utilities：
1. esearch 按关键词取第一个 PMID（不做任何排序，完全沿用返回顺序）；
2. esummary 取该 PMID 的标题，格式化为 Citation。

lookup() 严格模式，失败时抛 SourceUnavailable 的子类；
fetch() 是对外边界，任何失败都降级为空字符串并记录日志。
"""

import asyncio
from typing import Any, Dict

import httpx

from di_assistant.config.settings import settings
from di_assistant.domain.citation import Citation
from di_assistant.domain.exceptions import EmptyListError, MissingFieldError, SourceUnavailable
from di_assistant.infrastructure.logging.logger import logger


LITERATURE_LABEL = "PubMed論文"
PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}"


class PubMedLookup:
    name = "pubmed"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def fetch(self, query: str) -> str:
        term = (query or "").strip()
        if not term:
            return ""
        try:
            # httpx 的 timeout 只限制单次读写，整个检索另设总时限
            citation = await asyncio.wait_for(self.lookup(term), self._settings.lookup_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "pubmed.timeout",
                extra={"extra": {"query_chars": len(term), "timeout": self._settings.lookup_timeout}},
            )
            return ""
        except EmptyListError:
            logger.info("pubmed.no_results", extra={"extra": {"query_chars": len(term)}})
            return ""
        except SourceUnavailable as e:
            logger.warning(
                "pubmed.unavailable",
                extra={"extra": {"query_chars": len(term), "code": e.code, "error": e.message}},
            )
            return ""
        return citation.render()

    async def lookup(self, query: str) -> Citation:
        base = self._settings.pubmed_base_url.rstrip("/")
        try:
            async with httpx.AsyncClient(timeout=self._settings.lookup_timeout, trust_env=False) as client:
                search = await self._get_json(
                    client,
                    f"{base}/esearch.fcgi",
                    {"db": self._settings.pubmed_db, "retmode": "json", "term": query},
                )
                pmid = self._first_id(search)
                summary = await self._get_json(
                    client,
                    f"{base}/esummary.fcgi",
                    {"db": self._settings.pubmed_db, "retmode": "json", "id": pmid},
                )
        except httpx.HTTPError as e:
            raise SourceUnavailable(code="NETWORK_ERROR", message=str(e) or type(e).__name__, source=self.name)
        title = self._title_for(summary, pmid)
        return Citation(label=LITERATURE_LABEL, title=title, source_url=PUBMED_ARTICLE_URL.format(pmid=pmid))

    async def _get_json(self, client: httpx.AsyncClient, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        resp = await client.get(url, params=params)
        if resp.status_code >= 400:
            raise SourceUnavailable(
                code="API_ERROR",
                message=f"PubMed returned {resp.status_code}",
                http_status=resp.status_code,
                source=self.name,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise SourceUnavailable(code="INVALID_JSON", message=str(e), source=self.name)
        if not isinstance(data, dict):
            raise MissingFieldError(code="MISSING_FIELD", message="response body is not an object", source=self.name)
        return data

    def _first_id(self, data: Dict[str, Any]) -> str:
        result = data.get("esearchresult")
        if not isinstance(result, dict):
            raise MissingFieldError(code="MISSING_FIELD", message="esearchresult", source=self.name)
        id_list = result.get("idlist")
        if not isinstance(id_list, list):
            raise MissingFieldError(code="MISSING_FIELD", message="esearchresult.idlist", source=self.name)
        if not id_list:
            raise EmptyListError(code="EMPTY_LIST", message="esearchresult.idlist", source=self.name)
        return str(id_list[0])

    def _title_for(self, data: Dict[str, Any], pmid: str) -> str:
        results = data.get("result")
        entry = results.get(pmid) if isinstance(results, dict) else None
        if not isinstance(entry, dict):
            raise MissingFieldError(code="MISSING_FIELD", message=f"result.{pmid}", source=self.name)
        title = entry.get("title")
        if not isinstance(title, str) or not title.strip():
            raise MissingFieldError(code="MISSING_FIELD", message=f"result.{pmid}.title", source=self.name)
        return title.strip()
