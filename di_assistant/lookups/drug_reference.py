"""DrugBank 药品检索。

搜索页返回的是 HTML，这里不解析 DOM，只用一个正则取第一个
形如 <a href="/drugs/DB00945">Aspirin</a> 的链接。

已知限制：该模式依赖第三方页面的具体结构，没有任何兼容性承诺。
页面结构一变就会得到空结果（而不是报错），不要通过放宽正则来“修复”。
需要更换解析方式时，实现 DrugLinkExtractor 并注入 DrugBankLookup 即可。
"""

import asyncio
import html
import re
from typing import Optional, Pattern, Protocol

import httpx

from di_assistant.config.settings import settings
from di_assistant.domain.citation import Citation
from di_assistant.domain.exceptions import SourceUnavailable
from di_assistant.infrastructure.logging.logger import logger


DRUG_REFERENCE_LABEL = "DrugBank情報"

# v1: go.drugbank.com 搜索结果页的药品条目链接
DRUGBANK_LINK_PATTERN_V1 = re.compile(r'<a href="/drugs/(DB\d{5})">(.*?)</a>')


class DrugLinkExtractor(Protocol):
    def extract(self, markup: str) -> Optional[Citation]:
        ...


class RegexDrugLinkExtractor:
    """用单个正则从搜索结果 HTML 中取第一个药品条目。"""

    def __init__(self, site_url: str, pattern: Pattern[str] = DRUGBANK_LINK_PATTERN_V1):
        self._site_url = site_url.rstrip("/")
        self._pattern = pattern

    def extract(self, markup: str) -> Optional[Citation]:
        match = self._pattern.search(markup or "")
        if not match:
            return None
        drug_id, title = match.group(1), html.unescape(match.group(2)).strip()
        if not title:
            return None
        return Citation(
            label=DRUG_REFERENCE_LABEL,
            title=title,
            source_url=f"{self._site_url}/drugs/{drug_id}",
        )


class DrugBankLookup:
    name = "drugbank"

    def __init__(self, cfg=settings, extractor: Optional[DrugLinkExtractor] = None):
        self._settings = cfg
        self._extractor = extractor or RegexDrugLinkExtractor(cfg.drugbank_base_url)

    async def fetch(self, query: str) -> str:
        term = (query or "").strip()
        if not term:
            return ""
        try:
            # httpx 的 timeout 只限制单次读写，整个检索另设总时限
            citation = await asyncio.wait_for(self.lookup(term), self._settings.lookup_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "drugbank.timeout",
                extra={"extra": {"query_chars": len(term), "timeout": self._settings.lookup_timeout}},
            )
            return ""
        except SourceUnavailable as e:
            logger.warning(
                "drugbank.unavailable",
                extra={"extra": {"query_chars": len(term), "code": e.code, "error": e.message}},
            )
            return ""
        if citation is None:
            logger.info("drugbank.no_match", extra={"extra": {"query_chars": len(term)}})
            return ""
        return citation.render()

    async def lookup(self, query: str) -> Optional[Citation]:
        markup = await self._search(query)
        return self._extractor.extract(markup)

    async def _search(self, query: str) -> str:
        relay = getattr(self._settings, "drug_reference_relay_url", None)
        if relay:
            url = f"{relay.rstrip('/')}/lookup"
            params = {"q": query}
        else:
            url = f"{self._settings.drugbank_base_url.rstrip('/')}/unearth/q"
            params = {"searcher": self._settings.drugbank_searcher, "query": query}
        try:
            async with httpx.AsyncClient(timeout=self._settings.lookup_timeout, trust_env=False) as client:
                resp = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise SourceUnavailable(code="NETWORK_ERROR", message=str(e) or type(e).__name__, source=self.name)
        if resp.status_code >= 400:
            # 中继返回的 400/500 也走这里
            raise SourceUnavailable(
                code="API_ERROR",
                message=f"DrugBank search returned {resp.status_code}",
                http_status=resp.status_code,
                source=self.name,
            )
        return resp.text
