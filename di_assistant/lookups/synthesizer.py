"""并发执行各检索源并合并为补充上下文。"""

import asyncio
from typing import List, Optional, Protocol, Sequence

from di_assistant.config.settings import settings
from di_assistant.infrastructure.logging.logger import logger
from di_assistant.lookups.drug_reference import DrugBankLookup
from di_assistant.lookups.literature import PubMedLookup


CITATION_SEPARATOR = "\n\n"


class Lookup(Protocol):
    name: str

    async def fetch(self, query: str) -> str:
        ...


class ContextSynthesizer:
    """同时调用所有检索源，等待全部结束后按固定顺序拼接非空结果。

    各检索源互相隔离：某一个意外抛错或超过 timeout 只会被记录并视为空结果，
    不会取消其他检索源，synthesize() 本身不会抛出异常。
    """

    def __init__(self, lookups: Optional[Sequence[Lookup]] = None, timeout: Optional[float] = None):
        self._lookups: List[Lookup] = list(lookups) if lookups is not None else [PubMedLookup(), DrugBankLookup()]
        self._timeout = timeout if timeout is not None else settings.lookup_timeout

    async def synthesize(self, query: str) -> str:
        if not (query or "").strip():
            return ""
        results = await asyncio.gather(
            *(asyncio.wait_for(lookup.fetch(query), self._timeout) for lookup in self._lookups),
            return_exceptions=True,
        )
        parts: List[str] = []
        for lookup, result in zip(self._lookups, results):
            if isinstance(result, asyncio.TimeoutError):
                logger.warning(
                    "synthesizer.lookup_timeout",
                    extra={"extra": {"source": getattr(lookup, "name", "?"), "timeout": self._timeout}},
                )
                continue
            if isinstance(result, BaseException):
                logger.error(
                    "synthesizer.lookup_crashed",
                    extra={"extra": {"source": getattr(lookup, "name", "?"), "error": repr(result)}},
                )
                continue
            if result:
                parts.append(result)
        return CITATION_SEPARATOR.join(parts)
