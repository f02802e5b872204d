from __future__ import annotations

import inspect
from typing import Any, Callable, List, Optional, Tuple


INVALID_JSON = object()

Handler = Callable[[str, str, Optional[dict], dict], "FakeResponse"]


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = "", content_type: str = "text/html"):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.headers = {"content-type": content_type}

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")

    def json(self):
        if self._json is INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


async def _respond(result):
    # handler 可以返回协程，用来模拟慢速上游
    if inspect.isawaitable(result):
        return await result
    return result


def make_async_client(handler: Handler, calls: List[Tuple[str, str, Any]]):
    """Build a stand-in for httpx.AsyncClient that routes requests to handler."""

    class FakeAsyncClient:
        def __init__(self, *a, **kw):
            self.init_kwargs = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def get(self, url, params=None, **kw):
            calls.append(("GET", url, params))
            return await _respond(handler("GET", url, params, kw))

        async def post(self, url, **kw):
            calls.append(("POST", url, kw))
            return await _respond(handler("POST", url, kw.get("json"), kw))

    return FakeAsyncClient
