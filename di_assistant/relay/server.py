"""DrugBank 中继服务器。

浏览器端无法直接跨域抓取 DrugBank 搜索页，该服务只做原样转发：
- GET /lookup?q=<query> -> {drugbank_base_url}/unearth/q?searcher=drugs&query=<query>
- 缺少 q 或 q 为空串返回 400（空白字符照常转发），上游请求失败返回 500，其余情况透传上游状态码与正文。
"""

from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from di_assistant.config.settings import settings
from di_assistant.infrastructure.logging.logger import logger


RELAY_PORT = 3001


def create_app(cfg=settings) -> FastAPI:
    app = FastAPI(title="DI Assistant relay")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/lookup")
    async def lookup(q: Optional[str] = None) -> Response:
        if not q:
            return PlainTextResponse("Query missing", status_code=400)
        url = f"{cfg.drugbank_base_url.rstrip('/')}/unearth/q"
        try:
            async with httpx.AsyncClient(timeout=cfg.lookup_timeout, trust_env=False) as client:
                upstream = await client.get(url, params={"searcher": cfg.drugbank_searcher, "query": q})
        except httpx.HTTPError as e:
            logger.error("relay.upstream_failed", extra={"extra": {"query_chars": len(q), "error": repr(e)}})
            return PlainTextResponse("Error fetching DrugBank", status_code=500)
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type", "text/html"),
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "DI Assistant relay"}

    return app


app = create_app()


if __name__ == "__main__":
    logger.info("relay.start", extra={"extra": {"port": RELAY_PORT}})
    uvicorn.run(app, host="0.0.0.0", port=RELAY_PORT)
