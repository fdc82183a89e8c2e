#!/usr/bin/env python3
"""
LinkShare - A Small Page-Sharing API
====================================
Users post an HTML/Markdown snippet and get back a short link. Reads of
popular pages and API-key validation dominate the traffic, so both go
through the CacheGuard cache (cache-aside). The memory monitor samples
the process in the background and the admin endpoints expose both.

Run:
    uvicorn example_app.linkshare_api:app --port 8000
"""

import hashlib
import logging
import secrets
import sqlite3
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from cacheguard import CacheGuard, CacheGuardConfig

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DB_PATH = "linkshare.db"
RECENT_LIMIT = 10


# ======================================
# DATABASE
# ======================================

class PageStore:
    """sqlite3 page and API-key store, one short-lived connection per call."""

    def __init__(self, db_path: str = DB_PATH) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_database(self) -> None:
        with self._connect() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS pages (
                    id TEXT PRIMARY KEY,
                    html_content TEXT NOT NULL,
                    created_at INTEGER NOT NULL,
                    code_type TEXT DEFAULT 'html',
                    name TEXT
                )
            ''')
            conn.execute('''
                CREATE TABLE IF NOT EXISTS api_keys (
                    key TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    is_active INTEGER DEFAULT 1,
                    created_at INTEGER NOT NULL
                )
            ''')
        conn.close()

    def create_page(self, html_content: str, code_type: str = 'html', name: Optional[str] = None) -> str:
        created_at = int(time.time() * 1000)
        page_id = hashlib.md5(f"{html_content}{created_at}".encode()).hexdigest()[:7]
        with self._connect() as conn:
            conn.execute(
                'INSERT INTO pages (id, html_content, created_at, code_type, name) VALUES (?, ?, ?, ?, ?)',
                (page_id, html_content, created_at, code_type, name),
            )
        conn.close()
        return page_id

    def get_page(self, page_id: str) -> Optional[Dict[str, Any]]:
        conn = self._connect()
        try:
            row = conn.execute('SELECT * FROM pages WHERE id = ?', (page_id,)).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None

    def recent_pages(self, limit: int = RECENT_LIMIT) -> List[Dict[str, Any]]:
        conn = self._connect()
        try:
            rows = conn.execute('SELECT * FROM pages ORDER BY created_at DESC LIMIT ?', (limit,)).fetchall()
        finally:
            conn.close()
        return [dict(r) for r in rows]

    def create_api_key(self, name: str) -> str:
        key = f"ls_{secrets.token_hex(16)}"
        with self._connect() as conn:
            conn.execute('INSERT INTO api_keys (key, name, created_at) VALUES (?, ?, ?)',
                         (key, name, int(time.time() * 1000)))
        conn.close()
        return key

    def find_api_key(self, key: str) -> Optional[Dict[str, Any]]:
        conn = self._connect()
        try:
            row = conn.execute('SELECT key, name FROM api_keys WHERE key = ? AND is_active = 1',
                               (key,)).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None


class PageIn(BaseModel):
    html_content: str
    code_type: str = 'html'
    name: Optional[str] = None


class ApiKeyIn(BaseModel):
    name: str


# ======================================
# APP FACTORY
# ======================================

def create_app(guard: Optional[CacheGuard] = None, db_path: str = DB_PATH) -> FastAPI:
    guard = guard or CacheGuard(CacheGuardConfig.from_env())
    store = PageStore(db_path)
    cache = guard.categories

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.init_database()
        guard.start()
        logger.info("LinkShare started with CacheGuard")
        yield
        guard.stop()

    app = FastAPI(
        title="LinkShare API",
        description="Short-link page sharing with CacheGuard caching and memory monitoring",
        version="2.0.0",
        lifespan=lifespan,
    )
    app.state.guard = guard
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def require_api_key(x_api_key: Optional[str] = Header(None)) -> Dict[str, Any]:
        if not x_api_key:
            raise HTTPException(status_code=401, detail="Missing API key")
        record = cache.api_keys.get_or_set(x_api_key, lambda: store.find_api_key(x_api_key))
        if record is None:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return record

    def load_page(page_id: str) -> Dict[str, Any]:
        page = cache.pages.get_or_set(page_id, lambda: store.get_page(page_id))
        if page is None:
            raise HTTPException(status_code=404, detail="Page not found")
        return page

    # --------- Pages ---------

    @app.post("/api/pages/create")
    async def create_page(page: PageIn):
        page_id = store.create_page(page.html_content, page.code_type, page.name)
        cache.stats.delete('recent')
        return {"success": True, "urlId": page_id, "url": f"/view/{page_id}"}

    @app.get("/api/pages/list/recent")
    async def recent_pages():
        pages = cache.stats.get_or_set('recent', lambda: store.recent_pages(RECENT_LIMIT))
        return {"success": True, "pages": [{"id": p["id"], "created_at": p["created_at"]} for p in pages]}

    @app.get("/api/pages/{page_id}")
    async def get_page(page_id: str):
        return {"success": True, "page": load_page(page_id)}

    @app.post("/api/keys")
    async def create_api_key(body: ApiKeyIn):
        return {"success": True, "apiKey": store.create_api_key(body.name)}

    @app.get("/api/v2/pages/{page_id}")
    async def get_page_v2(page_id: str, api_key: Dict[str, Any] = Depends(require_api_key)):
        return {"success": True, "page": load_page(page_id), "client": api_key["name"]}

    @app.get("/api/v2/health")
    async def health():
        return guard.health()

    # --------- Admin: cache ---------

    @app.get("/api/admin/cache/stats")
    async def cache_stats():
        return {"success": True, "data": guard.cache.get_stats()}

    @app.get("/api/admin/cache/report")
    async def cache_report():
        return {"success": True, "data": guard.cache.get_detailed_report()}

    @app.post("/api/admin/cache/warmup")
    async def cache_warmup():
        pages = store.recent_pages(RECENT_LIMIT)
        warmed = guard.cache.warmup({cache.pages.key_for(p["id"]): p for p in pages}, category='pages')
        return {"success": True, "warmed": warmed}

    # --------- Admin: memory ---------

    @app.get("/api/admin/memory/status")
    async def memory_status():
        return {"success": True, "data": guard.memory.get_detailed_stats().to_dict()}

    @app.get("/api/admin/memory/report")
    async def memory_report():
        return {"success": True, "data": guard.generate_report().to_dict()}

    @app.get("/api/admin/memory/leak-detection")
    async def leak_detection():
        return {"success": True, "data": guard.memory.detect_leaks().to_dict()}

    @app.post("/api/admin/memory/gc")
    async def memory_gc():
        result = guard.memory.force_gc()
        if not result.success:
            raise HTTPException(status_code=400, detail=result.error)
        return {"success": True, "data": result.to_dict()}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
