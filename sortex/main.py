from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Deque

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sortex.core.config import get_settings
from sortex.core.logging import configure_logging
from sortex.db.base import Base
from sortex.db.session import engine
import sortex.models  # noqa: F401
from sortex.routers import bins, dashboard, leaderboard, points, uploads


class RateLimiter:
    def __init__(self, limit_per_minute: int) -> None:
        self.limit_per_minute = limit_per_minute
        self._hits: dict[str, Deque[float]] = {}

    def hit(self, key: str) -> bool:
        now = datetime.now(timezone.utc).timestamp()
        window_start = now - 60
        # Drop buckets with no hit left inside the window.
        for stale_key in [k for k, b in self._hits.items() if not b or b[-1] < window_start]:
            del self._hits[stale_key]
        bucket = self._hits.setdefault(key, deque())
        while bucket and bucket[0] < window_start:
            bucket.popleft()
        if len(bucket) >= self.limit_per_minute:
            return False
        bucket.append(now)
        return True


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    limiter = RateLimiter(settings.rate_limit_per_minute)

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        key = request.client.host if request.client else "unknown"
        if not limiter.hit(key):
            return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content={"detail": "rate_limited"})
        return await call_next(request)

    app.include_router(dashboard.router)
    app.include_router(leaderboard.router)
    app.include_router(uploads.router)
    app.include_router(points.router)
    app.include_router(bins.router)

    upload_root = Path(settings.upload_dir)
    upload_root.mkdir(parents=True, exist_ok=True)
    app.mount("/files", StaticFiles(directory=upload_root), name="files")

    @app.on_event("startup")
    def startup() -> None:
        if settings.auto_create_tables:
            Base.metadata.create_all(bind=engine)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
