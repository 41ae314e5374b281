"""FastAPI application: local endpoints for the lookup/create workflow."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from .client import ParkerClient
from .config import HOST, LOG_DIR, LOG_FILE, LOG_RETENTION_DAYS, PORT, ensure_dirs
from .models import (
    AuthResult,
    CreateRequest,
    CreateResult,
    LookupRequest,
    LookupResult,
    SettingsUpdate,
)
from .settings import SettingsStore

logger = logging.getLogger(__name__)

# Singleton, created on first use
_client: ParkerClient | None = None


def _get_client() -> ParkerClient:
    global _client
    if _client is None:
        _client = ParkerClient(SettingsStore())
    return _client


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _client
    yield
    if _client is not None:
        await _client.aclose()
        _client = None


app = FastAPI(title="Parker Lookup", version="0.1.0", lifespan=lifespan)


def _list_log_files() -> list[Path]:
    ensure_dirs()
    files = [p for p in LOG_DIR.glob("server.log*") if p.is_file()]
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)


def _cleanup_old_logs() -> None:
    cutoff = datetime.now() - timedelta(days=LOG_RETENTION_DAYS)
    cutoff_ts = cutoff.timestamp()
    for path in _list_log_files():
        if path.stat().st_mtime < cutoff_ts:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Failed to delete old log file: %s", path)


def _configure_logging() -> None:
    ensure_dirs()
    _cleanup_old_logs()
    log_format = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    formatter = logging.Formatter(log_format)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    file_handler = TimedRotatingFileHandler(
        filename=str(LOG_FILE),
        when="midnight",
        interval=1,
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    logging.basicConfig(level=logging.INFO, handlers=[stream_handler, file_handler], force=True)


# ── Session ───────────────────────────────────────────────────────────────

@app.get("/api/session/status")
async def session_status():
    authenticated = await _get_client().check_authenticated()
    return {"authenticated": authenticated}


@app.post("/api/session/login", response_model=AuthResult, response_model_exclude_none=True)
async def session_login():
    return await _get_client().login()


@app.post("/api/session/logout")
async def session_logout():
    _get_client().logout()
    return {"status": "ok"}


# ── Candidates ────────────────────────────────────────────────────────────

@app.post("/api/lookup", response_model=LookupResult, response_model_exclude_none=True)
async def lookup_candidate(req: LookupRequest):
    return await _get_client().lookup(req.url, req.first_name, req.last_name)


@app.post("/api/candidates", response_model=CreateResult, response_model_exclude_none=True)
async def create_candidate(req: CreateRequest):
    return await _get_client().create(req.first_name, req.last_name, req.url, req.sourced_date)


# ── Settings ──────────────────────────────────────────────────────────────

@app.get("/api/settings")
async def get_settings():
    return _get_client().settings.as_public_dict()


@app.put("/api/settings")
async def update_settings(body: SettingsUpdate):
    """Save credentials, then try them right away."""
    client = _get_client()
    if not body.email.strip() or not body.password:
        return {"saved": False, "login": {"ok": False, "error": "Please enter both email and password."}}
    client.settings.save_credentials(body.email, body.password)
    result = await client.login()
    return {"saved": True, "login": result.model_dump(exclude_none=True)}


# ── Entrypoint ────────────────────────────────────────────────────────────

def main():
    """CLI entrypoint: start the local server."""
    _configure_logging()
    logger.info("Starting Parker Lookup at http://%s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info", log_config=None)
