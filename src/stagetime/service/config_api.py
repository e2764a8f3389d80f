"""FastAPI service exposing reporter configuration and emitter counters."""

from __future__ import annotations

import copy
import os
from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from stagetime.config.defaults import ReporterConfig
from stagetime.config.store import (
    CONFIG_PATH,
    load_reporter_config,
    reporter_config_from_dict,
    reporter_config_to_dict,
    save_reporter_config,
)
from stagetime.runtime.emitter import configure, get_default_emitter


def _default_cors_origins() -> list[str]:
    return []


app = FastAPI(title="Stagetime Config Service", version="0.1.0")

cors_origins = os.environ.get("STAGETIME_CONFIG_CORS")
origins = (
    [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
    if cors_origins
    else _default_cors_origins()
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

CONFIG_TOKEN = os.environ.get("STAGETIME_CONFIG_TOKEN")
_CONFIG_CACHE: ReporterConfig = load_reporter_config()

_PATCHABLE_SECTIONS = ("policy", "format")


class StatsResponse(BaseModel):
    emitted: int
    suppressed: int
    dropped: int
    policy: str


async def verify_token(x_api_token: Optional[str] = Header(default=None)) -> None:
    """Simple header token check; bypassed when unset."""
    if CONFIG_TOKEN and x_api_token != CONFIG_TOKEN:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid api token")


def _get_config() -> ReporterConfig:
    return _CONFIG_CACHE


def _set_config(config: ReporterConfig) -> None:
    global _CONFIG_CACHE  # noqa: PLW0603 - module level cache
    configure(config)
    _CONFIG_CACHE = config
    save_reporter_config(config, CONFIG_PATH)


def _parse(payload: Dict[str, Any]) -> ReporterConfig:
    try:
        return reporter_config_from_dict(payload, ReporterConfig())
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@app.get("/health", dependencies=[Depends(verify_token)])
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/config", dependencies=[Depends(verify_token)])
async def get_config() -> Dict[str, Any]:
    """Return the complete reporter configuration."""
    return reporter_config_to_dict(_get_config())


@app.put("/config", dependencies=[Depends(verify_token)])
async def replace_config(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Replace the entire configuration and apply it to the default emitter."""
    new_config = _parse(payload)
    _set_config(new_config)
    return reporter_config_to_dict(new_config)


@app.patch("/config/{section}", dependencies=[Depends(verify_token)])
async def patch_section(section: str, payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Patch the policy or format section."""
    if section not in _PATCHABLE_SECTIONS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown section")
    updated = copy.deepcopy(reporter_config_to_dict(_get_config()))
    updated[section].update(payload)
    new_config = _parse(updated)
    _set_config(new_config)
    return reporter_config_to_dict(new_config)[section]


@app.get("/stats", dependencies=[Depends(verify_token)], response_model=StatsResponse)
async def get_stats() -> StatsResponse:
    """Return counters of the default emitter."""
    emitter = get_default_emitter()
    return StatsResponse(**asdict(emitter.stats()), policy=repr(emitter.policy))
