import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException

from .classifier import explain
from .config import HostSettings, PolicyConfig, load_config, load_settings
from .host import host_action
from .journal import Journal, list_journals
from .log import configure_logging, get_logger
from .models import (
    BatchClassifyRequest,
    BatchClassifyResponse,
    ClassifyRequest,
    ClassifyResponse,
    ConfigSummary,
    HostActionModel,
)

logger = get_logger(__name__)


def _classify_one(payload: ClassifyRequest, config: PolicyConfig) -> ClassifyResponse:
    verdict = explain(payload.url, payload.is_main_frame, config)
    action = host_action(verdict.disposition, payload.is_main_frame)
    return ClassifyResponse(
        url=payload.url,
        is_main_frame=payload.is_main_frame,
        disposition=verdict.disposition.value,
        rule=verdict.rule,
        matched=verdict.matched,
        action=HostActionModel(**action.as_dict()),
    )


def create_app(
    config: Optional[PolicyConfig] = None, settings: Optional[HostSettings] = None
) -> FastAPI:
    """Build the classification service.

    Without an explicit config the policy is read from ``GATEDVIEW_CONFIG``;
    a LoadError propagates so the server never starts on a broken policy.
    """
    configure_logging()
    if settings is None:
        settings = load_settings(os.getenv("GATEDVIEW_SETTINGS"))
    if config is None:
        path = os.getenv("GATEDVIEW_CONFIG")
        if not path:
            raise RuntimeError("GATEDVIEW_CONFIG is not set")
        config = load_config(path)
    journals_dir = Path(settings.journal_dir).resolve()
    journals_dir.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Policy loaded for %s (%d allowed domains)",
        config.domain,
        len(config.allowed_domains),
    )

    app = FastAPI()

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/v1/config", response_model=ConfigSummary)
    async def config_summary() -> ConfigSummary:
        return ConfigSummary(
            domain=config.domain,
            start_url=config.start_url,
            allowed_domains=list(config.allowed_domains),
            block_media=config.block_media,
            ad_blocker=config.ad_blocker,
            ignore_ssl_errors=config.ignore_ssl_errors,
            orientation=config.orientation.value,
            force_portrait=config.is_force_portrait(),
            force_landscape=config.is_force_landscape(),
        )

    @app.post("/v1/classify", response_model=ClassifyResponse)
    async def classify_url(payload: ClassifyRequest) -> ClassifyResponse:
        return _classify_one(payload, config)

    @app.post("/v1/classify_batch", response_model=BatchClassifyResponse)
    async def classify_batch(payload: BatchClassifyRequest) -> BatchClassifyResponse:
        results = [_classify_one(item, config) for item in payload.requests]
        journal_id = None
        if payload.journal:
            journal = Journal.open(journals_dir, label="batch")
            for item in payload.requests:
                verdict = explain(item.url, item.is_main_frame, config)
                journal.record(item.url, item.is_main_frame, verdict)
            journal.close()
            journal_id = journal.journal_id
        return BatchClassifyResponse(results=results, journal_id=journal_id)

    @app.get("/v1/journals")
    async def journals() -> dict:
        return {"journals": list_journals(journals_dir)}

    @app.get("/v1/journals/{journal_id}")
    async def journal_detail(journal_id: str) -> dict:
        journal_dir = (journals_dir / journal_id).resolve()
        if journals_dir not in journal_dir.parents or not journal_dir.is_dir():
            raise HTTPException(status_code=404, detail="journal not found")
        return Journal(journal_dir).summary()

    return app
