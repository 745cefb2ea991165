from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from hirelens.ai.errors import ModelCallError
from hirelens.ai.gateway import ModelGateway
from hirelens.core.config import settings
from hirelens.core.lifespan import build_gateway
from hirelens.core.security import check_api_key
from hirelens.parsing.extract import DocumentExtractionError
from hirelens.scoring.config import load_scoring_rules
from hirelens.scoring.engine import ScoringRules
from hirelens.services.progress import ProgressRecorder
from hirelens.storage.kv_store import KeyValueStore


def get_gateway(request: Request) -> ModelGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        gateway = build_gateway()
        request.app.state.gateway = gateway
    return gateway


def get_store(request: Request) -> KeyValueStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = KeyValueStore(settings.store_db_path)
        request.app.state.store = store
    return store


def get_progress(store: KeyValueStore = Depends(get_store)) -> ProgressRecorder:
    return ProgressRecorder(store)


def get_scoring_rules(request: Request) -> ScoringRules:
    rules = getattr(request.app.state, "scoring_rules", None)
    if rules is None:
        rules = load_scoring_rules()
        request.app.state.scoring_rules = rules
    return rules


def require_admin(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    check_api_key(x_api_key)


def raise_model_http_error(exc: ModelCallError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def raise_extraction_http_error(exc: DocumentExtractionError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found.")
