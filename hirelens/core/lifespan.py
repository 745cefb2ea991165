import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from hirelens.ai.config import load_ai_config
from hirelens.ai.factory import get_ai_client
from hirelens.ai.gateway import ModelGateway
from hirelens.analytics.db import init_db, purge_old_records
from hirelens.core.config import settings
from hirelens.core.throttle import RequestThrottle, ThrottleConfig
from hirelens.scoring.config import load_scoring_rules
from hirelens.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

PURGE_INTERVAL_SECONDS = 3600


def build_gateway() -> ModelGateway:
    ai_config = load_ai_config()
    throttle = RequestThrottle(ThrottleConfig.from_settings(settings))
    return ModelGateway(get_ai_client(), throttle, model_name=ai_config.model)


async def _purge_until(stopped: asyncio.Event) -> None:
    while not stopped.is_set():
        try:
            removed = purge_old_records()
        except Exception as exc:  # pragma: no cover
            logger.warning("model_call_purge_failed: %s", exc)
        else:
            if removed:
                logger.info("model_call_purge removed=%s", removed)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stopped.wait(), timeout=PURGE_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app):
    init_db()
    app.state.gateway = build_gateway()
    app.state.store = KeyValueStore(settings.store_db_path)
    app.state.scoring_rules = load_scoring_rules()
    logger.info(
        "hirelens_started provider=%s rpm=%s store=%s",
        load_ai_config().provider,
        settings.throttle_requests_per_minute,
        settings.store_db_path,
    )

    stopped = asyncio.Event()
    purge_task = asyncio.create_task(_purge_until(stopped))
    try:
        yield
    finally:
        stopped.set()
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
        app.state.store.close()
