# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.v1 import migrations as migrations_router
from app.api.v1 import models as models_router
from app.api.v1 import query as query_router
from app.core.config import get_settings
from app.services import migrations
from app.services.allow_list import AllowList
from app.services.database import create_pool

logger = logging.getLogger("main")

app = FastAPI(title="model-registry-search")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(query_router.legacy_router)
app.include_router(query_router.router)
app.include_router(models_router.router)
app.include_router(migrations_router.router)
register_error_handlers(app)


@app.on_event("startup")
async def startup():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    # read-only for the life of the process
    app.state.allow_list = AllowList.from_config(settings.SEARCH_ALLOW_LIST)
    app.state.pool = await create_pool(settings)

    if settings.RUN_MIGRATIONS:
        await migrations.apply_pending(app.state.pool)

    logger.info("starting server on %s", settings.SERVER_ADDRESS)


@app.on_event("shutdown")
async def shutdown():
    pool = getattr(app.state, "pool", None)
    if pool is not None:
        await pool.close()


@app.get("/")
async def root():
    return {"message": "model registry search running"}


def run() -> None:
    import uvicorn

    settings = get_settings()
    host, port = settings.host_port
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_keep_alive=120,
    )


if __name__ == "__main__":
    run()
