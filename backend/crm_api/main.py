# backend/crm_api/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm_api.api import materials, sections, suppliers, users, warehouses
from crm_api.api.errors import setup_exception_handlers
from crm_api.core.config import settings
from crm_api.core.database import create_engine, create_session_factory
from crm_api.core.init_db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    await init_db(engine, app.state.session_factory)
    logger.info("CRM API started")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("CRM API stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="CRM API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    app.include_router(materials.router)
    app.include_router(warehouses.router)
    app.include_router(suppliers.router)
    app.include_router(sections.router)
    app.include_router(users.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
