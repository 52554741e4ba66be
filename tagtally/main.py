from contextlib import asynccontextmanager
import uvicorn

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tagtally.api import analyse
from tagtally.core.config import get_settings
from tagtally.core.logging import setup_logging

logger = setup_logging("tagtally")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        f"Starting tagtally (worker transport={settings.WORKER_TRANSPORT}, "
        f"fanout={settings.FANOUT}, default mode={settings.DEFAULT_MODE})"
    )
    yield
    logger.info("Application shutdown initiated.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="tagtally API",
        description="Ranks the hashtags and creators found in a batch of TikTok posts",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analyse.router, prefix="/api", tags=["Analyse"])

    @app.get("/", tags=["Root"])
    def read_root(request: Request):
        logger.debug(f"Request from {request.client.host}:{request.client.port}")
        return {"message": "Welcome to the tagtally API"}

    @app.get("/health", tags=["Root"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def run():
    uvicorn.run("tagtally.main:app", host="0.0.0.0", port=get_settings().MASTER_PORT, workers=1)
