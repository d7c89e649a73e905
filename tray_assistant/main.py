import logging
from contextlib import asynccontextmanager

import fastapi
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tray_assistant.api.v1.router import api_v1_router as v1_router
from tray_assistant.core.config import settings
from tray_assistant.core.database import init_db
from tray_assistant.core.logger_config import setup_logging
from tray_assistant.external_services.ai_chat.client import ai_chat_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"🚀 {settings.PROJECT_NAME} 시작")

    if settings.DATABASE_INIT_ON_STARTUP:
        await init_db()

    if not ai_chat_client.is_configured:
        logger.warning("⚠️ AI_CHAT_URL 이 없어 모든 질문을 로컬 답변으로 처리합니다")

    yield

    logger.info(f"👋 {settings.PROJECT_NAME} 종료")


def create_app() -> fastapi.FastAPI:
    app_instance = FastAPI(
        lifespan=lifespan,
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.PROJECT_VERSION,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        redirect_slashes=False,
    )

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # health check
    @app_instance.get("/health")
    async def health_check():
        return {"status": "ok", "aiChatConfigured": ai_chat_client.is_configured}

    app_instance.include_router(v1_router)

    return app_instance


app = create_app()


if __name__ == "__main__":
    uvicorn.run("tray_assistant.main:app", port=8000, host="0.0.0.0", reload=True)
