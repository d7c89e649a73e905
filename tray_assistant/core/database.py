import logging
from functools import lru_cache
from typing import AsyncGenerator, List, Type

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.core.config import settings

# 로깅 설정
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """비동기 엔진 (최초 사용 시 생성)"""
    return create_async_engine(settings.DATABASE_URL, echo=False)


def get_sessionmaker() -> async_sessionmaker:
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


def registered_models() -> List[Type[SQLModel]]:
    """
    🔍 테이블 모델 목록

    models 패키지를 import 해야 SQLModel.metadata 에 테이블이 등록됩니다.
    """
    from tray_assistant.models import (
        Category,
        Company,
        Department,
        Document,
        NfcMapping,
        SharedDocument,
        Subcategory,
        User,
        UserPermission,
    )

    return [
        Company,
        Department,
        User,
        UserPermission,
        Category,
        Subcategory,
        Document,
        SharedDocument,
        NfcMapping,
    ]


async def init_db(engine: AsyncEngine | None = None) -> None:
    """
    🛠️ 데이터베이스 초기화

    등록된 모델의 테이블을 생성합니다. (이미 있으면 건너뜀)
    """
    engine = engine or get_engine()
    models = registered_models()
    logger.info(f"📊 등록된 모델 수: {len(models)}")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("🏗️ 데이터베이스 테이블 생성 완료")
    except Exception as e:
        logger.error(f"🚨 데이터베이스 초기화 실패: {e}")
        raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    🔗 데이터베이스 세션 생성

    요청 단위로 비동기 세션을 생성합니다.
    """
    async with get_sessionmaker()() as session:
        yield session
