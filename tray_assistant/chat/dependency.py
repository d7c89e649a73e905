from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.core.database import get_session

from .service import ResponseAssembler
from .store import AssistantStore, DatabaseAssistantStore


def get_assistant_store(
    session: AsyncSession = Depends(get_session),
) -> AssistantStore:
    """요청 세션 기반 저장소"""
    return DatabaseAssistantStore(session)


def get_response_assembler(
    store: AssistantStore = Depends(get_assistant_store),
) -> ResponseAssembler:
    return ResponseAssembler(store)
