from fastapi import APIRouter

from tray_assistant.chat.router import router as chat_router
from tray_assistant.search.router import router as search_router

api_v1_router = APIRouter(prefix="/api/v1")


api_v1_router.include_router(search_router)
api_v1_router.include_router(chat_router)
