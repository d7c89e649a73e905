"""
🤖 채팅 라우터

AI 어시스턴트(트로이) 질의응답 라우터입니다.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from tray_assistant.auth.dependency import get_user_context
from tray_assistant.auth.schema import UserContext
from tray_assistant.core.schema import ApiResponse, create_success_response

from .dependency import get_response_assembler
from .schema import ChatRequest, ChatResult
from .service import ResponseAssembler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["🤖 AI 어시스턴트"])


# ═══════════════════════════════════════════════════════════════════════════════
# 🔄 스트리밍 채팅
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/stream")
async def streaming_chat(
    request: ChatRequest,
    user: UserContext = Depends(get_user_context),
    assembler: ResponseAssembler = Depends(get_response_assembler),
):
    """
    🔄 스트리밍 채팅

    답변을 글자 묶음 단위로 실시간 전송합니다.

    **프레임 형식:** `data: {"chunk": ..., "documents": [...], "isComplete": ...}`
    - chunk: 현재까지의 답변 본문 (점점 길어짐)
    - documents: 참고 문서 (완료 프레임에만)
    - isComplete: 마지막 프레임 여부

    **특징:**
    - 만료/공유/NFC/날짜 질문은 원격 호출 없이 즉시 답변
    - 원격 서비스 장애 시 로컬 검색 기반 답변으로 대체
    - 대화 기록은 저장하지 않음
    """
    try:

        async def generate_stream():
            async for frame in assembler.stream_response(
                request.message, request.history, user=user
            ):
                yield f"data: {frame.model_dump_json(by_alias=True)}\n\n"

        return StreamingResponse(
            generate_stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )

    except Exception as e:
        logger.error(f"❌ 스트리밍 채팅 실패: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


# ═══════════════════════════════════════════════════════════════════════════════
# 💬 일반 채팅
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("", response_model=ApiResponse[ChatResult])
async def chat(
    request: ChatRequest,
    user: UserContext = Depends(get_user_context),
    assembler: ResponseAssembler = Depends(get_response_assembler),
):
    """
    💬 채팅 (한 번에 응답)

    스트리밍 없이 최종 답변과 참고 문서 목록을 반환합니다.
    """
    try:
        result = await assembler.generate_response(
            request.message, request.history, user=user
        )
        return create_success_response(data=result, message="답변 생성 완료")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ 채팅 실패: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
