"""
🔍 검색 라우터

접근 가능한 부서의 문서를 키워드로 검색하는 라우터입니다.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from tray_assistant.auth.dependency import get_user_context
from tray_assistant.auth.schema import UserContext
from tray_assistant.chat.dependency import get_assistant_store
from tray_assistant.chat.store import AssistantStore
from tray_assistant.core.schema import ApiResponse, create_success_response

from .schema import DocumentSearchRequest, DocumentSearchResponse
from .service import LocalSearchIndex, extract_search_terms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["🔍 문서 검색"])


# ═══════════════════════════════════════════════════════════════════════════════
# 🔍 키워드 문서 검색
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/documents", response_model=ApiResponse[DocumentSearchResponse])
async def search_documents(
    request: DocumentSearchRequest,
    user: UserContext = Depends(get_user_context),
    store: AssistantStore = Depends(get_assistant_store),
):
    """
    🔍 키워드 문서 검색

    문서 제목과 OCR 텍스트에서 키워드를 찾습니다.

    **검색 범위:**
    - 로그인한 사용자의 회사
    - 소속 부서 + 권한을 받은 부서

    **검색 방식:**
    - 대소문자 무시 부분 일치
    - 문장 전체로 찾지 못하면 조사/불용어를 뺀 검색어로 다시 검색
    """
    try:
        index = LocalSearchIndex(await store.load_snapshot(user), user)
        results = index.search_by_keyword(request.query)
        if not results:
            results = index.search_by_terms(extract_search_terms(request.query))

        logger.info(f"🔍 키워드 검색 '{request.query}': {len(results)}건")
        return create_success_response(
            data=DocumentSearchResponse(
                query=request.query,
                results=results[: request.top_k],
                total_found=len(results),
            ),
            message=f"'{request.query}' 검색 결과: {len(results)}개 문서",
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
