import logging
from typing import Any, AsyncIterator, Dict, Optional, Sequence

import httpx

from tray_assistant.chat.schema import ConversationTurn
from tray_assistant.core.config import settings

logger = logging.getLogger(__name__)


class RemoteChannelError(Exception):
    """원격 답변 채널 실패 (연결 / 타임아웃 / 비정상 상태 코드)"""


class AiChatClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = settings.AI_CHAT_URL if base_url is None else base_url
        self.api_key = settings.AI_CHAT_API_KEY if api_key is None else api_key
        self.timeout = settings.AI_CHAT_TIMEOUT if timeout is None else timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def build_payload(
        message: str, user_id: str, history: Sequence[ConversationTurn]
    ) -> Dict[str, Any]:
        return {
            "message": message,
            "userId": user_id,
            "history": [{"role": turn.role, "content": turn.content} for turn in history],
        }

    async def stream_answer(
        self, message: str, user_id: str, history: Sequence[ConversationTurn]
    ) -> AsyncIterator[bytes]:
        """
        답변 스트리밍 요청

        Args:
            message: 사용자 질문 (앞뒤 공백 제거됨)
            user_id: 사용자 ID
            history: 이전 대화 (호출자가 개수 제한)

        Yields:
            응답 본문 바이트 조각 (UTF-8, 글자 경계와 무관)

        Raises:
            RemoteChannelError: 설정 누락, 연결 실패, 타임아웃, 2xx 가 아닌 응답
        """
        if not self.is_configured:
            raise RemoteChannelError("AI 채팅 서비스 주소가 설정되지 않았습니다")

        payload = self.build_payload(message, user_id, history)
        logger.info(f"🤖 AI 채팅 서비스 호출: user={user_id}, history={len(history)}턴")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                async with client.stream(
                    "POST", self.base_url, json=payload, headers=self._headers()
                ) as response:
                    if not response.is_success:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        error_msg = f"AI 채팅 서비스 오류 (HTTP {response.status_code})"
                        logger.error(f"{error_msg}: {body[:200]}")
                        raise RemoteChannelError(error_msg)

                    received = 0
                    async for chunk in response.aiter_bytes():
                        if chunk:
                            received += len(chunk)
                            yield chunk
                    logger.info(f"✅ AI 채팅 응답 수신 완료: {received} bytes")

        except httpx.TimeoutException as e:
            error_msg = f"AI 채팅 서비스 타임아웃 ({self.timeout}초)"
            logger.error(error_msg)
            raise RemoteChannelError(error_msg) from e

        except httpx.HTTPError as e:
            logger.error(f"❌ AI 채팅 클라이언트 오류: {str(e)}")
            raise RemoteChannelError(str(e)) from e


# 싱글톤 인스턴스
ai_chat_client = AiChatClient()
