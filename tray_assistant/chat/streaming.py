"""
🔄 스트리밍 단계

원격 응답 본문을 화면용 조각으로 바꾸는 세 단계입니다.

1. decode_stream: 바이트 조각 → 문자열 (멀티바이트 경계 안전)
2. rechunk: 문자열 → 고정 길이 조각 + 타이핑 효과용 지연
3. split_trailing_payload: 본문과 뒤에 붙은 문서 목록(JSON) 분리
"""

import asyncio
import codecs
import logging
import re
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from tray_assistant.search.schema import SearchResult

logger = logging.getLogger(__name__)

DOCS_DELIMITER = "\n---DOCS---\n"

_CODE_FENCE = re.compile(r"```(?:json)?")

_DOCUMENT_LIST = TypeAdapter(List[SearchResult])

Sleep = Callable[[float], Awaitable[None]]


async def decode_stream(byte_chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """UTF-8 증분 디코딩 (조각 경계에서 잘린 글자는 다음 조각과 합쳐서 복원)"""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    async for chunk in byte_chunks:
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


async def rechunk(
    texts: AsyncIterable[str],
    size: int = 5,
    delay: float = 0.03,
    sleep: Sleep = asyncio.sleep,
) -> AsyncIterator[str]:
    """
    받은 문자열을 size 글자씩 잘라 내보냄

    조각마다 delay 초 만큼 쉬어 타이핑 효과를 냅니다. delay 가 0 이면 쉬지 않습니다.
    """
    size = max(size, 1)
    async for text in texts:
        for start in range(0, len(text), size):
            yield text[start : start + size]
            if delay > 0:
                await sleep(delay)


def strip_payload(buffer: str) -> str:
    """
    화면에 보여줄 본문만 남김

    구분자 이후는 잘라내고, 끝부분이 구분자의 앞부분과 같으면 그만큼 보류합니다.
    (보류한 글자는 다음 조각에서 구분자가 아니라고 확인되면 다시 보입니다)
    """
    index = buffer.find(DOCS_DELIMITER)
    if index >= 0:
        return buffer[:index]

    for length in range(min(len(DOCS_DELIMITER) - 1, len(buffer)), 0, -1):
        if buffer.endswith(DOCS_DELIMITER[:length]):
            return buffer[:-length]
    return buffer


def split_trailing_payload(text: str) -> Tuple[str, Optional[str]]:
    """첫 번째 구분자 기준으로 (본문, 문서 목록 JSON) 분리"""
    index = text.find(DOCS_DELIMITER)
    if index < 0:
        return text, None
    return text[:index], text[index + len(DOCS_DELIMITER) :]


def parse_documents(payload: Optional[str]) -> List[SearchResult]:
    """문서 목록 JSON 파싱 (실패하면 빈 목록)"""
    if payload is None:
        return []

    cleaned = _CODE_FENCE.sub("", payload).strip()
    if not cleaned:
        return []

    try:
        return _DOCUMENT_LIST.validate_json(cleaned)
    except ValidationError as e:
        logger.warning(f"⚠️ 참고 문서 목록 파싱 실패 (본문만 사용): {e.error_count()}개 오류")
        return []
