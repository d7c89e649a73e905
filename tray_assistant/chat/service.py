"""
🤖 채팅 서비스

질문 하나를 받아 의도를 분류하고, 로컬 답변 또는 원격 스트리밍 답변을 조립합니다.
원격 채널이 실패해도 항상 화면에 보여줄 수 있는 답변을 돌려줍니다.
"""

import asyncio
import contextlib
import inspect
import logging
from enum import Enum
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    List,
    Optional,
    Sequence,
    Union,
)

from tray_assistant.auth.schema import UserContext
from tray_assistant.core.config import settings
from tray_assistant.external_services.ai_chat.client import (
    AiChatClient,
    RemoteChannelError,
    ai_chat_client,
)
from tray_assistant.search.schema import SearchResult, StoreSnapshot
from tray_assistant.search.service import LocalSearchIndex

from .dates import Clock, DateExpressionResolver
from .fallback import (
    EMPTY_INPUT_MESSAGE,
    FAST_REPLY_QUESTIONS,
    GENERIC_ERROR_MESSAGE,
    LocalFallbackResponder,
)
from .intent import Intent, classify
from .reports import LocalReportService, format_date_search
from .schema import ChatResult, ConversationTurn, StreamedAnswer, StreamingChatResponse
from .store import AssistantStore
from .streaming import (
    Sleep,
    decode_stream,
    parse_documents,
    rechunk,
    split_trailing_payload,
    strip_payload,
)

logger = logging.getLogger(__name__)

PartialCallback = Callable[[str, List[SearchResult]], Union[None, Awaitable[None]]]


class AssemblerState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    LOCAL_ANSWER = "local_answer"
    REMOTE_STREAMING = "remote_streaming"
    FINALIZING = "finalizing"
    DONE = "done"


async def _notify(
    callback: Optional[PartialCallback], text: str, documents: List[SearchResult]
) -> None:
    """콜백 호출 (동기/비동기 모두 지원, 콜백 오류는 결과에 영향 없음)"""
    if callback is None:
        return
    try:
        result = callback(text, documents)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.warning(f"⚠️ 응답 콜백 처리 중 오류 (무시): {str(e)}")


class _ResponseRun:
    """질의 한 번 동안의 상태 (스냅샷은 최대 한 번만 조회)"""

    def __init__(
        self,
        store: AssistantStore,
        user: Optional[UserContext],
        snapshot: Optional[StoreSnapshot],
        callback: Optional[PartialCallback],
    ):
        self.store = store
        self.user = user
        self.snapshot = snapshot
        self.callback = callback
        self.state = AssemblerState.IDLE
        self._index: Optional[LocalSearchIndex] = None

    def enter(self, state: AssemblerState) -> None:
        logger.debug(f"🔀 응답 상태: {self.state.value} → {state.value}")
        self.state = state

    async def index(self) -> LocalSearchIndex:
        if self._index is None:
            if self.snapshot is None:
                self.snapshot = (
                    await self.store.load_snapshot(self.user)
                    if self.user is not None
                    else StoreSnapshot()
                )
            self._index = LocalSearchIndex(self.snapshot, self.user)
        return self._index

    async def fallback(self, text: str) -> str:
        return LocalFallbackResponder(await self.index()).respond(text)

    async def emit(self, text: str, documents: List[SearchResult]) -> None:
        await _notify(self.callback, text, documents)


class ResponseAssembler:
    """
    응답 조립기

    IDLE → CLASSIFYING → (LOCAL_ANSWER | REMOTE_STREAMING) → FINALIZING → DONE
    """

    def __init__(
        self,
        store: AssistantStore,
        channel: Optional[AiChatClient] = None,
        clock: Optional[Clock] = None,
        chunk_size: Optional[int] = None,
        chunk_delay: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
        history_limit: Optional[int] = None,
    ):
        self.store = store
        self.channel = ai_chat_client if channel is None else channel
        self.resolver = DateExpressionResolver(clock)
        self.reports = LocalReportService(store, clock)
        self.chunk_size = settings.STREAM_CHUNK_SIZE if chunk_size is None else chunk_size
        self.chunk_delay = (
            settings.STREAM_CHUNK_DELAY if chunk_delay is None else chunk_delay
        )
        self.sleep = sleep
        self.history_limit = (
            settings.CHAT_HISTORY_LIMIT if history_limit is None else history_limit
        )

    async def generate_response(
        self,
        message: str,
        history: Optional[Sequence[ConversationTurn]] = None,
        on_partial_update: Optional[PartialCallback] = None,
        *,
        user: Optional[UserContext],
        snapshot: Optional[StoreSnapshot] = None,
    ) -> ChatResult:
        """
        질문 하나에 대한 최종 답변 생성

        부분 답변 콜백은 0번 이상 (본문이 늘어나는 순서, 문서 목록은 비어 있음),
        마지막에 최종 본문과 문서 목록으로 정확히 한 번 더 호출됩니다.
        빈 입력은 콜백 없이 안내 문구만 반환합니다.
        """
        text = (message or "").strip()
        if not text:
            logger.info("💬 빈 질문 입력")
            return ChatResult(text=EMPTY_INPUT_MESSAGE)

        run = _ResponseRun(self.store, user, snapshot, on_partial_update)
        result = await self._generate(text, history or [], run)

        await run.emit(result.text, result.documents)
        run.enter(AssemblerState.DONE)
        return result

    async def stream_response(
        self,
        message: str,
        history: Optional[Sequence[ConversationTurn]] = None,
        *,
        user: Optional[UserContext],
        snapshot: Optional[StoreSnapshot] = None,
    ) -> AsyncIterator[StreamingChatResponse]:
        """SSE 용: 부분 답변 프레임들 다음에 완료 프레임 하나"""
        text = (message or "").strip()
        if not text:
            yield StreamingChatResponse(chunk=EMPTY_INPUT_MESSAGE, is_complete=True)
            return

        queue: "asyncio.Queue[StreamingChatResponse]" = asyncio.Queue()

        async def on_partial(partial: str, documents: List[SearchResult]) -> None:
            await queue.put(StreamingChatResponse(chunk=partial, is_complete=False))

        async def produce() -> None:
            run = _ResponseRun(self.store, user, snapshot, on_partial)
            try:
                result = await self._generate(text, history or [], run)
                frame = StreamingChatResponse(
                    chunk=result.text, documents=result.documents, is_complete=True
                )
            except Exception as e:
                logger.error(f"❌ 스트리밍 응답 생성 실패: {str(e)}")
                frame = StreamingChatResponse(chunk=GENERIC_ERROR_MESSAGE, is_complete=True)
            run.enter(AssemblerState.DONE)
            await queue.put(frame)

        task = asyncio.create_task(produce())
        try:
            while True:
                frame = await queue.get()
                yield frame
                if frame.is_complete:
                    break
        finally:
            if not task.done():
                task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ═══════════════════════════════════════════════════════════════════════════
    # 🧭 분기
    # ═══════════════════════════════════════════════════════════════════════════

    async def _generate(
        self, text: str, history: Sequence[ConversationTurn], run: _ResponseRun
    ) -> ChatResult:
        try:
            return await self._dispatch(text, history, run)
        except Exception as e:
            logger.exception(f"❌ 응답 생성 중 예기치 않은 오류 → 폴백: {str(e)}")
            return ChatResult(text=await self._safe_fallback(text, run))

    async def _dispatch(
        self, text: str, history: Sequence[ConversationTurn], run: _ResponseRun
    ) -> ChatResult:
        run.enter(AssemblerState.CLASSIFYING)

        if text in FAST_REPLY_QUESTIONS:
            run.enter(AssemblerState.LOCAL_ANSWER)
            return ChatResult(text=await run.fallback(text))

        intent = classify(text)
        logger.info(f"🧭 질문 의도: {intent.value}")

        if intent in (Intent.EXPIRY, Intent.SHARED_DOCUMENTS, Intent.NFC_STATUS):
            run.enter(AssemblerState.LOCAL_ANSWER)
            if run.user is None:
                return ChatResult(text=await run.fallback(text))
            return ChatResult(text=await self._report(intent, run.user))

        if intent is Intent.DATE_SEARCH:
            date_range = self.resolver.resolve(text)
            if date_range is not None:
                run.enter(AssemblerState.LOCAL_ANSWER)
                index = await run.index()
                results = index.search_by_date_range(date_range)
                limit = settings.DATE_SEARCH_DISPLAY_LIMIT
                return ChatResult(
                    text=format_date_search(date_range, results, limit),
                    documents=results[:limit],
                )
            logger.debug("📅 날짜 표현을 해석하지 못해 원격 답변으로 진행")

        if run.user is None or not run.user.user_id or not self.channel.is_configured:
            logger.warning("⚠️ 사용자 또는 원격 채널 설정이 없어 로컬 폴백 사용")
            run.enter(AssemblerState.LOCAL_ANSWER)
            return ChatResult(text=await run.fallback(text))

        return await self._stream_remote(text, history, run)

    async def _report(self, intent: Intent, user: UserContext) -> str:
        if intent is Intent.EXPIRY:
            return await self.reports.expiry_report(user)
        if intent is Intent.SHARED_DOCUMENTS:
            return await self.reports.shared_report(user)
        return await self.reports.nfc_report(user)

    # ═══════════════════════════════════════════════════════════════════════════
    # 🔄 원격 스트리밍
    # ═══════════════════════════════════════════════════════════════════════════

    async def _stream_remote(
        self, text: str, history: Sequence[ConversationTurn], run: _ResponseRun
    ) -> ChatResult:
        run.enter(AssemblerState.REMOTE_STREAMING)
        answer = StreamedAnswer()
        turns = list(history)[-self.history_limit :] if self.history_limit > 0 else []

        chunks = self.channel.stream_answer(text, run.user.user_id, turns)
        decoded = decode_stream(chunks)
        pieces = rechunk(decoded, self.chunk_size, self.chunk_delay, self.sleep)
        try:
            async for piece in pieces:
                answer.buffer += piece
                display = strip_payload(answer.buffer)
                if len(display) > len(answer.provisional_text):
                    answer.provisional_text = display
                    await run.emit(display, [])
        except RemoteChannelError as e:
            logger.warning(f"⚠️ 원격 답변 실패 → 로컬 폴백: {str(e)}")
            run.enter(AssemblerState.LOCAL_ANSWER)
            return ChatResult(text=await run.fallback(text))
        finally:
            await pieces.aclose()
            await decoded.aclose()
            await chunks.aclose()

        run.enter(AssemblerState.FINALIZING)
        prose, payload = split_trailing_payload(answer.buffer)
        if not prose.strip():
            logger.warning("⚠️ 원격 답변 본문이 비어 있음 → 로컬 폴백")
            return ChatResult(text=await run.fallback(text))

        answer.final_text = prose.strip()
        answer.documents = await self._visible_documents(parse_documents(payload), run)
        logger.info(
            f"✅ 원격 답변 완료: {len(answer.final_text)}자, 참고 문서 {len(answer.documents)}건"
        )
        return ChatResult(text=answer.final_text, documents=answer.documents)

    @staticmethod
    async def _visible_documents(
        documents: List[SearchResult], run: _ResponseRun
    ) -> List[SearchResult]:
        """원격 참고 문서 중 사용자가 볼 수 있는 문서만 스냅샷 기준으로 다시 구성"""
        if not documents:
            return []
        index = await run.index()
        visible = {doc.id: doc for doc in index.visible_documents()}
        kept = [index.to_result(visible[d.id]) for d in documents if d.id in visible]
        if len(kept) < len(documents):
            logger.warning(
                f"⚠️ 접근 범위 밖 참고 문서 {len(documents) - len(kept)}건 제외"
            )
        return kept

    async def _safe_fallback(self, text: str, run: _ResponseRun) -> str:
        try:
            return await run.fallback(text)
        except Exception as e:
            logger.error(f"❌ 로컬 폴백도 실패: {str(e)}")
            return GENERIC_ERROR_MESSAGE
