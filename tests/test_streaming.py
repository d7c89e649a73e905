"""
스트리밍 단계 테스트 (가짜 바이트 소스 사용)
"""

import json
import logging

import pytest

from conftest import agen, collect
from tray_assistant.chat.streaming import (
    DOCS_DELIMITER,
    decode_stream,
    parse_documents,
    rechunk,
    split_trailing_payload,
    strip_payload,
)


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestDecodeStream:
    @pytest.mark.asyncio
    async def test_multibyte_characters_split_across_chunks(self):
        raw = "안녕하세요".encode("utf-8")
        chunks = [raw[:1], raw[1:4], raw[4:8], raw[8:]]
        decoded = await collect(decode_stream(agen(chunks)))
        assert "".join(decoded) == "안녕하세요"
        assert all(decoded)

    @pytest.mark.asyncio
    async def test_truncated_tail_becomes_replacement_character(self):
        decoded = await collect(decode_stream(agen([b"ok", "가".encode("utf-8")[:2]])))
        assert "".join(decoded) == "ok�"


class TestRechunk:
    @pytest.mark.asyncio
    async def test_groups_of_five_with_pacing(self):
        sleep = SleepRecorder()
        pieces = await collect(rechunk(agen(["abcdefghijkl"]), 5, 0.03, sleep))
        assert pieces == ["abcde", "fghij", "kl"]
        assert sleep.delays == [0.03, 0.03, 0.03]

    @pytest.mark.asyncio
    async def test_zero_delay_disables_pacing(self):
        sleep = SleepRecorder()
        pieces = await collect(rechunk(agen(["안녕하세요 반가워요"]), 5, 0, sleep))
        assert "".join(pieces) == "안녕하세요 반가워요"
        assert sleep.delays == []


class TestStripPayload:
    @pytest.mark.parametrize(
        "buffer, expected",
        [
            ("hello", "hello"),
            ("hello\n---DOCS---\n[{", "hello"),
            ("hello\n---DO", "hello"),
            ("hello\n", "hello"),
            ("hello\nworld", "hello\nworld"),
        ],
    )
    def test_hides_payload_and_partial_delimiter(self, buffer, expected):
        assert strip_payload(buffer) == expected

    def test_displayed_prose_only_grows(self):
        body = "첫 줄\n둘째 줄\n---DOCS---\n[]"
        shown = [strip_payload(body[:end]) for end in range(len(body) + 1)]
        for before, after in zip(shown, shown[1:]):
            assert after.startswith(before)
        assert shown[-1] == "첫 줄\n둘째 줄"


class TestSplitTrailingPayload:
    def test_round_trip_single_document(self):
        body = "hello" + DOCS_DELIMITER + json.dumps([{"id": "1", "title": "급여 명세서"}])
        prose, payload = split_trailing_payload(body)
        assert prose == "hello"
        documents = parse_documents(payload)
        assert [d.id for d in documents] == ["1"]
        assert documents[0].title == "급여 명세서"

    def test_without_delimiter(self):
        assert split_trailing_payload("hello") == ("hello", None)

    def test_splits_at_first_delimiter_only(self):
        body = "a" + DOCS_DELIMITER + "b" + DOCS_DELIMITER + "c"
        prose, payload = split_trailing_payload(body)
        assert prose == "a"
        assert payload == "b" + DOCS_DELIMITER + "c"


class TestParseDocuments:
    def test_camel_case_keys_and_unknown_keys(self):
        payload = json.dumps(
            [
                {
                    "id": 7,
                    "title": "계약서",
                    "categoryName": "계약",
                    "departmentName": "법무팀",
                    "storageLocation": None,
                    "score": 0.9,
                }
            ]
        )
        document = parse_documents(payload)[0]
        assert document.id == "7"
        assert document.category_name == "계약"
        assert document.department_name == "법무팀"

    def test_code_fence_is_ignored(self):
        payload = '```json\n[{"id": "1", "title": "t"}]\n```'
        assert [d.id for d in parse_documents(payload)] == ["1"]

    @pytest.mark.parametrize("payload", [None, "", "   "])
    def test_empty_payload(self, payload):
        assert parse_documents(payload) == []

    def test_malformed_payload_is_logged_not_raised(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_documents("[{not json") == []
        assert "파싱 실패" in caplog.text

    def test_missing_title_drops_list(self):
        assert parse_documents('[{"id": "1"}]') == []
