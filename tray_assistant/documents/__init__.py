"""
📄 문서 저장소 조회

어시스턴트가 읽는 부서 / 카테고리 / 문서 / 공유 / NFC 데이터
- 모든 조회는 회사 + 접근 가능한 부서 범위로 제한
- 쓰기 연산 없음
"""

from .repository import DocumentRepository, document_repository

__all__ = ["DocumentRepository", "document_repository"]
