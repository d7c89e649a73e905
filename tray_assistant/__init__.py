"""
🗂️ TrayStorage 어시스턴트(트로이)

문서 저장소 질문에 대한 의도 분류, 날짜 해석, 로컬 검색,
원격 스트리밍 답변 조립을 담당하는 서비스
"""
