"""
🤖 AI 어시스턴트 채팅

- dates / intent: 날짜 표현 해석, 질문 의도 분류
- reports / fallback: 원격 호출 없는 로컬 답변
- streaming / service: 원격 스트리밍 답변 조립
"""
