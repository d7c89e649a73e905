import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env 파일 로드
load_dotenv()


class Settings(BaseSettings):
    # 기본 API 설정
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "TrayStorage Assistant API"
    PROJECT_DESCRIPTION: str = "TrayStorage 문서 관리 AI 어시스턴트(트로이) API"
    PROJECT_VERSION: str = "0.1.0"

    # CORS 설정
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # web development
        "https://app.traystorage.net",  # web production
    ]

    # 로깅 설정
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # 데이터베이스 설정
    DATABASE_HOST: str = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT: str = os.getenv("DATABASE_PORT", "5432")
    DATABASE_USER: str = os.getenv("DATABASE_USER", "")
    DATABASE_PASSWORD: str = os.getenv("DATABASE_PASSWORD", "")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "traystorage")
    DATABASE_INIT_ON_STARTUP: bool = True

    # JWT 설정
    JWT_SECRET_KEY: str = os.getenv(
        "JWT_SECRET_KEY", "your-super-secret-key-for-development-only"
    )
    JWT_ALGORITHM: str = "HS256"

    # AI 채팅(원격 생성 채널) 설정
    AI_CHAT_URL: str = os.getenv("AI_CHAT_URL", "")
    AI_CHAT_API_KEY: str = os.getenv("AI_CHAT_API_KEY", "")
    AI_CHAT_TIMEOUT: float = 60.0  # 초
    CHAT_HISTORY_LIMIT: int = 10

    # 스트리밍 표시 설정 (타이핑 효과)
    STREAM_CHUNK_SIZE: int = 5
    STREAM_CHUNK_DELAY_MS: int = 30

    # 로컬 응답 설정
    DATE_SEARCH_DISPLAY_LIMIT: int = 10
    KEYWORD_RESULT_LIMIT: int = 5
    EXPIRY_SOON_DAYS: int = 7
    EXPIRY_LATER_DAYS: int = 30

    # 날짜 계산 기준 시간대
    TIMEZONE: str = "Asia/Seoul"

    @property
    def DATABASE_URL(self) -> str:
        """DATABASE_URL 환경변수가 있으면 사용, 없으면 개별 환경변수로 생성"""
        env_database_url = os.getenv("DATABASE_URL")
        if env_database_url:
            return env_database_url

        # 개별 환경변수로 DATABASE_URL 생성
        return f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    @property
    def STREAM_CHUNK_DELAY(self) -> float:
        """글자 묶음 사이 지연 시간 (초)"""
        return self.STREAM_CHUNK_DELAY_MS / 1000

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",  # 정의되지 않은 환경변수 무시
    )


settings = Settings()
