import logging

from tray_assistant.core.config import settings

LOGGER_NAME = "tray_assistant"


def setup_logging() -> logging.Logger:
    """
    패키지 로거 설정

    콘솔 핸들러 하나만 붙이고, 모듈별 로거(logging.getLogger(__name__))는
    전파(propagate)로 이 핸들러를 사용합니다.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # 여러 번 호출되어도 핸들러가 중복되지 않도록 정리
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.setLevel(settings.LOG_LEVEL.upper())

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    logger.propagate = False

    logger.info(f"✅ 로깅 설정 완료 (레벨: {settings.LOG_LEVEL.upper()})")
    return logger
