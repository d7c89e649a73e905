from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.core.config import settings
from tray_assistant.core.database import get_session

from .permissions import build_user_context
from .schema import CurrentUser, UserContext

# HTTP Bearer 토큰 스키마
oauth2_scheme = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(oauth2_scheme),
) -> CurrentUser:
    """
    현재 로그인된 사용자 정보 추출 (토큰에서 바로!)

    사용법:
    - user.user_id : 사용자 ID
    - user.company_id : 회사(테넌트) ID
    - user.department_id : 소속 부서 ID
    - user.role : 권한
    """
    try:
        token = credentials.credentials

        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )

        user_id = payload.get("user_id")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={
                    "message": "토큰에 사용자 정보가 없습니다",
                    "code": "INVALID_TOKEN",
                },
            )

        return CurrentUser(
            user_id=str(user_id),
            email=payload.get("email"),
            name=payload.get("name"),
            role=payload.get("role"),
            department_id=payload.get("department_id"),
            company_id=payload.get("company_id"),
        )

    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "토큰이 만료되었습니다", "code": "TOKEN_EXPIRED"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "유효하지 않은 토큰입니다", "code": "INVALID_TOKEN"},
        )


async def get_user_context(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> UserContext:
    """질의 엔진용 사용자 범위 (접근 가능한 부서 포함)"""
    return await build_user_context(user, session)
