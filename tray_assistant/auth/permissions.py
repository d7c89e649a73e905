"""
🔐 역할 기반 권한

소속 부서는 자동으로 manager 권한, 다른 부서는 user_permissions 에 따라 결정됩니다.
"""

import logging
from typing import Dict, FrozenSet, Set, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.documents.repository import DocumentRepository, document_repository

from .schema import CurrentUser, UserContext

logger = logging.getLogger(__name__)

ROLE_PERMISSIONS: Dict[str, Tuple[str, ...]] = {
    "none": (),
    "viewer": ("read", "download", "print"),
    "editor": ("read", "download", "print", "write", "upload"),
    "manager": ("read", "download", "print", "write", "upload", "delete", "share"),
}


def has_permission(role: str, action: str) -> bool:
    return action in ROLE_PERMISSIONS.get(role, ())


async def resolve_accessible_department_ids(
    user: CurrentUser,
    session: AsyncSession,
    repository: DocumentRepository = document_repository,
) -> FrozenSet[str]:
    """
    사용자가 읽을 수 있는 부서 ID 집합 계산

    - 소속 부서: 항상 포함
    - 회사 관리자(admin): 회사의 모든 부서
    - 그 외: role 이 none 이 아닌 user_permissions 부서
    """
    if not user.company_id:
        return frozenset()

    department_ids: Set[str] = set()
    if user.department_id:
        department_ids.add(user.department_id)

    if user.is_admin:
        department_ids.update(
            await repository.get_company_department_ids(user.company_id, session)
        )
    else:
        permissions = await repository.get_user_permissions(
            user.user_id, user.company_id, session
        )
        department_ids.update(
            p.department_id for p in permissions if has_permission(p.role, "read")
        )

    logger.debug(f"🔐 접근 가능 부서 {len(department_ids)}개: user={user.user_id}")
    return frozenset(department_ids)


async def build_user_context(
    user: CurrentUser,
    session: AsyncSession,
    repository: DocumentRepository = document_repository,
) -> UserContext:
    return UserContext(
        user_id=user.user_id,
        company_id=user.company_id,
        department_id=user.department_id,
        role=user.role,
        accessible_department_ids=await resolve_accessible_department_ids(
            user, session, repository
        ),
    )
