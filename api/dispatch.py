"""
未知操作的 fallback

必須在所有其他 router 之後註冊
"""
from fastapi import APIRouter

from core.exceptions import UnknownOperationError

router = APIRouter(tags=["dispatch"])


@router.post("/{operation}")
def unknown_operation(operation: str):
    raise UnknownOperationError(f"/{operation}")
