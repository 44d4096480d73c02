"""
個人資料欄位服務：把可選欄位轉成明確的 (欄位, 值) 列表

純計算邏輯，不涉及資料庫
"""
from typing import Any, List, Tuple

from models import Role

# 輸入欄位名稱 -> users 表欄位名稱
PROFILE_COLUMNS = {
    "role": "role",
    "user_name": "username",
    "avatar_url": "avatar_url",
}


def build_profile_changes(**fields: Any) -> List[Tuple[str, Any]]:
    """
    只保留有提供的欄位（值不是 None）

    參數：
        role / user_name / avatar_url：可選

    返回：
        [(column, value), ...]，順序固定為 role、username、avatar_url

    異常：
        TypeError: 出現不認識的欄位名稱

    範例：
        build_profile_changes(user_name="Bob") -> [("username", "Bob")]
        build_profile_changes(role=2, avatar_url=None) -> [("role", 2)]
        build_profile_changes() -> []
    """
    unknown = set(fields) - set(PROFILE_COLUMNS)
    if unknown:
        raise TypeError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")

    changes = []
    for name, column in PROFILE_COLUMNS.items():
        value = fields.get(name)
        if value is None:
            continue
        if name == "role":
            value = int(Role(value))
        changes.append((column, value))
    return changes


def touches_role(changes: List[Tuple[str, Any]]) -> bool:
    """變更是否包含角色（包含時需要刪除該使用者的投票）"""
    return any(column == "role" for column, _ in changes)
