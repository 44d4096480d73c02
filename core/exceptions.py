"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理
"""


class PlanningPokerException(Exception):
    """所有 Planning Poker 異常的基類"""
    status_code = 500


# ============ 輸入驗證異常 ============

class ValidationError(PlanningPokerException):
    """必要欄位缺少或為空（例如 edit_profile 沒有任何欄位）"""
    status_code = 400


# ============ 查無資料異常 ============

class NotFoundError(PlanningPokerException):
    """操作需要的資料不存在"""
    status_code = 404


class RoomNotFound(NotFoundError):
    """房間不存在"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoundNotFound(NotFoundError):
    """回合不存在"""
    def __init__(self, round_id=None, room_id=None):
        self.round_id = round_id
        self.room_id = room_id
        if round_id is not None:
            super().__init__(f"Round {round_id} not found")
        else:
            super().__init__(f"No rounds found for room {room_id}")


class UserNotFound(NotFoundError):
    """使用者不存在"""
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


# ============ 儲存層異常 ============

class StorageError(PlanningPokerException):
    """資料庫拒絕或寫入失敗（包含 constraint violation）"""
    status_code = 500


# ============ Dispatcher 異常 ============

class UnknownOperationError(PlanningPokerException):
    """找不到對應的操作（dispatcher 層級）"""
    status_code = 404

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"Unknown endpoint: {operation}")
