"""
服務層

這個 package 包含不負責狀態轉換的邏輯：
- ProfileFields：部分更新欄位的組裝
- StatusService：房間狀態的唯讀查詢
"""
