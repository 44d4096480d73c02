"""
API 層

每個 endpoint 只負責：解析 request body -> 呼叫一個 core 操作 -> 序列化結果
"""
