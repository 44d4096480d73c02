"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- Manager：管理 Room / Round / Vote / 成員的生命週期
- Locks：並發控制工具
- Exceptions：所有業務邏輯異常
"""
