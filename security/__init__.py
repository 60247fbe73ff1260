"""
security/ - Access Control
==========================
Decorators that guard Telegram handlers.
"""
