"""
utils/ - Shared Helpers
=======================
Logging, input validation and display formatting.
"""
