"""
models/ - Domain Layer
======================
Plain dataclasses and enumerations describing subscriptions, plus the error types.
"""
