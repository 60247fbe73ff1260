"""
services/ - Business Logic Layer
================================
Subscription lifecycle, spending aggregation, reminders and charts.
Services talk to repositories and never to Telegram handlers.
"""
