"""
Package: delivery
Description: Notification delivery mechanisms.

Provides push delivery to the Telegram Bot API, the retry loop for
transient delivery failures, and the EventLogger dispatcher that
fans a notification out to every configured provider.
"""
