# backend/app/__init__.py
"""
Order Notify Bridge application package.

This package contains:
- main: FastAPI application entrypoint
- discord_client: Discord gateway session
- notifications: /send-message validation, member resolution and DM delivery
"""
