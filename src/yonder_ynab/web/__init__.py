"""
Django web service.

Endpoints:
- POST /import: authenticated CSV webhook
- POST /telegram/<secret>: Telegram bot webhook
- GET /healthz
"""
