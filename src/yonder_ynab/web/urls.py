"""
URL configuration for the import web service.
"""

from django.urls import path

from . import views

urlpatterns = [
    # iOS Shortcut / generic HTTP import
    path("import", views.import_webhook, name="import"),
    # Telegram bot webhook (token is the shared path secret)
    path("telegram/<str:token>", views.telegram_webhook, name="telegram"),
    path("healthz", views.healthz, name="healthz"),
]
