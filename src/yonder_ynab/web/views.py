"""
Views for the import web service.

Views are thin: they load configuration, build the channel adapter and
hand the request over to it.
"""

import logging
from pathlib import Path

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .. import __version__
from ..config import Config, ConfigValidationError, load_config
from ..services.importer import create_importer
from ..services.notifier import format_failure, status_for_error
from ..telegram_client import TelegramClient
from .ingress import TelegramIngress, WebhookIngress

logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load importer configuration (environment overrides the YAML file)."""
    return load_config(Path(settings.YONDER_YNAB_CONFIG))


def _get_telegram_client(config: Config) -> TelegramClient:
    return TelegramClient(
        bot_token=config.telegram.bot_token or "",
        api_url=config.telegram.api_url,
        timeout=config.telegram.timeout,
    )


def _config_unavailable(error: ConfigValidationError) -> JsonResponse:
    logger.error(f"Cannot load importer configuration: {error}")
    return JsonResponse({"error": format_failure(error)}, status=status_for_error(error))


@csrf_exempt
@require_http_methods(["POST"])
def import_webhook(request: HttpRequest) -> HttpResponse:
    """POST /import?api_key=... with a Yonder CSV body."""
    try:
        config = _get_config()
        importer = create_importer(config)
    except ConfigValidationError as e:
        return _config_unavailable(e)

    adapter = WebhookIngress(config, importer)
    return adapter.handle(request)


@csrf_exempt
@require_http_methods(["POST"])
def telegram_webhook(request: HttpRequest, token: str) -> HttpResponse:
    """Telegram bot updates, POST /telegram/<webhook_secret>."""
    try:
        config = _get_config()
        importer = create_importer(config)
    except ConfigValidationError as e:
        return _config_unavailable(e)

    adapter = TelegramIngress(config, importer, _get_telegram_client(config))
    return adapter.handle(request, token=token)


@require_http_methods(["GET"])
def healthz(request: HttpRequest) -> HttpResponse:
    return JsonResponse({"status": "ok", "version": __version__})
