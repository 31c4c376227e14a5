"""
Django application initialization.
"""

import os

SETTINGS_MODULE = "yonder_ynab.web.settings"


def get_wsgi_application(config_path: str | None = None):
    """
    Get the Django WSGI application configured with our settings.

    Args:
        config_path: Path to config.yaml (optional)
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)

    # Note: os.environ requires strings, so convert Path objects
    if config_path:
        os.environ["YONDER_YNAB_CONFIG"] = str(config_path)

    from django.core.wsgi import get_wsgi_application as django_wsgi

    return django_wsgi()


def run_server(host: str = "127.0.0.1", port: int = 8080, config_path: str | None = None):
    """
    Run the Django development server.

    Args:
        host: Host to bind to
        port: Port to listen on
        config_path: Path to config.yaml
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)
    if config_path:
        os.environ["YONDER_YNAB_CONFIG"] = str(config_path)

    import django

    django.setup()

    from django.core.management import execute_from_command_line

    print(f"\n🌐 Starting import service at http://{host}:{port}/")
    print(f"   Webhook:  POST http://{host}:{port}/import?api_key=...")
    print(f"   Telegram: POST http://{host}:{port}/telegram/<webhook_secret>")
    print("\nPress Ctrl+C to stop.\n")

    execute_from_command_line(
        [
            "manage.py",
            "runserver",
            f"{host}:{port}",
            "--noreload",
        ]
    )
