"""
WSGI entry point for production servers, e.g.

    gunicorn yonder_ynab.web.wsgi:application
"""

from .app import get_wsgi_application

application = get_wsgi_application()
