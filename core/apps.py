"""
App configuration for the core app.
"""

import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

SKIP_COMMANDS = {
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "test",
    "check",
    "init_credentials",
}


class CoreConfig(AppConfig):
    """Sets up tracing and metrics once the apps are loaded."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Called when Django starts."""
        if not getattr(settings, "OTEL_ENABLED", True):
            return
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_COMMANDS:
            return
        # The autoreloader parent process does not serve requests
        if os.environ.get("RUN_MAIN") == "false":
            return

        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to setup OpenTelemetry: %s", e)
