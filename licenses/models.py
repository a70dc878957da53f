"""
Model registration for the licenses app.
"""
from licenses.infrastructure.models import License, NotificationDeadLetter  # noqa: F401
