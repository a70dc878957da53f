"""
Model registration for the accounts app.
"""
from accounts.infrastructure.models import StoredSecret  # noqa: F401
