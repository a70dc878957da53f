"""
StoredSecret model.
"""
from django.db import models


class StoredSecret(models.Model):
    """A named JSON secret, such as the operator credential set."""

    name = models.CharField(max_length=255, unique=True)
    value = models.JSONField(default=dict)
    description = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "stored_secrets"
        ordering = ["name"]

    def __str__(self):
        return self.name
