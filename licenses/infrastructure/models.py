"""
License and NotificationDeadLetter models.
"""
from django.db import models


class License(models.Model):
    """
    An issued license.

    Identified by (customer_name, system_id); system_id is also unique
    on its own and indexed for activation lookups.
    """

    STATE_CHOICES = [
        (0, "Inactive"),
        (1, "Active"),
    ]

    customer_name = models.CharField(max_length=255, db_index=True)
    system_id = models.CharField(max_length=100, unique=True)
    site_name = models.CharField(max_length=255)
    device_count = models.PositiveIntegerField()
    validity = models.PositiveIntegerField(help_text="Validity in months from activation")
    email = models.EmailField()
    password = models.CharField(max_length=128, help_text="One-time activation password")
    generated_date = models.DateField()
    activated_date = models.DateField(null=True, blank=True)
    state = models.PositiveSmallIntegerField(choices=STATE_CHOICES, default=0, db_index=True)
    description = models.TextField(blank=True, default="")
    file_url = models.CharField(max_length=500, blank=True, default="")
    fe_mac = models.CharField(max_length=64, blank=True, default="")
    be_mac = models.CharField(max_length=64, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer_name", "system_id"], name="unique_customer_system_id"
            ),
        ]

    def __str__(self):
        return f"{self.customer_name} - {self.system_id}"


class NotificationDeadLetter(models.Model):
    """
    Credential notification that exhausted its retries.

    The password is never stored here; the operator re-sends by updating
    the license, which rotates it.
    """

    REASON_CHOICES = [
        ("created", "Created"),
        ("updated", "Updated"),
    ]

    customer_name = models.CharField(max_length=255)
    system_id = models.CharField(max_length=100, db_index=True)
    recipient = models.EmailField()
    reason = models.CharField(max_length=20, choices=REASON_CHOICES)
    error = models.TextField()
    attempts = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "notification_dead_letters"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.reason} - {self.system_id} -> {self.recipient}"
