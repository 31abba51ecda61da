"""
Verification log for package pickup attempts.
"""

import uuid
from django.db import models
from django.conf import settings
from django.utils import timezone


class VerificationLog(models.Model):
    """
    Immutable record of one pickup verification attempt.

    Written for every attempt, successful or not, by the delivery
    authorization service only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    package = models.ForeignKey(
        'Package',
        on_delete=models.PROTECT,
        related_name='verification_logs',
    )

    # Values exactly as entered at the counter
    suite_number = models.CharField(max_length=50)
    auth_code_entered = models.CharField(max_length=50)

    verification_success = models.BooleanField()
    failure_reason = models.TextField(null=True, blank=True)
    failure_code = models.CharField(max_length=30, null=True, blank=True)
    checks = models.JSONField(
        default=dict,
        blank=True,
        help_text="Pass/fail state of every pickup check"
    )

    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='verification_logs',
    )
    verified_by_role = models.CharField(max_length=20)

    verified_at = models.DateTimeField(default=timezone.now)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)

    class Meta:
        ordering = ['-verified_at']
        indexes = [
            models.Index(fields=['package', '-verified_at'], name='verif_package_idx'),
            models.Index(fields=['verification_success', '-verified_at'], name='verif_success_idx'),
            models.Index(fields=['verified_by', '-verified_at'], name='verif_staff_idx'),
        ]

    def __str__(self):
        outcome = "success" if self.verification_success else f"failed: {self.failure_reason}"
        return f"Verification of {self.package_id} by {self.verified_by_id} ({outcome})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Verification log entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Verification log entries cannot be deleted")
