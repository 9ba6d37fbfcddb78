"""
SCORM run-time persistence models
"""
from django.db import models
from django.utils import timezone


class CmiHistoryEntry(models.Model):
    """One persisted CMI snapshot (sent on Commit/Terminate) of a package/session"""

    history_key = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Identity of the learner's package/session the snapshot belongs to"
    )
    timestamp = models.DateTimeField(
        default=timezone.now,
        help_text="When the snapshot was persisted"
    )
    cmi = models.JSONField(
        default=dict,
        blank=True,
        help_text="Exported cmi data model snapshot"
    )

    class Meta:
        app_label = 'scorm'
        ordering = ['timestamp', 'id']
        verbose_name = 'CMI History Entry'
        verbose_name_plural = 'CMI History Entries'
        indexes = [
            models.Index(fields=['history_key', 'timestamp'], name='scorm_history_key_time_idx'),
        ]

    def __str__(self):
        return f"{self.history_key} @ {self.timestamp.isoformat()}"

    def as_entry(self):
        """The {timestamp, cmi} shape handed to players"""
        return {
            'timestamp': self.timestamp.isoformat(),
            'cmi': self.cmi,
        }
