"""
CMI snapshot history
Ordered, timestamped snapshots of one package/session, oldest first
"""
import logging
from typing import Dict, List, Optional

from .models import CmiHistoryEntry

logger = logging.getLogger(__name__)


class CmiHistoryStore:
    """
    History of persisted CMI snapshots for one history key

    Args:
        history_key: identity of the learner's package/session
    """

    def __init__(self, history_key: str):
        if not history_key:
            raise ValueError("A history key is required")
        self.history_key = str(history_key)

    def _queryset(self):
        return CmiHistoryEntry.objects.filter(history_key=self.history_key)

    def append(self, cmi: Dict, timestamp=None) -> CmiHistoryEntry:
        """Store a snapshot as the newest entry"""
        fields = {'history_key': self.history_key, 'cmi': cmi}
        if timestamp is not None:
            fields['timestamp'] = timestamp
        entry = CmiHistoryEntry.objects.create(**fields)
        logger.debug(f"Appended CMI history entry {entry.id} for {self.history_key}")
        return entry

    def last(self) -> Optional[Dict]:
        """Newest entry as {'timestamp': iso, 'cmi': dict}, or None"""
        entry = self._queryset().order_by('-timestamp', '-id').first()
        return entry.as_entry() if entry else None

    def entries(self) -> List[Dict]:
        return [entry.as_entry() for entry in self._queryset().order_by('timestamp', 'id')]

    def __len__(self):
        return self._queryset().count()
