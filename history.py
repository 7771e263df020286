# history.py

import json
import logging
import math
import os
import tempfile
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from config import HISTORY_CAPACITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionRecord:
    location: str
    probability: float
    timestamp: str


def _parse_record(entry):
    if not isinstance(entry, dict):
        return None
    location = entry.get('location')
    probability = entry.get('probability')
    timestamp = entry.get('timestamp')
    if not isinstance(location, str) or not isinstance(timestamp, str):
        return None
    if isinstance(probability, bool) or not isinstance(probability, (int, float)):
        return None
    if not math.isfinite(probability):
        return None
    return PredictionRecord(location=location, probability=float(probability), timestamp=timestamp)


class PredictionHistory:
    """
    The most recent predictions, newest first, persisted as a JSON array.
    """

    def __init__(self, path, capacity=HISTORY_CAPACITY):
        if capacity <= 0:
            raise ValueError("History capacity must be positive")
        self.path = Path(path)
        self.capacity = capacity
        self._records = self._load()

    @property
    def records(self):
        return list(self._records)

    def __len__(self):
        return len(self._records)

    def _load(self):
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable prediction history '%s': %s", self.path, exc)
            return []
        if not isinstance(payload, list):
            logger.warning("Ignoring prediction history '%s': not a list", self.path)
            return []

        records = [record for record in map(_parse_record, payload) if record is not None]
        if len(records) != len(payload):
            logger.info("Skipped %d invalid history entries", len(payload) - len(records))
        return records[:self.capacity]

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(record) for record in self._records]

        # Same temp file + replace swap as save_artifact
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def add(self, location, probability, timestamp=None):
        """
        Record a prediction at the front, dropping the oldest beyond capacity.

        Parameters:
            location (str): Location the prediction was made for.
            probability (float): Predicted rain probability.
            timestamp (str): Defaults to the current local time.

        Returns:
            PredictionRecord: The stored record.
        """
        if timestamp is None:
            timestamp = datetime.now().isoformat(timespec='seconds')
        record = PredictionRecord(location=location, probability=float(probability), timestamp=timestamp)
        self._records.insert(0, record)
        del self._records[self.capacity:]
        self._save()
        return record

    def clear(self):
        self._records = []
        self.path.unlink(missing_ok=True)
