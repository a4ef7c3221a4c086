"""In-memory store of analyzed resumes, one flat record per upload."""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List

from analyzer import AnalysisOutcome, AnalysisResult, ParsedDocument

logger = logging.getLogger(__name__)


class RecordNotFoundError(KeyError):
    """Raised when a resume id is not in the store."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResumeRecord:
    id: str
    file_name: str
    original_text: str
    parsed_data: ParsedDocument
    analysis: AnalysisResult
    uploaded_at: datetime
    last_analyzed: datetime

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "file_name": self.file_name,
            "original_text": self.original_text,
            "parsed_data": self.parsed_data.to_dict(),
            "analysis": self.analysis.to_dict(),
            "uploaded_at": self.uploaded_at.isoformat(),
            "last_analyzed": self.last_analyzed.isoformat(),
        }


class ResumeStore:
    def __init__(self):
        self._records: Dict[str, ResumeRecord] = {}
        self._lock = threading.Lock()

    def add(self, file_name: str, original_text: str, outcome: AnalysisOutcome) -> ResumeRecord:
        now = _utcnow()
        record = ResumeRecord(
            id=uuid.uuid4().hex,
            file_name=file_name,
            original_text=original_text,
            parsed_data=outcome.parsed_data,
            analysis=outcome.analysis,
            uploaded_at=now,
            last_analyzed=now,
        )
        with self._lock:
            self._records[record.id] = record
        logger.info("Stored resume %s (%s)", record.id, file_name)
        return record

    def get(self, record_id: str) -> ResumeRecord:
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def list(self) -> List[ResumeRecord]:
        """All records, newest upload first."""
        with self._lock:
            records = list(self._records.values())
        # ties keep reverse insertion order
        return sorted(reversed(records), key=lambda record: record.uploaded_at, reverse=True)

    def delete(self, record_id: str) -> ResumeRecord:
        with self._lock:
            record = self._records.pop(record_id, None)
        if record is None:
            raise RecordNotFoundError(record_id)
        logger.info("Deleted resume %s", record_id)
        return record

    def replace_analysis(self, record_id: str, outcome: AnalysisOutcome) -> ResumeRecord:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise RecordNotFoundError(record_id)
            record.parsed_data = outcome.parsed_data
            record.analysis = outcome.analysis
            record.last_analyzed = _utcnow()
        return record

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
