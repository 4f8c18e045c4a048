"""
Audit trail for validation calls.

Records carry a SHA256 of the submitted content, never the content itself.
Writes are dispatched off the request path and failures are only logged.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from content_compliance.services.formatter import serialize_result
from content_compliance.services.types import ValidationRequest, ValidationResult
from content_compliance.utils.checksum import content_hash

from .supabase import SupabaseRestClient

logger = logging.getLogger("content_compliance.audit")


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Append-only entry describing one validation."""

    content_hash: str
    domain: str
    content_type: str
    specialty: str
    target_audience: str
    platform: str
    result: Dict[str, Any]
    rule_set_version: Optional[str]
    timestamp: str
    actor_id: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_compliant"] = self.result.get("isCompliant")
        row["overall_score"] = self.result.get("overallScore")
        row["requires_review"] = self.result.get("requiresReview")
        row["violation_count"] = len(self.result.get("violations", []))
        row["warning_count"] = len(self.result.get("warnings", []))
        return row


def _enum_value(value: Any) -> str:
    return str(getattr(value, "value", value))


def build_audit_record(
    request: ValidationRequest,
    result: ValidationResult,
    *,
    domain: str,
    timestamp: Optional[datetime] = None,
) -> AuditRecord:
    moment = timestamp or datetime.now(timezone.utc)
    return AuditRecord(
        content_hash=content_hash(request.content),
        domain=domain,
        content_type=_enum_value(request.content_type),
        specialty=_enum_value(request.specialty),
        target_audience=_enum_value(request.target_audience),
        platform=_enum_value(request.platform),
        result=serialize_result(result),
        rule_set_version=result.rule_set_version,
        timestamp=moment.isoformat().replace("+00:00", "Z"),
        actor_id=request.actor_id,
    )


class AuditSink(Protocol):
    """Storage collaborator receiving audit records."""

    def record(self, record: AuditRecord) -> None:
        ...


class JsonlAuditSink:
    """Append-only JSONL file of audit records."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def record(self, record: AuditRecord) -> None:
        line = json.dumps(record.to_row(), ensure_ascii=False)
        with self._lock, self.path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")


class SupabaseAuditSink:
    """Insert audit rows into the hosted audit table."""

    def __init__(self, client: SupabaseRestClient, table: Optional[str] = None):
        self.client = client
        self.table = table or client.settings.audit_table

    def record(self, record: AuditRecord) -> None:
        self.client.insert(self.table, record.to_row())


class MemoryAuditSink:
    """Keeps records in memory; handy for tests and local demos."""

    def __init__(self) -> None:
        self.records: List[AuditRecord] = []

    def record(self, record: AuditRecord) -> None:
        self.records.append(record)


class AuditDispatcher:
    """Fire-and-forget delivery of audit records to a sink."""

    def __init__(self, sink: AuditSink, *, max_workers: int = 1):
        self.sink = sink
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="compliance-audit")
        self._pending: List[Future] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, record: AuditRecord) -> None:
        try:
            future = self._executor.submit(self._deliver, record)
        except RuntimeError:
            logger.error("Audit dispatcher is closed; record dropped", extra={"content_hash": record.content_hash})
            return
        with self._lock:
            self._pending = [pending for pending in self._pending if not pending.done()]
            self._pending.append(future)

    def _deliver(self, record: AuditRecord) -> None:
        try:
            self.sink.record(record)
        except Exception:
            logger.exception(
                "Audit write failed",
                extra={"content_hash": record.content_hash, "audit_domain": record.domain},
            )

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every submitted record has been handled."""
        with self._lock:
            pending = list(self._pending)
        for future in pending:
            future.result(timeout=timeout)

    def close(self) -> None:
        self._closed = True
        self._executor.shutdown(wait=True)


__all__ = [
    "AuditRecord",
    "AuditSink",
    "AuditDispatcher",
    "JsonlAuditSink",
    "MemoryAuditSink",
    "SupabaseAuditSink",
    "build_audit_record",
]
