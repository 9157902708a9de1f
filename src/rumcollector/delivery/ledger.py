"""Local record of report deliveries."""

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class DeliveryRecord:
    """Tracks one report from dispatch to completion."""

    delivery_id: int
    report_name: str
    dispatched_at_s: float
    completed_at_s: Optional[float] = None
    status: str = "PENDING"  # SUCCESS, FAILED
    attempts: int = 0
    status_code: Optional[int] = None
    error: Optional[str] = None


class DeliveryLedger:
    """Keeps a DeliveryRecord per dispatched report for diagnostics and summaries."""

    def __init__(self) -> None:
        self.records: List[DeliveryRecord] = []

    def log_dispatch(self, report_name: str, dispatched_at: float) -> DeliveryRecord:
        record = DeliveryRecord(
            delivery_id=len(self.records) + 1,
            report_name=report_name,
            dispatched_at_s=dispatched_at,
        )
        self.records.append(record)
        return record

    def log_attempt(self, record: DeliveryRecord) -> None:
        record.attempts += 1

    def log_success(self, record: DeliveryRecord, completed_at: float, status_code: int) -> None:
        record.completed_at_s = completed_at
        record.status = "SUCCESS"
        record.status_code = status_code
        record.error = None

    def log_failure(
        self,
        record: DeliveryRecord,
        completed_at: float,
        error: str,
        status_code: Optional[int] = None,
    ) -> None:
        record.completed_at_s = completed_at
        record.status = "FAILED"
        record.status_code = status_code
        record.error = error

    def generate_summary_report(self) -> Dict[str, Any]:
        """Counts of deliveries by status and by metric name."""
        by_status = Counter(record.status for record in self.records)
        by_metric = Counter(record.report_name for record in self.records)
        total = len(self.records)

        summary = {
            "deliveries": {
                "total": total,
                "successful": by_status.get("SUCCESS", 0),
                "failed": by_status.get("FAILED", 0),
                "pending": by_status.get("PENDING", 0),
                "success_rate": by_status.get("SUCCESS", 0) / total if total else 0,
            },
            "by_metric": dict(by_metric),
        }

        logger.info(
            f"Deliveries: {total} total, {summary['deliveries']['successful']} successful, "
            f"{summary['deliveries']['failed']} failed"
        )
        return summary

    def get_deliveries_df(self) -> pd.DataFrame:
        """All delivery records as a pandas DataFrame."""
        if not self.records:
            return pd.DataFrame()
        return pd.DataFrame([asdict(record) for record in self.records])
