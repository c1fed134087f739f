"""CSV export of per-subscriber CDR reports."""

import csv
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from app.core.exceptions import ReportExportError
from app.models.schemas import CallRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedReport:
    uuid: str
    path: Path
    records: int


class CsvReportExporter:
    """Writes CDRs to <output_dir>/<msisdn>_<uuid>.csv.

    Each row is call_type,phone_one,phone_two,start_time,end_time with
    the two-character call type code and ISO timestamps.
    """

    def __init__(self, output_dir: str | Path):
        self._output_dir = Path(output_dir)

    def export(self, msisdn: str, records: Sequence[CallRecord]) -> ExportedReport:
        report_id = str(uuid.uuid4())
        path = self._output_dir / f"{msisdn}_{report_id}.csv"
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f)
                for record in records:
                    writer.writerow([
                        record.call_type.value,
                        record.phone_one,
                        record.phone_two,
                        record.start_time.isoformat(),
                        record.end_time.isoformat(),
                    ])
        except OSError as e:
            raise ReportExportError(path=str(path), original_error=e) from e

        logger.info(f"Wrote {len(records)} CDRs for {msisdn} to {path}")
        return ExportedReport(uuid=report_id, path=path, records=len(records))
