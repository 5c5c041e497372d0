"""Row flattening and JSON export shared by every export format.

Exports always receive the filtered, unpaginated collection.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from pydantic import BaseModel

from cottontrace.models import Batch, ComplianceBatch, IsotopeRecord, VerificationRequest


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def batch_row(batch: Batch) -> dict[str, Any]:
    return {
        "Batch ID": batch.id,
        "Farm": batch.farm_name,
        "Harvest Date": _date(batch.harvest_date),
        "Region": batch.location.region,
        "Country": batch.location.country,
        "Quantity (kg)": batch.quantity,
        "Grade": batch.quality.grade,
        "Certifications": ", ".join(batch.certification_types),
        "Compliance": batch.compliance_status.forced_labor_verification.status,
        "Sustainability Score": batch.sustainability_score,
        "Custodian": batch.current_custodian,
    }


def compliance_row(record: ComplianceBatch) -> dict[str, Any]:
    return {
        "Batch ID": record.batch_id,
        "Origin": f"{record.origin.location}, {record.origin.country}",
        "Processing Date": _date(record.processing_date),
        "Sustainability Score": record.sustainability_score,
        "Certification Status": record.certification_status,
        "Grade": record.quality_parameters.grade,
        "Action Status": record.action_status.value,
        "Last Updated": _date(record.last_updated),
        "Updated By": record.updated_by,
        "Pending Issues": "; ".join(record.pending_issues or []),
    }


def isotope_row(record: IsotopeRecord) -> dict[str, Any]:
    return {
        "Batch ID": record.batch_id,
        "Farm": record.farm_name,
        "Region": record.location.region,
        "Test Date": _date(record.test_date),
        "δ13C": round(record.isotopes.carbon, 2),
        "δ15N": round(record.isotopes.nitrogen, 2),
        "δ18O": round(record.isotopes.oxygen, 2),
        "δ2H": round(record.isotopes.hydrogen, 2),
        "Verification": record.verification_status,
        "Confidence": record.confidence_score,
        "Facility": record.testing_facility,
    }


def verification_row(request: VerificationRequest) -> dict[str, Any]:
    return {
        "Request ID": request.id,
        "Company": request.company_name,
        "Document Type": request.document_type,
        "Status": request.status.value,
        "Priority": request.priority.value,
        "Auditor": request.assigned_auditor,
        "Submitted": _date(request.submission_date),
        "Days in Queue": request.time_in_queue,
    }


ROW_BUILDERS = {
    Batch: batch_row,
    ComplianceBatch: compliance_row,
    IsotopeRecord: isotope_row,
    VerificationRequest: verification_row,
}


def to_rows(records: Sequence[BaseModel]) -> list[dict[str, Any]]:
    """Flatten records to display rows using the builder for their type."""
    if not records:
        return []
    builder = ROW_BUILDERS[type(records[0])]
    return [builder(record) for record in records]


def export_json(
    records: Sequence[BaseModel],
    filters: BaseModel | None = None,
    exported_at: datetime | None = None,
) -> str:
    """Serialise the full filtered collection with the filters that produced it."""
    payload = {
        "exported_at": (exported_at or datetime.now(timezone.utc)).isoformat(),
        "filters": filters.model_dump(mode="json", exclude_none=True) if filters else {},
        "count": len(records),
        "records": [record.model_dump(mode="json") for record in records],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
