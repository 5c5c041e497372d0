"""CottonTrace Pydantic models for type-safe record validation.

Records are frozen: stores own the collections, views only read them, and
updates produce new instances via ``model_copy``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

# Fixed ordinal grade set. Sorting by grade is still lexicographic on the label.
QUALITY_GRADES: tuple[str, ...] = ("A", "A-", "B+", "B", "B-", "C+", "C")

VerificationState = Literal["verified", "pending", "failed"]
RegionalState = Literal["compliant", "non-compliant", "pending"]


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CertificationStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class CertificationType(str, Enum):
    ORGANIC = "organic"
    SUSTAINABLE = "sustainable"
    FAIR_TRADE = "fair-trade"
    LABOR_COMPLIANT = "labor-compliant"
    OTHER = "other"


class ActionStatus(str, Enum):
    """Compliance approve/hold decision."""

    APPROVED = "approved"
    HOLD = "hold"


class RequestStatus(str, Enum):
    PENDING = "Pending"
    IN_REVIEW = "In Review"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class RequestPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class _Record(BaseModel):
    """Base for all stored records: immutable, UTC-normalised timestamps."""

    class Config:
        frozen = True

    @field_validator("*", mode="after")
    @classmethod
    def _normalise_datetimes(cls, v):
        if isinstance(v, datetime):
            return _ensure_utc(v)
        return v


class GeoPoint(_Record):
    latitude: float
    longitude: float


class GeoLocation(_Record):
    latitude: float
    longitude: float
    elevation: float | None = None
    region: str
    country: str


class QualityMetrics(_Record):
    grade: str
    fiber_length: float
    strength: float
    micronaire: float
    color: str
    trash_content: float

    @field_validator("grade")
    @classmethod
    def validate_grade(cls, v: str) -> str:
        if v not in QUALITY_GRADES:
            raise ValueError(f"grade must be one of {', '.join(QUALITY_GRADES)}")
        return v


class Certification(_Record):
    id: str
    name: str
    issuer: str
    issue_date: datetime
    expiry_date: datetime
    status: CertificationStatus
    type: CertificationType
    document_url: str | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> Certification:
        if self.issue_date > self.expiry_date:
            raise ValueError("certification issue_date must not be after expiry_date")
        return self

    def effective_status(self, now: datetime | None = None) -> CertificationStatus:
        """Status as of ``now``: an active certification past expiry reads as expired."""
        now = _ensure_utc(now or datetime.now(timezone.utc))
        if self.status == CertificationStatus.ACTIVE and self.expiry_date < now:
            return CertificationStatus.EXPIRED
        return self.status

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "CERT-001",
                "name": "Organic Cotton Certification",
                "issuer": "Global Organic Textile Standard",
                "issue_date": "2024-11-15T00:00:00Z",
                "expiry_date": "2026-11-15T00:00:00Z",
                "status": "active",
                "type": "organic",
                "document_url": "https://example.com/certificates/CERT-001.pdf",
            }
        }


class IsotopeMarking(_Record):
    id: str
    marking_date: datetime
    marking_type: str
    verification_status: VerificationState
    last_verification_date: datetime | None = None


class BaleData(_Record):
    bale_no: str
    weight: float
    micronaire: float
    strength: float
    length: float


class FieldArea(_Record):
    value: float
    unit: str = "acres"


class EquipmentData(_Record):
    """Harvester provenance captured at module build time."""

    client_name: str
    farm_name: str
    field_name: str
    harvester_id: str
    harvester_model: str
    operator_id: str
    operator_name: str
    cotton_variety: str
    location: GeoPoint
    gmt_date_time: datetime
    field_area: FieldArea
    module_id: str
    bales: list[BaleData] = Field(default_factory=list)


class GinProductionDetails(_Record):
    fiber_bale_production_date: datetime
    fiber_bale_id: str
    bale_weight: float
    module_weight: float
    field_total_cotton: int


class GinQualityMetrics(_Record):
    moisture_content: float
    trash_content: float
    usda_classification: str
    usda_sort_category: str


class GinData(_Record):
    gin_id: str
    facility_name: str
    entry_date: datetime
    exit_date: datetime
    production_details: GinProductionDetails
    quality_metrics: GinQualityMetrics
    comments: str | None = None
    moisture_percentage: float


class ForcedLaborVerification(_Record):
    status: VerificationState
    verification_date: datetime | None = None
    verifier: str | None = None
    documents: list[str] = Field(default_factory=list)


class OrganicStatus(_Record):
    status: VerificationState
    certification_id: str | None = None


class RegionalCompliance(_Record):
    region: str
    status: RegionalState
    requirements: list[str] = Field(default_factory=list)


class ComplianceStatus(_Record):
    forced_labor_verification: ForcedLaborVerification
    organic_status: OrganicStatus
    regional_compliance: list[RegionalCompliance] = Field(default_factory=list)


class CustodyEvent(_Record):
    timestamp: datetime
    from_entity: str
    to_entity: str
    location: GeoLocation
    verification_method: str
    transport_method: str | None = None
    documents: list[str] | None = None
    blockchain_transaction_id: str | None = None


class Batch(_Record):
    """A traceable cotton module with provenance, quality and custody metadata."""

    id: str
    harvest_id: str
    farmer_id: str
    farm_name: str
    harvest_date: datetime
    location: GeoLocation
    field_boundaries: list[GeoPoint] = Field(default_factory=list)
    quantity: float
    quality: QualityMetrics
    certifications: list[Certification] = Field(default_factory=list)
    blockchain_token_id: str | None = None
    isotope_marking: IsotopeMarking | None = None
    equipment_data: EquipmentData
    gin_data: GinData
    compliance_status: ComplianceStatus
    current_custodian: str
    custody_chain: list[CustodyEvent] = Field(default_factory=list)
    sustainability_score: int

    @field_validator("sustainability_score")
    @classmethod
    def validate_sustainability_score(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("sustainability_score must be between 0 and 100")
        return v

    @model_validator(mode="after")
    def validate_custody_order(self) -> Batch:
        for previous, event in zip(self.custody_chain, self.custody_chain[1:]):
            if event.timestamp < previous.timestamp:
                raise ValueError(
                    "custody_chain must be chronologically non-decreasing "
                    f"({event.timestamp.isoformat()} precedes {previous.timestamp.isoformat()})"
                )
        return self

    @property
    def certification_types(self) -> list[str]:
        return [cert.type.value for cert in self.certifications]


class StatusHistoryEntry(_Record):
    timestamp: datetime
    status: ActionStatus
    updated_by: str
    note: str | None = None


class ComplianceOrigin(_Record):
    location: str
    country: str
    coordinates: tuple[float, float]


class ComplianceBatch(_Record):
    """Compliance dashboard view of a Batch with its approve/hold history."""

    id: str
    batch_id: str
    origin: ComplianceOrigin
    processing_date: datetime
    sustainability_score: int
    certification_status: VerificationState
    quality_parameters: QualityMetrics
    compliance_notes: str
    action_status: ActionStatus
    last_updated: datetime
    updated_by: str
    status_history: list[StatusHistoryEntry]
    pending_issues: list[str] | None = None

    @model_validator(mode="after")
    def validate_history_head(self) -> ComplianceBatch:
        if not self.status_history:
            raise ValueError("status_history must contain at least one entry")
        if self.action_status != self.status_history[0].status:
            raise ValueError("action_status must equal the newest status_history entry")
        return self

    def with_status(
        self, status: ActionStatus, updated_by: str, note: str | None, at: datetime
    ) -> ComplianceBatch:
        """Return a copy with a new head history entry; prior entries are untouched."""
        entry = StatusHistoryEntry(
            timestamp=at, status=status, updated_by=updated_by, note=note or None
        )
        return self.model_copy(
            update={
                "action_status": status,
                "last_updated": entry.timestamp,
                "updated_by": updated_by,
                "status_history": [entry, *self.status_history],
                "pending_issues": None
                if status == ActionStatus.APPROVED
                else self.pending_issues,
            }
        )


class VerificationRequest(_Record):
    id: str
    submission_date: datetime
    company_name: str
    document_type: str
    status: RequestStatus
    priority: RequestPriority
    assigned_auditor: str
    time_in_queue: int  # days

    @staticmethod
    def days_in_queue(submission_date: datetime, now: datetime | None = None) -> int:
        now = _ensure_utc(now or datetime.now(timezone.utc))
        return max(0, (now - _ensure_utc(submission_date)).days)


class ReferenceRange(_Record):
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class IsotopeValues(_Record):
    carbon: float  # δ13C ‰
    nitrogen: float  # δ15N ‰
    oxygen: float  # δ18O ‰
    hydrogen: float  # δ2H ‰


class IsotopeReferences(_Record):
    carbon: ReferenceRange
    nitrogen: ReferenceRange
    oxygen: ReferenceRange
    hydrogen: ReferenceRange


class IsotopeRecord(_Record):
    """IRMS analysis result used to verify a batch's declared origin."""

    id: str
    batch_id: str
    farm_name: str
    harvest_date: datetime
    location: GeoLocation
    isotopes: IsotopeValues
    reference_values: IsotopeReferences
    verification_status: VerificationState
    confidence_score: float
    testing_facility: str
    test_date: datetime
    last_updated: datetime

    @field_validator("confidence_score")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError("confidence_score must be between 0 and 100")
        return v

    def out_of_range_isotopes(self) -> list[str]:
        """Names of isotope ratios outside their reference range."""
        return [
            name
            for name in ("carbon", "nitrogen", "oxygen", "hydrogen")
            if not getattr(self.reference_values, name).contains(
                getattr(self.isotopes, name)
            )
        ]


class Alert(_Record):
    id: str
    type: Literal["compliance", "quality", "custody", "certification"]
    severity: Literal["low", "medium", "high"]
    message: str
    timestamp: datetime
    batch_id: str | None = None
    resolved: bool = False


class ReportType(str, Enum):
    COMPLIANCE = "compliance"
    SUSTAINABILITY = "sustainability"
    TRACEABILITY = "traceability"
    CUSTOM = "custom"


class ReportFormat(str, Enum):
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"


class ReportState(str, Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class Report(_Record):
    """A saved batch report: the filters it was run with and its output format.

    ``filters`` holds BatchFilter field values (serialised), so a report can be
    re-run against the current batch set.
    """

    id: str
    name: str
    created_at: datetime
    created_by: str
    type: ReportType
    filters: dict[str, Any] = Field(default_factory=dict)
    format: ReportFormat
    url: str | None = None
    status: ReportState = ReportState.GENERATING
    error: str | None = None
