"""Randomised cotton module batches shaped like real harvest records."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from cottontrace.models import (
    BaleData,
    Batch,
    Certification,
    CertificationStatus,
    CertificationType,
    ComplianceStatus,
    CustodyEvent,
    EquipmentData,
    FieldArea,
    ForcedLaborVerification,
    GeoLocation,
    GeoPoint,
    GinData,
    GinProductionDetails,
    GinQualityMetrics,
    IsotopeMarking,
    OrganicStatus,
    QualityMetrics,
    RegionalCompliance,
)

FARM_NAMES = [
    "Sunshine Organic Farms",
    "Green Valley Cotton",
    "Delta Cotton Cooperative",
    "Western Cotton Growers",
    "Heartland Farms",
    "Blue Sky Organics",
    "Golden State Cotton",
    "Southern Harvest Co-op",
    "Prairie Cotton Fields",
    "Mountain View Farms",
]

# Region -> approximate growing-area centre
REGIONS: dict[str, tuple[float, float]] = {
    "California": (36.7783, -119.4179),
    "Texas": (33.5779, -101.8552),
    "Mississippi": (33.400444, -88.509750),
    "Arizona": (32.8795, -111.7574),
    "Georgia": (31.4505, -83.5085),
}

GIN_FACILITIES = [
    "Delta Valley Gin Co.",
    "Sunshine Cotton Gin",
    "Lubbock Cooperative Gin",
    "Central Valley Ginning",
]

HARVESTER_MODELS = ["John Deere CP690", "John Deere CS690", "Case IH Module Express 635"]
OPERATORS = ["Joel Johnson", "Maria Lopez", "Dwayne Carter", "Hannah Brooks"]
VARIETIES = ["DP 2211 B3TXF TR", "PHY 400 W3FE", "ST 5091B3XF", "NG 4936 B3XF"]
USDA_CLASSIFICATIONS = ["Strict Middling", "Middling", "Strict Low Middling", "Good Middling"]
COLORS = ["White", "Light Spotted", "Spotted"]

CERTIFICATION_TEMPLATES: list[tuple[str, str, CertificationType]] = [
    ("Organic Cotton Certification", "Global Organic Textile Standard", CertificationType.ORGANIC),
    ("Better Cotton Standard", "Better Cotton Initiative", CertificationType.SUSTAINABLE),
    ("Fairtrade Cotton", "Fairtrade International", CertificationType.FAIR_TRADE),
    ("Responsible Labor Certification", "Labor Standards International", CertificationType.LABOR_COMPLIANT),
    ("Regenerative Agriculture Pilot", "Regenagri", CertificationType.OTHER),
]

REGIONAL_REQUIREMENTS = {
    "state": ["Water Conservation", "Pesticide Regulations"],
    "country": ["USDA Organic Standards", "Fair Labor Standards Act"],
}

# Weighted draws keep most of the sample in good standing
GRADE_WEIGHTS = {"A": 4, "A-": 3, "B+": 3, "B": 2, "B-": 1, "C+": 1, "C": 1}
LABOR_WEIGHTS = {"verified": 7, "pending": 2, "failed": 1}


def _weighted(rng: random.Random, weights: dict[str, int]) -> str:
    return rng.choices(list(weights), weights=list(weights.values()))[0]


def _hex(rng: random.Random, length: int) -> str:
    return "0x" + "".join(rng.choice("0123456789abcdef") for _ in range(length))


def _certifications(
    rng: random.Random, index: int, harvest: datetime, now: datetime
) -> list[Certification]:
    certs = []
    for n, (name, issuer, cert_type) in enumerate(
        rng.sample(CERTIFICATION_TEMPLATES, k=rng.randint(0, 2))
    ):
        cert_id = f"CERT-{index + 1:03d}{chr(ord('A') + n)}"
        issue = harvest - timedelta(days=rng.randint(30, 700))
        expiry = issue + timedelta(days=rng.choice([365, 730, 1095]))
        if rng.random() < 0.05:
            status = CertificationStatus.REVOKED
        elif expiry < now:
            status = CertificationStatus.EXPIRED
        else:
            status = CertificationStatus.ACTIVE
        certs.append(
            Certification(
                id=cert_id,
                name=name,
                issuer=issuer,
                issue_date=issue,
                expiry_date=expiry,
                status=status,
                type=cert_type,
                document_url=f"https://example.com/certificates/{cert_id}.pdf",
            )
        )
    return certs


def _custody_chain(
    rng: random.Random, farm: str, gin: str, location: GeoLocation, harvest: datetime
) -> list[CustodyEvent]:
    hops = [farm, gin, "Regional Distribution Center", "Spinning Mill"]
    events = []
    at = harvest + timedelta(hours=rng.randint(4, 12))
    for from_entity, to_entity in list(zip(hops, hops[1:]))[: rng.randint(1, 3)]:
        events.append(
            CustodyEvent(
                timestamp=at,
                from_entity=from_entity,
                to_entity=to_entity,
                location=location,
                verification_method=rng.choice(["Digital Signature", "RFID Scan", "Manual Inspection"]),
                transport_method=rng.choice(["Module Truck", "Flatbed", None]),
                blockchain_transaction_id=_hex(rng, 64),
            )
        )
        at += timedelta(days=rng.randint(1, 6), hours=rng.randint(0, 12))
    return events


def generate_batch(
    rng: random.Random, index: int, now: datetime | None = None
) -> Batch:
    """Build one batch; ``index`` keeps identifiers unique within a sample."""
    now = now or datetime.now(timezone.utc)
    farm = rng.choice(FARM_NAMES)
    region = rng.choice(list(REGIONS))
    lat0, lon0 = REGIONS[region]
    latitude = round(lat0 + rng.uniform(-0.8, 0.8), 6)
    longitude = round(lon0 + rng.uniform(-0.8, 0.8), 6)
    location = GeoLocation(
        latitude=latitude,
        longitude=longitude,
        elevation=round(rng.uniform(20, 400)),
        region=region,
        country="USA",
    )

    module_id = str(23410387436 + index * 1373 + rng.randint(0, 1000))
    harvest = datetime(
        2024,
        rng.randint(1, 12),
        rng.randint(1, 28),
        rng.randint(6, 16),
        rng.choice([0, 15, 30, 45]),
        tzinfo=timezone.utc,
    )
    quantity = round(rng.uniform(3500, 6500), 2)
    grade = _weighted(rng, GRADE_WEIGHTS)
    fiber_length = round(rng.uniform(1.02, 1.25), 2)
    strength = round(rng.uniform(27.0, 32.5), 1)
    micronaire = round(rng.uniform(3.8, 5.0), 1)
    trash = round(rng.uniform(0.4, 2.5), 1)
    gin_name = rng.choice(GIN_FACILITIES)

    bales = [
        BaleData(
            bale_no=str(1112840 + index * 10 + n),
            weight=rng.randint(465, 495),
            micronaire=micronaire,
            strength=strength,
            length=fiber_length,
        )
        for n in range(rng.randint(2, 5))
    ]

    gin_entry = harvest + timedelta(days=1)
    custody = _custody_chain(rng, farm, gin_name, location, harvest)
    labor_status = _weighted(rng, LABOR_WEIGHTS)
    certifications = _certifications(rng, index, harvest, now)
    organic = next((c for c in certifications if c.type == CertificationType.ORGANIC), None)

    return Batch(
        id=f"MODULE-{module_id}",
        harvest_id=f"HARV-2024-{index + 1:03d}",
        farmer_id=f"FARM-{FARM_NAMES.index(farm) + 1:03d}",
        farm_name=farm,
        harvest_date=harvest,
        location=location,
        field_boundaries=[
            GeoPoint(latitude=latitude + d, longitude=longitude - d)
            for d in (0.0, 0.0001, 0.0002, 0.0003)
        ],
        quantity=quantity,
        quality=QualityMetrics(
            grade=grade,
            fiber_length=fiber_length,
            strength=strength,
            micronaire=micronaire,
            color=rng.choice(COLORS),
            trash_content=trash,
        ),
        certifications=certifications,
        blockchain_token_id=_hex(rng, 40) if rng.random() < 0.8 else None,
        isotope_marking=IsotopeMarking(
            id=f"ISO-{index + 1:03d}",
            marking_date=harvest + timedelta(days=2),
            marking_type="Stable Isotope",
            verification_status=_weighted(rng, LABOR_WEIGHTS),
            last_verification_date=harvest + timedelta(days=6),
        )
        if rng.random() < 0.7
        else None,
        equipment_data=EquipmentData(
            client_name="Cotton Industries LLC",
            farm_name=farm,
            field_name=f"{rng.choice(['North', 'South', 'East', 'West'])} Field {rng.choice('ABCD')}{rng.randint(1, 20)}",
            harvester_id=f"1N0C690PLK{rng.randint(1000000, 9999999)}",
            harvester_model=rng.choice(HARVESTER_MODELS),
            operator_id=f"OP-{rng.randint(1, 40):03d}",
            operator_name=rng.choice(OPERATORS),
            cotton_variety=rng.choice(VARIETIES),
            location=GeoPoint(latitude=latitude, longitude=longitude),
            gmt_date_time=harvest + timedelta(hours=7),
            field_area=FieldArea(value=round(rng.uniform(150, 650), 1)),
            module_id=module_id,
            bales=bales,
        ),
        gin_data=GinData(
            gin_id=f"GIN-{GIN_FACILITIES.index(gin_name) + 1:03d}-2024",
            facility_name=gin_name,
            entry_date=gin_entry,
            exit_date=gin_entry + timedelta(days=1, hours=rng.randint(2, 10)),
            production_details=GinProductionDetails(
                fiber_bale_production_date=gin_entry + timedelta(days=1),
                fiber_bale_id=f"FB-2024-{1800 + index}",
                bale_weight=480,
                module_weight=quantity,
                field_total_cotton=len(bales),
            ),
            quality_metrics=GinQualityMetrics(
                moisture_content=round(rng.uniform(5.0, 8.0), 1),
                trash_content=round(rng.uniform(1.0, 3.5), 1),
                usda_classification=rng.choice(USDA_CLASSIFICATIONS),
                usda_sort_category=f"Color Grade {rng.choice([21, 31, 41])}",
            ),
            moisture_percentage=round(rng.uniform(5.0, 8.0), 1),
        ),
        compliance_status=ComplianceStatus(
            forced_labor_verification=ForcedLaborVerification(
                status=labor_status,
                verification_date=harvest - timedelta(days=1)
                if labor_status != "pending"
                else None,
                verifier="Labor Standards International",
                documents=[
                    f"https://example.com/documents/labor-verification-{index + 1:03d}.pdf"
                ],
            ),
            organic_status=OrganicStatus(
                status="verified" if organic else "pending",
                certification_id=organic.id if organic else None,
            ),
            regional_compliance=[
                RegionalCompliance(
                    region=region,
                    status="compliant" if labor_status == "verified" else "pending",
                    requirements=REGIONAL_REQUIREMENTS["state"],
                ),
                RegionalCompliance(
                    region="USA",
                    status="non-compliant" if labor_status == "failed" else "compliant",
                    requirements=REGIONAL_REQUIREMENTS["country"],
                ),
            ],
        ),
        current_custodian=custody[-1].to_entity if custody else farm,
        custody_chain=custody,
        sustainability_score=rng.randint(55, 98),
    )


def generate_batches(
    count: int = 24, rng: random.Random | None = None, now: datetime | None = None
) -> list[Batch]:
    """Sample of ``count`` batches with unique identifiers."""
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    return [generate_batch(rng, i, now) for i in range(count)]
