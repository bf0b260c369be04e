"""
app/domain/dashboards.py

Business-domain descriptors used by the dashboard aggregation layer.

Each descriptor names the normalised category (or categories) a domain
reads and maps metric stems onto the summary fields it produces, split into
actual and expected buckets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Mapping

DEPARTMENTS: Final[tuple[str, ...]] = (
    "General Medicine",
    "Orthopaedic",
    "Dialysis",
    "Pediatric",
    "Ophthalmology",
    "Homoeopathic",
    "Geriatric",
    "Cardiology",
    "Surgery",
    "Gynaecology",
    "Neurology",
    "Urology",
    "Gastroenterology",
    "ENT",
)
"""Clinical departments reported under departmental metrics, in display order."""

GENERAL_CATEGORY: Final[str] = "general"


@dataclass(frozen=True)
class DomainDescriptor:
    """
    Filter and field layout for one dashboard domain.
    """

    name: str
    categories: frozenset[str]
    actual_fields: Mapping[str, str]
    expected_fields: Mapping[str, str] = field(default_factory=dict)

    def includes(self, category: str) -> bool:
        return category in self.categories

    def field_for(self, metric: str, *, expected: bool) -> str | None:
        buckets = self.expected_fields if expected else self.actual_fields
        return buckets.get(metric)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.actual_fields.values()) + tuple(self.expected_fields.values())


def _paired(name: str, category: str, fields: Mapping[str, str]) -> DomainDescriptor:
    return DomainDescriptor(
        name=name,
        categories=frozenset({category}),
        actual_fields=dict(fields),
        expected_fields={stem: f"Expected{field_name}" for stem, field_name in fields.items()},
    )


FINANCE = DomainDescriptor(
    name="finance",
    categories=frozenset({GENERAL_CATEGORY}),
    actual_fields={"expense": "Expenses", "revenue": "Revenue"},
    expected_fields={"expense": "ExpectedExpense", "revenue": "ExpectedRevenue"},
)
HR = _paired("hr", "workforce", {"joinees": "Joinees", "resignations": "Resignations"})
PHARMACY = _paired("pharmacy", "pharmacy", {"issued": "Issued", "expired": "Expired"})
DIAGNOSTICS = _paired(
    "diagnostics",
    "diagnostic",
    {"lab tests": "LabTests", "radiology tests": "RadiologyTests"},
)
MAINTENANCE = _paired(
    "maintenance",
    "maintenance",
    {"repair cost": "RepairCost", "purchase cost": "PurchaseCost"},
)
ADMISSIONS = _paired(
    "admissions",
    "admissions and discharges",
    {"admissions": "Admissions", "discharges": "Discharges"},
)
FEEDBACK = _paired(
    "feedback",
    "patient feedback",
    {"ipd score": "IPDScore", "opd score": "OPDScore"},
)
DEPARTMENTAL = DomainDescriptor(
    name="departmental",
    categories=frozenset(department.lower() for department in DEPARTMENTS),
    actual_fields={"revenue": "Revenue", "patients": "Patients", "profitability": "Profitability"},
    expected_fields={
        "revenue": "ExpectedRevenue",
        "patients": "ExpectedPatients",
        "profitability": "ExpectedProfitability",
    },
)

DOMAINS: Final[dict[str, DomainDescriptor]] = {
    descriptor.name: descriptor
    for descriptor in (
        FINANCE,
        HR,
        PHARMACY,
        DIAGNOSTICS,
        MAINTENANCE,
        ADMISSIONS,
        FEEDBACK,
        DEPARTMENTAL,
    )
}

FORM_CATALOG: Final[dict[str, tuple[str, ...]]] = {
    "General": ("Revenue", "Expense"),
    "Diagnostic": ("Lab Tests", "Radiology Tests"),
    "Admissions and Discharges": ("Admissions", "Discharges"),
    "Workforce": ("Joinees", "Resignations"),
    "Pharmacy": ("Issued", "Expired"),
    "Maintenance": ("Repair Cost", "Purchase Cost"),
    "Patient Feedback": ("IPD Score", "OPD Score"),
    "Departmental Metrics": ("Revenue", "Patients", "Profitability"),
}
"""Submission form layout: category -> metric names (prefixed per role)."""

ROLE_SUBCATEGORIES: Final[dict[str, str]] = {
    "Staff": "Actual",
    "Stakeholder": "Expected",
}
"""Form roles and the sub-category each one persists as."""


def get_domain(name: str) -> DomainDescriptor | None:
    return DOMAINS.get(name.strip().lower())
