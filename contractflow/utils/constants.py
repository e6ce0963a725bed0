"""
Application-wide constants for the ContractFlow system.

Defines domain enumerations, business rule thresholds, and
lookup tables used across routers, services, and models.
"""

import enum
from typing import Final

# ---------------------------------------------------------------------------
# Contract enumerations (values match the wire format used by the frontend)
# ---------------------------------------------------------------------------


class ContractType(str, enum.Enum):
    SERVICE = "Servico"
    WORK = "Obra"
    SUPPLY = "Fornecimento"
    LEASE = "Locacao"
    OTHER = "Outro"


class ContractModality(str, enum.Enum):
    """Procurement modes under Brazilian public procurement law."""

    PREGAO = "Pregao"
    CONCORRENCIA = "Concorrencia"
    TOMADA_PRECO = "TomadaPreco"
    CONVITE = "Convite"
    DISPENSA = "Dispensa"
    INEXIGIBILIDADE = "Inexigibilidade"
    RDC = "RDC"
    CREDENCIAMENTO = "Credenciamento"


class ContractStatus(str, enum.Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    CLOSED = "Closed"
    TERMINATED = "Terminated"
    CANCELLED = "Cancelled"


class EvidenceOwnerKind(str, enum.Enum):
    DELIVERABLE = "deliverable"
    INSPECTION = "inspection"


DEFAULT_CURRENCY: Final[str] = "BRL"

# ---------------------------------------------------------------------------
# Obligations
# ---------------------------------------------------------------------------

OBLIGATION_DEFAULT_STATUS: Final[str] = "Pending"
OBLIGATION_COMPLETED_STATUS: Final[str] = "completed"  # compared lower-cased

# ---------------------------------------------------------------------------
# Non-compliance severity vocabulary
# ---------------------------------------------------------------------------

# Lower-cased synonyms (English + Portuguese labels used by the UI)
_SEVERITY_SYNONYMS: Final[dict[str, str]] = {
    "low": "low",
    "baixa": "low",
    "baixo": "low",
    "medium": "medium",
    "media": "medium",
    "média": "medium",
    "medio": "medium",
    "médio": "medium",
    "high": "high",
    "alta": "high",
    "alto": "high",
    "critical": "critical",
    "critica": "critical",
    "crítica": "critical",
    "critico": "critical",
    "crítico": "critical",
}


def severity_level(severity: str | None) -> str | None:
    """Map a free-text severity onto the fixed vocabulary, or ``None``."""
    if not severity:
        return None
    return _SEVERITY_SYNONYMS.get(severity.strip().lower())


# ---------------------------------------------------------------------------
# File uploads
# ---------------------------------------------------------------------------

MAX_ATTACHMENT_BYTES: Final[int] = 20 * 1024 * 1024  # 20 MB
MAX_EVIDENCE_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
DEFAULT_MIME_TYPE: Final[str] = "application/octet-stream"

# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

DUE_STATUS_OVERDUE: Final[str] = "overdue"
DUE_STATUS_PENDING: Final[str] = "pending"

REPORT_NAMES: Final[list[str]] = [
    "due-deliverables",
    "contract-status",
    "deliveries-by-supplier",
    "deliveries-by-orgunit",
    "penalties",
]
