"""SQLAlchemy models package for ContractFlow.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` runs.  The import order
follows the foreign-key dependency graph so that parent tables are always
registered before their children.

Usage from other modules:
    from contractflow.models import Contract, Deliverable
"""

# Leaf tables (no FK dependencies on other domain models)
from contractflow.models.supplier import Supplier  # noqa: F401
from contractflow.models.org_unit import OrgUnit  # noqa: F401

# Contract aggregate
from contractflow.models.contract import Contract  # noqa: F401
from contractflow.models.attachment import Attachment  # noqa: F401
from contractflow.models.obligation import Obligation  # noqa: F401
from contractflow.models.deliverable import Deliverable  # noqa: F401
from contractflow.models.inspection import Inspection  # noqa: F401
from contractflow.models.evidence import Evidence  # noqa: F401

# Non-compliance chain
from contractflow.models.non_compliance import NonCompliance  # noqa: F401
from contractflow.models.penalty import Penalty  # noqa: F401

# Cross-cutting concerns
from contractflow.models.alert import Alert  # noqa: F401

__all__ = [
    "Supplier",
    "OrgUnit",
    "Contract",
    "Attachment",
    "Obligation",
    "Deliverable",
    "Inspection",
    "Evidence",
    "NonCompliance",
    "Penalty",
    "Alert",
]
