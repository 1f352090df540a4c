from countapp.modules.auth.dependencies import get_current_identity, require
from countapp.modules.auth.policy import Operation, REQUIRED_ROLES, authorize
from countapp.modules.auth.tenancy import (
    tenant_predicate,
    scoped,
    company_code_for_write,
    company_code_for_user,
)

__all__ = [
    "get_current_identity",
    "require",
    "Operation",
    "REQUIRED_ROLES",
    "authorize",
    "tenant_predicate",
    "scoped",
    "company_code_for_write",
    "company_code_for_user",
]
