"""
Tenancy filter

Each tenant-owned table has a ``company_code`` column. Every read, update and
delete against such a table goes through ``scoped`` so that a non-``super``
caller only ever sees rows of its own company.
"""

from typing import Optional

from sqlalchemy.sql import Select, ColumnElement

from countapp.core.exceptions import AuthorizationError, ValidationError
from countapp.schemas.auth import IdentityClaim


def tenant_predicate(identity: IdentityClaim, model) -> Optional[ColumnElement]:
    """Company predicate for ``model``, or None for the cross-tenant ``super`` role"""
    if identity.is_super:
        return None
    return model.company_code == identity.company_code


def scoped(statement: Select, identity: IdentityClaim, model):
    """Apply the tenant predicate to a select, update or delete statement"""
    predicate = tenant_predicate(identity, model)
    if predicate is None:
        return statement
    return statement.where(predicate)


def company_code_for_write(identity: IdentityClaim) -> str:
    """Company code stamped on a newly created template, preset or instance"""
    return identity.company_code


def company_code_for_user(identity: IdentityClaim, requested: Optional[str] = None) -> str:
    """
    Company code for a new user account.

    Only ``super`` may target a company other than its own, and it has to
    name that company explicitly.
    """
    if identity.is_super:
        if not requested or not requested.strip():
            raise ValidationError("A super user must specify the company code.", field="companyCode")
        return requested.strip()

    if requested and requested != identity.company_code:
        raise AuthorizationError("You cannot assign a company code other than your own.")
    return identity.company_code
