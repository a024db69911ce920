"""
Idempotent database seeders for the role matrix and reference data.
"""

from .roles import seed_roles_and_permissions, ensure_admin_user
from .reference import seed_reference_data

__all__ = [
    "seed_roles_and_permissions",
    "ensure_admin_user",
    "seed_reference_data",
]
