"""
Role and permission matrix.
Static mapping of role names to permission strings; seeded into the database by
app.seeders.roles and checked by the require_permission dependency.
"""

import enum
from typing import Dict, List


class RoleName(str, enum.Enum):
    """Roles shipped with the application."""
    ADMIN = "admin"
    AGENT = "agent"
    MODERATOR = "moderator"
    USER = "user"


SYSTEM_ROLES = {role.value for role in RoleName}

FORBIDDEN_MESSAGE = "You do not have permission to access this resource."

ADMIN_PANEL_PERMISSION = "access admin panel"


def _crud(resource: str) -> List[str]:
    return [f"view {resource}", f"create {resource}", f"edit {resource}", f"delete {resource}"]


PERMISSIONS: List[str] = [
    # Admin area
    "access admin panel",
    "view dashboard",
    # Users and roles
    *_crud("users"),
    "assign roles",
    # Teams
    *_crud("teams"),
    "manage team members",
    *_crud("team invitations"),
    # Blog
    *_crud("categories"),
    *_crud("tags"),
    "view media",
    "upload media",
    "edit media",
    "delete media",
    *_crud("posts"),
    "publish posts",
    *_crud("comments"),
    "manage seo",
    # Real estate
    *_crud("properties"),
    "manage property images",
    *_crud("property images"),
    *_crud("property types"),
    *_crud("locations"),
    *_crud("agents"),
    *_crud("amenities"),
    *_crud("inquiries"),
    *_crud("favorites"),
    # Reviews
    *_crud("reviews"),
]


ROLE_PERMISSIONS: Dict[str, List[str]] = {
    RoleName.ADMIN.value: list(PERMISSIONS),
    RoleName.AGENT.value: [
        "access admin panel",
        "view dashboard",
        "view properties",
        "create properties",
        "edit properties",
        "view property types",
        "view locations",
        "view agents",
        "view amenities",
        *_crud("property images"),
        "manage property images",
        "view inquiries",
        "edit inquiries",
        "view favorites",
        "view posts",
        "view categories",
        "view tags",
    ],
    RoleName.MODERATOR.value: [
        "access admin panel",
        "view dashboard",
        "view posts",
        "create posts",
        "edit posts",
        "publish posts",
        "view categories",
        "create categories",
        "edit categories",
        "view tags",
        "create tags",
        "edit tags",
        "view media",
        "upload media",
        "edit media",
        *_crud("comments"),
        "view inquiries",
        "edit inquiries",
    ],
    RoleName.USER.value: [
        "view teams",
        "create teams",
        "edit teams",
        "view properties",
        "view property types",
        "view locations",
        "view agents",
        "view amenities",
        "view posts",
        "view categories",
        "view tags",
        "create inquiries",
        "create favorites",
        "view favorites",
        "create comments",
        "view reviews",
        "create reviews",
    ],
}
