"""Association tables for many-to-many relationships."""

from sqlalchemy import Column, ForeignKey, Table, Uuid

from app.database import Base

# Many-to-many: User <-> Role
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

# Many-to-many: Role <-> Permission
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Uuid(as_uuid=True), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)

# Many-to-many: Property <-> Amenity
property_amenities = Table(
    "property_amenities",
    Base.metadata,
    Column("property_id", Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", Uuid(as_uuid=True), ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True),
)

# Many-to-many: Post <-> Tag
post_tags = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
