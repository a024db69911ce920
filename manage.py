#!/usr/bin/env python3
"""
Management commands: schema setup, seeding, administrator accounts and reports.
"""

import asyncio
import sys
import argparse
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select, func

from app.config import settings
from app.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from app.models.user import User, Role
from app.models.property import Property
from app.models.blog import Post, Comment, Category, Tag
from app.models.media import Media
from app.models.inquiry import Inquiry
from app.repositories.user import RoleRepository
from app.schemas.user import UserCreate
from app.seeders import seed_roles_and_permissions, seed_reference_data, ensure_admin_user

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ManagementCommands:
    """Async implementations of the CLI commands."""

    def __init__(self, session_factory=AsyncSessionLocal):
        self.session_factory = session_factory

    async def create_tables(self) -> None:
        await create_tables()

    async def drop_tables(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def seed(self) -> None:
        """Seed roles, permissions and reference data."""
        async with self.session_factory() as session:
            await seed_roles_and_permissions(session)
            await seed_reference_data(session)

    async def acl_setup(self, force: bool = False, create_user: bool = True) -> None:
        """
        Seed the role matrix and optionally the default administrator.

        Args:
            force: Reset every role's permissions to exactly the matrix
            create_user: Create (or promote) the configured admin account
        """
        async with self.session_factory() as session:
            summary = await seed_roles_and_permissions(session, reset=force)
            print(
                f"Permissions created: {summary['permissions_created']}, "
                f"roles created: {summary['roles_created']}, "
                f"grants changed: {summary['grants_changed']}"
            )

            if not create_user:
                return

            user, created = await ensure_admin_user(
                session,
                email=settings.default_admin_email,
                name=settings.default_admin_name,
                password=settings.default_admin_password,
            )
            if created:
                print(f"Admin user created: {user.email}")
                logger.warning("Please change the default admin password!")
            else:
                print(f"Admin user already exists: {user.email}")

    async def create_admin(self, email: str, name: str, password: str) -> None:
        """Create an administrator after validating the input like the admin API does."""
        data = UserCreate(name=name, email=email, password=password)
        async with self.session_factory() as session:
            await seed_roles_and_permissions(session)
            user, created = await ensure_admin_user(
                session,
                email=data.email,
                name=data.name,
                password=data.password,
                reset_password=True,
            )
            print(f"Admin user {'created' if created else 'updated'}: {user.email}")

    async def roles_show(self, show_users: bool = False, show_permissions: bool = False) -> None:
        """Print roles with user counts, optionally their users and permissions."""
        async with self.session_factory() as session:
            role_repo = RoleRepository(session)
            roles = await role_repo.list_all()
            if not roles:
                print("No roles found. Run `manage.py acl-setup` first.")
                return

            for role in roles:
                users_count = await role_repo.count_users(role.id)
                print(f"{role.name}: {len(role.permissions)} permissions, {users_count} users")

                if show_permissions:
                    for name in role.permission_names:
                        print(f"    - {name}")

                if show_users:
                    result = await session.execute(
                        select(User).where(User.roles.any(Role.id == role.id)).order_by(User.email)
                    )
                    for user in result.scalars().all():
                        state = "" if user.is_active else " (inactive)"
                        print(f"    * {user.name} <{user.email}>{state}")

    async def content_stats(self, sample: int = 0) -> None:
        """Print row counts per status and optionally the latest posts."""
        async with self.session_factory() as session:
            for label, model in (
                ("Properties", Property),
                ("Posts", Post),
                ("Comments", Comment),
                ("Inquiries", Inquiry),
            ):
                result = await session.execute(select(model.status, func.count(model.id)).group_by(model.status))
                counts = dict(result.all())
                total = sum(counts.values())
                breakdown = ", ".join(f"{status}={count}" for status, count in sorted(counts.items()))
                print(f"{label}: {total}" + (f" ({breakdown})" if breakdown else ""))

            for label, model in (("Users", User), ("Categories", Category), ("Tags", Tag), ("Media", Media)):
                total = (await session.execute(select(func.count(model.id)))).scalar() or 0
                print(f"{label}: {total}")

            if sample > 0:
                result = await session.execute(select(Post).order_by(Post.created_at.desc()).limit(sample))
                print(f"\nLatest {sample} posts:")
                for post in result.scalars().all():
                    print(f"  [{post.status}] {post.title} (/{post.slug}) by {post.author.name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Realty CMS management commands")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create all database tables")

    drop_parser = subparsers.add_parser("drop-tables", help="Drop all database tables")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping the tables")

    subparsers.add_parser("seed", help="Seed roles, permissions and reference data")

    acl_parser = subparsers.add_parser("acl-setup", help="Seed roles and permissions and the default admin")
    acl_parser.add_argument("--force", action="store_true", help="Reset role permissions to the matrix")
    acl_parser.add_argument("--no-user", action="store_true", help="Do not create the default admin")

    admin_parser = subparsers.add_parser("create-admin", help="Create or promote an administrator")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--password", required=True)

    roles_parser = subparsers.add_parser("roles-show", help="Show roles")
    roles_parser.add_argument("--users", action="store_true", help="List users of each role")
    roles_parser.add_argument("--permissions", action="store_true", help="List permissions of each role")

    stats_parser = subparsers.add_parser("content-stats", help="Show content counts")
    stats_parser.add_argument("--sample", type=int, default=0, help="Show the N latest posts")

    return parser


async def run(args: argparse.Namespace, commands: Optional[ManagementCommands] = None) -> None:
    commands = commands or ManagementCommands()
    try:
        if args.command == "create-tables":
            await commands.create_tables()
        elif args.command == "drop-tables":
            await commands.drop_tables()
        elif args.command == "seed":
            await commands.seed()
        elif args.command == "acl-setup":
            await commands.acl_setup(force=args.force, create_user=not args.no_user)
        elif args.command == "create-admin":
            await commands.create_admin(args.email, args.name, args.password)
        elif args.command == "roles-show":
            await commands.roles_show(show_users=args.users, show_permissions=args.permissions)
        elif args.command == "content-stats":
            await commands.content_stats(sample=args.sample)
    finally:
        await close_db_connection()


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "drop-tables" and not args.confirm:
        print("Dropping tables requires --confirm flag")
        return

    try:
        asyncio.run(run(args))
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"{field}: {error['msg']}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
