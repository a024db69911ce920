"""
Tests for the management commands.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from app.config import settings
from app.models.catalog import PropertyType
from app.models.seo import SeoSetting
from app.models.user import User
from app.permissions import ROLE_PERMISSIONS, RoleName
from app.repositories.user import UserRepository
from app.seeders import seed_reference_data
from manage import ManagementCommands, build_parser


class TestSeeding:
    """Seeding is safe to repeat."""

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, session_factory):
        commands = ManagementCommands(session_factory)
        await commands.seed()

        async with session_factory() as session:
            first = (await session.execute(select(func.count(PropertyType.id)))).scalar()
            again = await seed_reference_data(session)

        assert first > 0
        assert set(again.values()) == {0}

    @pytest.mark.asyncio
    async def test_reseed_keeps_admin_edits(self, session_factory):
        commands = ManagementCommands(session_factory)
        await commands.seed()
        async with session_factory() as session:
            setting = (await session.execute(select(SeoSetting).where(SeoSetting.key == "site_name"))).scalars().first()
            setting.value = "Edited title"
            await session.commit()

        await commands.seed()

        async with session_factory() as session:
            setting = (await session.execute(select(SeoSetting).where(SeoSetting.key == "site_name"))).scalars().first()
            assert setting.value == "Edited title"


class TestAdminAccounts:
    """ACL setup and administrator creation."""

    @pytest.mark.asyncio
    async def test_acl_setup_creates_default_admin(self, session_factory, capsys):
        commands = ManagementCommands(session_factory)

        await commands.acl_setup()
        output = capsys.readouterr().out
        assert f"roles created: {len(ROLE_PERMISSIONS)}" in output
        assert f"Admin user created: {settings.default_admin_email}" in output

        await commands.acl_setup()
        assert "Admin user already exists" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_acl_setup_without_user(self, session_factory):
        await ManagementCommands(session_factory).acl_setup(create_user=False)

        async with session_factory() as session:
            assert (await session.execute(select(func.count(User.id)))).scalar() == 0

    @pytest.mark.asyncio
    async def test_create_admin_promotes_existing_account(self, session_factory, factory):
        await factory.user(email="owner@example.com", name="Office Owner")

        await ManagementCommands(session_factory).create_admin("Owner@Example.com", "Office Owner", "newpassword1")

        async with session_factory() as session:
            user = await UserRepository(session).get_by_email("owner@example.com")
            assert user.has_role(RoleName.ADMIN.value)
            assert user.verify_password("newpassword1")

    @pytest.mark.asyncio
    async def test_create_admin_validates_input(self, session_factory):
        with pytest.raises(ValidationError):
            await ManagementCommands(session_factory).create_admin("not-an-email", "Someone", "short")


class TestReports:
    """Read-only reports."""

    @pytest.mark.asyncio
    async def test_roles_show(self, session_factory, capsys):
        commands = ManagementCommands(session_factory)
        await commands.acl_setup()
        capsys.readouterr()

        await commands.roles_show(show_users=True)

        output = capsys.readouterr().out
        assert f"{RoleName.ADMIN.value}:" in output
        assert f"<{settings.default_admin_email}>" in output

    @pytest.mark.asyncio
    async def test_content_stats(self, session_factory, factory, admin_user, capsys):
        await factory.post(admin_user, title="Market update")
        await factory.listing()

        await ManagementCommands(session_factory).content_stats(sample=1)

        output = capsys.readouterr().out
        assert "Properties: 1 (available=1)" in output
        assert "Posts: 1 (published=1)" in output
        assert "Market update" in output


class TestParser:

    def test_parses_create_admin(self):
        args = build_parser().parse_args(
            ["create-admin", "--email", "a@example.com", "--name", "A", "--password", "secret123"]
        )

        assert (args.command, args.email, args.name) == ("create-admin", "a@example.com", "A")
