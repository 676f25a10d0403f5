"""
Unit tests for base cog functionality and command infrastructure.
"""

import pytest
from unittest.mock import Mock, AsyncMock, MagicMock

import discord
from discord.ext import commands

from commands.base_cog import (
    BaseCog,
    require_owner,
    require_admin_role,
    OWNER_DENIAL_MESSAGE,
    ADMIN_DENIAL_MESSAGE
)
from models.stats import TenantInfo


class TestBaseCog:
    """Test cases for BaseCog class."""

    @pytest.fixture
    def mock_bot(self):
        """Create a mock bot instance."""
        bot = Mock(spec=commands.Bot)
        bot.is_owner = AsyncMock(return_value=False)
        return bot

    @pytest.fixture
    def base_cog(self, mock_bot):
        """Create a BaseCog instance for testing."""
        return BaseCog(mock_bot)

    @pytest.fixture
    def mock_guild(self):
        """Create a mock guild."""
        guild = Mock(spec=discord.Guild)
        guild.id = 12345
        guild.owner_id = 555
        return guild

    @pytest.fixture
    def mock_user_regular(self):
        """Create a mock regular user."""
        user = Mock(spec=discord.Member)
        user.id = 33333
        user.guild_permissions.administrator = False
        return user

    @pytest.fixture
    def mock_interaction(self, mock_user_regular, mock_guild):
        """Create a mock interaction."""
        interaction = Mock(spec=discord.Interaction)
        interaction.user = mock_user_regular
        interaction.guild = mock_guild
        interaction.response = Mock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()
        interaction.followup = Mock()
        interaction.followup.send = AsyncMock()
        return interaction

    def test_base_cog_initialization(self, mock_bot):
        """Test BaseCog initialization."""
        cog = BaseCog(mock_bot)
        assert cog.bot == mock_bot
        assert cog.logger is not None
        assert cog.audit_logger is None

    @pytest.mark.asyncio
    async def test_owner_check_guild_owner(self, base_cog, mock_bot, mock_user_regular, mock_guild):
        """Test that the server owner passes without asking Discord."""
        mock_user_regular.id = mock_guild.owner_id

        assert await base_cog.check_owner_permissions(mock_user_regular, mock_guild) is True
        mock_bot.is_owner.assert_not_called()

    @pytest.mark.asyncio
    async def test_owner_check_bot_owner(self, base_cog, mock_bot, mock_user_regular, mock_guild):
        mock_bot.is_owner.return_value = True

        assert await base_cog.check_owner_permissions(mock_user_regular, mock_guild) is True
        mock_bot.is_owner.assert_called_once_with(mock_user_regular)

    @pytest.mark.asyncio
    async def test_owner_check_bot_owner_in_dm(self, base_cog, mock_bot, mock_user_regular):
        mock_bot.is_owner.return_value = True

        assert await base_cog.check_owner_permissions(mock_user_regular, None) is True

    @pytest.mark.asyncio
    async def test_owner_check_regular_user(self, base_cog, mock_user_regular, mock_guild):
        assert await base_cog.check_owner_permissions(mock_user_regular, mock_guild) is False

    @pytest.mark.asyncio
    async def test_check_admin_permissions(self, base_cog, mock_user_regular, mock_guild):
        """Test admin permission check for admin and regular users."""
        assert await base_cog.check_admin_permissions(mock_user_regular, mock_guild) is False

        mock_user_regular.guild_permissions.administrator = True
        assert await base_cog.check_admin_permissions(mock_user_regular, mock_guild) is True

    @pytest.mark.asyncio
    async def test_check_admin_permissions_no_guild(self, base_cog, mock_user_regular):
        mock_user_regular.guild_permissions.administrator = True
        assert await base_cog.check_admin_permissions(mock_user_regular, None) is False

    def test_get_tenants(self, base_cog, mock_bot):
        guild = Mock(spec=discord.Guild)
        guild.id = 1
        guild.name = "Alpha"
        guild.member_count = None
        guild.owner_id = 7
        mock_bot.guilds = [guild]

        assert base_cog.get_tenants() == [TenantInfo(tenant_id=1, name="Alpha", member_count=0, owner_id=7)]

    def test_color_without_config_manager(self, base_cog):
        assert base_cog.color('primary') == discord.Color.blurple()

    def test_color_from_config_manager(self, mock_bot):
        mock_bot.config_manager = MagicMock()
        mock_bot.config_manager.get_color.return_value = 0xFF0000

        assert BaseCog(mock_bot).color('info') == discord.Color(0xFF0000)
        mock_bot.config_manager.get_color.assert_called_once_with('info')

    @pytest.mark.asyncio
    async def test_send_error_embed(self, base_cog, mock_interaction):
        """Test sending error embed."""
        await base_cog.send_error_embed(mock_interaction, "Test Error", "Test description")

        call_args = mock_interaction.response.send_message.call_args
        assert call_args[1]['ephemeral'] is True
        assert call_args[1]['embed'].title == "Test Error"
        assert call_args[1]['embed'].color == discord.Color.red()

    @pytest.mark.asyncio
    async def test_send_success_embed_after_defer(self, base_cog, mock_interaction):
        """Test that a deferred interaction is answered with a followup."""
        mock_interaction.response.is_done.return_value = True

        await base_cog.send_success_embed(mock_interaction, "Test Success", "Test description")

        mock_interaction.response.send_message.assert_not_called()
        call_args = mock_interaction.followup.send.call_args
        assert call_args[1]['embed'].title == "Test Success"
        assert call_args[1]['ephemeral'] is True

    @pytest.mark.asyncio
    async def test_cog_load(self, base_cog):
        """Test cog loading."""
        # Should not raise any exceptions
        await base_cog.cog_load()
        await base_cog.cog_unload()


class TestPermissionDecorators:
    """Test cases for permission decorators."""

    @pytest.fixture
    def mock_cog(self):
        """Create a mock cog with permission checking methods."""
        cog = Mock()
        cog.check_owner_permissions = AsyncMock()
        cog.check_admin_permissions = AsyncMock()
        return cog

    @pytest.fixture
    def mock_interaction(self):
        """Create a mock interaction."""
        interaction = Mock(spec=discord.Interaction)
        interaction.user = Mock()
        interaction.guild = Mock()
        interaction.response = Mock()
        interaction.response.send_message = AsyncMock()
        return interaction

    @pytest.mark.asyncio
    async def test_require_owner_success(self, mock_cog, mock_interaction):
        mock_cog.check_owner_permissions.return_value = True

        @require_owner()
        async def test_command(self, interaction):
            return "success"

        assert await test_command(mock_cog, mock_interaction) == "success"
        mock_interaction.response.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_require_owner_denied(self, mock_cog, mock_interaction):
        """Test that denied callers get the fixed reply and the body never runs."""
        mock_cog.check_owner_permissions.return_value = False
        body = AsyncMock()

        @require_owner()
        async def test_command(self, interaction):
            await body()

        result = await test_command(mock_cog, mock_interaction)

        assert result is None
        body.assert_not_called()
        mock_interaction.response.send_message.assert_called_once_with(OWNER_DENIAL_MESSAGE, ephemeral=True)
        mock_cog.audit_permission_denied.assert_called_once()

    @pytest.mark.asyncio
    async def test_require_admin_role_denied(self, mock_cog, mock_interaction):
        mock_cog.check_admin_permissions.return_value = False

        @require_admin_role()
        async def test_command(self, interaction):
            return "success"

        assert await test_command(mock_cog, mock_interaction) is None
        mock_interaction.response.send_message.assert_called_once_with(ADMIN_DENIAL_MESSAGE, ephemeral=True)
