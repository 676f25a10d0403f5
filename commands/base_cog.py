"""
Base Cog Class

Provides permission gates, reply helpers and the platform snapshot shared by
all command cogs.
"""

import logging
from typing import Callable, List, Optional
from functools import wraps

import discord
from discord.ext import commands
from discord import app_commands

from models.stats import TenantInfo


logger = logging.getLogger(__name__)

OWNER_DENIAL_MESSAGE = "❌ This command is only available to the bot owner or server owner."
ADMIN_DENIAL_MESSAGE = "❌ You need the Administrator permission to manage this server's categories."


def _command_name(interaction: discord.Interaction, func: Callable) -> str:
    command = getattr(interaction, 'command', None)
    return getattr(command, 'qualified_name', None) or func.__name__


def require_owner():
    """
    Decorator restricting a command to the bot owner or the server owner.

    Denied calls get a fixed ephemeral reply and never reach the command body.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, interaction: discord.Interaction, *args, **kwargs):
            if not await self.check_owner_permissions(interaction.user, interaction.guild):
                self.audit_permission_denied(interaction, _command_name(interaction, func), "owner")
                await interaction.response.send_message(OWNER_DENIAL_MESSAGE, ephemeral=True)
                return

            return await func(self, interaction, *args, **kwargs)
        return wrapper
    return decorator


def require_admin_role():
    """Decorator to check if user has admin permissions in the server."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, interaction: discord.Interaction, *args, **kwargs):
            if not await self.check_admin_permissions(interaction.user, interaction.guild):
                self.audit_permission_denied(interaction, _command_name(interaction, func), "administrator")
                await interaction.response.send_message(ADMIN_DENIAL_MESSAGE, ephemeral=True)
                return

            return await func(self, interaction, *args, **kwargs)
        return wrapper
    return decorator


class BaseCog(commands.Cog):
    """Base cog class with common functionality for all command cogs."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def audit_logger(self):
        return getattr(self.bot, 'audit_logger', None)

    async def check_owner_permissions(self, user: discord.abc.User,
                                      guild: Optional[discord.Guild]) -> bool:
        """Check if user is the bot owner or owns the server the command was used in."""
        if guild is not None and user.id == guild.owner_id:
            return True

        try:
            return await self.bot.is_owner(user)
        except Exception as e:
            self.logger.error(f"Error checking bot owner: {e}")
            return False

    async def check_admin_permissions(self, user: discord.abc.User,
                                      guild: Optional[discord.Guild]) -> bool:
        """Check if user administers the server the command was used in."""
        if guild is None:
            return False

        if user.id == guild.owner_id:
            return True

        permissions = getattr(user, 'guild_permissions', None)
        return bool(permissions and permissions.administrator)

    def audit_permission_denied(self, interaction: discord.Interaction, command_name: str,
                                required_permission: str):
        self.logger.warning(f"Denied {command_name} for user {interaction.user.id}")
        if self.audit_logger:
            self.audit_logger.log_permission_denied(
                command_name=command_name,
                user_id=interaction.user.id,
                guild_id=interaction.guild.id if interaction.guild else None,
                required_permission=required_permission
            )

    def audit_command_used(self, interaction: discord.Interaction, command_name: str, **info):
        if self.audit_logger:
            self.audit_logger.log_command_used(
                command_name=command_name,
                user_id=interaction.user.id,
                guild_id=interaction.guild.id if interaction.guild else None,
                additional_info=info or None
            )

    def get_tenants(self) -> List[TenantInfo]:
        """Snapshot the servers the bot is in, in the order Discord reports them."""
        return [
            TenantInfo(
                tenant_id=guild.id,
                name=guild.name,
                member_count=guild.member_count or 0,
                owner_id=guild.owner_id
            )
            for guild in self.bot.guilds
        ]

    def color(self, name: str) -> discord.Color:
        config_manager = getattr(self.bot, 'config_manager', None)
        if config_manager is None:
            return discord.Color.blurple()
        return discord.Color(config_manager.get_color(name))

    async def send_error_embed(self, interaction: discord.Interaction, title: str, description: str,
                               color: Optional[discord.Color] = None, ephemeral: bool = True):
        """Send a standardized error embed."""
        embed = discord.Embed(
            title=title,
            description=description,
            color=color or discord.Color.red()
        )

        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=ephemeral)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=ephemeral)

    async def send_success_embed(self, interaction: discord.Interaction, title: str, description: str,
                                 ephemeral: bool = True):
        """Send a standardized success embed."""
        embed = discord.Embed(
            title=title,
            description=description,
            color=discord.Color.green()
        )

        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=ephemeral)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=ephemeral)

    async def cog_load(self):
        """Called when the cog is loaded."""
        self.logger.info(f"{self.__class__.__name__} cog loaded")

    async def cog_unload(self):
        """Called when the cog is unloaded."""
        self.logger.info(f"{self.__class__.__name__} cog unloaded")

    async def cog_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle application command errors."""
        self.logger.error(f"App command error in {interaction.command}: {error}")

        if isinstance(error, app_commands.CommandOnCooldown):
            embed = discord.Embed(
                title="⏰ Command on Cooldown",
                description=f"Please wait {error.retry_after:.1f} seconds before using this command again.",
                color=discord.Color.orange()
            )
        elif isinstance(error, app_commands.NoPrivateMessage):
            embed = discord.Embed(
                title="❌ Server Only",
                description="This command can only be used inside a server.",
                color=discord.Color.red()
            )
        else:
            embed = discord.Embed(
                title="❌ Command Error",
                description="An error occurred while executing the command.",
                color=discord.Color.red()
            )

        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)
