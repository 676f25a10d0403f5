"""
Category Commands Cog

Lets server administrators opt their server in or out of the global ticket
categories.
"""

import logging

import discord
from discord.ext import commands
from discord import app_commands

from commands.base_cog import BaseCog, require_admin_role
from commands.owner_commands import chunk_lines, format_category
from errors.handlers import handle_errors

logger = logging.getLogger(__name__)


class CategoryCommands(BaseCog):
    """Cog containing per-server category toggles."""

    categories = app_commands.Group(
        name="categories",
        description="Choose which global ticket categories this server offers",
        guild_only=True
    )

    @property
    def coordinator(self):
        return self.bot.coordinator

    @categories.command(name="enable", description="Enable a global category in this server")
    @app_commands.rename(category_id="id")
    @app_commands.describe(category_id="ID of the global category to enable")
    @require_admin_role()
    @handle_errors
    async def enable(self, interaction: discord.Interaction, category_id: str):
        """Enable a global category for this server."""
        changed = await self.coordinator.enable_category(interaction.guild.id, category_id)

        if not changed:
            await self.send_success_embed(
                interaction,
                "ℹ️ Already Enabled",
                f"`{category_id}` is already enabled in this server."
            )
            return

        if self.audit_logger:
            self.audit_logger.log_tenant_category_toggled(
                category_id=category_id,
                user_id=interaction.user.id,
                guild_id=interaction.guild.id,
                enabled=True
            )

        category = self.coordinator.registry.get(category_id)
        await self.send_success_embed(
            interaction,
            "✅ Category Enabled",
            f"{category.display() if category else category_id} is now available in this server."
        )

    @categories.command(name="disable", description="Disable a category in this server")
    @app_commands.rename(category_id="id")
    @app_commands.describe(category_id="ID of the category to disable")
    @require_admin_role()
    @handle_errors
    async def disable(self, interaction: discord.Interaction, category_id: str):
        """Disable a category for this server."""
        changed = await self.coordinator.disable_category(interaction.guild.id, category_id)

        if not changed:
            await self.send_error_embed(
                interaction,
                "❌ Not Enabled",
                f"`{category_id}` is not enabled in this server.",
                color=discord.Color.orange()
            )
            return

        if self.audit_logger:
            self.audit_logger.log_tenant_category_toggled(
                category_id=category_id,
                user_id=interaction.user.id,
                guild_id=interaction.guild.id,
                enabled=False
            )

        await self.send_success_embed(
            interaction,
            "✅ Category Disabled",
            f"`{category_id}` is no longer offered in this server."
        )

    @categories.command(name="list", description="Show enabled and available global categories")
    @require_admin_role()
    @handle_errors
    async def list_categories(self, interaction: discord.Interaction):
        """Show this server's enabled categories and the ones it could enable."""
        enabled = await self.coordinator.resolve_enabled_categories(interaction.guild.id)
        enabled_ids = {category.id for category in enabled}
        available = [
            category for category in self.coordinator.list_global_categories()
            if category.id not in enabled_ids
        ]

        embed = discord.Embed(
            title="🎫 Ticket Categories",
            description=f"Global categories for **{interaction.guild.name}**",
            color=self.color('primary')
        )

        for title, group in (("Enabled", enabled), ("Available", available)):
            if not group:
                embed.add_field(name=title, value="None", inline=False)
                continue
            for index, chunk in enumerate(chunk_lines([format_category(c) for c in group])):
                embed.add_field(name=title if index == 0 else f"{title} (cont.)", value=chunk, inline=False)

        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot):
    """Setup function to add the cog to the bot."""
    await bot.add_cog(CategoryCommands(bot))
