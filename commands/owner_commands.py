"""
Owner Commands Cog

Implements the ``/bot-owner`` commands: managing the global category catalog
shared by every server, and viewing bot-wide statistics.
"""

import logging
from datetime import datetime, timezone
from typing import List, Sequence

import discord
from discord.ext import commands
from discord import app_commands

from commands.base_cog import BaseCog, require_owner
from core.stats_aggregator import DEFAULT_SERVER_LIST_LIMIT
from errors.handlers import handle_errors
from models.category import CategoryDefinition

logger = logging.getLogger(__name__)

EMBED_FIELD_LIMIT = 1024
EMPTY_CATALOG_MESSAGE = "No default categories configured. All servers must create custom categories."


def chunk_lines(entries: Sequence[str], limit: int = EMBED_FIELD_LIMIT, separator: str = "\n\n") -> List[str]:
    """
    Pack entries into chunks no longer than ``limit`` characters.

    An entry longer than the limit on its own is truncated.
    """
    chunks: List[str] = []
    current = ""
    for entry in entries:
        if len(entry) > limit:
            entry = entry[:limit - 1] + "…"
        candidate = f"{current}{separator}{entry}" if current else entry
        if len(candidate) > limit:
            chunks.append(current)
            current = entry
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def format_category(category: CategoryDefinition) -> str:
    return f"{category.display()}\n{category.description}"


class OwnerCommands(BaseCog):
    """Cog containing bot owner commands for the global category catalog and statistics."""

    owner_group = app_commands.Group(
        name="bot-owner",
        description="Bot owner exclusive commands",
        guild_only=True
    )

    @property
    def coordinator(self):
        return self.bot.coordinator

    @property
    def stats_aggregator(self):
        return self.bot.stats_aggregator

    @property
    def server_list_limit(self) -> int:
        config_manager = getattr(self.bot, 'config_manager', None)
        if config_manager is None:
            return DEFAULT_SERVER_LIST_LIMIT
        return config_manager.settings.server_list_limit

    @owner_group.command(
        name="add-global-category",
        description="[Owner Only] Add a default category available to all servers"
    )
    @app_commands.rename(category_id="id")
    @app_commands.describe(
        category_id="Unique ID for category (lowercase, no spaces)",
        label="Display name for the category",
        emoji="Emoji for the category",
        description="Description of what this category is for"
    )
    @require_owner()
    @handle_errors
    async def add_global_category(
        self,
        interaction: discord.Interaction,
        category_id: str,
        label: str,
        emoji: str,
        description: str
    ):
        """Add a category to the catalog every server can enable."""
        category = await self.coordinator.add_global_category(category_id, label, emoji, description)

        if self.audit_logger:
            self.audit_logger.log_category_added(
                category_id=category.id,
                user_id=interaction.user.id,
                guild_id=interaction.guild.id if interaction.guild else None
            )

        await self.send_success_embed(
            interaction,
            "✅ Global Category Added",
            f"Added global default category: {category.display()}\n\n"
            f"This category is now available for all servers to enable."
        )

    @owner_group.command(
        name="remove-global-category",
        description="[Owner Only] Remove a default category from all servers"
    )
    @app_commands.rename(category_id="id")
    @app_commands.describe(category_id="ID of the category to remove")
    @require_owner()
    @handle_errors
    async def remove_global_category(self, interaction: discord.Interaction, category_id: str):
        """Remove a category from the catalog and disable it in every server."""
        result = await self.coordinator.remove_global_category_cascade(category_id)

        if self.audit_logger:
            self.audit_logger.log_category_removed(
                category_id=result.category.id,
                user_id=interaction.user.id,
                affected_tenants=result.affected_tenants,
                guild_id=interaction.guild.id if interaction.guild else None
            )

        category = result.category
        await self.send_success_embed(
            interaction,
            "✅ Global Category Removed",
            f"Removed global default category: {category.emoji} **{category.label}**\n\n"
            f"🔄 Automatically disabled in {result.affected_tenants} server(s)."
        )

    @owner_group.command(
        name="list-global-categories",
        description="[Owner Only] View all default categories"
    )
    @require_owner()
    @handle_errors
    async def list_global_categories(self, interaction: discord.Interaction):
        """List the global catalog in insertion order."""
        categories = self.coordinator.list_global_categories()

        embed = discord.Embed(
            title="🌐 Global Default Categories",
            description="These categories are available for all servers to enable.",
            color=self.color('primary'),
            timestamp=datetime.now(timezone.utc)
        )

        if not categories:
            embed.description = EMPTY_CATALOG_MESSAGE
        else:
            chunks = chunk_lines([format_category(category) for category in categories])
            for index, chunk in enumerate(chunks):
                name = "Default Categories" if index == 0 else "Default Categories (cont.)"
                embed.add_field(name=name, value=chunk, inline=False)

        self.audit_command_used(interaction, "bot-owner list-global-categories", count=len(categories))
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @owner_group.command(name="stats", description="[Owner Only] View bot-wide statistics")
    @require_owner()
    @handle_errors
    async def stats(self, interaction: discord.Interaction):
        """Show ticket, feedback, server and member counts across every server."""
        await interaction.response.defer(ephemeral=True)

        snapshot = await self.stats_aggregator.compute_bot_wide_stats(self.get_tenants())

        embed = discord.Embed(
            title="📊 Bot-Wide Statistics",
            color=self.color('info'),
            timestamp=datetime.now(timezone.utc)
        )
        embed.add_field(name="🖥️ Servers", value=str(snapshot.server_count), inline=True)
        embed.add_field(name="👥 Total Users", value=str(snapshot.user_count), inline=True)
        embed.add_field(name="🎫 Total Tickets", value=str(snapshot.total_tickets), inline=True)
        embed.add_field(name="🟢 Open Tickets", value=str(snapshot.open_tickets), inline=True)
        embed.add_field(name="🔒 Closed Tickets", value=str(snapshot.closed_tickets), inline=True)
        embed.add_field(name="⭐ Total Feedback", value=str(snapshot.total_feedback), inline=True)
        embed.set_footer(text=f"Requested by: {interaction.user}")

        self.audit_command_used(interaction, "bot-owner stats")
        await interaction.followup.send(embed=embed, ephemeral=True)

    @owner_group.command(name="servers", description="[Owner Only] List all servers using the bot")
    @require_owner()
    @handle_errors
    async def servers(self, interaction: discord.Interaction):
        """List the largest servers by member count with their ticket totals."""
        await interaction.response.defer(ephemeral=True)

        tenants = self.get_tenants()
        ranked = await self.stats_aggregator.rank_servers(tenants, limit=self.server_list_limit)

        lines = []
        for entry in ranked:
            lines.append(
                f"**{entry.rank}.** {entry.tenant.name}\n"
                f"   👥 {entry.tenant.member_count} members | 🎫 {entry.total_tickets} tickets"
            )

        embed = discord.Embed(
            title="🖥️ Server List",
            description=f"Showing top {len(ranked)} servers by member count\n\n"
                        + ("\n".join(lines) or "No servers"),
            color=self.color('info'),
            timestamp=datetime.now(timezone.utc)
        )
        embed.set_footer(text=f"Total servers: {len(tenants)}")

        self.audit_command_used(interaction, "bot-owner servers", shown=len(ranked))
        await interaction.followup.send(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot):
    """Setup function to add the cog to the bot."""
    await bot.add_cog(OwnerCommands(bot))
