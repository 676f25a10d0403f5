"""
Error handling utilities and decorators for Discord Ticket Bot.

This module provides the decorator used by the command cogs to turn raised
exceptions into ephemeral error embeds, plus the logging helpers behind it.
"""

import logging
import traceback
import functools
from typing import Optional, Callable, Union
from datetime import datetime, timezone

import discord
from discord.ext import commands

from .exceptions import TicketBotError, PermissionError, DatabaseError

logger = logging.getLogger(__name__)

# Errors that are an expected answer to bad input rather than a fault.
USER_FACING_ERROR_CODES = {
    'PERMISSION_ERROR',
    'VALIDATION_ERROR',
    'DUPLICATE_CATEGORY',
    'CATEGORY_NOT_FOUND',
}


def log_error(error: Exception, context: Optional[str] = None,
              user_id: Optional[int] = None, guild_id: Optional[int] = None,
              additional_info: Optional[dict] = None) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Additional context about where the error occurred
        user_id: ID of the user involved (if applicable)
        guild_id: ID of the guild involved (if applicable)
        additional_info: Additional information to log
    """
    error_info = {
        'error_type': type(error).__name__,
        'error_message': str(error),
        'context': context,
        'user_id': user_id,
        'guild_id': guild_id,
        'timestamp': datetime.now(timezone.utc).isoformat()
    }

    if additional_info:
        error_info.update(additional_info)

    if isinstance(error, TicketBotError):
        if error.error_code in USER_FACING_ERROR_CODES:
            logger.warning(f"Bot error: {error_info}")
        else:
            logger.error(f"Bot error: {error_info}")
    else:
        logger.error(f"Unexpected error: {error_info}", exc_info=error)


def format_error_message(error: Exception, include_details: bool = False) -> str:
    """
    Format an error message for display to users.

    Args:
        error: The exception to format
        include_details: Whether to include technical details

    Returns:
        str: Formatted error message
    """
    if isinstance(error, TicketBotError):
        message = error.user_message
        if include_details and error.details:
            details = ", ".join(f"{k}: {v}" for k, v in error.details.items())
            message += f"\n\n**Details:** {details}"
        return message
    return "An unexpected error occurred. Please try again later."


async def send_error_embed(interaction_or_context: Union[discord.Interaction, commands.Context],
                           title: str, description: str,
                           color: Optional[discord.Color] = None,
                           ephemeral: bool = True) -> None:
    """
    Send an error embed to the user.

    Args:
        interaction_or_context: Discord interaction or command context
        title: Error embed title
        description: Error embed description
        color: Embed color (default: red)
        ephemeral: Whether the message should be ephemeral (for interactions)
    """
    embed = discord.Embed(
        title=title,
        description=description,
        color=color or discord.Color.red(),
        timestamp=datetime.now(timezone.utc)
    )
    embed.set_footer(text="Ticket Bot Error")

    try:
        if isinstance(interaction_or_context, discord.Interaction):
            if interaction_or_context.response.is_done():
                await interaction_or_context.followup.send(embed=embed, ephemeral=ephemeral)
            else:
                await interaction_or_context.response.send_message(embed=embed, ephemeral=ephemeral)
        else:
            await interaction_or_context.send(embed=embed)
    except discord.HTTPException as e:
        logger.error(f"Failed to send error embed: {e}")


def _audit_error(args, error: Exception, user_id: Optional[int], guild_id: Optional[int]) -> None:
    # Cog methods carry the bot's audit logger on self
    audit_logger = getattr(args[0], 'audit_logger', None) if args else None
    if audit_logger:
        audit_logger.log_error_occurred(
            error_type=type(error).__name__,
            error_message=str(error),
            user_id=user_id,
            guild_id=guild_id
        )


def handle_errors(func: Callable) -> Callable:
    """
    Decorator for handling errors in command functions.

    Catches exceptions, logs them, and replies with a user-friendly embed.
    No state is rolled back here; the operation that raised is responsible
    for leaving its documents untouched.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        interaction_or_context = None
        user_id = None
        guild_id = None

        for arg in args:
            if isinstance(arg, discord.Interaction):
                interaction_or_context = arg
                user_id = arg.user.id
                guild_id = arg.guild.id if arg.guild else None
                break
            elif isinstance(arg, commands.Context):
                interaction_or_context = arg
                user_id = arg.author.id
                guild_id = arg.guild.id if arg.guild else None
                break

        try:
            return await func(*args, **kwargs)

        except PermissionError as e:
            log_error(e, context=func.__name__, user_id=user_id, guild_id=guild_id)
            if interaction_or_context:
                await send_error_embed(
                    interaction_or_context,
                    "❌ Permission Denied",
                    format_error_message(e),
                    color=discord.Color.orange()
                )

        except DatabaseError as e:
            log_error(e, context=func.__name__, user_id=user_id, guild_id=guild_id)
            _audit_error(args, e, user_id, guild_id)
            if interaction_or_context:
                await send_error_embed(
                    interaction_or_context,
                    "❌ Storage Error",
                    format_error_message(e)
                )

        except TicketBotError as e:
            log_error(e, context=func.__name__, user_id=user_id, guild_id=guild_id)
            if interaction_or_context:
                await send_error_embed(
                    interaction_or_context,
                    "❌ Error",
                    format_error_message(e)
                )

        except discord.HTTPException as e:
            log_error(e, context=func.__name__, user_id=user_id, guild_id=guild_id)
            if interaction_or_context:
                await send_error_embed(
                    interaction_or_context,
                    "❌ API Error",
                    "A Discord API error occurred. Please try again later."
                )

        except Exception as e:
            log_error(e, context=func.__name__, user_id=user_id, guild_id=guild_id,
                      additional_info={'traceback': traceback.format_exc()})
            _audit_error(args, e, user_id, guild_id)
            if interaction_or_context:
                await send_error_embed(
                    interaction_or_context,
                    "❌ Unexpected Error",
                    "An unexpected error occurred. The issue has been logged and will be investigated."
                )

    return wrapper
