"""
Helpers that keep interaction acknowledgement from raising inside command handlers.

Discord gives an interaction a few seconds to be acknowledged. Slow commands
defer first and deliver their result with a follow-up.
"""

import logging

import discord

logger = logging.getLogger("bucks_bot.utils.interaction_safety")

_ALREADY_ACKNOWLEDGED = 40060


async def safe_defer(interaction: discord.Interaction, ephemeral: bool = False) -> bool:
    """
    Defer the interaction response.

    Returns True if the interaction is acknowledged (now or previously) and
    follow-ups can be sent, False if it expired.
    """
    if interaction.response.is_done():
        return True
    try:
        await interaction.response.defer(ephemeral=ephemeral)
        return True
    except discord.NotFound:
        logger.warning(f"Interaction expired before defer (user {interaction.user.id})")
        return False
    except discord.HTTPException as exc:
        if exc.code == _ALREADY_ACKNOWLEDGED:
            return True
        logger.warning(f"Failed to defer interaction: {exc}")
        return False


async def safe_followup(
    interaction: discord.Interaction,
    content: str | None = None,
    *,
    embed: discord.Embed | None = None,
    view: discord.ui.View | None = None,
    ephemeral: bool = False,
    allowed_mentions: discord.AllowedMentions | None = None,
):
    """Send a follow-up, logging (not raising) HTTP failures. Returns the message or None."""
    kwargs = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view
    if allowed_mentions is not None:
        kwargs["allowed_mentions"] = allowed_mentions
    try:
        return await interaction.followup.send(**kwargs)
    except discord.HTTPException as exc:
        logger.warning(f"Failed to send followup: {exc}")
        return None
