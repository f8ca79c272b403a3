"""
Guild-related utilities.

Centralizes guild keys for documents and the level roles a guild carries.
"""

import logging

import discord

from domain.models.level import LEVELS, get_level

logger = logging.getLogger("bucks_bot.utils.guild")


def guild_key(guild) -> str:
    """
    Document key for a guild.

    Guild ids are stringified; None (DMs, tests) becomes "0".
    """
    return str(guild.id) if guild is not None else "0"


async def ensure_level_roles(guild: discord.Guild) -> int:
    """Create any missing level roles in the guild. Returns how many were created."""
    existing = {role.name for role in guild.roles}
    created = 0
    for level in LEVELS:
        if level.name in existing:
            continue
        await guild.create_role(
            name=level.name,
            colour=discord.Colour(level.color),
            hoist=True,
            mentionable=True,
            reason="Level ladder",
        )
        created += 1
    if created:
        logger.info(f"Created {created} level role(s) in guild {guild.id}")
    return created


async def sync_level_role(member: discord.Member, previous_level: int, new_level: int) -> None:
    """Swap the member's level role; missing roles are skipped."""
    guild = member.guild
    new = get_level(new_level)
    old = get_level(previous_level)
    if new is not None:
        role = discord.utils.get(guild.roles, name=new.name)
        if role is not None:
            await member.add_roles(role, reason="Level purchased")
    if old is not None:
        role = discord.utils.get(guild.roles, name=old.name)
        if role is not None:
            await member.remove_roles(role, reason="Level purchased")
