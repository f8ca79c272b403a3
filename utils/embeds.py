"""
Reusable Discord embed builders.
"""

import discord

from domain.models.bet import Bet
from domain.models.cancel_ticket import CancelTicket
from domain.models.leaderboard import LeaderboardEntry
from domain.models.level import LEVELS
from domain.models.lottery import Lottery
from domain.models.money import format_money
from utils.formatting import BUCKS_EMOTE, format_relative_time, format_signed, mention

REJECTION_TITLE = "Invalid Bank Transaction"


def create_rejection_embed(message: str) -> discord.Embed:
    """Red embed explaining why an action was refused and what to do instead."""
    return discord.Embed(title=REJECTION_TITLE, description=message, color=discord.Color.red())


def create_transfer_embed(actor_name: str, receipt, given: bool) -> discord.Embed:
    verb = "gave" if given else "took"
    preposition = "to" if given else "from"
    embed = discord.Embed(
        title=f"{BUCKS_EMOTE} Bank Transaction",
        description=(
            f"**{actor_name}** {verb} {format_money(abs(receipt.amount))} "
            f"{preposition} {mention(receipt.target_id)}"
        ),
        color=discord.Color.green() if given else discord.Color.red(),
    )
    if receipt.transaction.comment:
        embed.add_field(name="Reason", value=receipt.transaction.comment, inline=False)
    embed.add_field(name="New Balance", value=format_money(receipt.new_balance), inline=False)
    return embed


def create_balance_embed(username: str, balance) -> discord.Embed:
    return discord.Embed(
        title=f"{username}'s Balance",
        description=format_money(balance),
        color=discord.Color.green() if balance >= 0 else discord.Color.red(),
    )


def create_transactions_embed(username: str, transactions) -> discord.Embed:
    embed = discord.Embed(title=f"{username}'s Recent Transactions", color=discord.Color.blue())
    if not transactions:
        embed.description = "No transactions yet."
        return embed
    for txn in transactions:
        embed.add_field(
            name=f"{format_signed(txn.amount)} from {txn.initiator}",
            value=f"{txn.comment or '*no reason given*'}\n{format_relative_time(txn.timestamp)}",
            inline=False,
        )
    return embed


def create_ranking_embed(
    title: str, entries: list[LeaderboardEntry], color: discord.Color
) -> discord.Embed:
    embed = discord.Embed(title=title, color=color)
    if not entries:
        embed.description = "Nobody has any bucks yet."
        return embed
    lines = [
        f"{idx}. {mention(e.user_id)} ({e.username}): {format_money(e.balance)}"
        for idx, e in enumerate(entries, 1)
    ]
    embed.description = "\n".join(lines)
    return embed


STANDING_TEXT = {
    "woke": ("You are woke.", discord.Color.green()),
    "problematic": ("You are problematic.", discord.Color.red()),
    "neutral": ("You are neither woke nor problematic.", discord.Color.light_grey()),
}


def create_standing_embed(username: str, standing: str) -> discord.Embed:
    text, color = STANDING_TEXT[standing]
    return discord.Embed(title=f"Is {username} woke?", description=text, color=color)


def create_lottery_embed(lottery: Lottery, duration_seconds: int) -> discord.Embed:
    embed = discord.Embed(
        title="🎟️ Lottery",
        description=f"Current jackpot: **{format_money(lottery.pot)}**",
        color=discord.Color.gold(),
    )
    embed.add_field(name="Tickets Sold", value=str(lottery.total_tickets), inline=True)
    embed.add_field(
        name="Drawing",
        value=format_relative_time(lottery.started_at + duration_seconds),
        inline=True,
    )
    return embed


def create_lottery_winner_embed(settlement) -> discord.Embed:
    embed = discord.Embed(
        title="🎉 Lottery Winner!",
        description=(
            f"{mention(settlement.winner_id)} won **{format_money(settlement.amount)}** "
            f"out of {settlement.total_tickets} ticket(s)!"
        ),
        color=discord.Color.gold(),
    )
    embed.add_field(name="New Balance", value=format_money(settlement.new_balance), inline=False)
    return embed


def create_level_embed(status) -> discord.Embed:
    current = status.current.name if status.current else "No level"
    embed = discord.Embed(
        title="🧠 Levels",
        description=f"Current level: **{current}**",
        color=discord.Color(status.current.color) if status.current else discord.Color.light_grey(),
    )
    embed.add_field(
        name="Transfer Limits",
        value=f"{format_money(status.lower_limit)} to {format_money(status.upper_limit)}",
        inline=False,
    )
    if status.next is None:
        embed.add_field(name="Next Level", value="You're at the top of the ladder.", inline=False)
    else:
        embed.add_field(
            name="Next Level",
            value=(
                f"**{status.next.name}** for {format_money(status.next.cost)} "
                f"(limits {format_money(status.next.lower_limit)} to "
                f"{format_money(status.next.upper_limit)})"
            ),
            inline=False,
        )
    embed.add_field(name="Balance", value=format_money(status.balance), inline=False)
    return embed


def create_level_purchase_embed(username: str, purchase) -> discord.Embed:
    return discord.Embed(
        title="🧠 Level Up!",
        description=(
            f"**{username}** is now **{purchase.level.name}**.\n"
            f"New balance: {format_money(purchase.new_balance)}"
        ),
        color=discord.Color(purchase.level.color),
    )


def create_level_ladder_text() -> str:
    return "\n".join(
        f"{lvl.id}. {lvl.name}: {format_money(lvl.cost)} "
        f"({format_money(lvl.lower_limit)} to {format_money(lvl.upper_limit)})"
        for lvl in LEVELS
    )


def create_bet_embed(bet: Bet) -> discord.Embed:
    embed = discord.Embed(
        title=f"🎲 {bet.reason}",
        description=f"Opened by **{bet.owner_name}**. Pick an option below to wager.",
        color=discord.Color.blurple(),
    )
    for name, option in bet.options.items():
        embed.add_field(
            name=name,
            value=f"{format_money(option.total)} from {len(option.voters)} bettor(s)",
            inline=True,
        )
    embed.set_footer(text=f"Total pot: {format_money(bet.pot)}")
    return embed


def create_settlement_embed(settlement) -> discord.Embed:
    embed = discord.Embed(
        title=f"🏁 Bet Ended: {settlement.bet.reason}",
        description=(
            f"Winning option: **{settlement.winning_option}**\n"
            f"Pot: {format_money(settlement.pot)}"
        ),
        color=discord.Color.green(),
    )
    winners = settlement.winners
    if winners:
        embed.add_field(
            name="Winners",
            value="\n".join(f"{mention(uid)}: +{format_money(amount)}" for uid, amount in winners.items()),
            inline=False,
        )
    else:
        embed.add_field(name="Winners", value="Nobody picked the winning option.", inline=False)
    return embed


def create_cancel_ticket_embed(ticket: CancelTicket, threshold: int) -> discord.Embed:
    embed = discord.Embed(
        title=f"🚫 Cancel {ticket.target_name}?",
        description=ticket.description,
        color=discord.Color.dark_red() if ticket.resolved else discord.Color.orange(),
    )
    embed.add_field(name="Opened By", value=ticket.initiator_name, inline=True)
    embed.add_field(name="Votes", value=f"{len(ticket.votes)}/{threshold}", inline=True)
    embed.add_field(name="Opened", value=format_relative_time(ticket.opened_at), inline=True)
    status = "This person was canceled. " if ticket.resolved else ""
    embed.set_footer(text=f"{status}Ticket {ticket.id}")
    return embed


def create_ticket_list_embed(title: str, tickets: list[CancelTicket], threshold: int) -> discord.Embed:
    embed = discord.Embed(title=title, color=discord.Color.orange())
    if not tickets:
        embed.description = "No tickets."
        return embed
    embed.description = "\n".join(
        f"{'✅' if t.resolved else '🕒'} {t.display_text} ({len(t.votes)}/{threshold} votes)"
        for t in tickets
    )
    return embed
