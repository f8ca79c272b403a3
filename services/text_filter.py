"""
Free-text sanitizing for comments, bet reasons, options and ticket descriptions.
"""

from better_profanity import profanity

from config import TEXT_LIMIT

profanity.load_censor_words()


def truncate(text: str | None, limit: int | None = None) -> str:
    limit = limit if limit is not None else TEXT_LIMIT
    return (text or "")[:limit]


def clean_text(text: str | None, limit: int | None = None) -> str:
    """Truncate to the text limit, then censor profanity."""
    return profanity.censor(truncate(text, limit))
