"""
Standard error codes for service layer.

These error codes allow command handlers to programmatically handle
specific error conditions without parsing error message text.
"""

# General errors
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
PERMISSION_DENIED = "permission_denied"
RATE_LIMITED = "rate_limited"
COOLDOWN_ACTIVE = "cooldown_active"

# Transfer errors
INVALID_AMOUNT = "invalid_amount"
SELF_TARGET_FORBIDDEN = "self_target_forbidden"
TARGET_UNRESOLVABLE = "target_unresolvable"
INSUFFICIENT_FUNDS = "insufficient_funds"

# Bet errors
BET_EXISTS = "bet_exists"
BET_NOT_FOUND = "bet_not_found"
INVALID_OPTION = "invalid_option"
ALREADY_WAGERED = "already_wagered"
NOT_BET_OWNER = "not_bet_owner"

# Level errors
MAX_LEVEL_REACHED = "max_level_reached"

# Cancellation ticket errors
TICKET_NOT_FOUND = "ticket_not_found"
TICKET_RESOLVED = "ticket_resolved"
ALREADY_VOTED = "already_voted"
