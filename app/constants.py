"""
Constants for activity actions and point weights
"""

# Activity log actions
ACTION_LOGIN = "login"
ACTION_LOGOUT = "logout"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"
ACTION_BULK_DELETE = "bulk_delete"
ACTION_EXPORT = "export"
ACTION_VIEW = "view"
ACTION_SEARCH = "search"

ACTIVITY_ACTIONS = (
    ACTION_LOGIN,
    ACTION_LOGOUT,
    ACTION_CREATE,
    ACTION_UPDATE,
    ACTION_DELETE,
    ACTION_BULK_DELETE,
    ACTION_EXPORT,
    ACTION_VIEW,
    ACTION_SEARCH,
)

# Points awarded per unit of each counter
ATTENDEES_WEIGHT = 150
DROPPED_LINKS_WEIGHT = 100
RECRUITS_WEIGHT = 500
NICKNAMES_SET_WEIGHT = 100
GAME_HANDLED_WEIGHT = 1000

# Value stored when the client does not report a MAC address
MAC_ADDRESS_UNAVAILABLE = "unavailable"

# Largest accepted counter; keeps every total within a 32-bit INTEGER column
MAX_COUNTER = 1_000_000

# Largest value an INTEGER primary key can hold
MAX_RECORD_ID = 2**31 - 1
