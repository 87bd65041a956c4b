"""Global constants for the racketdraw application."""

# Firestore collections
USERS_COLLECTION = "users"
PLAYERS_COLLECTION = "players"
TOURNAMENTS_COLLECTION = "tournaments"
CLUBS_COLLECTION = "clubs"

# Session keys
SESSION_USER_ID = "user_id"
SESSION_ROLE = "role"

# Roles
ROLE_ADMIN = "admin"
ROLE_COACH = "coach"
ROLE_PLAYER = "player"
ROLES = (ROLE_ADMIN, ROLE_COACH, ROLE_PLAYER)
MANAGER_ROLES = (ROLE_ADMIN, ROLE_COACH)

# Storage
DEFAULT_FIRESTORE_TIMEOUT = 30.0

# Tournament configuration
SPORTS = ("Tennis", "Padel")
MODE_SINGLES = "Singles"
MODE_DOUBLES = "Doubles"
ALLOWED_SETS_PER_MATCH = (1, 2)
ALLOWED_GAMES_PER_SET = (4, 6)
MIN_TIEBREAK_POINTS = 7
MAX_TIEBREAK_POINTS = 25
DEFAULT_SET_TIEBREAK_POINTS = 7
DEFAULT_MATCH_TIEBREAK_POINTS = 10
MIN_TIEBREAK_MARGIN = 2

# Draw
MAX_SEEDS = 6
MIN_PARTICIPANTS = 2
DEFAULT_GROUP_COUNT = 1
DEFAULT_ADVANCE_COUNT = 2
