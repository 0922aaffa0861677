"""Global constants for the provopadel application."""

# Session keys
SESSION_TOKEN = "pc_token"  # nosec B105
SESSION_IS_ADMIN = "pc_is_admin"

# Tournament statuses
STATUS_UPCOMING = "upcoming"
STATUS_ONGOING = "ongoing"
STATUS_GROUPS_FINISHED = "groups_finished"
STATUS_FINISHED = "finished"
RESULT_EDITABLE_STATUSES = (STATUS_ONGOING, STATUS_GROUPS_FINISHED)

# Match statuses
MATCH_PENDING = "pending"
MATCH_ONGOING = "ongoing"
MATCH_PLAYED = "played"

# Match stages, in bracket order
STAGE_ORDER = ("group", "round_of_32", "round_of_16", "quarter", "semi", "final")
PLAYOFF_STAGES = STAGE_ORDER[1:]
STAGE_LABELS = {
    "group": "Zonas",
    "round_of_32": "16vos",
    "round_of_16": "Octavos",
    "quarter": "Cuartos",
    "semi": "Semis",
    "final": "Final",
}
MATCH_STATUS_LABELS = {
    MATCH_PENDING: "Por jugar",
    MATCH_ONGOING: "Jugando",
    MATCH_PLAYED: "Finalizado",
}

# Result entry
MIN_SETS = 2
MAX_SETS = 3

# Schedule form
SCHEDULE_MINUTES = ("00", "30")

# Support tickets
TICKET_STATUSES = ("open", "pending", "closed")

# Payments
DEFAULT_CURRENCY = "ARS"

# Pair import
IMPORT_ERROR_LIMIT = 5
CATEGORIES = ("1ra", "2da", "3ra", "4ta", "5ta", "6ta", "7ma")
GENDERS = (("damas", "Damas"), ("masculino", "Masculino"))
PLAYER_CATEGORIES = ("8va", "7ma", "6ta", "5ta", "4ta", "3ra", "2da", "1ra")
