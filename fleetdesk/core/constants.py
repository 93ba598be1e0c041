import re

ZIP_PATTERN = re.compile(r"^\d{5}$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Statuses with server-side rules
DRIVING_PREVIOUS_ROUTE = "Driving previous route"
HOMETIME = "Hometime"

# Seed catalog, in display order. "Empty" is the default.
DEFAULT_ROUTE_STATUSES = [
    ("Empty", "#FF9E44"),
    ("Service", "#4169E1"),
    (DRIVING_PREVIOUS_ROUTE, "#FFB6C1"),
    (HOMETIME, "#A9A9A9"),
    ("Loaded", "#2E8B57"),
    ("AT PU", "#FFD700"),
    ("AT DEL", "#FFA500"),
    ("34 hour reset", "#DDA0DD"),
    ("Not answering", "#4682B4"),
]
DEFAULT_STATUS_NAME = "Empty"

# Route audit actions
AUDIT_CREATED = "created"
AUDIT_UPDATED = "updated"
AUDIT_DELETED = "deleted"
ALL_FIELDS = "all"

# Weekly route audit actions
WEEK_CREATED = "created"
WEEK_UPDATED = "updated"
WEEK_ROUTE_ADDED = "route_added"
WEEK_ROUTE_REMOVED = "route_removed"

# Mileage provenance
MILEAGE_MANUAL = "manual"
MILEAGE_SAME_STATE = "same_state"
MILEAGE_STATE_PAIR = "state_pair"
MILEAGE_ZIP_DELTA = "zip_delta"
MILEAGE_HAVERSINE = "haversine"
MILEAGE_FALLBACK = "fallback"

# "Driving previous route" picker
PREVIOUS_ROUTE_WINDOW_DAYS = 14
MAX_PREVIOUS_ROUTES = 7
