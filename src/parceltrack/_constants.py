"""Internal constants shared across the library."""

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND

DEFAULT_TRACKING_NUMBER = "TM123456789"
DEFAULT_POLL_INTERVAL: float = 10.0

#: Start times are backdated by ``randint(0, MAX_BACKDATE_MINUTES - 1)`` minutes.
MAX_BACKDATE_MINUTES = 240

ARRIVED = "Arrived"

# ------------------------------------------------------------------
# Storage keys
# ------------------------------------------------------------------

START_TIME_KEY_PREFIX = "startTime:"
LAST_STATUS_KEY_PREFIX = "lastStatus:"
THEME_KEY = "theme"

THEME_DARK = "dark"
THEME_LIGHT = "light"

# ------------------------------------------------------------------
# Shareable link
# ------------------------------------------------------------------

SHARE_QUERY_PARAM = "tn"
