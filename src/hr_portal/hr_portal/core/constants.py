"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

MIN_MONTH = 1
MAX_MONTH = 12
MIN_YEAR = 2000
MAX_YEAR = 2100

DEFAULT_SESSION_DAYS = 30
DEFAULT_ASSISTANT_TIMEOUT = 30

# Money columns are DECIMAL(12,2).
MONEY_PLACES = 2
MAX_MONEY = "9999999999.99"
