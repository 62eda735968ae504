from typing import Final

DEFAULT_AISLE: Final[str] = "Other"
PANTRY_MODE_HIDE: Final[str] = "hide"
PANTRY_MODE_MARK: Final[str] = "mark"
PANTRY_MODES: Final[tuple[str, ...]] = (PANTRY_MODE_HIDE, PANTRY_MODE_MARK)
# Idempotency tokens remembered per list (oldest dropped first)
MAX_APPLIED_REQUESTS: Final[int] = 200
# Recent shopping list events kept for polling clients
MAX_EVENTS: Final[int] = 300
USER_HEADER: Final[str] = "X-Basket-User"
