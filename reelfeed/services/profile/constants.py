from typing import Final

# Search history (strongest, explicit intent)
SEARCH_HISTORY_LIMIT: Final[int] = 30
SEARCH_WEIGHT: Final[float] = 8.0
SEARCH_DECAY: Final[float] = 8.0  # e-folding rank

# Watch history (implicit interest)
WATCH_HISTORY_LIMIT: Final[int] = 100
WATCH_WEIGHT: Final[float] = 4.0
WATCH_DECAY: Final[float] = 20.0
WATCH_CHANNEL_MULTIPLIER: Final[float] = 1.5  # channel name matters more than title words

# Subscriptions (long-term affinity, flat, uncapped)
SUBSCRIPTION_WEIGHT: Final[float] = 3.0
