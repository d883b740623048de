from typing import Final

# --- Candidate sourcing ---
DISCOVERY_KEYWORD_LIMIT: Final[int] = 12
DISCOVERY_QUERY_CHUNK: Final[int] = 3  # terms per OR-query
TRENDING_QUERY: Final[str] = "trending OR viral OR new"
RELATED_SOURCE_WINDOW: Final[int] = 5  # pick the "rabbit hole" seed from the last N watched
SUBSCRIPTION_SAMPLE_SIZE: Final[int] = 2
PREFERRED_CHANNEL_LIMIT: Final[int] = 3
CHANNEL_VIDEOS_LIMIT: Final[int] = 8

# --- Scoring context ---
RECENT_WATCH_LIMIT: Final[int] = 100
RECENT_CHANNEL_LIMIT: Final[int] = 20

# --- Parsing ---
UNKNOWN_AGE_DAYS: Final[float] = 999.0
HOURS_MIN_DAYS: Final[float] = 0.04  # "n hours ago" never reads as brand new
VELOCITY_MIN_DAYS: Final[float] = 0.1

# --- Relevance ---
RELEVANCE_SCALE: Final[float] = 10.0  # lifts cosine [0,1] to the log10 range of the other signals

# --- Discovery mode weights ---
DISCOVERY_RELEVANCE_WEIGHT: Final[float] = 2.0
DISCOVERY_POPULARITY_WEIGHT: Final[float] = 1.0
DISCOVERY_VELOCITY_WEIGHT: Final[float] = 1.5
DISCOVERY_FRESHNESS_WEIGHT: Final[float] = 2.0
DISCOVERY_RELEVANCE_FLOOR: Final[float] = 0.05
DISCOVERY_OFF_TOPIC_SCORE_CAP: Final[float] = 5.0
FRESH_BOOST_1_DAY: Final[float] = 1.3
FRESH_BOOST_3_DAYS: Final[float] = 1.15

# --- Comfort mode weights ---
COMFORT_RELEVANCE_WEIGHT: Final[float] = 4.0
COMFORT_POPULARITY_WEIGHT: Final[float] = 0.5
COMFORT_VELOCITY_WEIGHT: Final[float] = 0.25
COMFORT_FRESHNESS_WEIGHT: Final[float] = 0.5
CHANNEL_AFFINITY_BONUS: Final[float] = 8.0

# --- Penalties ---
HISTORY_PENALTY_DISCOVERY: Final[float] = 0.01
HISTORY_PENALTY_COMFORT: Final[float] = 0.2
NEGATIVE_KEYWORD_PENALTY: Final[float] = 0.5

# --- Diversity (max items per channel) ---
MAX_PER_CHANNEL_DISCOVERY: Final[int] = 2
MAX_PER_CHANNEL_COMFORT: Final[int] = 4

# --- Shorts feed ---
SHORTS_MAX_DURATION_SECONDS: Final[int] = 60
