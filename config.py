import os
import yaml
from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from errors import ConfigurationError

load_dotenv()

# Load YAML file (optional, every key has a default)
CONFIG_PATH = os.getenv("LOBSTERS_CONFIG", "config.yml")
if os.path.exists(CONFIG_PATH):
    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
else:
    cfg = {}

# Connection and run
DSN = os.getenv("LOBSTERS_DSN", cfg.get("dsn", "mysql+aiomysql://lobsters@localhost/soup"))
IN_FLIGHT = int(os.getenv("LOBSTERS_IN_FLIGHT", cfg.get("in_flight", 50)))
VARIANT = os.getenv("LOBSTERS_VARIANT", cfg.get("queries", "original"))
PRIME = str(os.getenv("LOBSTERS_PRIME", cfg.get("prime", False))).lower() in {"1", "true", "yes"}
POOL_TIMEOUT = float(cfg.get("pool_timeout", 300))
TRACE_PATH = os.getenv("LOBSTERS_TRACE", cfg.get("trace"))
LOG_LEVEL = cfg.get("log_level", "INFO")

# Synthetic content written by the page handlers
workload = cfg.get("workload", {})
COMMENT_BODY          = workload.get("comment_body", "moar benchmarking")
COMMENT_MARKDOWN      = workload.get("comment_markdown", "<p>moar benchmarking</p>\n")
COMMENT_CONFIDENCE    = float(workload.get("comment_confidence", 0.1828847834138887))
COMMENT_HOTNESS_DELTA = float(workload.get("comment_hotness_delta", 1.0))
STORY_DESCRIPTION     = workload.get("story_description", "to infinity")
STORY_MARKDOWN        = workload.get("story_markdown", "<p>to infinity</p>\n")
STORY_HOTNESS         = float(workload.get("story_hotness", -19216.2884921))
STORY_REHOTNESS       = float(workload.get("story_rehotness", -19216.5479744))
SUBMIT_TAG            = workload.get("submit_tag", "test")

# Listing windows
FRONTPAGE_LIMIT  = int(workload.get("frontpage_limit", 51))
RECENT_MAX_SCORE = int(workload.get("recent_max_score", 5))
COMMENTS_LIMIT   = int(workload.get("comments_limit", 40))

# async drivers used when the DSN names a bare backend
ASYNC_DRIVERS = {
    "mysql": "mysql+aiomysql",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def parse_dsn(dsn: str) -> URL:
    """Parse a connection string, swapping in the async driver for bare backends."""
    try:
        url = make_url(dsn)
    except ArgumentError as e:
        raise ConfigurationError(f"malformed connection string: {dsn!r}") from e
    if url.drivername in ASYNC_DRIVERS:
        url = url.set(drivername=ASYNC_DRIVERS[url.drivername])
    return url


def check_in_flight(in_flight: int) -> int:
    if in_flight < 1:
        raise ConfigurationError(f"in_flight must be at least 1, got {in_flight}")
    return in_flight
