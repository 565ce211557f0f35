"""Time helpers. The store keeps Unix seconds throughout."""
import time
from datetime import datetime, timezone


def unix_now() -> int:
    """Current time as Unix seconds."""
    return int(time.time())


def local_day_start(timestamp: int) -> int:
    """Unix timestamp of local midnight of the day containing ``timestamp``."""
    local = datetime.fromtimestamp(timestamp)
    return int(local.replace(hour=0, minute=0, second=0, microsecond=0).timestamp())


def format_utc(timestamp: int, pattern: str) -> str:
    """strftime of a Unix timestamp interpreted as UTC."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(pattern)
