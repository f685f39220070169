from datetime import datetime, timezone

# Microsecond resolution keeps "date desc" ordering stable for documents
# written within the same second.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
