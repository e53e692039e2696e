from datetime import datetime, timezone


def utcnow():
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def mean(values):
    """Arithmetic mean that treats an empty sequence as 0."""
    values = [float(v) for v in values if v is not None]
    if not values:
        return 0
    return sum(values) / len(values)

def round_score(value, places=2):
    return round(float(value), places)
