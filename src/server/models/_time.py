from datetime import datetime, timezone


def utcnow() -> datetime:
    # Alltid med tidszon (UTC); sqlmodel vägrar spara naiva datetime-värden
    return datetime.now(timezone.utc)
