from datetime import datetime, timezone


def utcnow() -> datetime:
    """Agora em UTC, com tzinfo (colunas de data exigem timezone)."""
    return datetime.now(timezone.utc)
