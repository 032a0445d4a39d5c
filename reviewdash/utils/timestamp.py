"""Timestamp parsing utilities."""
from datetime import datetime, timezone


def parse_timestamp(s: str) -> datetime:
    """
    Parse a timestamp string from the backend into an aware datetime.
    
    Supports:
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with offset: "2024-01-02T09:10:00+00:00"
    - ISO format without timezone (assumed UTC): "2024-01-02T09:10:00"
    - Date only: "2024-01-02"
    - Space-separated: "2024-01-02 09:10:00"
    
    Raises:
        ValueError: If the string is empty or cannot be parsed
    """
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")
    
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    
    candidates = [s]
    if " " in s and "T" not in s:
        candidates.append(s.replace(" ", "T", 1))
    
    for candidate in candidates:
        try:
            dt = datetime.fromisoformat(candidate)
        except ValueError:
            continue
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    
    raise ValueError(f"Unable to parse timestamp: {s}. Expected ISO format (e.g., '2024-01-02T09:10:00Z')")
