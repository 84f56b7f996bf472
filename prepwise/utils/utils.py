import uuid
import time
from datetime import datetime, timezone

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def new_request_id() -> str:
    """Correlation token: epoch milliseconds plus a short random suffix"""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

def clean_for_firestore(value):
    """Recursively drop None values (dict entries and list items) before a write"""
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            item = clean_for_firestore(item)
            if item is not None:
                cleaned[key] = item
        return cleaned
    if isinstance(value, (list, tuple)):
        return [clean_for_firestore(item) for item in value if item is not None]
    return value

def clean_document(data: dict) -> dict:
    """Convert Firestore timestamps (written by other clients) to ISO strings"""
    cleaned = {}
    for key, value in data.items():
        if hasattr(value, 'isoformat'):  # Handle datetime objects
            cleaned[key] = value.isoformat()
        elif isinstance(value, dict):
            cleaned[key] = clean_document(value)
        elif isinstance(value, list):
            cleaned[key] = [
                clean_document(item) if isinstance(item, dict)
                else item.isoformat() if hasattr(item, 'isoformat') else item
                for item in value
            ]
        else:
            cleaned[key] = value
    return cleaned
