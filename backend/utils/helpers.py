import re
import secrets
import uuid
from datetime import datetime

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9-]+")
_REPEATED_HYPHENS = re.compile(r"-+")


def generate_slug(name: str) -> str:
    slug = (name or "").lower().replace(" ", "-")
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_order_number() -> str:
    # EJ-<date>-<8 hex chars>
    return f"EJ-{datetime.now().strftime('%Y%m%d')}-{secrets.token_hex(4).upper()}"


def generate_sku(metal_type: str, category: str, number: int) -> str:
    metal = (metal_type or "X")[0].upper()
    cat = (category or "X")[0].upper()
    return f"{metal}{cat}-{number:06d}"


def new_object_id() -> str:
    """Identifier for documents embedded in JSON columns (addresses, variants)."""
    return uuid.uuid4().hex
