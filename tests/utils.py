"""Test utilities for shortlink tests."""

import random
import string
from typing import Optional

from shortlink.models.mapping import Mapping


def random_string(length: int = 10) -> str:
    """Generate a random lowercase alphanumeric string."""
    return ''.join(random.choice(string.ascii_lowercase + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_mapping(
    db,
    slug: Optional[str] = None,
    url: Optional[str] = None,
) -> Mapping:
    """Create and commit a test Mapping directly, bypassing the service."""
    mapping = Mapping(slug=slug or random_string(6), url=url or random_url())
    db.add(mapping)
    await db.commit()
    await db.refresh(mapping)
    return mapping
