"""
Placeholder posts shown before the first feed page arrives.
These are kept apart from the repository so fake data never reaches it.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import List

from .models import Author, Post, PostType

_AUTHORS = [
    Author(id="demo-user-1", name="Hafidz Ramadhan", type="student"),
    Author(id="demo-user-2", name="Dewi Anggraini", type="lecturer"),
    Author(id="demo-user-3", name="BEM ITTP", type="organization"),
    Author(id="demo-user-4", name="Rizky Pratama", type="alumni"),
]

_TEXTS = {
    PostType.TWEET: [
        "Anyone up for futsal after class today?",
        "The library wifi is finally fast again.",
    ],
    PostType.ACADEMIC: [
        "Reminder: mid-term schedule for Informatics is out on the portal.",
        "Thesis consultation hours move to Thursday this week.",
    ],
    PostType.ACHIEVEMENT: [
        "Our robotics team took first place at the regional competition!",
        "Congratulations to the debate team for reaching the national final.",
    ],
    PostType.EVENT: [
        "Tech talk on cloud careers this Saturday in the main hall.",
        "Campus job fair opens next Monday, bring your CV.",
    ],
    PostType.SCHOLARSHIP: [
        "Applications for the achievement scholarship close on the 30th.",
        "Exchange program scholarship info session on Friday.",
    ],
}


def mock_rng(seed_source: str) -> random.Random:
    """Create a deterministic random number generator for consistent demo data."""
    seed = sum(ord(c) for c in seed_source) % (2**32)
    return random.Random(seed)


def generate_all_post(seed: str = "ittpizen") -> List[Post]:
    """Two demo posts per post type, newest first."""
    rng = mock_rng(seed)
    now = datetime.now(timezone.utc)
    posts: List[Post] = []

    for post_type, texts in _TEXTS.items():
        for text in texts:
            posts.append(Post(
                id=f"demo-{len(posts) + 1}",
                user=rng.choice(_AUTHORS),
                text=text,
                type=post_type,
                like_count=rng.randint(0, 120),
                comment_count=rng.randint(0, 30),
                liked=False,
                created_at=now - timedelta(minutes=rng.randint(1, 600)),
            ))

    posts.sort(key=lambda p: p.created_at, reverse=True)
    return posts


__all__ = ["generate_all_post", "mock_rng"]
