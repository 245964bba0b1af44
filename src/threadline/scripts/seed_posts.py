# src/threadline/scripts/seed_posts.py
"""Insert sample posts for local development."""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from threadline.db.session import SessionLocal
from threadline.db.time import utcnow
from threadline.repositories.post_repo import PostRepository
from threadline.repositories.user_repo import UserRepository

SAMPLE_TITLES = [
    "Hearts Divided",
    "I Love You Again",
    "Paths of Glory",
    "Divine Madness!",
    "American Son",
    "Scary Movie",
    "Get Educated",
    "Street Fighter II",
]

SAMPLE_TEXT = (
    "Integer tincidunt ante vel ipsum. Praesent blandit lacinia erat. "
    "Vestibulum sed magna at nunc commodo placerat.\n\n"
    "Praesent blandit. Nam nulla. Integer pede justo, lacinia eget, "
    "tincidunt eget, tempus vel, pede."
)


def seed_posts(creator_id: int, count: int) -> int:
    """Insert `count` posts for `creator_id`, one minute apart, newest last."""
    with SessionLocal() as db:
        if UserRepository(db).get(creator_id) is None:
            raise ValueError(f"user {creator_id} does not exist")
        repo = PostRepository(db)
        start = utcnow() - timedelta(minutes=count)
        for i in range(count):
            title = SAMPLE_TITLES[i % len(SAMPLE_TITLES)]
            repo.create(
                title=f"{title} #{i + 1}",
                text=SAMPLE_TEXT,
                creator_id=creator_id,
                created_at=start + timedelta(minutes=i),
            )
        db.commit()
    return count


def main() -> None:
    parser = argparse.ArgumentParser(description="Insert sample posts")
    parser.add_argument("--creator-id", type=int, required=True, help="Owner of the posts")
    parser.add_argument("--count", type=int, default=50, help="Number of posts to insert")
    args = parser.parse_args()

    try:
        inserted = seed_posts(args.creator_id, args.count)
    except ValueError as exc:
        print(f"[seed_posts] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"[seed_posts] inserted {inserted} posts for user {args.creator_id}")


if __name__ == "__main__":
    main()
