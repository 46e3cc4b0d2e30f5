"""Populate the blog database with demo users and tagged articles."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta
from blog_api.database import engine, async_session, Base
from blog_api.models import User, Article
from blog_api.security import hash_password
from blog_api.slugs import generate_slug

TAGS = ["python", "fastapi", "postgresql", "docker", "kubernetes", "java",
        "javascript", "typescript", "aws", "devops", "testing", "ninja-tips"]

DEMO_PASSWORD = "password123"

async def seed(small: bool = False):
    num_users = 5 if small else 25
    num_articles = 50 if small else 2000

    print(f"Seeding: {num_users} users, {num_articles} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One hash for everyone; bcrypt is deliberately slow.
    password_hash = hash_password(DEMO_PASSWORD)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = User(
                name=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                bio=f"I am demo user number {i}. I write about technology.",
                password=password_hash,
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users (password: {DEMO_PASSWORD})")

        batch_size = 500
        for batch_start in range(0, num_articles, batch_size):
            batch_end = min(batch_start + batch_size, num_articles)
            for i in range(batch_start, batch_end):
                created = datetime.now(timezone.utc) - timedelta(
                    days=random.randint(0, 365), seconds=random.randint(0, 86399)
                )
                title = f"Article {i}: Getting started with {random.choice(TAGS)}"
                session.add(Article(
                    title=title,
                    slug=generate_slug(title),
                    description=f"A short guide, part {i}.",
                    body=f"This is the full body of article {i}. " * 20,
                    tag_list=random.sample(TAGS, k=random.randint(0, 4)),
                    created_at=created,
                    updated_at=created,
                    author_id=random.choice(users).id,
                ))
            await session.flush()
            print(f"  Batch {batch_start}-{batch_end}: articles created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 articles)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
