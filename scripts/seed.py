"""Populate a development database with users, posts, comments and likes."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta
from app.database import engine, async_session, Base
from app.models import ROLES, Comment, Like, Post
from app.security import create_access_token
from app.services import user_service

FILE_TYPES = [None, "image/png", "image/jpeg", "video/mp4"]

async def seed(small: bool = False, show_tokens: bool = False):
    num_users = 5 if small else 50
    num_posts = 20 if small else 2000
    max_comments_per_post = 3 if small else 8

    print(f"Seeding: {num_users} users, {num_posts} posts, up to {max_comments_per_post} comments per post")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = await user_service.create_user(
                session,
                user_name=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                avatar=f"avatars/{i:04d}.png",
                role=ROLES[i % len(ROLES)],
            )
            users.append(user)
        print(f"  Created {len(users)} users")

        total_comments = 0
        total_likes = 0
        for i in range(num_posts):
            posted = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 365))
            file_type = random.choice(FILE_TYPES)
            post = Post(
                title=f"Post {i}",
                date=posted,
                content=f"Content of post {i}. " * 10,
                file_path=f"uploads/{i:06d}" if file_type else None,
                file_type=file_type,
                is_spoiler=random.random() < 0.1,
                author_id=random.choice(users).id,
            )
            session.add(post)
            await session.flush()

            for _ in range(random.randint(0, max_comments_per_post)):
                session.add(Comment(
                    post_id=post.id,
                    author_id=random.choice(users).id,
                    content=f"Comment on post {i}",
                    is_spoiler=random.random() < 0.05,
                    date=posted + timedelta(hours=random.randint(1, 48)),
                ))
                total_comments += 1

            for liker in random.sample(users, k=random.randint(0, len(users))):
                session.add(Like(post_id=post.id, user_id=liker.id))
                total_likes += 1

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Users: {num_users}")
    print(f"  Posts: {num_posts}")
    print(f"  Comments: {total_comments}")
    print(f"  Likes: {total_likes}")

    if show_tokens:
        print("\nBearer tokens:")
        for user in users:
            print(f"  {user.user_name} ({user.role}): {create_access_token(user.id, user.role)}")


def main():
    parser = argparse.ArgumentParser(description="Seed the Mays database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (20 posts)")
    parser.add_argument("--tokens", action="store_true", help="Print a bearer token per user")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, show_tokens=args.tokens))


if __name__ == "__main__":
    main()
