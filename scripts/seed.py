"""Recreate the schema and fill it with demo users, posts and comments."""
import argparse
import asyncio
import random
import time

from blog_api.database import Base, async_session, engine
from blog_api.models import Comment, Post, User
from blog_api.security import hash_password

TOPICS = ["python", "fastapi", "postgresql", "docker", "testing", "security",
          "asyncio", "sqlalchemy", "deployment", "api design"]

DEMO_PASSWORD = "password123"


async def seed(num_posts: int = 50, comments_per_post: int = 5, num_users: int = 10):
    print(f"Seeding: {num_users} users, {num_posts} posts, {num_posts * comments_per_post} comments")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One hash shared by every demo account; bcrypt is deliberately slow.
    password_hash = hash_password(DEMO_PASSWORD)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = User(
                name=f"User {i}",
                email=f"user_{i:04d}@example.com",
                password=password_hash,
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users (password: {DEMO_PASSWORD})")

        posts = []
        for i in range(num_posts):
            topic = random.choice(TOPICS)
            post = Post(
                title=f"Post {i}: notes on {topic}",
                content=f"This is post {i}, a few thoughts about {topic}. " * 5,
                user_id=random.choice(users).id,
            )
            session.add(post)
            posts.append(post)
        await session.flush()

        for post in posts:
            for j in range(comments_per_post):
                session.add(Comment(
                    content=f"Comment {j} on post {post.id}.",
                    post_id=post.id,
                    user_id=random.choice(users).id,
                ))
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--posts", type=int, default=50, help="Number of posts to create")
    parser.add_argument("--comments", type=int, default=5, help="Comments per post")
    parser.add_argument("--users", type=int, default=10, help="Number of users to create")
    args = parser.parse_args()
    asyncio.run(seed(args.posts, args.comments, args.users))


if __name__ == "__main__":
    main()
