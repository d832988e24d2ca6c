"""Seed a development database with a post, a comment and a few users to like it."""
import asyncio
import argparse

from social_api.database import Base, async_session, engine
from social_api.models import Comment, Post, User


async def seed(users: int = 3, reset: bool = False):
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        author = User(username="author", email="author@example.com")
        session.add(author)
        await session.flush()

        post = Post(title="Hello", content="First post", author_id=author.id)
        session.add(post)
        await session.flush()

        comment = Comment(content="First comment", post_id=post.id, author_id=author.id)
        session.add(comment)

        likers = [User(username=f"reader{i}", email=f"reader{i}@example.com") for i in range(users)]
        session.add_all(likers)
        await session.commit()

    print(f"post:    {post.id}")
    print(f"comment: {comment.id}")
    print(f"author:  {author.id}")
    for user in likers:
        print(f"reader:  {user.id}")

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the database with demo data")
    parser.add_argument("--users", type=int, default=3, help="Number of extra users to create")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()
    asyncio.run(seed(users=args.users, reset=args.reset))
