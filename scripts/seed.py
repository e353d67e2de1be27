"""Database seeder for the news API (development data)."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from app.database import engine, async_session, Base
from app.models import NewsArticle, NewsCategory

AUTHORS = ["Andi Pratama", "Siti Rahma", "Budi Santoso", "Dewi Lestari", "Rizky Hidayat"]

TOPICS = {
    NewsCategory.SPORTS: ["Liga 1", "bulu tangkis", "MotoGP", "timnas"],
    NewsCategory.POLITICS: ["DPR", "pemilu", "kabinet", "pilkada"],
    NewsCategory.TECHNOLOGY: ["startup", "kecerdasan buatan", "5G", "smartphone"],
    NewsCategory.ENTERTAINMENT: ["film", "konser", "sinetron", "festival musik"],
}


async def seed(small: bool = False, reset: bool = True):
    num_articles = 40 if small else 2000

    print(f"Seeding: {num_articles} news articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        batch_size = 500
        for batch_start in range(0, num_articles, batch_size):
            batch_end = min(batch_start + batch_size, num_articles)
            for i in range(batch_start, batch_end):
                category = random.choice(list(NewsCategory))
                topic = random.choice(TOPICS[category])
                created = datetime.now(timezone.utc) - timedelta(
                    days=random.randint(0, 180), minutes=random.randint(0, 1440)
                )
                session.add(
                    NewsArticle(
                        title=f"Kabar {topic} #{i}",
                        content=f"Laporan lengkap tentang {topic}. " * 30,
                        excerpt=f"Ringkasan berita {topic} hari ini.",
                        category=category,
                        image_url=f"https://picsum.photos/seed/news{i}/800/450" if random.random() > 0.2 else None,
                        author=random.choice(AUTHORS),
                        is_featured=random.random() < 0.05,
                        view_count=random.randint(0, 5000),
                        created_at=created,
                        updated_at=created,
                    )
                )
            await session.flush()
            print(f"  Batch {batch_start}-{batch_end}: articles created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles: {num_articles}")


def main():
    parser = argparse.ArgumentParser(description="Seed the news database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (40 articles)")
    parser.add_argument("--keep", action="store_true", help="Do not drop existing tables first")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=not args.keep))


if __name__ == "__main__":
    main()
