"""
Seed database with initial data (stations).

Usage:
    python scripts/seed_db.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select

from models.database import AsyncSessionLocal
from models.rating import Rating
from models.song import Song
from models.station import Station


STATIONS_DATA = [
    {
        "code": "ENGLISH",
        "name": "RadioAwa English",
        "stream_url": "https://d3d4yli4hf5bmh.cloudfront.net/hls/live.m3u8",
        "metadata_url": "/api/metadata/english",
        "is_active": True,
        "display_order": 1,
        "stream_format": "HLS",
        "stream_quality": "24-bit / 48 kHz lossless",
        "stream_codec": "FLAC",
        "genre": "Pop, Rock, Indie",
        "tagline": "Lossless music, live",
    },
    {
        "code": "HINDI",
        "name": "Vividh Bharati",
        "stream_url": "https://air.pc.cdn.bitgravity.com/air/live/pbaudio001/playlist.m3u8",
        "metadata_url": "/api/metadata/hindi",
        "is_active": True,
        "display_order": 2,
        "stream_format": "HLS",
        "stream_codec": "AAC",
        "genre": "Bollywood, Hindi Classics",
        "tagline": "Hindi classics around the clock",
        "source_info": "All India Radio",
    },
]


async def seed_stations(session) -> int:
    """Seed radio stations"""
    print("\n📻 Seeding stations...")

    created = 0
    skipped = 0

    for station_data in STATIONS_DATA:
        # Check if station already exists
        stmt = select(Station).where(Station.code == station_data["code"])
        result = await session.execute(stmt)
        existing = result.scalar_one_or_none()

        if not existing:
            session.add(Station(**station_data))
            created += 1
            print(f"  ✅ Created station: {station_data['code']}")
        else:
            skipped += 1
            print(f"  ℹ️  Station already exists: {station_data['code']}")

    if created > 0:
        await session.commit()
        print(f"\n✅ Successfully created {created} stations")

    if skipped > 0:
        print(f"ℹ️  Skipped {skipped} existing stations")

    return created


async def verify_database():
    """Verify database state after seeding"""
    print("\n🔍 Verifying database...")

    async with AsyncSessionLocal() as session:
        station_count = await session.scalar(select(func.count()).select_from(Station))
        print(f"  📻 Stations: {station_count}")

        song_count = await session.scalar(select(func.count()).select_from(Song))
        print(f"  🎵 Songs: {song_count}")

        rating_count = await session.scalar(select(func.count()).select_from(Rating))
        print(f"  👍 Ratings: {rating_count}")

        result = await session.execute(select(Station).order_by(Station.display_order))
        stations = result.scalars().all()

        if stations:
            print("\n📋 Stations:")
            for station in stations:
                active = "✅" if station.is_active else "❌"
                print(f"  • {station.code:10} - {station.name:25} Active: {active}")


async def main():
    """Main seeding function"""
    print("\n" + "="*70)
    print("🌱 RADIO PULSE - DATABASE SEEDING")
    print("="*70)

    try:
        async with AsyncSessionLocal() as session:
            created_stations = await seed_stations(session)

        await verify_database()

        print("\n" + "="*70)
        print("✅ Database seeding completed successfully!")
        print("="*70 + "\n")

        if created_stations == 0:
            print("💡 Tip: Database was already seeded. To reset:")
            print("   1. Drop database: docker-compose down -v")
            print("   2. Recreate: docker-compose up -d postgres")
            print("   3. Run migrations: alembic upgrade head")
            print("   4. Seed again: python scripts/seed_db.py\n")

    except Exception as e:
        print(f"\n❌ Error seeding database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
