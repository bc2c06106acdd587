from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from models import Rating, RatingType, Song
from models.database import utcnow
from models.schemas import RatingOutcome, RatingRequest
from services.errors import RateLimitExceeded, StationNotFound, StorageFailure
from services.rating_service import RatingService


def _request(
    rating_type: RatingType = RatingType.THUMBS_UP,
    user_id: str = "user-123",
    title: str = "Test Song",
    station_code: str = "ENGLISH",
) -> RatingRequest:
    return RatingRequest(
        station_code=station_code,
        artist="Test Artist",
        title=title,
        user_id=user_id,
        rating_type=rating_type,
    )


async def _counts_match_ratings(session) -> bool:
    songs = (await session.execute(select(Song))).scalars().all()
    for song in songs:
        up = await session.scalar(
            select(func.count(Rating.id)).where(
                Rating.song_id == song.id, Rating.rating_type == RatingType.THUMBS_UP.value
            )
        )
        down = await session.scalar(
            select(func.count(Rating.id)).where(
                Rating.song_id == song.id, Rating.rating_type == RatingType.THUMBS_DOWN.value
            )
        )
        if (song.thumbs_up_count, song.thumbs_down_count) != (up, down):
            return False
    return True


def test_new_rating_creates_song_and_counts(run_db):
    async def scenario(Session):
        async with Session() as session:
            response = await RatingService(session).submit_rating(_request(), "192.168.1.1")

        async with Session() as session:
            songs = (await session.execute(select(Song))).scalars().all()
            ratings = (await session.execute(select(Rating))).scalars().all()
            consistent = await _counts_match_ratings(session)
        return response, songs, ratings, consistent

    response, songs, ratings, consistent = run_db(scenario)

    assert response.outcome is RatingOutcome.CREATED
    assert response.message == "Rating submitted successfully"
    assert response.user_rating is RatingType.THUMBS_UP
    assert (response.thumbs_up_count, response.thumbs_down_count) == (1, 0)
    assert response.song_id == songs[0].id
    assert len(songs) == 1
    assert len(ratings) == 1
    assert ratings[0].ip_address == "192.168.1.1"
    assert consistent


def test_same_vote_twice_is_idempotent(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            first = await service.submit_rating(_request(), "10.0.0.1")
            second = await service.submit_rating(_request(), "10.0.0.1")
            rating_count = await session.scalar(select(func.count(Rating.id)))
        return first, second, rating_count

    first, second, rating_count = run_db(scenario)

    assert second.outcome is RatingOutcome.UNCHANGED
    assert "already submitted" in second.message
    assert (second.thumbs_up_count, second.thumbs_down_count) == (
        first.thumbs_up_count,
        first.thumbs_down_count,
    )
    assert rating_count == 1


def test_changing_vote_moves_one_unit(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            await service.submit_rating(_request(RatingType.THUMBS_UP, user_id="a"), "10.0.0.1")
            await service.submit_rating(_request(RatingType.THUMBS_UP, user_id="b"), "10.0.0.2")
            await service.submit_rating(_request(RatingType.THUMBS_DOWN, user_id="c"), "10.0.0.3")
            changed = await service.submit_rating(_request(RatingType.THUMBS_DOWN, user_id="a"), "10.0.0.9")

        async with Session() as session:
            rating = (
                await session.execute(select(Rating).where(Rating.user_id == "a"))
            ).scalar_one()
            consistent = await _counts_match_ratings(session)
        return changed, rating, consistent

    changed, rating, consistent = run_db(scenario)

    assert changed.outcome is RatingOutcome.UPDATED
    assert changed.message == "Rating updated successfully"
    assert changed.user_rating is RatingType.THUMBS_DOWN
    assert (changed.thumbs_up_count, changed.thumbs_down_count) == (1, 2)
    assert rating.rating_type == RatingType.THUMBS_DOWN.value
    assert rating.ip_address == "10.0.0.9"
    assert consistent


def test_changing_vote_never_goes_negative(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            await service.submit_rating(_request(RatingType.THUMBS_UP), "10.0.0.1")
            song = (await session.execute(select(Song))).scalar_one()
            # Counts drifted below the real number of ratings
            song.thumbs_up_count = 0
            await session.commit()
            return await service.submit_rating(_request(RatingType.THUMBS_DOWN), "10.0.0.1")

    response = run_db(scenario)

    assert response.thumbs_up_count == 0
    assert response.thumbs_down_count == 1


def test_toggling_back_and_forth_keeps_counts_consistent(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            sequence = [
                ("a", RatingType.THUMBS_UP),
                ("b", RatingType.THUMBS_DOWN),
                ("a", RatingType.THUMBS_DOWN),
                ("a", RatingType.THUMBS_DOWN),
                ("b", RatingType.THUMBS_UP),
                ("a", RatingType.THUMBS_UP),
                ("c", RatingType.THUMBS_UP),
            ]
            last = None
            for user_id, rating_type in sequence:
                last = await service.submit_rating(_request(rating_type, user_id=user_id), None)
            consistent = await _counts_match_ratings(session)
        return last, consistent

    last, consistent = run_db(scenario)

    assert (last.thumbs_up_count, last.thumbs_down_count) == (3, 0)
    assert consistent


def test_twentieth_vote_succeeds_and_twenty_first_is_rate_limited(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            responses = []
            for i in range(20):
                responses.append(
                    await service.submit_rating(_request(title=f"Song {i}"), "203.0.113.7")
                )

            before_songs = await session.scalar(select(func.count(Song.id)))
            before_ratings = await session.scalar(select(func.count(Rating.id)))

            with pytest.raises(RateLimitExceeded) as excinfo:
                await service.submit_rating(_request(title="Song 20"), "203.0.113.7")

            after_songs = await session.scalar(select(func.count(Song.id)))
            after_ratings = await session.scalar(select(func.count(Rating.id)))
        return responses, excinfo.value, (before_songs, before_ratings), (after_songs, after_ratings)

    responses, error, before, after = run_db(scenario)

    assert len(responses) == 20
    assert responses[-1].outcome is RatingOutcome.CREATED
    assert error.max_votes == 20
    assert "Rate limit exceeded" in str(error)
    assert before == after == (20, 20)


def test_rate_limit_is_scoped_per_station_and_address(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session, max_votes=2)
            await service.submit_rating(_request(title="One"), "198.51.100.1")
            await service.submit_rating(_request(title="Two"), "198.51.100.1")

            other_station = await service.submit_rating(
                _request(title="One", station_code="HINDI"), "198.51.100.1"
            )
            other_address = await service.submit_rating(_request(title="Three"), "198.51.100.2")
            no_address = await service.submit_rating(_request(title="Four"), None)
        return other_station, other_address, no_address

    other_station, other_address, no_address = run_db(scenario)

    assert other_station.outcome is RatingOutcome.CREATED
    assert other_address.outcome is RatingOutcome.CREATED
    assert no_address.outcome is RatingOutcome.CREATED


def test_rate_limit_ignores_votes_outside_window(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session, max_votes=2)
            await service.submit_rating(_request(title="Old 1", user_id="u1"), "192.0.2.5")
            await service.submit_rating(_request(title="Old 2", user_id="u2"), "192.0.2.5")

            for rating in (await session.execute(select(Rating))).scalars():
                rating.created_at = utcnow() - timedelta(hours=2)
            await session.commit()

            return await service.submit_rating(_request(title="New"), "192.0.2.5")

    response = run_db(scenario)

    assert response.outcome is RatingOutcome.CREATED


def test_rate_limit_applies_to_repeat_votes(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session, max_votes=1)
            await service.submit_rating(_request(), "192.0.2.9")
            with pytest.raises(RateLimitExceeded):
                await service.submit_rating(_request(), "192.0.2.9")

    run_db(scenario)


def test_unknown_station_is_rejected(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            with pytest.raises(StationNotFound):
                await service.submit_rating(_request(station_code="NOPE"), "10.0.0.1")
            with pytest.raises(StationNotFound):
                await service.get_rating_counts("NOPE", "Test Artist", "Test Song")
            return await session.scalar(select(func.count(Song.id)))

    assert run_db(scenario) == 0


def test_same_song_on_different_stations_is_tracked_separately(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            english = await service.submit_rating(_request(), None)
            hindi = await service.submit_rating(_request(station_code="HINDI"), None)
        return english, hindi

    english, hindi = run_db(scenario)

    assert english.song_id != hindi.song_id
    assert hindi.thumbs_up_count == 1


def test_counts_for_unrated_song_are_zero(run_db):
    async def scenario(Session):
        async with Session() as session:
            return await RatingService(session).get_rating_counts(
                "ENGLISH", "Nobody", "Nothing", "user-123"
            )

    counts = run_db(scenario)

    assert counts.song_id is None
    assert counts.artist == "Nobody"
    assert counts.title == "Nothing"
    assert (counts.thumbs_up_count, counts.thumbs_down_count) == (0, 0)
    assert counts.user_rating is None


def test_counts_include_voter_rating(run_db):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)
            await service.submit_rating(_request(RatingType.THUMBS_DOWN, user_id="voter"), None)
            with_voter = await service.get_rating_counts("ENGLISH", "Test Artist", "Test Song", "voter")
            other_voter = await service.get_rating_counts("ENGLISH", "Test Artist", "Test Song", "other")
            anonymous = await service.get_rating_counts("ENGLISH", "Test Artist", "Test Song")
        return with_voter, other_voter, anonymous

    with_voter, other_voter, anonymous = run_db(scenario)

    assert with_voter.user_rating is RatingType.THUMBS_DOWN
    assert with_voter.thumbs_down_count == 1
    assert other_voter.user_rating is None
    assert anonymous.user_rating is None
    assert anonymous.song_id == with_voter.song_id


def test_storage_errors_are_wrapped_and_rolled_back(run_db, monkeypatch):
    async def scenario(Session):
        async with Session() as session:
            service = RatingService(session)

            async def broken_save(rating):
                raise OperationalError("INSERT INTO ratings", {}, Exception("disk I/O error"))

            monkeypatch.setattr(service.repository, "save_rating", broken_save)

            with pytest.raises(StorageFailure):
                await service.submit_rating(_request(), "10.0.0.1")

        async with Session() as session:
            return await session.scalar(select(func.count(Song.id)))

    # The song created before the failure is rolled back with it
    assert run_db(scenario) == 0


def test_concurrent_first_votes_on_new_song_are_both_recorded(run_db, tmp_path):
    async def scenario(Session):
        async def vote(user_id):
            async with Session() as session:
                return await RatingService(session).submit_rating(_request(user_id=user_id), None)

        first, second = await asyncio.gather(vote("u1"), vote("u2"))

        async with Session() as session:
            song = (await session.execute(select(Song))).scalar_one()
            consistent = await _counts_match_ratings(session)
        return first, second, song, consistent

    first, second, song, consistent = run_db(scenario, url=f"sqlite+aiosqlite:///{tmp_path / 'ratings.db'}")

    assert first.outcome == RatingOutcome.CREATED
    assert second.outcome == RatingOutcome.CREATED
    assert first.song_id == second.song_id == song.id
    assert song.thumbs_up_count == 2
    assert consistent
