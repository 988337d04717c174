"""Rating aggregation: rounding, averaging and landlord recompute."""

from app.models.enums import RatingCategory
from app.services.ratings import RatingAggregator, aggregate_ratings, round_rating
from tests.factories import GOOD_CONTENT, ratings


class TestRoundRating:
    def test_rounds_half_up(self):
        assert round_rating(17, 4) == 4.3

    def test_exact_mean_unchanged(self):
        assert round_rating(9, 2) == 4.5

    def test_rounds_to_one_decimal(self):
        assert round_rating(13, 3) == 4.3
        assert round_rating(14, 3) == 4.7


class TestAggregateRatings:
    def test_empty_set_has_no_summary(self):
        assert aggregate_ratings([]) is None

    def test_each_category_averaged_independently(self):
        summary = aggregate_ratings([(5, 4, 3, 2, 1, 5), (4, 4, 4, 4, 4, 4)])

        assert summary.total_reviews == 2
        assert summary.averages[RatingCategory.OVERALL] == 4.5
        assert summary.averages[RatingCategory.DEPOSIT_RETURN] == 4.0
        assert summary.averages[RatingCategory.RESPONSIVENESS] == 3.5
        assert summary.averages[RatingCategory.ETHICS] == 3.0
        assert summary.averages[RatingCategory.MAINTENANCE] == 2.5
        assert summary.averages[RatingCategory.COMMUNICATION] == 4.5

    def test_landlord_values_use_landlord_columns(self):
        summary = aggregate_ratings([(3, 3, 3, 3, 3, 3)])

        assert summary.landlord_values() == {
            "average_rating": 3.0,
            "deposit_return_rating": 3.0,
            "responsiveness_rating": 3.0,
            "ethics_rating": 3.0,
            "maintenance_rating": 3.0,
            "communication_rating": 3.0,
        }


async def _add_review(store, landlord_id, value, **overrides):
    return await store.create_review(
        landlord_id,
        author_name=None,
        is_anonymous=True,
        content=GOOD_CONTENT,
        **ratings(value, **overrides),
    )


class TestRatingAggregator:
    async def test_recompute_overwrites_landlord_fields(self, db, store):
        landlord = await store.create_landlord("Rating Test LLC", "Frederick, MD")
        await _add_review(store, landlord.id, 5, ethics_rating=1)
        await _add_review(store, landlord.id, 4, ethics_rating=2)

        summary = await RatingAggregator(store).recompute(landlord.id)
        await db.commit()

        assert summary.total_reviews == 2
        refreshed = await store.get_landlord(landlord.id)
        assert refreshed.average_rating == 4.5
        assert refreshed.ethics_rating == 1.5
        assert refreshed.total_reviews == 2

    async def test_recompute_without_reviews_leaves_landlord_untouched(self, db, store):
        landlord = await store.create_landlord("No Reviews Inc", "Frederick, MD")
        await db.commit()

        assert await RatingAggregator(store).recompute(landlord.id) is None

        refreshed = await store.get_landlord(landlord.id)
        assert refreshed.average_rating == 0
        assert refreshed.total_reviews == 0

    async def test_recompute_for_missing_landlord(self, store):
        assert await RatingAggregator(store).recompute(4040) is None

    async def test_recompute_reads_every_review(self, db, store):
        landlord = await store.create_landlord("Many Reviews Co", "Frederick, MD")
        for value in (1, 2, 3, 4, 5):
            await _add_review(store, landlord.id, value)
        await db.commit()

        summary = await RatingAggregator(store).recompute(landlord.id)

        assert summary.total_reviews == 5
        assert summary.averages[RatingCategory.OVERALL] == 3.0
        assert len(await store.list_reviews_for_landlord(landlord.id)) == 5
