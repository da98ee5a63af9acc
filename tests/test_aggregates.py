"""
Tests for the derived bootcamp averages.
"""

from unittest.mock import patch

import pytest
from pymongo.errors import OperationFailure

from aggregates import recompute_average_cost, recompute_average_rating, round_up_to_ten
from schemas import Course, Review
from tests.support.factories import add_course, add_review, create_bootcamp
from tests.support.mongo import raw


def _insert_bootcamp(store, owner_id="u1", name="Devworks"):
    return store.bootcamps.create({"name": name, "user_id": owner_id, "photo": "no-photo.jpg"})


def _insert_course(store, bootcamp_id, tuition):
    doc = Course(
        bootcamp_id=bootcamp_id,
        user_id="u1",
        title="Course",
        description="d",
        weeks=4,
        tuition=tuition,
        minimum_skill="beginner",
    ).model_dump()
    return store.courses.create(doc)


def _insert_review(store, bootcamp_id, user_id, rating):
    doc = Review(bootcamp_id=bootcamp_id, user_id=user_id, title="t", text="x", rating=rating).model_dump()
    return store.reviews.create(doc)


@pytest.mark.parametrize("value,expected", [(200, 200), (102.5, 110), (0.1, 10), (9000, 9000), (9000.01, 9010)])
def test_round_up_to_ten(value, expected):
    assert round_up_to_ten(value) == expected


class TestAverageCost:
    def test_no_courses_leaves_field_unset(self, store):
        bootcamp = _insert_bootcamp(store)
        recompute_average_cost(store, bootcamp["id"])
        assert "average_cost" not in store.bootcamps.find_by_id(bootcamp["id"])

    def test_exact_mean(self, store):
        bootcamp = _insert_bootcamp(store)
        for tuition in (100, 200, 300):
            _insert_course(store, bootcamp["id"], tuition)
        recompute_average_cost(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 200

    def test_mean_is_rounded_up_to_next_ten(self, store):
        bootcamp = _insert_bootcamp(store)
        for tuition in (101, 104):
            _insert_course(store, bootcamp["id"], tuition)
        recompute_average_cost(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 110

    def test_only_counts_courses_of_that_bootcamp(self, store):
        first = _insert_bootcamp(store, name="First")
        second = _insert_bootcamp(store, name="Second")
        _insert_course(store, first["id"], 1000)
        _insert_course(store, second["id"], 5000)
        recompute_average_cost(store, first["id"])
        assert store.bootcamps.find_by_id(first["id"])["average_cost"] == 1000
        assert "average_cost" not in store.bootcamps.find_by_id(second["id"])

    def test_last_course_removed_clears_field(self, store):
        bootcamp = _insert_bootcamp(store)
        course = _insert_course(store, bootcamp["id"], 500)
        recompute_average_cost(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 500

        store.courses.delete(course["id"])
        recompute_average_cost(store, bootcamp["id"])
        assert "average_cost" not in store.bootcamps.find_by_id(bootcamp["id"])


class TestAverageRating:
    def test_plain_mean(self, store):
        bootcamp = _insert_bootcamp(store)
        _insert_review(store, bootcamp["id"], "a", 8)
        _insert_review(store, bootcamp["id"], "b", 6)
        recompute_average_rating(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_rating"] == 7

    def test_mean_is_not_rounded(self, store):
        bootcamp = _insert_bootcamp(store)
        _insert_review(store, bootcamp["id"], "a", 8)
        _insert_review(store, bootcamp["id"], "b", 7)
        recompute_average_rating(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_rating"] == 7.5

    def test_no_reviews_leaves_field_unset(self, store):
        bootcamp = _insert_bootcamp(store)
        recompute_average_rating(store, bootcamp["id"])
        assert "average_rating" not in store.bootcamps.find_by_id(bootcamp["id"])


class TestFailuresAreSwallowed:
    def test_aggregate_failure_does_not_raise_or_write(self, store):
        bootcamp = _insert_bootcamp(store)
        store.bootcamps.update_by_id(bootcamp["id"], {"$set": {"average_cost": 300}})
        with patch.object(raw(store.courses), "aggregate", side_effect=OperationFailure("boom")):
            recompute_average_cost(store, bootcamp["id"])
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 300

    def test_write_failure_does_not_raise(self, store):
        bootcamp = _insert_bootcamp(store)
        _insert_review(store, bootcamp["id"], "a", 9)
        with patch.object(raw(store.bootcamps), "find_one_and_update", side_effect=OperationFailure("boom")):
            recompute_average_rating(store, bootcamp["id"])
        assert "average_rating" not in store.bootcamps.find_by_id(bootcamp["id"])

    def test_non_numeric_mean_is_never_written(self, store):
        bootcamp = _insert_bootcamp(store)
        raw(store.courses).docs.append({"_id": "x", "bootcamp_id": bootcamp["id"], "tuition": "lots"})
        recompute_average_cost(store, bootcamp["id"])
        assert "average_cost" not in store.bootcamps.find_by_id(bootcamp["id"])

    def test_failure_is_logged(self, store):
        bootcamp = _insert_bootcamp(store)
        with patch.object(raw(store.courses), "aggregate", side_effect=OperationFailure("boom")), patch(
            "aggregates.logger"
        ) as logger:
            recompute_average_cost(store, bootcamp["id"])
        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["bootcamp_id"] == bootcamp["id"]


class TestTriggeredByRoutes:
    def test_course_create_and_delete_keep_average_cost(self, client, acting, store, publisher):
        bootcamp = create_bootcamp(client, acting, publisher)
        assert "average_cost" not in store.bootcamps.find_by_id(bootcamp["id"])

        first = add_course(client, acting, publisher, bootcamp["id"], tuition=101)
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 110
        add_course(client, acting, publisher, bootcamp["id"], tuition=104, title="Second")
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 110

        assert client.delete(f"/api/v1/courses/{first['id']}").status_code == 200
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 110

    def test_deleting_sole_course_clears_average_cost(self, client, acting, store, publisher):
        bootcamp = create_bootcamp(client, acting, publisher)
        course = add_course(client, acting, publisher, bootcamp["id"], tuition=8000)
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 8000

        resp = client.delete(f"/api/v1/courses/{course['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": None}
        assert "average_cost" not in store.bootcamps.find_by_id(bootcamp["id"])

    def test_tuition_update_refreshes_average_cost(self, client, acting, store, publisher):
        bootcamp = create_bootcamp(client, acting, publisher)
        course = add_course(client, acting, publisher, bootcamp["id"], tuition=1000)
        resp = client.put(f"/api/v1/courses/{course['id']}", json={"tuition": 2000})
        assert resp.status_code == 200
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_cost"] == 2000

    def test_reviews_keep_average_rating(self, client, acting, store, publisher, reviewer, other_reviewer):
        bootcamp = create_bootcamp(client, acting, publisher)
        add_review(client, acting, reviewer, bootcamp["id"], rating=8)
        review = add_review(client, acting, other_reviewer, bootcamp["id"], rating=6)
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_rating"] == 7

        acting["user"] = other_reviewer
        assert client.delete(f"/api/v1/reviews/{review['id']}").status_code == 200
        assert store.bootcamps.find_by_id(bootcamp["id"])["average_rating"] == 8

    def test_aggregate_failure_does_not_fail_course_create(self, client, acting, store, publisher):
        bootcamp = create_bootcamp(client, acting, publisher)
        with patch.object(raw(store.courses), "aggregate", side_effect=OperationFailure("boom")):
            course = add_course(client, acting, publisher, bootcamp["id"], tuition=5000)
        assert store.courses.find_by_id(course["id"]) is not None
