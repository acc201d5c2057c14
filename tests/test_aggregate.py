from age_summary.aggregate import Summary, merge, summarize
from age_summary.errors import TransportFatal
from age_summary.locators import Locator
from age_summary.records import User
from age_summary.sources.base import Outcome


def _users(*ages):
    return [User(f"f{i}", f"l{i}", age) for i, age in enumerate(ages)]


def test_mean_is_truncated():
    assert summarize(_users(20, 30)).mean == 25
    assert summarize(_users(10, 20, 21)).mean == 17


def test_median_even_count_uses_upper_middle():
    summary = summarize(_users(20, 20, 30, 40))
    assert summary.median == 30
    assert summary.median_users == (User("f2", "l2", 30),)


def test_median_lists_every_tied_user():
    users = _users(40, 30, 10, 30, 20)
    summary = summarize(users)
    assert summary.median == 30
    assert summary.median_users == (users[1], users[3])


def test_single_user_reports_no_median():
    # ceil(1 / 2) == 1 is past the end of a one-element list.
    summary = summarize(_users(42))
    assert summary == Summary(count=1, mean=42)
    assert list(summary.lines()) == ["1 users", "mean 42"]


def test_two_users_median_is_the_older():
    assert summarize(_users(50, 20)).median == 50


def test_empty_input_reports_only_the_count():
    summary = summarize([])
    assert summary == Summary(count=0)
    assert list(summary.lines()) == ["0 users"]


def test_merge_skips_failures_and_keeps_outcome_order():
    a = Outcome.success(Locator("file", "a"), _users(1, 2), 0)
    bad = Outcome.failure(Locator("file", "x"), TransportFatal("x", "gone"))
    b = Outcome.success(Locator("file", "b"), _users(3), 1)

    assert [u.age for u in merge([a, bad, b])] == [1, 2, 3]


def test_merge_is_repeatable():
    outcomes = [Outcome.success(Locator("file", n), _users(5, 6), 0) for n in "ab"]
    assert merge(outcomes) == merge(outcomes)


def test_summary_lines_and_dict():
    summary = summarize(_users(10, 20, 30, 30, 40))
    assert list(summary.lines()) == ["5 users", "mean 26", "median 30 users:", "f2 l2 30", "f3 l3 30"]
    assert summary.to_dict()["median_users"] == [
        {"fname": "f2", "lname": "l2", "age": 30},
        {"fname": "f3", "lname": "l3", "age": 30},
    ]


def test_mean_of_large_ages_uses_integer_arithmetic():
    big = 2**63 - 1
    summary = summarize(_users(big, big, big))
    assert summary.mean == big
    assert summary.median == big


def test_negative_mean_truncates_toward_zero():
    assert summarize(_users(-10, -11)).mean == -10
