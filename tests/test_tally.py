# File: tests/test_tally.py
import pytest

from pageripper.tally import tally_counts


def test_empty_input_gives_empty_tally():
    assert tally_counts([]) == {}


def test_three_anchor_example():
    assert tally_counts(["a.com", "b.com", "a.com"]) == {"a.com": 2, "b.com": 1}


@pytest.mark.parametrize(
    "hosts",
    [
        ["x.org"],
        ["", "", "a.com"],
        ["a.com", "b.com", "c.com", "b.com", "a.com", "a.com"],
        ["same"] * 50,
    ],
)
def test_tally_accounts_for_every_host(hosts):
    tally = tally_counts(hosts)
    assert sum(tally.values()) == len(hosts)
    assert set(tally) == set(hosts)
    assert all(count >= 1 for count in tally.values())


def test_accepts_any_iterable():
    assert tally_counts(h for h in ("a", "a")) == {"a": 2}
