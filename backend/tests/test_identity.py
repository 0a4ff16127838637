import hashlib
import itertools
import uuid
from datetime import date, datetime

import pytest

from wordlers.errors import ValidationError
from wordlers.services.scoreboard.identity import (
    date_key,
    format_display_date,
    is_thread_key,
    parse_game_date,
    shift_date,
    thread_key,
)


def test_thread_key_is_sha256_of_sorted_joined_ids():
    expected = hashlib.sha256('a-b-c'.encode('utf-8')).hexdigest()
    assert thread_key('b', ['c', 'a']) == expected
    assert len(expected) == 64


def test_thread_key_same_for_every_participant_and_order():
    ids = [str(uuid.uuid4()) for _ in range(4)]
    keys = set()
    for perm in itertools.permutations(ids):
        # each participant computes with itself as the local id
        keys.add(thread_key(perm[0], list(perm[1:])))
    assert len(keys) == 1


def test_thread_key_distinct_for_distinct_sets():
    ids = [str(uuid.uuid4()) for _ in range(12)]
    sets = set()
    for size in (1, 2, 3):
        sets.update(frozenset(c) for c in itertools.combinations(ids, size))
    keys = {thread_key(sorted(s)[0], sorted(s)[1:]) for s in sets}
    assert len(keys) == len(sets)


def test_thread_key_hides_participant_ids():
    local = '6f1c0d2e-0000-4000-8000-000000000001'
    key = thread_key(local, ['6f1c0d2e-0000-4000-8000-000000000002'])
    assert local not in key
    assert is_thread_key(key)


def test_solo_conversation_has_stable_key():
    assert thread_key('only-me') == thread_key('only-me', [])
    assert is_thread_key(thread_key('only-me'))


def test_is_thread_key_rejects_non_digests():
    assert not is_thread_key('abc')
    assert not is_thread_key('Z' * 64)
    assert not is_thread_key(None)


def test_game_dates_are_iso_and_display_is_separate():
    assert date_key('2026-10-16') == '2026-10-16'
    assert date_key(datetime(2026, 10, 16, 23, 59)) == '2026-10-16'
    assert parse_game_date(date(2026, 1, 2)) == date(2026, 1, 2)
    assert format_display_date('2026-10-16') == 'Oct 16, 2026'


def test_shift_date_crosses_month_boundaries():
    assert shift_date('2026-03-01', -1) == date(2026, 2, 28)
    assert shift_date('2026-12-31', 1) == date(2027, 1, 1)


@pytest.mark.parametrize('bad', ['Oct 16, 2026', '16/10/2026', '', None, 20261016])
def test_invalid_game_dates_are_rejected(bad):
    with pytest.raises(ValidationError):
        parse_game_date(bad)


def test_shift_date_past_calendar_ends_is_none():
    assert shift_date('9999-12-31', 1) is None
    assert shift_date('0001-01-01', -1) is None
    assert shift_date('9999-12-31', -1) == date(9999, 12, 30)
