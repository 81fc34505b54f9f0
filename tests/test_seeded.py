"""Tests for the seeded stream."""

import hashlib

import pytest

from growth.seeded import MODULUS, SeededRandom, seed_state


def test_seed_state_uses_first_15_hex_digits():
    digest = hashlib.sha256(b'abc').hexdigest()
    assert seed_state('abc') == int(digest[:15], 16)


def test_first_draw_follows_lcg():
    state = seed_state('abc')
    expected = ((state * 1664525 + 1013904223) % 2 ** 32) / 2 ** 32
    assert SeededRandom('abc').next() == expected


def test_same_seed_same_sequence():
    a = SeededRandom('moss')
    b = SeededRandom('moss')
    assert [a.next() for _ in range(500)] == [b.next() for _ in range(500)]


def test_different_seeds_diverge():
    a = SeededRandom('moss')
    b = SeededRandom('fern')
    assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]


def test_next_stays_in_unit_interval():
    rng = SeededRandom('range')
    for _ in range(2000):
        value = rng.next()
        assert 0 <= value < 1


def test_next_float_bounds():
    rng = SeededRandom('float')
    for _ in range(500):
        assert -45 <= rng.next_float(-45, 45) < 45


def test_next_int_upper_bound_exclusive():
    rng = SeededRandom('ints')
    values = {rng.next_int(2, 4) for _ in range(500)}
    assert values == {2, 3}


def test_choice_and_draw_count():
    rng = SeededRandom('pick')
    items = ['a', 'b', 'c']
    picks = [rng.choice(items) for _ in range(100)]
    assert set(picks) <= set(items)
    assert rng.draws == 100


def test_choice_empty():
    with pytest.raises(IndexError):
        SeededRandom('x').choice([])


def test_seed_must_be_string():
    with pytest.raises(TypeError):
        SeededRandom(42)


def test_state_fits_modulus():
    rng = SeededRandom('wrap')
    for _ in range(100):
        rng.next()
        assert 0 <= rng._state < MODULUS
