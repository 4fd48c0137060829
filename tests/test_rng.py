"""Tests for the domain-separated deterministic RNG."""

from zonespawn.core.enums import Domain
from zonespawn.systems.rng import DeterministicRNG


class TestDeterministicRNG:
    def test_same_inputs_same_output(self):
        a, b = DeterministicRNG(42), DeterministicRNG(42)
        assert a.next_float(Domain.CHANCE, 3, 7) == b.next_float(Domain.CHANCE, 3, 7)

    def test_domains_are_separated(self):
        rng = DeterministicRNG(42)
        assert rng.next_float(Domain.CHANCE, 1, 1) != rng.next_float(Domain.TIER, 1, 1)

    def test_seed_changes_stream(self):
        assert DeterministicRNG(1).next_float(Domain.ANGLE, 0, 0) != DeterministicRNG(2).next_float(Domain.ANGLE, 0, 0)

    def test_ranges(self):
        rng = DeterministicRNG(7)
        for step in range(500):
            f = rng.next_float(Domain.DISTANCE, 0, step)
            assert 0.0 <= f < 1.0
            assert 2.0 <= rng.next_uniform(Domain.SANDBOX, 0, step, 2.0, 4.0) < 4.0

    def test_next_bool_extremes(self):
        rng = DeterministicRNG(7)
        assert not any(rng.next_bool(Domain.CHANCE, 0, s, 0.0) for s in range(100))
        assert all(rng.next_bool(Domain.CHANCE, 0, s, 1.0) for s in range(100))
