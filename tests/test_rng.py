"""Tests for seeded random streams and string hashes."""

import math

from deepfield.models.rng import SeededRandom, checksum, polynomial_hash


class TestSeededRandom:
    def test_same_seed_same_stream(self):
        a, b = SeededRandom(99), SeededRandom(99)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_values_in_unit_interval(self):
        rng = SeededRandom(3)
        for _ in range(1000):
            assert 0.0 <= rng.next() < 1.0

    def test_index_in_range(self):
        rng = SeededRandom(5)
        values = {rng.index(7) for _ in range(500)}
        assert values == set(range(7))

    def test_index_of_empty_range(self):
        assert SeededRandom(1).index(0) == 0

    def test_uniform_bounds(self):
        rng = SeededRandom(8)
        for _ in range(200):
            assert 10.0 <= rng.uniform(10.0, 20.0) < 20.0

    def test_direction_is_unit_length(self):
        rng = SeededRandom(11)
        for _ in range(100):
            x, y, z = rng.direction()
            assert math.isclose(math.sqrt(x * x + y * y + z * z), 1.0, rel_tol=1e-9)

    def test_derive_is_independent(self):
        parent = SeededRandom(20)
        child = parent.derive(1)
        assert child.seed == 21
        before = [SeededRandom(20).next() for _ in range(3)]
        [child.next() for _ in range(10)]
        assert [parent.next() for _ in range(3)] == before


class TestHashes:
    def test_checksum_sums_character_codes(self):
        assert checksum("AB") == 65 + 66
        assert checksum("") == 0

    def test_polynomial_hash(self):
        assert polynomial_hash("a") == 97
        assert polynomial_hash("ab") == 97 * 31 + 98

    def test_polynomial_hash_fits_32_bits(self):
        assert 0 <= polynomial_hash("NGC-4999 " * 20) <= 0xFFFFFFFF
