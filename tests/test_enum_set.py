"""
Tests for EnumSet: construction, set algebra, capacity and type checks.
"""

import copy
from enum import Enum, IntEnum

import pytest

from enumscan import (
    EnumSet,
    EnumTypeMismatchError,
    MemberIndexError,
    SetOperatorsMixin,
    union,
)


class Fruit(IntEnum):
    Apple = 0
    Banana = 1
    Orange = 2


class Color(Enum):
    Red = 0
    Green = 1


class Sparse(IntEnum):
    NEG = -100
    ZERO = 0
    BIG = 120
    OUTSIDE = 500


class Suit(SetOperatorsMixin, Enum):
    Clubs = 1
    Diamonds = 2
    Hearts = 3
    Spades = 4


class Level(SetOperatorsMixin, IntEnum):
    LOW = 1
    HIGH = 2


class Nothing(Enum):
    pass


def all_subsets(enum_type):
    members = list(enum_type)
    for mask in range(1 << len(members)):
        yield EnumSet(enum_type, [m for i, m in enumerate(members) if mask >> i & 1])


class TestExample:

    def test_apple_orange_banana(self):
        s = EnumSet.singleton(Fruit.Apple) | EnumSet.singleton(Fruit.Orange)
        assert s.count() == 2
        assert not (s & EnumSet.singleton(Fruit.Banana))
        assert (s & EnumSet.singleton(Fruit.Banana)) == EnumSet(Fruit)


class TestAlgebra:

    def test_commutative(self):
        for a in all_subsets(Fruit):
            for b in all_subsets(Fruit):
                assert a | b == b | a
                assert a & b == b & a

    def test_double_complement(self):
        for a in all_subsets(Fruit):
            assert ~~a == a

    def test_xor_self_is_empty(self):
        for a in all_subsets(Fruit):
            assert not (a ^ a)
            assert (a ^ a).count() == 0

    def test_union_with_complement_is_full(self):
        for a in all_subsets(Fruit):
            full = a | ~a
            assert full.count() == full.size() == 3
            assert full == EnumSet.full(Fruit)

    def test_bare_member_operands(self):
        s = EnumSet.singleton(Fruit.Apple) | Fruit.Banana
        assert set(s) == {Fruit.Apple, Fruit.Banana}
        assert Fruit.Orange | s == s | Fruit.Orange

    def test_in_place_forms(self):
        s = EnumSet(Fruit)
        same = s
        s |= Fruit.Apple
        s |= EnumSet.singleton(Fruit.Banana)
        assert s is same
        assert s.count() == 2
        s &= Fruit.Banana
        assert list(s) == [Fruit.Banana]
        s ^= EnumSet(Fruit, [Fruit.Banana, Fruit.Orange])
        assert list(s) == [Fruit.Orange]

    def test_binary_forms_do_not_mutate(self):
        a = EnumSet.singleton(Fruit.Apple)
        _ = a | Fruit.Orange
        _ = ~a
        assert list(a) == [Fruit.Apple]


class TestQueries:

    def test_singleton_count(self):
        for member in Fruit:
            assert EnumSet.singleton(member).count() == 1

    def test_union_of_two_members(self):
        s = union(Fruit.Apple, Fruit.Orange)
        assert s.count() == 2
        assert Fruit.Apple in s and Fruit.Orange in s
        assert Fruit.Banana not in s

    def test_bool(self):
        assert not EnumSet(Fruit)
        assert EnumSet.singleton(Fruit.Banana)

    def test_size_is_member_count(self):
        assert EnumSet(Fruit).size() == 3
        assert EnumSet(Sparse).size() == 3

    def test_len_and_iteration_order(self):
        s = EnumSet(Fruit, [Fruit.Orange, Fruit.Apple])
        assert len(s) == 2
        assert list(s) == [Fruit.Apple, Fruit.Orange]

    def test_repr(self):
        assert repr(EnumSet(Fruit, [Fruit.Orange, Fruit.Apple])) == "EnumSet[Fruit](Apple|Orange)"

    def test_single_member_argument(self):
        assert EnumSet(Fruit, Fruit.Banana) == EnumSet.singleton(Fruit.Banana)

    def test_copy_is_independent(self):
        a = EnumSet.singleton(Fruit.Apple)
        b = copy.copy(a)
        b |= Fruit.Banana
        assert a.count() == 1 and b.count() == 2

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(EnumSet(Fruit))

    def test_not_equal_across_types(self):
        assert EnumSet(Fruit) != EnumSet(Color)
        assert EnumSet(Fruit) != 0


class TestSparseAddressing:

    def test_negative_and_large_members(self):
        s = EnumSet(Sparse, [Sparse.NEG, Sparse.BIG])
        assert s.bits == 0b101
        assert list(~s) == [Sparse.ZERO]

    def test_complement_only_holds_members(self):
        assert set(EnumSet.full(Sparse)) == {Sparse.NEG, Sparse.ZERO, Sparse.BIG}

    def test_member_outside_window(self):
        with pytest.raises(MemberIndexError) as exc:
            EnumSet.singleton(Sparse.OUTSIDE)
        assert exc.value.code == "RE2020"

    def test_membership_of_undiscovered_member_is_false(self):
        assert Sparse.OUTSIDE not in EnumSet.full(Sparse)


class TestDegenerate:

    def test_zero_capacity(self):
        s = EnumSet(Nothing)
        assert s.size() == 0
        assert s.count() == 0
        assert not s
        assert not ~s
        assert list(~s) == []


class TestTypeChecks:

    def test_mixed_sets(self):
        with pytest.raises(EnumTypeMismatchError) as exc:
            EnumSet(Fruit) | EnumSet(Color)
        assert exc.value.code == "CE2001"
        assert isinstance(exc.value, TypeError)

    def test_foreign_member(self):
        with pytest.raises(EnumTypeMismatchError):
            EnumSet.singleton(Fruit.Apple) | Color.Red
        with pytest.raises(EnumTypeMismatchError):
            Color.Red | EnumSet.singleton(Fruit.Apple)

    def test_foreign_member_in_place(self):
        s = EnumSet(Fruit)
        with pytest.raises(EnumTypeMismatchError):
            s &= Color.Green

    def test_foreign_member_in_constructor(self):
        with pytest.raises(EnumTypeMismatchError):
            EnumSet(Fruit, [Color.Red])

    def test_union_of_different_types(self):
        with pytest.raises(EnumTypeMismatchError):
            union(Fruit.Apple, Color.Red)

    def test_non_enum_type(self):
        with pytest.raises(EnumTypeMismatchError):
            EnumSet(int)

    def test_unrelated_operand(self):
        with pytest.raises(TypeError):
            EnumSet(Fruit) | 1


class TestOperatorsMixin:

    def test_members_build_sets(self):
        s = Suit.Clubs | Suit.Hearts
        assert isinstance(s, EnumSet)
        assert list(s) == [Suit.Clubs, Suit.Hearts]

    def test_complement_of_member(self):
        assert list(~Suit.Spades) == [Suit.Clubs, Suit.Diamonds, Suit.Hearts]

    def test_and_xor(self):
        assert not (Suit.Clubs & Suit.Hearts)
        assert (Suit.Clubs ^ Suit.Clubs).count() == 0

    def test_member_with_set(self):
        s = Suit.Clubs | (Suit.Hearts | Suit.Spades)
        assert s.count() == 3

    def test_int_arithmetic_survives(self):
        assert Level.LOW | 4 == 5
        assert 4 | Level.HIGH == 6

    def test_int_enum_members(self):
        assert (Level.LOW | Level.HIGH).count() == 2

    def test_mixin_rejects_foreign_member(self):
        with pytest.raises(EnumTypeMismatchError):
            Suit.Clubs | Color.Red
