import pytest

from kdtreex.core.ordering import (
    KeyedOrdering,
    SequenceOrdering,
    sequence_ordering_for,
    tuple_ordering,
)
from kdtreex.exceptions import PreconditionError


def test_ordering_by_uses_primary_axis_first() -> None:
    ordering = tuple_ordering(2)

    by_x = ordering.ordering_by(0)
    by_y = ordering.ordering_by(1)

    assert by_x.lt((1, 9), (2, 0))
    assert by_y.gt((1, 9), (2, 0))
    assert by_x.compare((3, 4), (3, 4)) == 0


def test_ties_on_primary_axis_fall_back_to_lowest_differing_axis() -> None:
    ordering = tuple_ordering(3)
    by_z = ordering.ordering_by(2)

    assert by_z.lt((1, 5, 7), (2, 0, 7))
    assert by_z.lt((1, 2, 7), (1, 3, 7))
    assert by_z.equiv((1, 2, 7), (1, 2, 7))


def test_sort_key_orders_sequences() -> None:
    ordering = tuple_ordering(2)
    points = [(3, 1), (1, 2), (2, 2), (1, 1)]

    assert sorted(points, key=ordering.ordering_by(1).sort_key()) == [
        (1, 1),
        (3, 1),
        (1, 2),
        (2, 2),
    ]


def test_ordering_by_rejects_out_of_range_axis() -> None:
    ordering = tuple_ordering(2)

    with pytest.raises(PreconditionError):
        ordering.ordering_by(2)
    with pytest.raises(PreconditionError):
        ordering.ordering_by(-1)


def test_check_axis_rejects_non_integer_axes() -> None:
    ordering = SequenceOrdering(3)

    assert ordering.check_axis(2) == 2
    with pytest.raises(PreconditionError):
        ordering.check_axis(True)
    with pytest.raises(PreconditionError):
        ordering.check_axis(1.0)  # type: ignore[arg-type]


def test_tuple_ordering_supports_two_to_five_dimensions() -> None:
    for dimensions in (2, 3, 4, 5):
        assert tuple_ordering(dimensions).dimensions == dimensions
    with pytest.raises(PreconditionError):
        tuple_ordering(6)


def test_validating_sequence_ordering_rejects_wrong_length() -> None:
    ordering = sequence_ordering_for((0.0, 1.0, 2.0), validate=True)

    ordering.validate_point((1.0, 2.0, 3.0))
    with pytest.raises(PreconditionError):
        ordering.validate_point((1.0, 2.0))
    with pytest.raises(PreconditionError):
        ordering.validate_point(7)


def test_sequence_orderings_compare_by_dimensions() -> None:
    assert SequenceOrdering(2) == tuple_ordering(2)
    assert SequenceOrdering(2) != SequenceOrdering(3)
    assert hash(SequenceOrdering(4)) == hash(SequenceOrdering(4))


def test_keyed_ordering_projects_records() -> None:
    records = [{"pos": (2, 1)}, {"pos": (1, 3)}]
    ordering = KeyedOrdering(tuple_ordering(2), lambda record: record["pos"])

    assert ordering.dimensions == 2
    assert ordering.compare_projection(0, records[0], records[1]) > 0
    assert ordering.ordering_by(1).lt(records[0], records[1])
