import pytest

from jsarray.jsarray_sequence import Sequence, JS_METHOD_NAMES, wrap, from_, is_sequence, validate
from jsarray.jsarray_datatypes import NotASequence, INDEX_BASE


# --- Construction ---

def test_wrap_aliases_the_list():
    data = [1, 2, 3]
    seq = wrap(data)
    assert seq.items is data
    seq.push(4)
    assert data == [1, 2, 3, 4]
    data.append(5)
    assert len(seq) == 5


def test_wrap_of_sequence_is_identity():
    seq = Sequence([1])
    assert wrap(seq) is seq


def test_wrap_none_is_empty():
    assert len(wrap()) == 0
    assert len(wrap(None)) == 0


@pytest.mark.parametrize("value", [(1, 2), {1: 'a'}, "abc", 3])
def test_wrap_rejects_non_lists(value):
    with pytest.raises(TypeError):
        wrap(value)


def test_from_copies():
    source = wrap([1, 2, 3])
    copy = from_(source)
    assert copy == source
    assert copy.items is not source.items
    copy.push(4)
    copy[1] = 99
    assert source.items == [1, 2, 3]


def test_from_with_map_fn():
    assert from_([1, 2, 3], lambda x, i: x * i) == [1, 4, 9]
    assert from_([1, 2, 3], "x + i") == [2, 4, 6]


def test_from_native_map_fn_of_one_argument():
    assert from_(["a", "b"], str.upper) == ["A", "B"]


def test_from_accepts_tuples_mappings_and_iterables():
    assert from_((1, 2)) == [1, 2]
    assert from_({2: 'b', 1: 'a'}) == ['a', 'b']
    assert from_(range(3)) == [0, 1, 2]


def test_from_rejects_non_collections():
    with pytest.raises(NotASequence):
        from_(42)
    with pytest.raises(NotASequence):
        from_({1: 'a', 3: 'c'})


def test_class_level_construction():
    assert Sequence.from_([1]) == [1]
    assert Sequence.isSequence([1])
    assert Sequence.wrap([1]).items == [1]
    # Instances see the same static helpers.
    assert Sequence([]).is_sequence([])


# --- Structural test ---

IS_SEQUENCE_CASES = [
    ("empty_list", [], True),
    ("empty_mapping", {}, True),
    ("contiguous_list", [1, 2, 3], True),
    ("tuple", ("a",), True),
    ("gap_in_list", [1, 2, None, 4], False),
    ("contiguous_mapping", {1: 'a', 2: 'b', 3: 'c'}, True),
    ("unordered_mapping", {3: 'c', 1: 'a', 2: 'b'}, True),
    ("gap_in_mapping", {1: 'a', 2: 'b', 4: 'd'}, False),
    ("zero_based_mapping", {0: 'a', 1: 'b'}, False),
    ("string_keys", {'a': 1}, False),
    ("none_value", {1: None}, False),
    ("bool_key", {True: 'a'}, False),
    ("tagged", Sequence([1]), True),
    ("string", "abc", False),
    ("number", 5, False),
    ("none", None, False),
]


@pytest.mark.parametrize(
    "value, expected",
    [c[1:] for c in IS_SEQUENCE_CASES],
    ids=[c[0] for c in IS_SEQUENCE_CASES],
)
def test_is_sequence(value, expected):
    assert is_sequence(value) is expected


def test_validate():
    data = [1, 2]
    assert validate(data).items is data
    seq = Sequence([1])
    assert validate(seq) is seq
    assert validate((1, 2)) == [1, 2]
    assert validate({1: 'x', 2: 'y'}) == ['x', 'y']
    with pytest.raises(NotASequence) as excinfo:
        validate([1, None])
    assert isinstance(excinfo.value, TypeError)


# --- Python protocol ---

def test_one_based_indexing():
    assert INDEX_BASE == 1
    seq = Sequence(['a', 'b', 'c'])
    assert seq[1] == 'a'
    assert seq[3] == 'c'
    for bad in (0, 4, -1):
        with pytest.raises(IndexError):
            seq[bad]
    with pytest.raises(TypeError):
        seq['1']


def test_setitem_appends_at_n_plus_one_only():
    seq = Sequence([1, 2])
    seq[2] = 20
    seq[3] = 30
    assert seq.items == [1, 20, 30]
    with pytest.raises(IndexError):
        seq[5] = 50
    with pytest.raises(IndexError):
        seq[0] = 0


def test_container_protocol():
    seq = Sequence([3, 1, 2])
    assert len(seq) == 3
    assert list(seq) == [3, 1, 2]
    assert list(reversed(seq)) == [2, 1, 3]
    assert 1 in seq
    assert 9 not in seq


def test_equality():
    assert Sequence([1, 2]) == Sequence([1, 2])
    assert Sequence([1, 2]) == [1, 2]
    assert Sequence([1, 2]) == (1, 2)
    assert Sequence([1, 2]) != [2, 1]
    assert Sequence([1]) != "1"


def test_unhashable():
    with pytest.raises(TypeError):
        hash(Sequence([]))


def test_repr():
    assert repr(Sequence([1, "two", Sequence([3])])) == 'Sequence[ 1, "two", Sequence[ 3 ] ]'
    assert str(Sequence([True, None])) == 'Sequence[ true, nil ]'


# --- Method naming ---

@pytest.mark.parametrize("js_name, attr", [
    ("indexOf", "index_of"),
    ("lastIndexOf", "last_index_of"),
    ("findLastIndex", "find_last_index"),
    ("flatMap", "flat_map"),
    ("copyWithin", "copy_within"),
    ("toSpliced", "to_spliced"),
    ("forEach", "for_each"),
    ("reduceRight", "reduce_right"),
    ("with", "with_"),
    ("from", "from_"),
])
def test_js_method_names(js_name, attr):
    assert JS_METHOD_NAMES[js_name] == attr
    assert JS_METHOD_NAMES[attr] == attr


def test_camel_case_aliases_are_the_same_methods():
    seq = Sequence([1, 2, 1])
    assert seq.indexOf(1) == seq.index_of(1) == 1
    assert seq.lastIndexOf(1) == 3
    assert Sequence.flatMap is Sequence.flat_map
    assert not hasattr(Sequence, "with")
