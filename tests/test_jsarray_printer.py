import pytest
from jsarray.jsarray_printer import Printer
from jsarray.jsarray_sequence import Sequence


@pytest.fixture
def printer():
    return Printer()


# Test cases: (id, object, expected_string)
FORMAT_TEST_CASES = [
    ("str", "hello", '"hello"'),
    ("str_escapes", 'say "hi"\n', '"say \\"hi\\"\\n"'),
    ("int", 123, "123"),
    ("float", -1.5, "-1.5"),
    ("bool_true", True, "true"),
    ("bool_false", False, "false"),
    ("none", None, "nil"),
    ("empty_sequence", Sequence([]), "Sequence[  ]"),
    ("flat_sequence", Sequence([1, "a"]), 'Sequence[ 1, "a" ]'),
    ("nested_sequence", Sequence([Sequence([1]), Sequence([])]), "Sequence[ Sequence[ 1 ], Sequence[  ] ]"),
    ("mapping", {"k": 1}, '{"k": 1}'),
    ("plain_list_falls_back_to_repr", [1, 2], "[1, 2]"),
]


@pytest.mark.parametrize(
    "obj, expected",
    [c[1:] for c in FORMAT_TEST_CASES],
    ids=[c[0] for c in FORMAT_TEST_CASES],
)
def test_pformat(printer, obj, expected):
    assert printer.pformat(obj) == expected


def test_ptext_is_unquoted(printer):
    assert printer.ptext("a") == "a"
    assert printer.ptext(None) == ""
    assert printer.ptext(False) == "false"
    assert printer.ptext(Sequence(["a"])) == 'Sequence[ "a" ]'
