"""
The Sequence type: a JavaScript-Array-style method set over a Python list,
addressed with 1-based positions.

Construction comes in two flavours. `wrap` is a zero-copy view: every holder
of the backing list sees mutations. `from_` always allocates a new list.
Methods marked **mutates self** operate on the backing list in place and
return the same Sequence; every other method that returns a Sequence builds
a fresh one.
"""

import keyword
import collections.abc
from functools import cmp_to_key
from typing import Any, Callable, List, Optional

from jsarray.jsarray_datatypes import INDEX_BASE, MISSING, EmptyReduceError, NotASequence
from jsarray.jsarray_runtime import ELEMENT_TEST, MAP, FOR_EACH, REDUCE, bind_callback


def _is_position(key) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def is_sequence(value: Any) -> bool:
    """Structural list test.

    True for a tagged Sequence, for a list/tuple with no `None` slot, and for
    a mapping whose keys are exactly the integers 1..N. The mapping scan
    stops at the first missing position. Empty collections qualify.
    """
    if isinstance(value, Sequence):
        return True
    if isinstance(value, (list, tuple)):
        return all(v is not None for v in value)
    if isinstance(value, collections.abc.Mapping):
        for count, key in enumerate(value, start=INDEX_BASE):
            if not _is_position(key) or value.get(count) is None:
                return False
        return True
    return False


def _elements(value) -> List[Any]:
    """The elements of a value that already passed is_sequence, in order."""
    if isinstance(value, Sequence):
        return value.items
    if isinstance(value, collections.abc.Mapping):
        return [value[k] for k in range(INDEX_BASE, len(value) + INDEX_BASE)]
    return value


def wrap(collection: Optional[List[Any]] = None) -> 'Sequence':
    """Returns a Sequence view over `collection` without copying it.

    Wrapping a Sequence returns that same Sequence.
    """
    if collection is None:
        return Sequence([])
    if isinstance(collection, Sequence):
        return collection
    if isinstance(collection, list):
        return Sequence(collection)
    raise TypeError(
        f"wrap() needs a list to alias, not {type(collection).__name__}; use from_() to copy")


def from_(collection: Any, map_fn: Any = None) -> 'Sequence':
    """Returns a new Sequence over a freshly allocated shallow copy.

    `map_fn` (callable or text, bound as `(x, i)`) replaces each element
    before insertion. The source is never mutated.
    """
    if is_sequence(collection):
        source = _elements(collection)
    elif isinstance(collection, collections.abc.Iterable) and not isinstance(collection, collections.abc.Mapping):
        source = list(collection)
    else:
        raise NotASequence(collection)

    if map_fn is None:
        return Sequence(list(source))
    fn = bind_callback(map_fn, MAP)
    return Sequence([fn(v, i) for i, v in enumerate(source, start=INDEX_BASE)])


def validate(value: Any) -> 'Sequence':
    """Validates untyped input and tags it as a Sequence.

    Lists are wrapped in place; tuples and 1..N mappings are copied because
    they cannot be aliased as a mutable list. Anything else raises
    NotASequence.
    """
    if not is_sequence(value):
        raise NotASequence(value)
    if isinstance(value, (Sequence, list)):
        return wrap(value)
    return from_(value)


def _comparison(comparator: Callable) -> Callable:
    """Turns a less-than predicate or a three-way comparator into a cmp function."""
    def compare(a, b):
        result = comparator(a, b)
        if isinstance(result, bool):
            if result:
                return -1
            return 1 if comparator(b, a) else 0
        return result
    return compare


class Sequence:
    """An ordered, 1-indexed, hole-free sequence backed by a Python list."""

    def __init__(self, items: Optional[List[Any]] = None):
        self.items = [] if items is None else items

    # --- Construction (also exposed as module functions) ---
    wrap = staticmethod(wrap)
    from_ = staticmethod(from_)
    is_sequence = staticmethod(is_sequence)
    validate = staticmethod(validate)

    # --- Python protocol ---
    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __reversed__(self):
        return reversed(self.items)

    def __contains__(self, value) -> bool:
        return value in self.items

    def __getitem__(self, index: int) -> Any:
        if not _is_position(index):
            raise TypeError(f"Sequence indices must be integers, not {type(index).__name__}")
        if not INDEX_BASE <= index < len(self.items) + INDEX_BASE:
            raise IndexError(f"Sequence index {index} out of range 1..{len(self.items)}")
        return self.items[index - INDEX_BASE]

    def __setitem__(self, index: int, value: Any):
        if not _is_position(index):
            raise TypeError(f"Sequence indices must be integers, not {type(index).__name__}")
        n = len(self.items)
        if index == n + INDEX_BASE:
            self.items.append(value)
        elif INDEX_BASE <= index < n + INDEX_BASE:
            self.items[index - INDEX_BASE] = value
        else:
            # Anything further out would leave a hole.
            raise IndexError(f"Sequence assignment index {index} out of range 1..{n + 1}")

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return self.items == other.items
        if isinstance(other, (list, tuple)):
            return self.items == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        from jsarray.jsarray_printer import Printer
        return Printer().pformat(self)

    __str__ = __repr__

    def _span(self, start, end):
        """Clamps an inclusive 1-based [start, end] range to 0-based slice bounds."""
        n = len(self.items)
        lo = max(start, INDEX_BASE) - INDEX_BASE
        hi = min(n if end is None else end, n)
        return lo, max(hi, lo)

    # =================================================================
    # Query / predicate
    # =================================================================

    def length(self) -> int:
        """The number of elements."""
        return len(self.items)

    def includes(self, search_element, from_index: int = 1) -> bool:
        return self.index_of(search_element, from_index) != -1

    def index_of(self, search_element, from_index: int = 1) -> int:
        """First position of `search_element` at or after `from_index`, or -1."""
        for i in range(max(from_index, INDEX_BASE), len(self.items) + INDEX_BASE):
            if self.items[i - INDEX_BASE] == search_element:
                return i
        return -1

    def last_index_of(self, search_element, from_index: Optional[int] = None) -> int:
        """Last position of `search_element` at or before `from_index`, or -1."""
        n = len(self.items)
        start = n if from_index is None else min(from_index, n)
        for i in range(start, INDEX_BASE - 1, -1):
            if self.items[i - INDEX_BASE] == search_element:
                return i
        return -1

    def find(self, callback) -> Any:
        """First element passing the test, or None."""
        callback = bind_callback(callback, ELEMENT_TEST)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            if callback(v, i, self):
                return v
        return None

    def find_index(self, callback) -> int:
        callback = bind_callback(callback, ELEMENT_TEST)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            if callback(v, i, self):
                return i
        return -1

    def find_last(self, callback) -> Any:
        """Last element passing the test (scanning backwards), or None."""
        i = self.find_last_index(callback)
        return None if i == -1 else self.items[i - INDEX_BASE]

    def find_last_index(self, callback) -> int:
        callback = bind_callback(callback, ELEMENT_TEST)
        for i in range(len(self.items), INDEX_BASE - 1, -1):
            # the callback may have shrunk the receiver
            if i > len(self.items):
                continue
            if callback(self.items[i - INDEX_BASE], i, self):
                return i
        return -1

    def every(self, callback) -> bool:
        callback = bind_callback(callback, ELEMENT_TEST)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            if not callback(v, i, self):
                return False
        return True

    def some(self, callback) -> bool:
        callback = bind_callback(callback, ELEMENT_TEST)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            if callback(v, i, self):
                return True
        return False

    # =================================================================
    # Transformation (always a new Sequence)
    # =================================================================

    def concat(self, *args) -> 'Sequence':
        """Merges self and args; sequence arguments contribute their elements (one level)."""
        new = []
        for value in (self,) + args:
            if is_sequence(value):
                new.extend(_elements(value))
            else:
                new.append(value)
        return Sequence(new)

    def filter(self, callback) -> 'Sequence':
        callback = bind_callback(callback, ELEMENT_TEST)
        return Sequence([v for i, v in enumerate(self.items, start=INDEX_BASE) if callback(v, i, self)])

    def map(self, callback) -> 'Sequence':
        callback = bind_callback(callback, ELEMENT_TEST)
        return Sequence([callback(v, i, self) for i, v in enumerate(self.items, start=INDEX_BASE)])

    def flat(self, depth: int = 1) -> 'Sequence':
        """Inlines nested sequences up to `depth` levels.

        A negative depth wraps the whole receiver as a single element. None
        values are dropped; every other value, falsy or not, is kept.
        """
        new = []

        def _flatten(value, d):
            if d <= -1:
                new.append(value)
                return
            for v in _elements(value):
                if is_sequence(v):
                    _flatten(v, d - 1)
                elif v is not None:
                    new.append(v)

        _flatten(self, depth)
        return Sequence(new)

    def flat_map(self, callback) -> 'Sequence':
        """map() then flat(1), in a single pass."""
        callback = bind_callback(callback, ELEMENT_TEST)
        new = []
        for i, v in enumerate(self.items, start=INDEX_BASE):
            result = callback(v, i, self)
            if is_sequence(result):
                new.extend(r for r in _elements(result) if r is not None)
            elif result is not None:
                new.append(result)
        return Sequence(new)

    def slice(self, start: int = 1, end: Optional[int] = None) -> 'Sequence':
        """Copies the inclusive range [start, end]; positions are clamped to 1..N."""
        lo, hi = self._span(start, end)
        return Sequence(self.items[lo:hi])

    def with_(self, index: int, value) -> 'Sequence':
        """Copy with the element at `index` replaced."""
        new = Sequence(list(self.items))
        if not INDEX_BASE <= index < len(new.items) + INDEX_BASE:
            raise IndexError(f"Sequence index {index} out of range 1..{len(new.items)}")
        new.items[index - INDEX_BASE] = value
        return new

    def to_reversed(self) -> 'Sequence':
        return Sequence(self.items[::-1])

    def to_sorted(self, comparator: Optional[Callable] = None) -> 'Sequence':
        return Sequence(list(self.items)).sort(comparator)

    def to_spliced(self, start: int, delete_count: Optional[int] = None, *items) -> 'Sequence':
        return Sequence(list(self.items)).splice(start, delete_count, *items)

    def join(self, separator: str = "") -> str:
        from jsarray.jsarray_printer import Printer
        p = Printer()
        return separator.join(p.ptext(v) for v in self.items)

    # =================================================================
    # Mutation (in place)
    # =================================================================

    def push(self, *values) -> int:
        """**mutates self** Appends values; returns the new length."""
        self.items.extend(values)
        return len(self.items)

    def unshift(self, *values) -> int:
        """**mutates self** Prepends values in argument order; returns the new length."""
        self.items[0:0] = values
        return len(self.items)

    def pop(self) -> Any:
        """**mutates self** Removes and returns the last element (None when empty)."""
        return self.items.pop() if self.items else None

    def shift(self) -> Any:
        """**mutates self** Removes and returns the first element (None when empty)."""
        return self.items.pop(0) if self.items else None

    def fill(self, value, start: int = 1, end: Optional[int] = None) -> 'Sequence':
        """**mutates self** Overwrites the inclusive range [start, end] with `value`."""
        lo, hi = self._span(start, end)
        self.items[lo:hi] = [value] * (hi - lo)
        return self

    def copy_within(self, target: int, start: int, end: Optional[int] = None) -> 'Sequence':
        """**mutates self** Copies [start, end] to begin at `target`.

        The source range is read in full before writing, so overlapping
        ranges are safe. The length never changes.
        """
        lo, hi = self._span(start, end)
        chunk = self.items[lo:hi]
        n = len(self.items)
        for offset, value in enumerate(chunk):
            pos = target + offset
            if pos > n:
                break
            if pos >= INDEX_BASE:
                self.items[pos - INDEX_BASE] = value
        return self

    def reverse(self) -> 'Sequence':
        """**mutates self**"""
        self.items.reverse()
        return self

    def sort(self, comparator: Optional[Callable] = None) -> 'Sequence':
        """**mutates self** Stable sort.

        `comparator(a, b)` may be a less-than predicate (True when `a` sorts
        first) or return a number, negative when `a` sorts first.
        """
        if comparator is None:
            self.items.sort()
        elif callable(comparator):
            self.items.sort(key=cmp_to_key(_comparison(comparator)))
        else:
            raise TypeError(f"comparator must be callable, not {type(comparator).__name__}")
        return self

    def splice(self, start: int, delete_count: Optional[int] = None, *items) -> 'Sequence':
        """**mutates self** Removes `delete_count` elements at `start`, then inserts `items` there.

        An omitted `delete_count` removes everything from `start` on.
        """
        lo = min(max(start, INDEX_BASE) - INDEX_BASE, len(self.items))
        count = len(self.items) - lo if delete_count is None else max(delete_count, 0)
        self.items[lo:lo + count] = items
        return self

    # =================================================================
    # Iteration & reduction
    # =================================================================

    def for_each(self, callback) -> None:
        callback = bind_callback(callback, FOR_EACH)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            callback(v, i, self)

    def reduce(self, callback, initial_value=MISSING) -> Any:
        """Folds left-to-right.

        Without `initial_value` the first element is removed from the
        sequence and used as the seed; the fold then runs over what remains.
        """
        callback = bind_callback(callback, REDUCE)
        acc = initial_value
        if acc is MISSING:
            if not self.items:
                raise EmptyReduceError("reduce of empty sequence with no initial value")
            acc = self.items.pop(0)
        for i, v in enumerate(self.items, start=INDEX_BASE):
            acc = callback(acc, v, i, self)
        return acc

    def reduce_right(self, callback, initial_value=MISSING) -> Any:
        """Folds right-to-left; without a seed the last element is removed and used."""
        callback = bind_callback(callback, REDUCE)
        acc = initial_value
        if acc is MISSING:
            if not self.items:
                raise EmptyReduceError("reduceRight of empty sequence with no initial value")
            acc = self.items.pop()
        for i in range(len(self.items), INDEX_BASE - 1, -1):
            # the callback may have shrunk the receiver
            if i > len(self.items):
                continue
            acc = callback(acc, self.items[i - INDEX_BASE], i, self)
        return acc


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


# Public method names as written in JavaScript (and in textual callbacks),
# mapped to the Python attribute that implements them.
JS_METHOD_NAMES = {}
for _name in [
    'length', 'includes', 'index_of', 'last_index_of', 'find', 'find_index',
    'find_last', 'find_last_index', 'every', 'some', 'concat', 'filter', 'map',
    'flat', 'flat_map', 'slice', 'with_', 'to_reversed', 'to_sorted',
    'to_spliced', 'join', 'push', 'unshift', 'pop', 'shift', 'fill',
    'copy_within', 'reverse', 'sort', 'splice', 'for_each', 'reduce',
    'reduce_right', 'from_', 'is_sequence', 'validate', 'wrap',
]:
    _js = _camel(_name.rstrip('_'))
    JS_METHOD_NAMES[_js] = _name
    JS_METHOD_NAMES[_name] = _name
    # camelCase aliases; keywords (`with`, `from`) keep the trailing underscore
    if _js != _name and not keyword.iskeyword(_js):
        setattr(Sequence, _js, Sequence.__dict__[_name])
del _name, _js
