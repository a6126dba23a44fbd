"""
Defines the core data types for the jsarray runtime.

This module provides the exception hierarchy, the binding scope used when a
textual callback runs, and the node classes that a parsed callback
expression is transformed into.
"""

from typing import List, Dict, Any, Optional
import collections.abc

# Public positions (method arguments, callback indices, seq[i]) start here.
INDEX_BASE = 1


class _Missing:
    """Marks an omitted optional argument where `None` is a legal value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


# =================================================================
# Errors
# =================================================================

class CallbackSyntaxError(SyntaxError):
    """A textual callback is not valid for its template."""
    def __init__(self, message: str, source: Optional[str] = None,
                 line: Optional[int] = None, col: Optional[int] = None):
        super().__init__(message)
        self.source = source
        self.line = line
        self.col = col


class UnboundName(NameError):
    def __init__(self, key: str):
        super().__init__(f"name '{key}' is not bound in callback expression")
        self.key = key


class EmptyReduceError(TypeError):
    """Reduction of an empty sequence with no seed available."""
    pass


class NotASequence(TypeError):
    def __init__(self, value: Any):
        super().__init__(f"value of type {type(value).__name__} is not a contiguous 1..N sequence")
        self.value = value


# =================================================================
# Binding scope for textual callbacks
# =================================================================

class Scope:
    """Name bindings visible to a compiled callback.

    Template parameters are bound on a child scope whose parent holds the
    optional caller-supplied environment. Lookup walks child → parent;
    nothing outside the chain is reachable.
    """
    def __init__(self, bindings: Optional[Dict[str, Any]] = None, parent: Optional['Scope'] = None):
        self.bindings: Dict[str, Any] = dict(bindings or {})
        self.parent = parent

    def __setitem__(self, key: str, value: Any):
        if not isinstance(key, str):
            raise TypeError(f"Scope key must be a str, not {type(key)}")
        self.bindings[key] = value

    def __getitem__(self, key: str) -> Any:
        owner = self.find_owner(key)
        if owner is not None:
            return owner.bindings[key]
        raise UnboundName(key)

    def __contains__(self, key: Any) -> bool:
        return isinstance(key, str) and self.find_owner(key) is not None

    def find_owner(self, key: str) -> Optional['Scope']:
        """Finds the Scope in the lookup chain that owns key."""
        if key in self.bindings:
            return self
        if self.parent is not None:
            return self.parent.find_owner(key)
        return None

    def keys(self) -> collections.abc.KeysView:
        """Returns a view of keys in the current scope only."""
        return self.bindings.keys()

    def __repr__(self) -> str:
        keys = ', '.join(self.bindings.keys())
        parent_id = f", parent=#{id(self.parent)}" if self.parent else ""
        return f"<Scope bindings=[{keys}]{parent_id}>"


# =================================================================
# Expression nodes
# =================================================================
# Literal values (numbers, strings, booleans, None) are carried as plain
# Python values; only structured expressions get a node class.

class Node:
    """Base class for all callback expression nodes."""
    _fields: tuple = ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self._fields)

    def __hash__(self):
        return hash((type(self).__name__,) + tuple(repr(getattr(self, f)) for f in self._fields))

    def __repr__(self) -> str:
        args = ", ".join(repr(getattr(self, f)) for f in self._fields)
        return f"{type(self).__name__}({args})"


class Name(Node):
    """A bare identifier, resolved against the callback scope."""
    _fields = ('text',)

    def __init__(self, text: str):
        self.text = text


class BinaryOp(Node):
    _fields = ('op', 'left', 'right')

    def __init__(self, op: str, left: Any, right: Any):
        self.op = op
        self.left = left
        self.right = right


class UnaryOp(Node):
    _fields = ('op', 'operand')

    def __init__(self, op: str, operand: Any):
        self.op = op
        self.operand = operand


class Field(Node):
    """`target.name`: mapping key or public data attribute."""
    _fields = ('target', 'name')

    def __init__(self, target: Any, name: str):
        self.target = target
        self.name = name


class Index(Node):
    """`target[key]`: 1-based for sequences, key lookup for mappings."""
    _fields = ('target', 'key')

    def __init__(self, target: Any, key: Any):
        self.target = target
        self.key = key


class MethodCall(Node):
    """`target:name(args)` or `target.name(args)`."""
    _fields = ('target', 'name', 'args')

    def __init__(self, target: Any, name: str, args: List[Any]):
        self.target = target
        self.name = name
        self.args = list(args)


class TableLiteral(Node):
    """`{a, b, c}`: evaluates to a fresh Sequence."""
    _fields = ('items',)

    def __init__(self, items: List[Any]):
        self.items = list(items)


class Program(Node):
    """A `;`-separated list of expressions. The value is the last one."""
    _fields = ('statements',)

    def __init__(self, statements: List[Any]):
        self.statements = list(statements)

    def __len__(self) -> int:
        return len(self.statements)
