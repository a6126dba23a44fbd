"""
Evaluates callback expression nodes against a binding Scope.

The evaluator only knows arithmetic, comparison, field access, indexing and
method calls on sequences and strings. There is no access to builtins,
modules or attributes beginning with an underscore.
"""

import os
import sys
import collections.abc
from typing import Any

from jsarray.jsarray_datatypes import (
    Scope, Name, BinaryOp, UnaryOp, Field, Index, MethodCall, TableLiteral, Program,
)

# Pure string methods reachable from `s:upper()` style calls.
STRING_METHODS = frozenset({
    'upper', 'lower', 'strip', 'lstrip', 'rstrip', 'startswith', 'endswith',
    'find', 'replace', 'split', 'isdigit', 'isalpha', 'isspace', 'count',
})


def _tostring(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'nil'
    return str(value)


class Operators:
    """Python implementations of the expression operators."""

    # --- Math ---
    def _add(self, a, b): return a + b
    def _sub(self, a, b): return a - b
    def _mul(self, a, b): return a * b
    def _div(self, a, b): return a / b
    def _idiv(self, a, b): return a // b
    def _mod(self, a, b): return a % b
    def _pow(self, b, e): return b ** e
    def _concat(self, a, b): return _tostring(a) + _tostring(b)

    # --- Comparison ---
    def _eq(self, a, b): return a == b
    def _neq(self, a, b): return a != b
    def _gt(self, a, b): return a > b
    def _gte(self, a, b): return a >= b
    def _lt(self, a, b): return a < b
    def _lte(self, a, b): return a <= b

    # --- Unary ---
    def _neg(self, x): return -x
    def _not(self, x): return not x
    def _len(self, x): return len(x)

    def binary_table(self):
        return {
            '+': self._add, '-': self._sub, '*': self._mul, '/': self._div,
            '//': self._idiv, '%': self._mod, '^': self._pow, '**': self._pow,
            '..': self._concat,
            '==': self._eq, '~=': self._neq, '!=': self._neq,
            '>': self._gt, '>=': self._gte, '<': self._lt, '<=': self._lte,
        }

    def unary_table(self):
        return {'-': self._neg, 'not': self._not, '#': self._len}


class Evaluator:
    def __init__(self):
        ops = Operators()
        self.binary = ops.binary_table()
        self.unary = ops.unary_table()

    def _dbg(self, *parts):
        if os.environ.get("JSARRAY_DEBUG"):
            print("[DBG]", *parts, file=sys.stderr)

    def run(self, program: Program, scope: Scope) -> Any:
        """Evaluates every statement in order and returns the last value."""
        result = None
        for stmt in program.statements:
            result = self.eval(stmt, scope)
        return result

    def eval(self, node: Any, scope: Scope) -> Any:
        match node:
            case Name():
                return scope[node.text]
            case BinaryOp(op='and'):
                left = self.eval(node.left, scope)
                return self.eval(node.right, scope) if left else left
            case BinaryOp(op='or'):
                left = self.eval(node.left, scope)
                return left if left else self.eval(node.right, scope)
            case BinaryOp():
                func = self.binary[node.op]
                return func(self.eval(node.left, scope), self.eval(node.right, scope))
            case UnaryOp():
                return self.unary[node.op](self.eval(node.operand, scope))
            case Field():
                return self._get_field(self.eval(node.target, scope), node.name)
            case Index():
                return self._get_index(self.eval(node.target, scope), self.eval(node.key, scope))
            case MethodCall():
                target = self.eval(node.target, scope)
                args = [self.eval(a, scope) for a in node.args]
                return self._call_method(target, node.name, args)
            case TableLiteral():
                from jsarray.jsarray_sequence import Sequence
                return Sequence([self.eval(item, scope) for item in node.items])
            case Program():
                return self.run(node, scope)
            case _:
                # Literal value
                return node

    def _get_field(self, target, name):
        if isinstance(target, collections.abc.Mapping):
            return target.get(name)
        if name.startswith('_'):
            raise AttributeError(f"private attribute '{name}' is not accessible from callbacks")
        value = getattr(target, name, None)
        if callable(value):
            raise TypeError(f"'{name}' is a method; call it with {name}(...)")
        return value

    def _get_index(self, target, key):
        from jsarray.jsarray_sequence import Sequence
        if isinstance(target, collections.abc.Mapping):
            return target.get(key)
        if isinstance(target, (Sequence, list, tuple)):
            if isinstance(key, bool) or not isinstance(key, int):
                raise TypeError(f"sequence index must be an integer, not {type(key).__name__}")
            if 1 <= key <= len(target):
                return target[key] if isinstance(target, Sequence) else target[key - 1]
            return None
        raise TypeError(f"'{type(target).__name__}' value cannot be indexed")

    def _call_method(self, target, name, args):
        from jsarray.jsarray_sequence import Sequence, JS_METHOD_NAMES
        if isinstance(target, Sequence):
            attr = JS_METHOD_NAMES.get(name)
            if attr is None:
                raise AttributeError(f"Sequence has no method '{name}'")
            self._dbg("Sequence call", name, "argc", len(args))
            return getattr(target, attr)(*args)
        if isinstance(target, str) and name in STRING_METHODS:
            return getattr(target, name)(*args)
        raise TypeError(f"method '{name}' is not available on {type(target).__name__}")
