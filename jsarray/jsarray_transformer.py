"""
Transforms the raw parser AST into callback expression nodes.
"""

import re

from jsarray.jsarray_datatypes import (
    CallbackSyntaxError,
    Name, BinaryOp, UnaryOp, Field, Index, MethodCall, TableLiteral, Program,
)

_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '0': '\0', '\\': '\\', '"': '"', "'": "'"}
_ESCAPE_RE = re.compile(r'\\(.)')

_UNARY_TAGS = {'negation': 'not', 'negative': '-', 'length': '#'}


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


class CallbackTransformer:
    def _error(self, message, node):
        line = node.get('line') if isinstance(node, dict) else None
        col = node.get('col') if isinstance(node, dict) else None
        return CallbackSyntaxError(message, line=line, col=col)

    def transform(self, node: object) -> object:
        # Lists: transform each item
        if isinstance(node, list):
            return [self.transform(n) for n in node]

        # Primitives already in final form
        if not isinstance(node, dict):
            return node

        tag = node.get('tag')
        children = node.get('children', [])

        match tag:
            case 'program':
                return Program(self.transform(children))
            case 'binary_op':
                op = node['op']['text']
                return BinaryOp(op, self.transform(node['left']), self.transform(node['right']))
            case 'negation' | 'negative' | 'length':
                return UnaryOp(_UNARY_TAGS[tag], self.transform(children[0]))
            case 'postfix':
                return self._fold_postfix(children)
            case 'table':
                return TableLiteral(self.transform(children))

            # Atomics
            case 'number':
                # Integers stay exact; only decimal or exponent forms become floats.
                txt = node['text']
                if '.' in txt or 'e' in txt or 'E' in txt:
                    return float(txt)
                return int(txt)
            case 'string':
                return _unescape(node['text'][1:-1])
            case 'boolean' | 'nil':
                return node['value']
            case 'name':
                return Name(node['text'])

            case _:
                raise self._error(f"Unexpected syntax node {tag!r}", node)

    def _fold_postfix(self, children):
        """Folds `primary trailer*` into nested Field/Index/MethodCall nodes."""
        target = self.transform(children[0])
        for trailer in children[1:]:
            kids = trailer.get('children', [])
            match trailer.get('tag'):
                case 'field':
                    target = Field(target, kids[0]['text'])
                case 'index':
                    target = Index(target, self.transform(kids[0]))
                case 'method_call':
                    name, args = kids[0]['text'], kids[1]
                    target = MethodCall(target, name, self._arguments(args))
                case 'call':
                    # `a.m(...)` is the dotted spelling of `a:m(...)`; anything
                    # else would call an arbitrary value.
                    if not isinstance(target, Field):
                        raise self._error("Only method calls are allowed in callback expressions", trailer)
                    target = MethodCall(target.target, target.name, self._arguments(kids[0]))
                case other:
                    raise self._error(f"Unexpected trailer {other!r}", trailer)
        return target

    def _arguments(self, node):
        return [self.transform(a) for a in node.get('children', [])]
