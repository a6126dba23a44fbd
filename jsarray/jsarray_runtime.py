"""
Callback normalization: turns either a callable or the source text of an
expression into a callable with a fixed, template-defined signature.
"""

import os
import re
import sys
import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from koine import Parser

from jsarray.jsarray_datatypes import CallbackSyntaxError, Program, Scope
from jsarray.jsarray_transformer import CallbackTransformer
from jsarray.jsarray_interpreter import Evaluator

GRAMMAR_PATH = Path(__file__).parent / "grammar" / "callback_grammar.yaml"

_LOCATION_RE = re.compile(r"L(\d+):C(\d+)")


def _dbg(*parts):
    if os.environ.get("JSARRAY_DEBUG"):
        print("[DBG]", *parts, file=sys.stderr)


# ===================================================================
# Templates
# ===================================================================

@dataclass(frozen=True)
class Template:
    """A parameter-binding shape for textual callbacks.

    `returns` is False for the side-effect template: the text is a statement
    list run for effect and the callback always returns None.
    """
    name: str
    params: Tuple[str, ...]
    returns: bool = True


ELEMENT_TEST = Template("callback", ("x", "i", "self"))
MAP = Template("mapFn", ("x", "i"))
FOR_EACH = Template("forEachFn", ("x", "i", "self"), returns=False)
REDUCE = Template("reduceFn", ("acc", "cur", "i", "self"))

TEMPLATES = {t.name: t for t in (ELEMENT_TEST, MAP, FOR_EACH, REDUCE)}


# ===================================================================
# Compilation
# ===================================================================

class CallbackCompiler:
    """Parses, transforms, and binds textual callbacks."""

    _parser: Optional[Parser] = None
    _transformer: Optional[CallbackTransformer] = None

    def __init__(self):
        if CallbackCompiler._parser is None:
            grammar_path = os.environ.get("JSARRAY_GRAMMAR") or str(GRAMMAR_PATH)
            _dbg("loading grammar", grammar_path)
            CallbackCompiler._parser = Parser.from_file(grammar_path)

        if CallbackCompiler._transformer is None:
            CallbackCompiler._transformer = CallbackTransformer()

        self.parser = CallbackCompiler._parser
        self.transformer = CallbackCompiler._transformer
        self.evaluator = Evaluator()

    def _source_context(self, source: str, line: int, col: Optional[int], radius: int = 2) -> str:
        lines = source.splitlines()
        if not line or line < 1 or line > len(lines):
            return ""
        start = max(1, line - radius)
        end = min(len(lines), line + radius)
        width = len(str(end))
        out = []
        for i in range(start, end + 1):
            prefix = ">" if i == line else " "
            ln = str(i).rjust(width)
            content = lines[i - 1]
            out.append(f"{prefix} {ln} | {content}")
            if i == line and col is not None:
                caret = " " * max(col - 1, 0)
                out.append(f"  {' ' * width} | {caret}^")
        return "\n".join(out)

    def _syntax_error(self, message: str, source: str, line=None, col=None) -> CallbackSyntaxError:
        if line is None:
            m = _LOCATION_RE.search(message)
            if m:
                line, col = int(m.group(1)), int(m.group(2))
        text = f"CallbackSyntaxError: {message}"
        if line is not None:
            context = self._source_context(source, line, col)
            if context:
                text = f"{text}\n{context}"
        return CallbackSyntaxError(text, source=source, line=line, col=col)

    def parse(self, source: str) -> Program:
        """Parses source text into a Program, raising CallbackSyntaxError on failure."""
        parse_out = self.parser.parse(source)
        if parse_out.get('status') != 'success':
            raise self._syntax_error(parse_out.get('message') or str(parse_out), source)
        try:
            return self.transformer.transform(parse_out['ast'])
        except CallbackSyntaxError as e:
            raise self._syntax_error(str(e), source, e.line, e.col) from None

    def compile(self, source: str, template: Template,
                env: Optional[Mapping[str, Any]] = None) -> Callable:
        program = self.parse(source)
        if template.returns and len(program) != 1:
            raise self._syntax_error(
                f"'{template.name}' expects a single expression, got {len(program)} statements", source)
        _dbg("compiled", template.name, repr(source), "->", program)

        evaluator = self.evaluator
        params = template.params
        returns = template.returns
        outer = Scope(env) if env else None

        def callback(*args):
            scope = Scope(dict(zip(params, args)), parent=outer)
            result = evaluator.run(program, scope)
            return result if returns else None

        callback.__name__ = template.name
        callback.__qualname__ = f"<{template.name} {source!r}>"
        callback.source = source
        callback.template = template
        return callback


def normalize(callback: Any, template: Template = ELEMENT_TEST,
              env: Optional[Dict[str, Any]] = None) -> Callable:
    """Returns `callback` unchanged when callable; compiles it when it is text.

    Every call with text compiles afresh. `env` supplies extra names the
    expression may read; template parameters shadow them.
    """
    if isinstance(callback, str):
        return CallbackCompiler().compile(callback, template, env)
    if callable(callback):
        return callback
    raise TypeError(f"callback must be callable or str, not {type(callback).__name__}")


def fit_arity(func: Callable, count: int) -> Callable:
    """Adapts a native callable that accepts fewer than `count` positional args.

    Callables with *args, or whose signature cannot be inspected, are
    returned as-is and receive every argument.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return func
    positional = 0
    for p in sig.parameters.values():
        if p.kind == inspect.Parameter.VAR_POSITIONAL:
            return func
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    if positional >= count:
        return func
    _dbg("fit_arity", getattr(func, "__name__", func), positional, "of", count)

    def fitted(*args):
        return func(*args[:positional])
    return fitted


def bind_callback(callback: Any, template: Template) -> Callable:
    """normalize() followed by fit_arity() for the template's parameter count."""
    return fit_arity(normalize(callback, template), len(template.params))
