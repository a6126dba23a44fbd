"""
A pretty-printer for sequences and the values they hold.
"""
import collections.abc


class Printer:
    """Formats values into their display form (`Sequence[ 1, "a" ]`)."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def ptext(self, obj):
        """Unquoted textual form used by `join`; None renders as ''."""
        if obj is None:
            return ""
        if isinstance(obj, str):
            return obj
        return self.pformat(obj)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        from jsarray.jsarray_sequence import Sequence
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, Sequence):
            return self._pformat_sequence
        if isinstance(obj, str):
            return self._pformat_str
        if isinstance(obj, collections.abc.Mapping):
            return self._pformat_dict
        # Default to Python's repr for unknown types
        return lambda o, l: repr(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
        }

    def _pformat_primitive(self, obj, level):
        return str(obj)

    def _pformat_str(self, obj, level):
        escaped = (obj.replace('\\', '\\\\').replace('"', '\\"')
                   .replace('\n', '\\n').replace('\r', '\\r').replace('\0', '\\0'))
        return f'"{escaped}"'

    def _pformat_bool(self, obj, level):
        return 'true' if obj else 'false'

    def _pformat_none(self, obj, level):
        return 'nil'

    def _pformat_sequence(self, obj, level):
        items = ", ".join(self.pformat(item, level + 1) for item in obj)
        return f"Sequence[ {items} ]"

    def _pformat_dict(self, obj, level):
        items = ", ".join(f"{self.pformat(k, level + 1)}: {self.pformat(v, level + 1)}" for k, v in obj.items())
        return f"{{{items}}}"
