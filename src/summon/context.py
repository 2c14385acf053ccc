"""
Shared key/value scope for one Task interpretation.

``ReadContext``/``WriteContext`` effects read and write a TaskContext. It is
the only state shared between sub-Tasks of one run, including concurrent
``parallel`` branches; concurrent writers of the same key race and the last
writer by completion time wins.
"""

from __future__ import annotations

from typing import Mapping


class TaskContext:
    """Mutable key/value store threaded through one interpretation.

    Example:
        >>> context = TaskContext({"component_name": "Button"})
        >>> context.write("dir", "src/components/Button")
        >>> context.read("dir")
        'src/components/Button'
    """

    def __init__(self, initial: Mapping[str, object] | None = None) -> None:
        self._values: dict[str, object] = dict(initial or {})

    def read(self, key: str) -> object:
        """Return the value for ``key``, or None when unset."""
        return self._values.get(key)

    def write(self, key: str, value: object) -> None:
        self._values[key] = value


__all__ = ["TaskContext"]
