from __future__ import annotations
from typing import Dict, Optional

class RenderContext:
    """State for rendering one (possibly cyclic) validator graph as text.

    A node reached again while it is still being rendered prints as ``&N`` and its
    outermost rendering is prefixed with ``&N=``. Numbers are local to one render
    call.
    """

    def __init__(self) -> None:
        self._active: Dict[int, Optional[int]] = {}
        self._counter = 0

    def render(self, node) -> str:
        key = id(node)
        if key in self._active:
            if self._active[key] is None:
                self._counter += 1
                self._active[key] = self._counter
            return f"&{self._active[key]}"
        self._active[key] = None
        try:
            text = node.render(self)
        finally:
            ref = self._active.pop(key)
        if ref is not None:
            return f"&{ref}={text}"
        return text

def render(node) -> str:
    return RenderContext().render(node)
