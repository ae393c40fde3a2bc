from __future__ import annotations

from typing import Any

__all__ = [
    "MirrorDelegate",
]


class MirrorDelegate:
    """
    Hooks which let the application hosting a mirror intercept element
    creation and attribute assignment. Each hook may decline, in which case
    the mirror falls back to its default behavior; this base class declines
    everything and is what a mirror uses when no delegate is provided.

    Subclass and override either hook:

    ```
    class NoScriptDelegate(MirrorDelegate):
        def set_attribute(self, node, name, value) -> bool:
            # drop inline event handlers
            return name.startswith("on")
    ```
    """

    def create_element(self, tag_name: str) -> Any | None:
        """
        Create an element for the mirror, or return `None` to use the
        mirror's default construction.
        """
        return None

    def set_attribute(self, node: Any, name: str, value: str) -> bool:
        """
        Assign an attribute, returning `True` if handled. Returning `False`
        makes the mirror assign it directly.
        """
        return False
