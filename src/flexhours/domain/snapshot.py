"""
Point-in-time captures of the host page's rendered text.

A TimeSnapshot is a forest of TextFragments in document order. Each fragment
carries its full trimmed text (its own text followed by its descendants'
text, the way ``textContent`` renders it), so scans can match on a fragment
without walking its children. Snapshots are immutable and never persisted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

Scope = Callable[["TextFragment"], Iterable["TextFragment"]]


@dataclass(frozen=True)
class TextFragment:
    """One rendered element: its full text, tag, classes and child elements."""

    text: str
    tag: str = ""
    classes: tuple[str, ...] = ()
    children: tuple[TextFragment, ...] = ()

    @classmethod
    def element(
        cls,
        tag: str,
        own_text: str = "",
        *children: TextFragment,
        classes: Iterable[str] = (),
    ) -> TextFragment:
        """Build a fragment whose text is ``own_text`` followed by its children's text."""
        full = own_text + "".join(child.text for child in children)
        return cls(text=full.strip(), tag=tag.lower(), classes=tuple(classes), children=tuple(children))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextFragment:
        """
        Deserialize from dict (e.g. loaded from JSON).

        Shape::

            {"tag": "button", "class": "time-box", "text": "근무중 ",
             "children": [{"tag": "span", "text": "1시간 5분"}]}

        ``text`` is the element's own text; descendants' text is appended.
        ``class`` may be a space-separated string or a list.
        """
        children = tuple(cls.from_dict(child) for child in data.get("children", ()))
        raw_classes = data.get("class", ())
        classes = raw_classes.split() if isinstance(raw_classes, str) else list(raw_classes)
        return cls.element(str(data.get("tag", "")), str(data.get("text", "")), *children, classes=classes)

    def descendants(self) -> Iterator[TextFragment]:
        """Yield all descendant fragments in document order (excluding self)."""
        for child in self.children:
            yield child
            yield from child.descendants()


def subtree(fragment: TextFragment) -> Iterator[TextFragment]:
    """The fragment itself followed by its descendants. Never siblings or ancestors."""
    yield fragment
    yield from fragment.descendants()


def fragment_only(fragment: TextFragment) -> Iterator[TextFragment]:
    yield fragment


@dataclass(frozen=True)
class TimeSnapshot:
    """Immutable capture of zero or more fragments read at one instant."""

    roots: tuple[TextFragment, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[TextFragment]:
        """All fragments in document order (pre-order, like ``querySelectorAll('*')``)."""
        for root in self.roots:
            yield from subtree(root)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return bool(self.roots)

    def by_tag(self, tag: str) -> Iterator[TextFragment]:
        tag = tag.lower()
        return (fragment for fragment in self if fragment.tag == tag)

    @classmethod
    def of(cls, *roots: TextFragment) -> TimeSnapshot:
        return cls(roots=tuple(roots))

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list[Any]) -> TimeSnapshot:
        """Accept either ``{"fragments": [...]}`` or a bare list of fragments."""
        items = data.get("fragments", []) if isinstance(data, dict) else data
        return cls(roots=tuple(TextFragment.from_dict(item) for item in items))

    @classmethod
    def from_json_file(cls, path: Path | str) -> TimeSnapshot:
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


EMPTY_SNAPSHOT = TimeSnapshot()
