"""Structural element queries over BeautifulSoup trees.

A query is a chain of `Step` predicates joined by child/descendant
combinators. Chains are matched right-to-left against a candidate element,
so a selection pass is a single document-order walk over `root.find_all`.
Every query renders an equivalent CSS selector via `to_css()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from bs4 import Tag


class Combinator(str, Enum):
    """Relation between two adjacent steps."""

    CHILD = ">"
    DESCENDANT = " "


class Position(str, Enum):
    """Structural position of an element among its element siblings."""

    FIRST_CHILD = "first-child"
    FIRST_OF_TYPE = "first-of-type"
    LAST_OF_TYPE = "last-of-type"


def _element_children(parent: Tag) -> list[Tag]:
    return [child for child in parent.children if isinstance(child, Tag)]


def _attr_text(element: Tag, name: str) -> str | None:
    """Return an attribute as text; multi-valued attributes are space-joined."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


@dataclass(frozen=True, slots=True)
class AttrTest:
    """Attribute presence, exact value, or presence with a non-empty value."""

    name: str
    value: str | None = None
    non_empty: bool = False

    def matches(self, element: Tag) -> bool:
        actual = _attr_text(element, self.name)
        if actual is None:
            return False
        if self.value is not None:
            return actual == self.value
        if self.non_empty:
            return actual != ""
        return True

    def to_css(self) -> str:
        if self.value is not None:
            return f'[{self.name}="{self.value}"]'
        if self.non_empty:
            return f'[{self.name}]:not([{self.name}=""])'
        return f"[{self.name}]"


@dataclass(frozen=True, slots=True)
class Step:
    """One element test: tag name, attributes, position and relative paths."""

    tag: str | None = None
    attrs: tuple[AttrTest, ...] = ()
    position: Position | None = None
    has: Relative | None = None
    has_not: Relative | None = None

    def matches(self, element: Tag) -> bool:
        if self.tag is not None and element.name != self.tag:
            return False
        if not all(test.matches(element) for test in self.attrs):
            return False
        if self.position is not None and not self._position_matches(element):
            return False
        if self.has is not None and not self.has.exists_under(element):
            return False
        if self.has_not is not None and self.has_not.exists_under(element):
            return False
        return True

    def _position_matches(self, element: Tag) -> bool:
        parent = element.parent
        if parent is None:
            return False
        siblings = _element_children(parent)
        if self.position is Position.FIRST_CHILD:
            return bool(siblings) and siblings[0] is element
        same_type = [sibling for sibling in siblings if sibling.name == element.name]
        if self.position is Position.FIRST_OF_TYPE:
            return same_type[0] is element
        return same_type[-1] is element

    def to_css(self) -> str:
        css = self.tag or "*"
        css += "".join(test.to_css() for test in self.attrs)
        if self.has is not None:
            css += f":has({self.has.to_css()})"
        if self.has_not is not None:
            css += f":not(:has({self.has_not.to_css()}))"
        if self.position is not None:
            css += f":{self.position.value}"
        return css


@dataclass(frozen=True, slots=True)
class Path:
    """Steps joined by combinators, outermost first."""

    steps: tuple[Step, ...]
    combinators: tuple[Combinator, ...] = ()

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Path needs at least one step")
        if len(self.combinators) != len(self.steps) - 1:
            raise ValueError("Path needs exactly one combinator between steps")

    @classmethod
    def children(cls, *steps: Step) -> Path:
        """Build a path where every step is a direct child of the previous."""
        return cls(steps=tuple(steps), combinators=(Combinator.CHILD,) * (len(steps) - 1))

    @property
    def target(self) -> Step:
        return self.steps[-1]

    def matches(
        self,
        element: Tag,
        scope: Tag,
        lead: Combinator = Combinator.DESCENDANT,
    ) -> bool:
        """Return True when `element` ends this path inside `scope`.

        `lead` relates the first step to `scope`; the scope itself never
        matches a step.
        """
        return self._match_from(element, len(self.steps) - 1, scope, lead)

    def _match_from(self, element: Tag, index: int, scope: Tag, lead: Combinator) -> bool:
        if element is scope or not self.steps[index].matches(element):
            return False
        if index == 0:
            return _related(element, scope, lead)
        if self.combinators[index - 1] is Combinator.CHILD:
            parent = element.parent
            return parent is not None and self._match_from(parent, index - 1, scope, lead)
        for ancestor in element.parents:
            if ancestor is scope:
                return False
            if self._match_from(ancestor, index - 1, scope, lead):
                return True
        return False

    def iter_select(self, root: Tag) -> Iterator[Tag]:
        for candidate in _candidates(root, self.target.tag):
            if self.matches(candidate, root):
                yield candidate

    def select(self, root: Tag) -> list[Tag]:
        """All matching descendants of `root` in document order."""
        return list(self.iter_select(root))

    def select_one(self, root: Tag) -> Tag | None:
        """First matching descendant of `root` in document order."""
        return next(self.iter_select(root), None)

    def to_css(self) -> str:
        parts = [self.steps[0].to_css()]
        for combinator, step in zip(self.combinators, self.steps[1:]):
            if combinator is Combinator.CHILD:
                parts.append(">")
            parts.append(step.to_css())
        return " ".join(parts)


@dataclass(frozen=True, slots=True)
class Relative:
    """A path anchored below an element, as used by `:has()`."""

    path: Path
    lead: Combinator = Combinator.DESCENDANT

    def exists_under(self, element: Tag) -> bool:
        return any(
            self.path.matches(candidate, element, self.lead)
            for candidate in _candidates(element, self.path.target.tag)
        )

    def to_css(self) -> str:
        if self.lead is Combinator.CHILD:
            return f"> {self.path.to_css()}"
        return self.path.to_css()


@dataclass(frozen=True, slots=True)
class AnyOf:
    """Union of paths, selected in one document-order pass without duplicates."""

    paths: tuple[Path, ...]

    def iter_select(self, root: Tag) -> Iterator[Tag]:
        tags = {path.target.tag for path in self.paths}
        tag_filter = None if None in tags else sorted(tags)
        for candidate in _candidates(root, tag_filter):
            if any(path.matches(candidate, root) for path in self.paths):
                yield candidate

    def select(self, root: Tag) -> list[Tag]:
        return list(self.iter_select(root))

    def to_css(self) -> str:
        return ", ".join(path.to_css() for path in self.paths)


def _related(element: Tag, scope: Tag, lead: Combinator) -> bool:
    if lead is Combinator.CHILD:
        return element.parent is scope
    return any(ancestor is scope for ancestor in element.parents)


def _candidates(root: Tag, tag: str | Iterable[str] | None) -> list[Tag]:
    if tag is None:
        return root.find_all(True)
    return root.find_all(tag)


def step(tag: str | None = None, *attrs: AttrTest, **options) -> Step:
    """Shorthand for `Step(tag, attrs, ...)`."""
    return Step(tag=tag, attrs=tuple(attrs), **options)
