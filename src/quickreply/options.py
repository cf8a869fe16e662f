"""Quick-reply option records and the editable list that owns them."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Final, Iterable, Iterator, List, Optional

IdGenerator = Callable[[], str]

DEFAULT_LABEL: Final[str] = "New button"
DEFAULT_COLOUR: Final[str] = "#3c8dbc"
_COLOUR_DIGITS = 6


class OptionKind(Enum):
    """Where a button takes its reply text from."""

    BY_ID = "byId"
    CUSTOM = "custom"

    @classmethod
    def from_wire(cls, value: object) -> Optional["OptionKind"]:
        """Return the kind spelled ``value`` in script data, if recognised."""

        for kind in cls:
            if kind.value == value:
                return kind
        return None


class MoveDirection(Enum):
    UP = auto()
    DOWN = auto()
    JUMP = auto()


def new_uid() -> str:
    return uuid.uuid4().hex


def pad_colour(value: str, *, default: str = DEFAULT_COLOUR) -> str:
    """Right-pad short ``#`` colour literals with ``0`` to six hex digits.

    Empty values fall back to ``default``; anything not starting with ``#``
    is returned unchanged.
    """

    colour = value.strip()
    if not colour:
        return default
    if colour.startswith("#") and len(colour) < _COLOUR_DIGITS + 1:
        return colour.ljust(_COLOUR_DIGITS + 1, "0")
    return colour


def infer_kind(content: str) -> OptionKind:
    return OptionKind.CUSTOM if content else OptionKind.BY_ID


@dataclass
class Option:
    """One configurable quick-reply button."""

    uid: str
    order: int = 0
    kind: OptionKind = OptionKind.BY_ID
    selector: str = ""
    content: str = ""
    label: str = DEFAULT_LABEL
    colour: str = DEFAULT_COLOUR


@dataclass(frozen=True)
class OptionDefaults:
    """Field values given to options created with the "new" action."""

    label: str = DEFAULT_LABEL
    colour: str = DEFAULT_COLOUR
    selector: str = ""


class OptionList:
    """Ordered, editable option list that keeps ``order`` contiguous."""

    def __init__(
        self,
        options: Iterable[Option] | None = None,
        *,
        ids: IdGenerator | None = None,
        defaults: OptionDefaults | None = None,
    ) -> None:
        self._ids = ids or new_uid
        self.defaults = defaults or OptionDefaults()
        self._options: List[Option] = list(options or ())
        self.renumber()

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options)

    def __getitem__(self, index: int) -> Option:
        return self._options[index]

    def __bool__(self) -> bool:
        return bool(self._options)

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(self._options)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._options)

    def renumber(self) -> None:
        """Reassign ``order`` so it matches each option's list position."""

        for position, option in enumerate(self._options, start=1):
            option.order = position

    def load(self, options: Iterable[Option]) -> None:
        self._options = list(options)
        self.renumber()

    def clear(self) -> None:
        self._options.clear()

    def append(self) -> Option:
        """Add an option carrying the configured defaults at the end."""

        option = Option(
            uid=self._ids(),
            kind=OptionKind.BY_ID,
            selector=self.defaults.selector,
            label=self.defaults.label,
            colour=self.defaults.colour,
        )
        self._options.append(option)
        self.renumber()
        return option

    def remove(self, index: int) -> Optional[Option]:
        if not self._in_range(index):
            return None
        removed = self._options.pop(index)
        self.renumber()
        return removed

    def duplicate(self, index: int) -> Optional[Option]:
        """Insert a copy of the option at ``index`` right after it."""

        if not self._in_range(index):
            return None
        clone = replace(self._options[index], uid=self._ids())
        self._options.insert(index + 1, clone)
        self.renumber()
        return clone

    def move(self, index: int, direction: MoveDirection) -> None:
        """Reposition the option at ``index``.

        ``JUMP`` targets the position named by the option's own ``order``
        field, which the editing surface lets the user overwrite.
        """

        if not self._in_range(index):
            return
        if direction is MoveDirection.UP:
            target = index - 1
        elif direction is MoveDirection.DOWN:
            target = index + 1
        else:
            target = self._options[index].order - 1

        if target != index and self._in_range(target):
            if direction is MoveDirection.JUMP:
                self._options.insert(target, self._options.pop(index))
            else:
                self._options[index], self._options[target] = (
                    self._options[target],
                    self._options[index],
                )
        self.renumber()

    def edit(
        self,
        index: int,
        *,
        label: str | None = None,
        colour: str | None = None,
        kind: OptionKind | None = None,
        selector: str | None = None,
        content: str | None = None,
        order: int | None = None,
    ) -> Optional[Option]:
        """Apply field edits in place; a new ``order`` jumps the option there."""

        if not self._in_range(index):
            return None
        option = self._options[index]
        if label is not None:
            option.label = label
        if colour is not None:
            option.colour = pad_colour(colour, default=self.defaults.colour)
        if kind is not None:
            option.kind = kind
        if selector is not None:
            option.selector = selector
        if content is not None:
            option.content = content
        if order is not None:
            option.order = order
            self.move(index, MoveDirection.JUMP)
        return option


__all__ = [
    "DEFAULT_COLOUR",
    "DEFAULT_LABEL",
    "IdGenerator",
    "MoveDirection",
    "Option",
    "OptionDefaults",
    "OptionKind",
    "OptionList",
    "infer_kind",
    "new_uid",
    "pad_colour",
]
