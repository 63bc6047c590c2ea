"""Parsed payload values.

Every parser produces exactly one of three value shapes:

    Atom        characters matched by a primitive parser
    ValueList   ordered results of seq / many0 / many1 / sep_by
    Node[T]     an author-defined payload produced by map_

Value is the closed union of these shapes. Consumers inspect values with
``match`` on the concrete class (or on ``tag``), never with unchecked
casts.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Literal

__all__ = ["Atom", "Node", "Value", "ValueList", "is_value"]


@dataclass(frozen=True, slots=True)
class Atom:
    """Text matched by a primitive parser.

    Example:
        >>> Atom("a").unwrap()
        'a'
    """

    tag: ClassVar[Literal["atom"]] = "atom"

    text: str

    def unwrap(self) -> str:
        """Return the matched text."""
        return self.text


@dataclass(frozen=True, slots=True)
class ValueList:
    """Ordered sequence of sub-results.

    Example:
        >>> items = ValueList((Atom("a"), Atom("b")))
        >>> items.joined()
        'ab'
        >>> items.unwrap()
        ['a', 'b']
    """

    tag: ClassVar[Literal["list"]] = "list"

    items: tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]

    def joined(self) -> str:
        """Concatenate the text of every Atom, recursing into nested lists.

        Node entries are skipped: they carry data, not matched text.
        """
        parts: list[str] = []
        for item in self.items:
            match item:
                case Atom(text=text):
                    parts.append(text)
                case ValueList():
                    parts.append(item.joined())
                case Node():
                    pass
        return "".join(parts)

    def unwrap(self) -> list[Any]:
        """Convert to a plain list, unwrapping every item."""
        return [item.unwrap() for item in self.items]


@dataclass(frozen=True, slots=True)
class Node[T]:
    """Author-defined payload.

    Type Parameters:
        T: Type of the wrapped data

    Example:
        >>> Node(123).unwrap()
        123
    """

    tag: ClassVar[Literal["node"]] = "node"

    data: T

    def unwrap(self) -> T:
        """Return the wrapped data unchanged."""
        return self.data


type Value = Atom | ValueList | Node[Any]


def is_value(obj: object) -> bool:
    """Check whether obj belongs to the Value union."""
    return isinstance(obj, (Atom, ValueList, Node))
