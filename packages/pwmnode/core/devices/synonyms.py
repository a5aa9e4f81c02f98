"""Synonym registries for actions and device groups.

Each registry maps a kind to a canonical lowercase name and a stable 128-bit
identifier, in both directions. The tables are built once at import time and
are read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from pwmnode.core.devices.actions import Action
from pwmnode.core.devices.enums import ActionKind, DeviceGroup
from pwmnode.core.devices.errors import MissingArgumentError, NotFoundError, RangeError

T = TypeVar("T")

Identifier = UUID | int | str


class Synonym(BaseModel, Generic[T]):
    """One registry row: representative value, name and identifier."""

    model_config = ConfigDict(frozen=True)

    value: T
    name: str
    id: UUID


def to_uuid(identifier: Identifier) -> UUID:
    """Coerce a UUID, its 128-bit integer, or its string form to a UUID.

    Raises:
        NotFoundError: If a string is not a valid UUID or an integer is out of range
    """
    if isinstance(identifier, UUID):
        return identifier
    try:
        if isinstance(identifier, int):
            return UUID(int=identifier)
        return UUID(identifier)
    except ValueError as e:
        raise NotFoundError(f"Not a valid identifier: {identifier!r}") from e


class SynonymTable(Generic[T]):
    """Immutable bidirectional lookup of name/id synonyms.

    Rows are keyed by the tag ``tag_of`` extracts from their value, so a
    payload-carrying value shares the row of its tag.

    Example:
        >>> table = SynonymTable(rows, tag_of=lambda action: action.kind, label="action")
        >>> table.by_name("on").value
        Action(kind=<ActionKind.ON: 'On'>, value=None)
    """

    def __init__(
        self,
        rows: Iterable[Synonym[T]],
        *,
        tag_of: Callable[[T], Hashable],
        label: str,
    ) -> None:
        """Build the lookup maps.

        Args:
            rows: Registry rows, one per tag.
            tag_of: Maps a value to the tag that identifies its row.
            label: Human-readable name for error messages (e.g. "action").

        Raises:
            ValueError: If a tag, name or id appears more than once.
        """
        self._label = label
        self._rows: tuple[Synonym[T], ...] = tuple(rows)
        self._by_name: dict[str, Synonym[T]] = {}
        self._by_id: dict[UUID, Synonym[T]] = {}
        self._by_tag: dict[Hashable, Synonym[T]] = {}

        for row in self._rows:
            tag = tag_of(row.value)
            if tag in self._by_tag:
                raise ValueError(f"Duplicate {label} tag in synonym table: {tag}")
            if row.name in self._by_name:
                raise ValueError(f"Duplicate {label} name in synonym table: {row.name}")
            if row.id in self._by_id:
                raise ValueError(f"Duplicate {label} id in synonym table: {row.id}")
            self._by_tag[tag] = row
            self._by_name[row.name] = row
            self._by_id[row.id] = row

    def __iter__(self):
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def by_name(self, name: str) -> Synonym[T]:
        try:
            return self._by_name[name]
        except KeyError:
            raise NotFoundError(f"No {self._label} named {name!r}") from None

    def by_id(self, identifier: Identifier) -> Synonym[T]:
        uuid = to_uuid(identifier)
        try:
            return self._by_id[uuid]
        except KeyError:
            raise NotFoundError(f"No {self._label} with id {uuid}") from None

    def by_tag(self, tag: Hashable) -> Synonym[T]:
        try:
            return self._by_tag[tag]
        except KeyError:
            # Every tag is registered; reaching this means the table is incomplete.
            raise RuntimeError(f"Synonym table has no {self._label} entry for {tag}") from None


ACTIONS: SynonymTable[Action] = SynonymTable(
    [
        Synonym(value=Action.on(), name="on", id=UUID(int=0x928E9B929939486B998D69613F89A9A6)),
        Synonym(value=Action.off(), name="off", id=UUID(int=0x13DF417D74D2443B87E3DE60557B75B8)),
        Synonym(
            value=Action.increase(), name="up", id=UUID(int=0xBC6C6EEBA0BA40E0A57FF5186D4350CE)
        ),
        Synonym(
            value=Action.decrease(), name="down", id=UUID(int=0x62865402C86245EEA282D4F2CA8FD51B)
        ),
        Synonym(
            value=Action.minimum(), name="minimum", id=UUID(int=0x4AAD1B26EA9B455190D0D917102B7F36)
        ),
        Synonym(
            value=Action.maximum(), name="maximum", id=UUID(int=0x4FFB631FA4BA4FB5A189F7A3BB9DFA01)
        ),
        Synonym(
            value=Action.reverse(), name="reverse", id=UUID(int=0x1A8A1DF0523E4ACB8390B872329A9CA7)
        ),
        Synonym(
            value=Action.set_absolute(0), name="set", id=UUID(int=0x2A4FAE8107134E1FA8187AC56E4F13E4)
        ),
    ],
    tag_of=lambda action: action.kind,
    label="action",
)

GROUPS: SynonymTable[DeviceGroup] = SynonymTable(
    [
        Synonym(
            value=DeviceGroup.LIGHT, name="lights", id=UUID(int=0xF1D34301C91642A88C7C274828177649)
        ),
        Synonym(
            value=DeviceGroup.FAN, name="fans", id=UUID(int=0x3D39295FB06842ECABEED69E0D65C105)
        ),
    ],
    tag_of=lambda group: group,
    label="device group",
)


def _check_argument(argument: int | None) -> int | None:
    if argument is not None and argument < 0:
        raise RangeError(f"Action argument must be non-negative, got {argument}")
    return argument


def resolve_by_name(text: str, argument: int | None = None) -> Action:
    """Resolve an action name to an Action.

    ``up``/``down`` carry ``argument`` as their step verbatim and ``set``
    requires it as the target index. Every other name returns the registered
    representative and ignores ``argument``.

    Args:
        text: Action name, matched case-insensitively
        argument: Optional step size or target index

    Returns:
        The resolved Action

    Raises:
        NotFoundError: If the name is not registered
        MissingArgumentError: If ``set`` is given without an argument
        RangeError: If ``argument`` is negative for up, down or set
    """
    name = text.lower()

    if name == "up":
        return Action.increase(_check_argument(argument))
    if name == "down":
        return Action.decrease(_check_argument(argument))
    if name == "set":
        if argument is None:
            raise MissingArgumentError("Action 'set' requires a target index")
        return Action.set_absolute(_check_argument(argument))

    return ACTIONS.by_name(name).value


def resolve_by_id(identifier: Identifier, argument: int | None = None) -> Action:
    """Resolve an action identifier, then treat it like its registered name."""
    return resolve_by_name(ACTIONS.by_id(identifier).name, argument)


def canonical_name(action: Action | ActionKind) -> str:
    """Return the registered name for an action's tag, ignoring payload."""
    return ACTIONS.by_tag(_kind_of(action)).name


def canonical_id(action: Action | ActionKind) -> UUID:
    """Return the registered identifier for an action's tag, ignoring payload."""
    return ACTIONS.by_tag(_kind_of(action)).id


def _kind_of(action: Action | ActionKind) -> ActionKind:
    return action if isinstance(action, ActionKind) else action.kind


def resolve_group_by_name(text: str) -> DeviceGroup:
    """Resolve a device group name (e.g. ``"lights"``), case-insensitively."""
    return GROUPS.by_name(text.lower()).value


def resolve_group_by_id(identifier: Identifier) -> DeviceGroup:
    """Resolve a device group identifier."""
    return GROUPS.by_id(identifier).value


def group_name(group: DeviceGroup) -> str:
    return GROUPS.by_tag(group).name


def group_id(group: DeviceGroup) -> UUID:
    return GROUPS.by_tag(group).id
