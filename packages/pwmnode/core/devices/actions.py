"""Action values requested of a device.

An Action pairs an ActionKind tag with an optional payload: the step size for
Increase/Decrease or the target index for SetAbsolute. Serialized actions use
an externally tagged form: payload-less kinds are a bare tag (``"On"``) and
payload kinds are a single-key object (``{"Increase": 2}``,
``{"Increase": null}``, ``{"SetAbsolute": 4}``).
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    ValidationInfo,
    model_serializer,
    model_validator,
)

from pwmnode.core.devices.enums import PAYLOAD_KINDS, ActionKind
from pwmnode.core.devices.errors import DecodeError

_TAGS = {kind.value: kind for kind in ActionKind}


class Action(BaseModel):
    """A single device command with its payload.

    Two actions are "the same kind" when their tags match, regardless of
    payload. Equality compares tag and payload.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ActionKind = Field(..., description="Action tag")
    value: StrictInt | None = Field(
        default=None, ge=0, description="Step size (Increase/Decrease) or index (SetAbsolute)"
    )

    @model_validator(mode="before")
    @classmethod
    def _decode_tagged(cls, data: Any, info: ValidationInfo) -> Any:
        """Accept the externally tagged wire form alongside keyword construction.

        JSON input must use the tagged form; the keyword shape is for Python
        callers only.
        """
        if isinstance(data, str):
            kind = _TAGS.get(data)
            if kind is None:
                raise ValueError(f"Unknown action tag: {data!r}")
            if kind in PAYLOAD_KINDS:
                raise ValueError(f"Action {data} must be encoded as {{{data!r}: payload}}")
            return {"kind": kind}

        if isinstance(data, dict) and "kind" not in data:
            if len(data) != 1:
                raise ValueError(f"Tagged action must have exactly one key, got {sorted(data)}")
            ((tag, payload),) = data.items()
            kind = _TAGS.get(tag)
            if kind is None:
                raise ValueError(f"Unknown action tag: {tag!r}")
            if kind not in PAYLOAD_KINDS:
                raise ValueError(f"Action {tag} carries no payload and must be a bare tag")
            return {"kind": kind, "value": payload}

        if isinstance(data, dict) and info.mode == "json":
            raise ValueError(f"Action must be a bare tag or a single-key object, got {data!r}")

        return data

    @model_validator(mode="after")
    def _check_payload(self) -> Action:
        if self.kind is ActionKind.SET_ABSOLUTE and self.value is None:
            raise ValueError("SetAbsolute requires a target index")
        if self.kind not in PAYLOAD_KINDS and self.value is not None:
            raise ValueError(f"{self.kind.value} does not take a payload")
        return self

    @model_serializer
    def _encode_tagged(self) -> str | dict[str, int | None]:
        if self.kind in PAYLOAD_KINDS:
            return {self.kind.value: self.value}
        return self.kind.value

    # Constructors

    @classmethod
    def on(cls) -> Action:
        return cls(kind=ActionKind.ON)

    @classmethod
    def off(cls) -> Action:
        return cls(kind=ActionKind.OFF)

    @classmethod
    def increase(cls, step: int | None = None) -> Action:
        return cls(kind=ActionKind.INCREASE, value=step)

    @classmethod
    def decrease(cls, step: int | None = None) -> Action:
        return cls(kind=ActionKind.DECREASE, value=step)

    @classmethod
    def minimum(cls) -> Action:
        return cls(kind=ActionKind.MIN)

    @classmethod
    def maximum(cls) -> Action:
        return cls(kind=ActionKind.MAX)

    @classmethod
    def reverse(cls) -> Action:
        return cls(kind=ActionKind.REVERSE)

    @classmethod
    def set_absolute(cls, index: int) -> Action:
        return cls(kind=ActionKind.SET_ABSOLUTE, value=index)

    def same_kind(self, other: Action) -> bool:
        """Check whether both actions share a tag, ignoring payload."""
        return self.kind is other.kind

    @property
    def has_payload(self) -> bool:
        """True for kinds whose payload is supplied per request."""
        return self.kind in PAYLOAD_KINDS

    def to_json(self) -> str:
        """Encode the action in its tagged wire form."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str | bytes) -> Action:
        """Decode an action from its tagged wire form.

        Raises:
            DecodeError: If the input is not a recognised action shape
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise DecodeError(f"Could not decode action: {e}") from e
