"""Service binding data models — bound service records and credential requirements."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union


USER_PROVIDED_LABEL = "user-provided"


@dataclass(frozen=True, eq=False)
class ServiceRecord:
    """A single bound service instance from a binding payload.

    Records compare and hash by identity; the same entry bound under two
    categories stays two records.
    """

    label: str | None = None
    name: str | None = None
    tags: tuple[str, ...] = ()
    credentials: Mapping[str, Any] | None = field(default=None, repr=False)

    # Source mapping the record was read from
    raw: Any = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> ServiceRecord:
        """Build a record from a decoded binding entry.

        Missing fields are left empty and nothing is validated here. An entry
        that is not a mapping becomes a record with no fields, which no filter
        matches.
        """
        if isinstance(data, ServiceRecord):
            return data
        if not isinstance(data, Mapping):
            return cls(raw=data)

        tags = data.get("tags")
        if isinstance(tags, str):
            tags = [tags]
        credentials = data.get("credentials")
        return cls(
            label=data.get("label"),
            name=data.get("name"),
            tags=tuple(tags) if tags else (),
            credentials=credentials if isinstance(credentials, Mapping) else None,
            raw=data,
        )

    @property
    def is_user_provided(self) -> bool:
        return self.label == USER_PROVIDED_LABEL

    @property
    def display_name(self) -> str:
        return self.name or self.label or "<unnamed>"


@dataclass(frozen=True)
class SingleKey:
    """Requires one credential key to be present."""

    key: str

    def satisfied_by(self, credentials: Mapping[str, Any] | None) -> bool:
        return isinstance(credentials, Mapping) and self.key in credentials

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class AnyOf:
    """Requires at least one credential key of a group to be present."""

    keys: tuple[str, ...]

    def satisfied_by(self, credentials: Mapping[str, Any] | None) -> bool:
        if not isinstance(credentials, Mapping):
            return False
        return any(k in credentials for k in self.keys)

    def __str__(self) -> str:
        return "any of (" + ", ".join(self.keys) + ")"


CredentialRequirement = Union[SingleKey, AnyOf]


def as_requirement(spec: CredentialRequirement | str | Iterable[str]) -> CredentialRequirement:
    """Normalize a credential specifier.

    A plain string is a single required key, any other iterable of strings is a
    group where one key is enough.
    """
    if isinstance(spec, (SingleKey, AnyOf)):
        return spec
    if isinstance(spec, str):
        return SingleKey(spec)
    if isinstance(spec, Iterable):
        return AnyOf(tuple(spec))
    raise TypeError(f"Unsupported credential specifier: {spec!r}")


def missing_requirements(
    credentials: Mapping[str, Any] | None,
    requirements: Iterable[CredentialRequirement],
) -> list[CredentialRequirement]:
    """Return the requirements a credentials mapping does not satisfy."""
    return [r for r in requirements if not r.satisfied_by(credentials)]
