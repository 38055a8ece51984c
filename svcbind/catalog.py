"""Service catalog — resolve bound services by name, label, or tag.

A catalog is built once per application run from a decoded VCAP_SERVICES style
payload (category name -> list of service entries) and answers two questions:
which service matches a filter first, and whether exactly one service matches
and carries the credentials the caller needs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, Union

from svcbind.errors import AmbiguousMatchError
from svcbind.models import (
    CredentialRequirement,
    ServiceRecord,
    as_requirement,
    missing_requirements,
)

ServiceFilter = Union[str, re.Pattern]


class ServiceCatalog(Sequence[ServiceRecord]):
    """Read-only, ordered view over the services bound to an application."""

    def __init__(
        self,
        raw: Mapping[str, Iterable[Any]] | None = None,
        logger: logging.Logger | None = None,
    ):
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._services: tuple[ServiceRecord, ...] = tuple(
            ServiceRecord.from_dict(entry)
            for entries in (raw or {}).values()
            for entry in entries
        )

    def __getitem__(self, index):
        return self._services[index]

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[ServiceRecord]:
        return iter(self._services)

    def __repr__(self) -> str:
        names = ", ".join(s.display_name for s in self._services)
        return f"ServiceCatalog([{names}])"

    def find_service(self, filter: ServiceFilter) -> ServiceRecord | None:
        """Return the first service whose name, label, or tags match ``filter``.

        Returns None when nothing matches. Multiple matches are not an error.
        """
        matches = _matcher(filter)
        return next((s for s in self._services if matches(s)), None)

    def find_services(self, filter: ServiceFilter) -> list[ServiceRecord]:
        """Return every service whose name, label, or tags match ``filter``."""
        matches = _matcher(filter)
        return [s for s in self._services if matches(s)]

    def one_service(
        self,
        filter: ServiceFilter,
        *required_credentials: CredentialRequirement | str | Iterable[str],
    ) -> bool:
        """Check that exactly one service matches ``filter``.

        Args:
            filter: A compiled pattern or a regular expression string, searched
                against the name (user-provided services only), label and tags.
            required_credentials: Keys that must be present in the service's
                credentials. A list or tuple of keys means one of them is enough.

        Returns:
            True if exactly one service matches and carries the required
            credentials, False otherwise.

        Raises:
            AmbiguousMatchError: More than one service matches the filter.
        """
        pattern = _compile(filter)
        requirements = [as_requirement(r) for r in required_credentials]
        candidates = self.find_services(pattern)

        if not candidates:
            self._logger.debug(
                "Unable to resolve a single service for filter '%s'. No matches exist",
                pattern.pattern,
            )
            return False

        if len(candidates) > 1:
            self._logger.error(
                "Unable to resolve a single service for filter '%s'. "
                "Found potential matches of %s",
                pattern.pattern,
                [c.display_name for c in candidates],
            )
            raise AmbiguousMatchError(pattern, candidates)

        missing = missing_requirements(candidates[0].credentials, requirements)
        if missing:
            self._logger.warning(
                "A service with a name, label or tag matching '%s' was found, "
                "but was missing required credentials: %s",
                pattern.pattern,
                ", ".join(str(r) for r in missing),
            )
            return False

        return True


def _compile(filter: ServiceFilter) -> re.Pattern[str]:
    return filter if isinstance(filter, re.Pattern) else re.compile(filter)


def _matcher(filter: ServiceFilter) -> Callable[[ServiceRecord], bool]:
    """Build the name/label/tag predicate for a filter."""
    pattern = _compile(filter)

    def _search(value: Any) -> bool:
        return isinstance(value, str) and pattern.search(value) is not None

    def matches(service: ServiceRecord) -> bool:
        if service.is_user_provided and _search(service.name):
            return True
        if _search(service.label):
            return True
        return any(_search(tag) for tag in service.tags)

    return matches
