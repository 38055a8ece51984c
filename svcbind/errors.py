"""Errors raised while loading or resolving service bindings."""

from __future__ import annotations

import re
from collections.abc import Sequence

from svcbind.models import ServiceRecord


class ServiceBindingError(RuntimeError):
    """Base class for service binding failures."""


class CatalogLoadError(ServiceBindingError):
    """The binding payload could not be read or decoded."""


class AmbiguousMatchError(ServiceBindingError):
    """More than one bound service matched a filter expected to pick exactly one."""

    def __init__(self, filter: re.Pattern[str], candidates: Sequence[ServiceRecord]):
        self.filter = filter
        self.candidates = tuple(candidates)
        names = ", ".join(c.display_name for c in self.candidates)
        super().__init__(
            f"Unable to resolve a single service for filter '{filter.pattern}'. "
            f"Multiple inexact matches exist: {names}"
        )
