"""svcbind — resolve the bound services an application should use.

Given the services bound to an application (the ``VCAP_SERVICES`` payload),
the catalog finds the service whose name, label, or tags match a filter,
enforces that exactly one service matches, and checks that it carries the
credentials the caller requires.
"""

from svcbind.catalog import ServiceCatalog
from svcbind.errors import AmbiguousMatchError, CatalogLoadError, ServiceBindingError
from svcbind.models import AnyOf, ServiceRecord, SingleKey

__version__ = "0.1.0"

__all__ = [
    "ServiceCatalog",
    "ServiceRecord",
    "SingleKey",
    "AnyOf",
    "ServiceBindingError",
    "AmbiguousMatchError",
    "CatalogLoadError",
]
