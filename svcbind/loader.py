"""Loader — read a service binding payload from the environment or a file.

The payload is the ``VCAP_SERVICES`` document: a JSON object mapping each
service category to the list of service instances bound in it. YAML files of
the same shape are accepted too.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from svcbind.catalog import ServiceCatalog
from svcbind.errors import CatalogLoadError

logger = logging.getLogger(__name__)

VCAP_SERVICES_ENV = "VCAP_SERVICES"


def parse_services(text: str, source: str = VCAP_SERVICES_ENV) -> dict[str, list[Any]]:
    """Decode a binding payload.

    Returns an empty mapping for blank input. Raises CatalogLoadError when the
    text does not decode or is not a mapping of category -> list.
    """
    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CatalogLoadError(
                f"Invalid service binding payload in {source}: {e}"
            ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogLoadError(
            f"Service binding payload in {source} must be a mapping, got {type(data).__name__}"
        )

    for category, entries in data.items():
        if entries is None:
            data[category] = []
        elif not isinstance(entries, list):
            raise CatalogLoadError(
                f"Service category '{category}' in {source} must be a list, "
                f"got {type(entries).__name__}"
            )

    return data


def load_services(path: str | Path) -> dict[str, list[Any]]:
    """Read a binding payload from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError(f"File not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(f"Unable to read service bindings from {path}: {e}") from e

    return parse_services(text, source=str(path))


def services_from_env(environ: Mapping[str, str] | None = None) -> dict[str, list[Any]]:
    """Read the binding payload from the VCAP_SERVICES environment variable."""
    env = os.environ if environ is None else environ
    text = env.get(VCAP_SERVICES_ENV)
    if text is None:
        logger.debug("%s is not set, no services are bound", VCAP_SERVICES_ENV)
        return {}
    return parse_services(text)


def load_catalog(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    catalog_logger: logging.Logger | None = None,
) -> ServiceCatalog:
    """Build a catalog from a file when ``path`` is given, else from the environment."""
    raw = load_services(path) if path else services_from_env(environ)
    catalog = ServiceCatalog(raw, logger=catalog_logger)
    logger.debug(
        "Loaded %d bound service(s) from %s",
        len(catalog),
        path or VCAP_SERVICES_ENV,
    )
    return catalog
