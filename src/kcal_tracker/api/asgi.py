"""ASGI entrypoint for the kcal tracker API."""

import locale
import logging

from kcal_tracker.api.app import create_app
from kcal_tracker.containers import build_container

try:
    locale.setlocale(locale.LC_COLLATE, "")
except locale.Error:
    logging.getLogger(__name__).warning(
        "System locale unavailable; name ties sort by code point"
    )

app = create_app(build_container())
