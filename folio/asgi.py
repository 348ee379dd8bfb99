"""ASGI entry point: ``hypercorn folio.asgi:app``."""

from folio.app_factory import create_app
from folio.lib import observability

app = observability.instrument_app(create_app())
