"""ASGI entrypoint for the shift ledger API."""

from shift_ledger.api.app import create_app
from shift_ledger.containers import build_container

app = create_app(build_container())
