"""ASGI entrypoint for the expense split API."""

from expense_split.api.app import create_app
from expense_split.containers import build_container

app = create_app(build_container())
