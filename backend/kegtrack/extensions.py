# Overview: Wiring for the in-memory domain store shared by all blueprints.

from __future__ import annotations

from flask import Flask, current_app

from .services.store import DomainStore

STORE_KEY = "kegtrack.store"


def init_store(app: Flask, store: DomainStore | None = None) -> DomainStore:
    store = store or DomainStore()
    app.extensions[STORE_KEY] = store
    return store


def get_store() -> DomainStore:
    """Store of the current app. Requires an app context."""
    return current_app.extensions[STORE_KEY]
