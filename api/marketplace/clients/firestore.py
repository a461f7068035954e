"""
Firestore client to handle database operations.

This module builds the asynchronous Firestore client the application passes to its stores.
The client will authenticate using the credentials set in the environment.
"""
from __future__ import annotations

from google.cloud import firestore

from marketplace.config import FirestoreConfig


def create_firestore_client(project: str | None = None, database: str | None = None) -> firestore.AsyncClient:
    """
    Create a Firestore AsyncClient.

    :param project: The Google Cloud project. Defaults to ``FirestoreConfig.project``.
    :param database: The Firestore database. Defaults to ``FirestoreConfig.database``.
    """
    kwargs = {}
    if project or FirestoreConfig.project:
        kwargs["project"] = project or FirestoreConfig.project
    if database or FirestoreConfig.database:
        kwargs["database"] = database or FirestoreConfig.database
    # auth is handled implicitly by the environment.
    return firestore.AsyncClient(**kwargs)


__all__ = ["create_firestore_client"]
