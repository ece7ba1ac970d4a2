"""Declarative base and type-map for all human-effects ORM models.

Uses SQLAlchemy 2.0 ``DeclarativeBase`` with a ``type_annotation_map``
that maps Python built-in types to portable SA column types.
"""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, Text
from sqlalchemy.orm import DeclarativeBase


class DtsBase(DeclarativeBase):
    """Shared declarative base for every table.

    ``type_annotation_map`` lets Mapped columns use plain Python types and
    automatically resolve to the right SA column type:

    * ``str``   → ``Text``
    * ``int``   → ``Integer``
    * ``bool``  → ``Boolean``
    * ``datetime.date``     → ``Date``
    * ``datetime.datetime`` → ``DateTime``
    * ``dict``  → ``JSON``    (stored as TEXT in SQLite, native JSON elsewhere)
    * ``list``  → ``JSON``
    """

    type_annotation_map = {
        str: Text,
        int: Integer,
        bool: Boolean,
        datetime.date: Date,
        datetime.datetime: DateTime,
        dict: JSON,
        list: JSON,
    }
