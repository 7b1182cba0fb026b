"""Joke telling backed by a SQLite database."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Joke:
    """One stored joke."""

    id: int
    text: str


class JokeBook:
    """A collection of jokes stored in the table ``jokes``."""

    TABLE = "jokes"

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {self.TABLE} "
            "(id INTEGER PRIMARY KEY NOT NULL, text TEXT NOT NULL)"
        )
        self._conn.commit()

    def __enter__(self) -> JokeBook:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def count(self) -> int:
        """Return the number of stored jokes."""
        (n,) = self._conn.execute(f"SELECT COUNT(1) FROM {self.TABLE}").fetchone()
        return n

    def pick(self) -> Joke:
        """Return a random joke; raise LookupError if there is none."""
        row = self._conn.execute(
            f"SELECT id, text FROM {self.TABLE} ORDER BY RANDOM() LIMIT 1"
        ).fetchone()
        if row is None:
            raise LookupError("no joke stored")
        return Joke(*row)

    def tell(self, name: str) -> str:
        """Return a random joke with ``%name`` replaced by ``name``."""
        return self.pick().text.replace("%name", name)

    def close(self) -> None:
        self._conn.close()