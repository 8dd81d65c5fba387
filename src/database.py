"""SQLite snapshot storage for the entity store."""

from pathlib import Path
import logging
import sqlite3

from models import Person, Relation, RelationType, Snapshot
from store import EntityStore

logger = logging.getLogger(__name__)


def create_database(db_path: Path) -> sqlite3.Connection:
    """Open (or create) the SQLite database with person and relation tables."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS person (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            gender TEXT,
            birth_date_string TEXT,
            birth_date TEXT,
            photo TEXT,
            details TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relation (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            from_id INTEGER NOT NULL,
            to_id INTEGER NOT NULL,
            relation_type TEXT NOT NULL,
            UNIQUE (from_id, to_id, relation_type),
            FOREIGN KEY (from_id) REFERENCES person(id),
            FOREIGN KEY (to_id) REFERENCES person(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS meta (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)

    conn.commit()
    return conn


def store_snapshot(conn: sqlite3.Connection, snapshot: Snapshot):
    """Replace the stored people and relations with the snapshot, in one transaction."""
    with conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM relation")
        cursor.execute("DELETE FROM person")

        cursor.executemany(
            """
            INSERT INTO person
            (id, name, gender, birth_date_string, birth_date, photo, details)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (p.id, p.name, p.gender, p.birth_date_string, p.birth_date, p.photo, p.details)
                for p in snapshot.people
            ],
        )

        # Insertion order is kept through the autoincrement id
        cursor.executemany(
            """
            INSERT INTO relation (from_id, to_id, relation_type)
            VALUES (?, ?, ?)
            """,
            [(r.from_id, r.to_id, r.relation_type.value) for r in snapshot.relations],
        )

        cursor.execute(
            "INSERT OR REPLACE INTO meta (key, value) VALUES ('next_id', ?)",
            (str(snapshot.next_id),),
        )

    logger.info(
        "Stored snapshot v%d: %d people, %d relations",
        snapshot.version,
        len(snapshot.people),
        len(snapshot.relations),
    )


def load_store(conn: sqlite3.Connection) -> EntityStore:
    """Rebuild an EntityStore from the database contents."""
    cursor = conn.cursor()

    cursor.execute(
        "SELECT id, name, gender, birth_date_string, birth_date, photo, details FROM person ORDER BY id"
    )
    people = [
        Person(
            id=row[0],
            name=row[1],
            gender=row[2],
            birth_date_string=row[3],
            birth_date=row[4],
            photo=row[5],
            details=row[6],
        )
        for row in cursor.fetchall()
    ]

    cursor.execute("SELECT from_id, to_id, relation_type FROM relation ORDER BY id")
    relations = [Relation(row[0], row[1], RelationType(row[2])) for row in cursor.fetchall()]

    cursor.execute("SELECT value FROM meta WHERE key = 'next_id'")
    row = cursor.fetchone()
    next_id = int(row[0]) if row else 1

    return EntityStore.from_records(people, relations, next_id=next_id)
