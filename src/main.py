"""
Command-line host for the kinship engine.

Every command loads the entity store from the SQLite file, runs, and writes
the store back when it changed:

    kinship add-person "Alice" --gender F --born "25 NOV 1954"
    kinship add-relation 1 2 spouse
    kinship path 3 4 --algorithm dijkstra
    kinship import-gedcom family.ged
"""

from contextlib import contextmanager
from pathlib import Path
import logging

import typer

from config import get_settings
from database import create_database, load_store, store_snapshot
from errors import KinshipError
from parsing import import_gedcom
from query import KinshipQuery
from store import EntityStore

app = typer.Typer(
    name="kinship",
    help="Family relationship graph and kinship path queries",
    add_completion=False,
)

DbOption = typer.Option(None, "--db", help="SQLite file (default from KINSHIP_DB_PATH)")


@app.callback()
def configure(
    log_level: str = typer.Option(None, "--log-level", help="Logging level"),
):
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@contextmanager
def open_store(db: Path | None, save: bool = False):
    """Yield the store persisted at db; write it back on success when save is set."""
    db_path = db or get_settings().db_path
    conn = create_database(db_path)
    try:
        store = load_store(conn)
        yield store
        if save:
            store_snapshot(conn, store.snapshot())
    except KinshipError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        conn.close()


@app.command("import-gedcom")
def import_gedcom_cmd(gedcom: Path = typer.Argument(..., exists=True, dir_okay=False), db: Path = DbOption):
    """Replace the stored tree with the contents of a GEDCOM file."""
    try:
        imported: EntityStore = import_gedcom(gedcom)
    except KinshipError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    db_path = db or get_settings().db_path
    conn = create_database(db_path)
    try:
        store_snapshot(conn, imported.snapshot())
    finally:
        conn.close()
    typer.echo(f"Imported {len(imported.people())} people and {len(imported.relations())} relations")


@app.command("add-person")
def add_person(
    name: str,
    gender: str = typer.Option(None, "--gender", help="M or F"),
    born: str = typer.Option(None, "--born", help="Birth date as written"),
    photo: str = typer.Option(None, "--photo"),
    details: str = typer.Option(None, "--details"),
    db: Path = DbOption,
):
    with open_store(db, save=True) as store:
        person = store.add_person(
            name, gender=gender, birth_date_string=born, photo=photo, details=details
        )
    typer.echo(f"Added {person.name} with id {person.id}")


@app.command("add-relation")
def add_relation(from_id: int, to_id: int, relation_type: str, db: Path = DbOption):
    """Link two people; for 'child', FROM_ID is the parent."""
    with open_store(db, save=True) as store:
        relation = store.add_relation(from_id, to_id, relation_type)
    typer.echo(f"Added {relation.relation_type.value} relation {relation.from_id} -> {relation.to_id}")


@app.command("remove-person")
def remove_person(person_id: int, db: Path = DbOption):
    with open_store(db, save=True) as store:
        store.remove_person(person_id)
    typer.echo(f"Removed person {person_id}")


@app.command("remove-relation")
def remove_relation(from_id: int, to_id: int, relation_type: str, db: Path = DbOption):
    with open_store(db, save=True) as store:
        store.remove_relation(from_id, to_id, relation_type)
    typer.echo(f"Removed {relation_type} relation {from_id} -> {to_id}")


@app.command()
def path(
    start_id: int,
    goal_id: int,
    algorithm: str = typer.Option(None, "--algorithm", "-a", help="dfs, bfs or dijkstra"),
    db: Path = DbOption,
):
    """Find a relationship path between two people."""
    with open_store(db) as store:
        queries = KinshipQuery(store)
        result = queries.find_path(start_id, goal_id, algorithm or get_settings().default_algorithm)
        if not result.found:
            typer.echo("No relationship found")
            return
        for step in queries.describe_path(result):
            prefix = f"  {step.relation} " if step.relation else "  "
            typer.echo(f"{prefix}{step.name} ({step.person_id})")
        typer.echo(f"{result.hops} relation(s) via {result.algorithm.value}")


@app.command()
def relatives(person_id: int, db: Path = DbOption):
    """List parents, children, spouses and siblings of a person."""
    with open_store(db) as store:
        queries = KinshipQuery(store)
        groups = {
            "Parents": queries.parents(person_id),
            "Spouses": queries.spouses(person_id),
            "Children": queries.children(person_id),
            "Siblings": queries.siblings(person_id),
        }
    for label, people in groups.items():
        names = ", ".join(f"{p.name} ({p.id})" for p in people) or "-"
        typer.echo(f"{label}: {names}")


@app.command()
def validate(db: Path = DbOption):
    """Report integrity warnings (cycles, impossible birth dates)."""
    with open_store(db) as store:
        warnings = KinshipQuery(store).validate()
    if not warnings:
        typer.echo("No validation issues found")
        return
    typer.echo(f"Found {len(warnings)} validation warnings:")
    for w in warnings[:10]:
        typer.echo(f"  - {w}")
    if len(warnings) > 10:
        typer.echo(f"  ... and {len(warnings) - 10} more")


@app.command()
def summary(db: Path = DbOption):
    with open_store(db) as store:
        graph = KinshipQuery(store).graph()
    typer.echo(f"{len(graph)} people, {graph.number_of_relations()} relations")


def main():
    app()


if __name__ == "__main__":
    main()
