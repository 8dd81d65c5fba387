"""GEDCOM import into the entity store."""

from pathlib import Path
import logging
import re

from ged4py import GedcomReader

from dates import parse_date_string
from errors import InvalidRelation
from models import GENDERS, Person, Relation, RelationType
from store import EntityStore

logger = logging.getLogger(__name__)


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def extract_name(indi) -> str:
    """Full display name of an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        parts = [p for p in name_rec.value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return str(name_rec.value).replace("/", "").strip() or "Unknown"


def extract_birth_date(indi) -> str | None:
    birth = indi.sub_tag("BIRT")
    if birth is None:
        return None
    date_rec = birth.sub_tag("DATE")
    # ged4py may return DateValue objects
    return str(date_rec.value) if date_rec and date_rec.value else None


def extract_gender(indi) -> str | None:
    sex_rec = indi.sub_tag("SEX")
    sex = sex_rec.value if sex_rec else None
    return sex if sex in GENDERS else None


def normalize_data(reader: GedcomReader) -> tuple[list[Person], list[Relation]]:
    """
    Extract people and relations from parsed GEDCOM data.

    Each FAM record yields a spouse relation between HUSB and WIFE and a child
    relation from each of them to every CHIL. Notes go into `details`.
    """
    people: list[Person] = []
    relations: list[Relation] = []

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        birth_date_string = extract_birth_date(rec)
        note = rec.sub_tag("NOTE")
        people.append(
            Person(
                id=extract_numeric_id(rec.xref_id),
                name=extract_name(rec),
                gender=extract_gender(rec),
                birth_date_string=birth_date_string,
                birth_date=parse_date_string(birth_date_string),
                details=str(note.value) if note and note.value else None,
            )
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        parents = []
        for tag in ("HUSB", "WIFE"):
            partner = rec.sub_tag(tag)
            if partner and partner.xref_id:
                parents.append(extract_numeric_id(partner.xref_id))

        if len(parents) == 2:
            relations.append(Relation(parents[0], parents[1], RelationType.SPOUSE))

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            for parent_id in parents:
                relations.append(Relation(parent_id, child_id, RelationType.CHILD))

    return people, relations


def import_gedcom(filepath: Path) -> EntityStore:
    """
    Load a GEDCOM file into a new EntityStore.

    People keep their GEDCOM numeric ids. Relations the store rejects
    (repeated couples, a third parent, dangling references) are logged and
    left out.
    """
    with GedcomReader(str(filepath)) as reader:
        people, relations = normalize_data(reader)

    store = EntityStore.from_records(people, [])
    rejected = 0
    for relation in relations:
        try:
            store.add_relation(relation.from_id, relation.to_id, relation.relation_type)
        except InvalidRelation as exc:
            rejected += 1
            logger.warning("Skipping GEDCOM relation: %s", exc)

    logger.info(
        "Imported %d people and %d relations from %s (%d rejected)",
        len(people),
        len(relations) - rejected,
        filepath,
        rejected,
    )
    return store
