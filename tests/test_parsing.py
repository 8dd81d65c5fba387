"""Test GEDCOM import."""

import pytest

from models import Relation, RelationType
from parsing import extract_numeric_id, import_gedcom

GEDCOM = """\
0 HEAD
1 SOUR TEST
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
0 @I3@ INDI
1 NAME Tom /Smith/
1 SEX M
1 NOTE Moved to Ohio
0 @I4@ INDI
1 NAME Ann /Smith/
1 SEX U
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 CHIL @I4@
0 @F2@ FAM
1 HUSB @I1@
1 WIFE @I2@
0 TRLR
"""


@pytest.fixture
def gedcom_file(tmp_path):
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")
    return path


def test_extract_numeric_id():
    assert extract_numeric_id("@I_347421849@") == 347421849
    with pytest.raises(ValueError):
        extract_numeric_id("@F@")


def test_import_people(gedcom_file):
    store = import_gedcom(gedcom_file)
    people = {p.id: p for p in store.people()}

    assert set(people) == {1, 2, 3, 4}
    assert people[1].name == "John Smith"
    assert people[2].gender == "F"
    assert people[3].details == "Moved to Ohio"
    assert people[4].gender is None


def test_import_relations_skips_repeated_couple(gedcom_file, caplog):
    store = import_gedcom(gedcom_file)
    relations = store.relations()

    assert Relation(1, 2, RelationType.SPOUSE) in relations
    assert Relation(1, 3, RelationType.CHILD) in relations
    assert Relation(2, 4, RelationType.CHILD) in relations
    assert len(relations) == 5
    assert "Skipping GEDCOM relation" in caplog.text
