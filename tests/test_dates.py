"""Test birth date normalization."""

import pytest

from dates import birth_year, parse_date_string


@pytest.mark.parametrize(
    "text, expected",
    [
        ("25 NOV 1954", "1954-11-25"),
        ("1698", "1698-01-01"),
        ("ABOUT 1905", "1905-01-01"),
        ("JAN 1905", "1905-01-01"),
        ("(01-27-1920)", "1920-01-27"),
        ("(02 May1838)", "1838-05-02"),
        ("(04 05 1911)", "1911-04-05"),
        ("(1839-08-29)", "1839-08-29"),
        ("(SEPT. 17,1910)", "1910-09-17"),
        ("(Oct.12,1929)", "1929-10-12"),
        ("(May, 1837)", "1837-05-01"),
        ("(1789?)", "1789-01-01"),
        ("(About:1746-00-00)", "1746-01-01"),
        ("(11 Aug. 1968)", "1968-08-11"),
        ("(April 17, 1850)", "1850-04-17"),
    ],
)
def test_parse_date_string(text, expected):
    assert parse_date_string(text) == expected


@pytest.mark.parametrize("text", [None, "", "()", "unknown", "Someday 1900", "13/45/1900"])
def test_unparseable_dates(text):
    assert parse_date_string(text) is None


def test_birth_year():
    assert birth_year("1954-11-25") == 1954
    assert birth_year(None) is None
