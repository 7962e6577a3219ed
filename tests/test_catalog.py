import pytest

from adventure.levels.catalog import (
    SAMPLE_LEVELS,
    InvalidLevelError,
    LevelNotFoundError,
    find_level,
    get_level,
    list_levels,
    next_level_number,
    public_level,
    seed_levels,
    validate_level_definition,
)
from adventure.levels.models import Level


def test_get_level_returns_seeded_level(db):
    level = get_level(db, "html", 1)
    assert level.title == "Hello World"
    assert level.solution == "<h1>Hello World</h1>"
    assert level.points == 10
    assert level.hints.startswith("Use the h1 tag")


def test_language_lookup_is_case_insensitive(db):
    assert get_level(db, "CSS", 1).solution == "color: red;"


def test_missing_level_raises_not_found(db):
    with pytest.raises(LevelNotFoundError) as exc:
        get_level(db, "html", 999)
    assert exc.value.language == "html"
    assert exc.value.level_number == 999


def test_list_levels_is_ordered(db):
    numbers = [lv.level_number for lv in list_levels(db, "javascript")]
    assert numbers == sorted(numbers)
    assert numbers[:2] == [1, 2]


def test_list_levels_unknown_language_is_empty(db):
    assert list_levels(db, "cobol") == []


def test_next_level_number(db):
    assert next_level_number(db, "html", 1) == 2
    assert next_level_number(db, "html", 2) is None


def test_public_level_withholds_solution(db):
    shape = public_level(get_level(db, "css", 2))
    assert "solution" not in shape
    assert shape["levelNumber"] == 2
    assert shape["points"] == 15


def test_reseeding_does_not_duplicate(db):
    before = db.query(Level).count()
    assert seed_levels(db) == 0
    assert seed_levels(db) == 0
    assert db.query(Level).count() == before
    assert db.query(Level).filter(Level.language == "html", Level.level_number == 1).count() == 1


@pytest.mark.parametrize(
    "override",
    [
        {"solution": ""},
        {"solution": "   \n"},
        {"points": 0},
        {"level_number": 0},
        {"level_number": "3"},
        {"language": "python"},
        {"title": ""},
    ],
)
def test_invalid_definitions_rejected(override):
    definition = dict(SAMPLE_LEVELS[0], **override)
    with pytest.raises(InvalidLevelError):
        validate_level_definition(definition)


def test_seed_with_invalid_definition_inserts_nothing(db):
    good = dict(SAMPLE_LEVELS[0], level_number=98)
    bad = dict(SAMPLE_LEVELS[0], level_number=99, solution=" ")
    with pytest.raises(InvalidLevelError):
        seed_levels(db, [good, bad])
    assert find_level(db, "html", 98) is None


def test_seed_rejects_duplicate_definitions(db):
    with pytest.raises(InvalidLevelError):
        seed_levels(db, [SAMPLE_LEVELS[0], SAMPLE_LEVELS[0]])


def test_find_level_out_of_integer_range(db):
    assert find_level(db, "html", 2**70) is None
    assert find_level(db, "html", 0) is None
    assert next_level_number(db, "html", 2**31 - 1) is None


def test_level_number_above_integer_range_rejected():
    with pytest.raises(InvalidLevelError):
        validate_level_definition(dict(SAMPLE_LEVELS[0], level_number=2**31))
