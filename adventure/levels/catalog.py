"""
Level catalog: read-only lookup of challenge definitions keyed by
(language, level_number), plus idempotent seeding of the sample levels.

Levels are written only by seed_levels(); every other function here is a
pure read and needs no locking.
"""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from adventure.core.config import SUPPORTED_LANGUAGES
from adventure.levels.models import Level


class LevelNotFoundError(LookupError):
    """No level exists for the requested (language, level_number)."""

    def __init__(self, language: str, level_number: int):
        super().__init__(f"Level not found: language={language!r} level={level_number}")
        self.language = language
        self.level_number = level_number


class InvalidLevelError(ValueError):
    """A level definition is not valid catalog content."""


SAMPLE_LEVELS = [
    # HTML
    {
        "language": "html",
        "level_number": 1,
        "title": "Hello World",
        "description": "Create your first HTML page with a heading",
        "challenge": 'Create an HTML page with an <h1> heading that says "Hello World"',
        "solution": "<h1>Hello World</h1>",
        "hints": "Use the h1 tag to create a main heading",
        "points": 10,
    },
    {
        "language": "html",
        "level_number": 2,
        "title": "Basic Structure",
        "description": "Learn the basic HTML document structure",
        "challenge": "Create a complete HTML document with html, head, title, and body tags",
        "solution": "<!DOCTYPE html>\n<html>\n<head>\n<title>My Page</title>\n</head>\n<body>\n<h1>Welcome</h1>\n</body>\n</html>",
        "hints": "Every HTML document needs DOCTYPE, html, head, and body tags",
        "points": 15,
    },
    # CSS
    {
        "language": "css",
        "level_number": 1,
        "title": "Color the World",
        "description": "Learn to change text colors in CSS",
        "challenge": "Make the text color red using CSS",
        "solution": "color: red;",
        "hints": "Use the color property to change text color",
        "points": 10,
    },
    {
        "language": "css",
        "level_number": 2,
        "title": "Size Matters",
        "description": "Learn to change font sizes",
        "challenge": "Make the text size 24px using CSS",
        "solution": "font-size: 24px;",
        "hints": "Use the font-size property to change text size",
        "points": 15,
    },
    # JavaScript
    {
        "language": "javascript",
        "level_number": 1,
        "title": "First Function",
        "description": "Create your first JavaScript function",
        "challenge": 'Create a function called greet that returns "Hello!"',
        "solution": 'function greet() {\n  return "Hello!";\n}',
        "hints": "Use the function keyword to create a function",
        "points": 20,
    },
    {
        "language": "javascript",
        "level_number": 2,
        "title": "Variable Adventure",
        "description": "Learn to create and use variables",
        "challenge": 'Create a variable called name with the value "Player"',
        "solution": 'let name = "Player";',
        "hints": "Use let to declare a variable",
        "points": 15,
    },
]


# Largest value a 32-bit INTEGER column holds
MAX_LEVEL_NUMBER = 2**31 - 1


def normalize_language(language: str) -> str:
    return (language or "").strip().lower()


# ---------------------------------------------------------------------------
# LOOKUPS
# ---------------------------------------------------------------------------

def find_level(db: Session, language: str, level_number: int) -> Optional[Level]:
    if not 1 <= level_number <= MAX_LEVEL_NUMBER:
        return None
    return (
        db.query(Level)
        .filter(
            Level.language == normalize_language(language),
            Level.level_number == level_number,
        )
        .first()
    )


def get_level(db: Session, language: str, level_number: int) -> Level:
    """Return the level or raise LevelNotFoundError."""
    level = find_level(db, language, level_number)
    if level is None:
        raise LevelNotFoundError(normalize_language(language), level_number)
    return level


def list_levels(db: Session, language: str) -> List[Level]:
    """All levels for a language, ascending by level number. Unknown language -> []."""
    return (
        db.query(Level)
        .filter(Level.language == normalize_language(language))
        .order_by(Level.level_number.asc())
        .all()
    )


def next_level_number(db: Session, language: str, level_number: int) -> Optional[int]:
    """level_number + 1 if that level exists for the language, else None."""
    candidate = level_number + 1
    return candidate if find_level(db, language, candidate) is not None else None


def public_level(level: Level) -> dict:
    """Public shape of a level; the canonical solution is withheld."""
    return {
        "language": level.language,
        "levelNumber": level.level_number,
        "title": level.title,
        "description": level.description,
        "challenge": level.challenge,
        "points": level.points,
        "hints": level.hints,
    }


# ---------------------------------------------------------------------------
# SEEDING
# ---------------------------------------------------------------------------

def validate_level_definition(definition: dict) -> dict:
    """
    Check a level definition before it enters the catalog and return a
    normalised copy. A blank canonical solution would accept any non-blank
    submission, so it is rejected here.
    """
    language = normalize_language(definition.get("language", ""))
    if language not in SUPPORTED_LANGUAGES:
        raise InvalidLevelError(f"Unsupported language: {definition.get('language')!r}")

    level_number = definition.get("level_number")
    if not isinstance(level_number, int) or isinstance(level_number, bool) or not 1 <= level_number <= MAX_LEVEL_NUMBER:
        raise InvalidLevelError(f"{language}: level_number must be in 1..{MAX_LEVEL_NUMBER}, got {level_number!r}")

    points = definition.get("points", 10)
    if not isinstance(points, int) or isinstance(points, bool) or points < 1:
        raise InvalidLevelError(f"{language}/{level_number}: points must be a positive integer, got {points!r}")

    solution = definition.get("solution") or ""
    if not solution.strip():
        raise InvalidLevelError(f"{language}/{level_number}: canonical solution must not be blank")

    for field in ("title", "description", "challenge"):
        if not (definition.get(field) or "").strip():
            raise InvalidLevelError(f"{language}/{level_number}: {field} must not be blank")

    return {
        "language": language,
        "level_number": level_number,
        "title": definition["title"],
        "description": definition["description"],
        "challenge": definition["challenge"],
        "solution": solution,
        "hints": definition.get("hints") or None,
        "points": points,
    }


def seed_levels(db: Session, levels: Iterable[dict] = SAMPLE_LEVELS) -> int:
    """
    Insert any level definitions that are missing. Existing
    (language, level_number) pairs are left untouched, so running this
    repeatedly never duplicates a level. Returns the number inserted.
    """
    validated = [validate_level_definition(d) for d in levels]

    seen = set()
    for d in validated:
        key = (d["language"], d["level_number"])
        if key in seen:
            raise InvalidLevelError(f"Duplicate level definition: {key[0]}/{key[1]}")
        seen.add(key)

    created = 0
    skipped = 0
    try:
        for d in validated:
            if find_level(db, d["language"], d["level_number"]) is not None:
                skipped += 1
                continue
            db.add(Level(**d))
            created += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    print(f"[SEED] levels created={created} skipped={skipped}", flush=True)
    return created
