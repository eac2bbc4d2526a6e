"""Team data model."""

import re
from dataclasses import dataclass

# Display prefix some brackets carry in team names, e.g. "(1) Celtics"
SEED_PREFIX = re.compile(r"^\((\d+)\)\s*")


@dataclass(frozen=True)
class Team:
    name: str
    seed: int
    conference: str = ""

    def __str__(self):
        return f"({self.seed}) {self.name}"


def normalize_team_name(name: str | None) -> str:
    """Strip any "(N) " seed prefix, surrounding whitespace and case."""
    if not name:
        return ""
    return SEED_PREFIX.sub("", name.strip()).strip().lower()


def seed_from_name(name: str | None) -> int | None:
    """Parse the seed out of a "(N) Name" display string, if present."""
    if not name:
        return None
    match = SEED_PREFIX.match(name.strip())
    return int(match.group(1)) if match else None


def same_team(a: str | None, b: str | None) -> bool:
    """Compare two team names ignoring seed prefixes and case. Empty never matches."""
    a, b = normalize_team_name(a), normalize_team_name(b)
    return bool(a) and a == b
