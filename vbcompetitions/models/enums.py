"""Group kinds and the flags used to filter matches and teams."""

from enum import Enum, IntFlag


class GroupType(str, Enum):
    """The kind of competition played in a group."""

    LEAGUE = "league"
    KNOCKOUT = "knockout"
    CROSSOVER = "crossover"


class MatchFilter(IntFlag):
    """Which matches to return when asking for a team's matches."""

    ALL_IN_GROUP = 1
    ALL = 2
    PLAYING = 4
    OFFICIATING = 8


class TeamFilter(IntFlag):
    """Which team IDs to return from a group or stage."""

    FIXED_ID = 1      # literal IDs only, sorted by name
    KNOWN = 2         # anything that currently resolves to a real team, sorted by name
    MAYBE = 4         # teams that could still arrive through unresolved references
    ALL = 8           # every ID or reference, playing or officiating
    PLAYING = 16
    OFFICIATING = 32
