"""Core data types for the provopadel application.

Every entity is owned by the REST API; these shapes describe the JSON it
returns and are only held for the lifetime of a request.
"""

from typing import Any, Literal, Optional, TypedDict

TournamentStatus = Literal["upcoming", "ongoing", "groups_finished", "finished"]
MatchStage = Literal[
    "group", "round_of_32", "round_of_16", "quarter", "semi", "final"
]
MatchStatus = Literal["pending", "ongoing", "played"]


class ApiDocument(TypedDict):
    """Generic API resource structure."""

    id: int


class Tournament(ApiDocument, total=False):
    """A tournament as returned by the API."""

    name: str
    description: Optional[str]
    location: Optional[str]
    category: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    match_duration_minutes: Optional[int]
    courts_count: Optional[int]
    club_name: Optional[str]


class TeamPlayer(TypedDict, total=False):
    """A player inside a team pair."""

    id: int
    name: str
    category: Optional[str]
    gender: Optional[str]


class Team(ApiDocument, total=False):
    """A registered pair."""

    tournament_id: int
    players: list[TeamPlayer]
    schedule_constraints: Optional[str]


class MatchSet(TypedDict):
    """Games won by each side in one set."""

    a: int
    b: int


class Match(ApiDocument, total=False):
    """A match as returned by the API."""

    match_code: Optional[str]
    tournament_id: int
    group_id: Optional[int]
    stage: MatchStage
    team_a_id: int
    team_b_id: int
    sets: Optional[list[MatchSet]]
    winner_team_id: Optional[int]
    played_at: Optional[str]
    status: MatchStatus
    scheduled_date: Optional[str]
    scheduled_time: Optional[str]
    court_number: Optional[int]


class RescheduleResponse(TypedDict):
    """Response of the schedule endpoint."""

    updated: Match
    swapped: Optional[Match]


class Group(ApiDocument, total=False):
    """A group with its member teams."""

    name: str
    is_incompatible: bool
    teams: list[Team]


class StandingRow(TypedDict, total=False):
    """A per-team aggregate in a group table."""

    team: Team
    played: int
    won: int
    lost: int
    sets_for: int
    sets_against: int
    games_for: int
    games_against: int
    points: int
    set_diff: int
    game_diff: int


class GroupStandings(TypedDict):
    """Standings for one group."""

    group_id: int
    group_name: str
    standings: list[StandingRow]


class SupportTicket(ApiDocument, total=False):
    """A support ticket header."""

    user_id: int
    subject: str
    status: str
    tags: Optional[list[str]]
    created_at: str
    updated_at: str
    last_message_at: Optional[str]
    user_email: Optional[str]
    user_club_name: Optional[str]
    messages: list[dict[str, Any]]
