# competitions/teams.py
"""
Read side of team formation.

- Participation index: which teams a user is on, across competitions
- Team directory: a team with its members and outstanding join requests

Nothing here writes to the database.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from django.contrib.auth import get_user_model

from core.exceptions import NotFoundError
from .models import Competition, Team, Participant, JoinRequest

User = get_user_model()


@dataclass
class Participation:
    participation: Participant
    team: Team
    competition: Competition


@dataclass
class TeamView:
    team: Team
    members: List = field(default_factory=list)
    join_requests: List[JoinRequest] = field(default_factory=list)
    # Set when the view was looked up through one of its members
    membership: Optional[Participant] = None

    @property
    def id(self):
        return self.team.pk

    @property
    def competition_id(self):
        return self.team.competition_id

    def has_member(self, user) -> bool:
        user_id = getattr(user, "pk", user)
        return any(member.pk == user_id for member in self.members)


def _users_in_order(user_ids):
    """Batch fetch users, keeping the order of ``user_ids``."""
    by_id = User.objects.in_bulk(user_ids)
    return [by_id[user_id] for user_id in user_ids if user_id in by_id]


def list_own_participations(user) -> List[Participation]:
    """
    Lists the teams and competitions a user is in.

    Rows whose team or competition can no longer be resolved are skipped
    rather than failing the whole listing.
    """
    rows = list(Participant.objects.filter(user=user).order_by("id"))
    teams = Team.objects.select_related("competition").in_bulk({row.team_id for row in rows})

    participations = []
    for row in rows:
        team = teams.get(row.team_id)
        if team is None:
            continue
        competition = team.competition
        if competition is None:
            continue
        participations.append(Participation(participation=row, team=team, competition=competition))

    return participations


def verify_team(team_id) -> TeamView:
    """
    Gets the information on a team independent of a user.

    Raises NotFoundError when the team does not exist.
    """
    team = Team.objects.select_related("competition").filter(pk=team_id).first()
    if team is None:
        raise NotFoundError("The team does not exist")

    member_ids = list(
        Participant.objects.filter(team=team).order_by("id").values_list("user_id", flat=True)
    )
    join_requests = list(
        JoinRequest.objects.filter(team=team).select_related("user").prefetch_related("messages")
    )

    return TeamView(team=team, members=_users_in_order(member_ids), join_requests=join_requests)


def find_team_of_user(user, competition) -> Optional[TeamView]:
    """
    The user's team in a competition, or None when they have not entered it.

    ``competition`` may be a Competition or its id.
    """
    competition_id = getattr(competition, "pk", competition)

    current = next(
        (item for item in list_own_participations(user) if item.competition.pk == competition_id),
        None,
    )
    if current is None:
        return None

    view = verify_team(current.team.pk)
    view.membership = current.participation
    return view


def list_competition_teams(competition_id) -> List[TeamView]:
    """Every team entered in a competition, with members."""
    if not Competition.objects.filter(pk=competition_id).exists():
        raise NotFoundError("The competition does not exist")

    team_ids = Team.objects.filter(competition_id=competition_id).order_by("created_at", "id").values_list("id", flat=True)
    return [verify_team(team_id) for team_id in team_ids]
