# competitions/state_machine.py
"""
Join-request state machine.

A join request moves a user from their current team onto another team in
the same competition once both sides consent:

    (none) ──invite──→ INVITED   (team_consent)
    (none) ──request─→ REQUESTED (user_consent)
    INVITED / REQUESTED ──other side consents──→ ACCEPTED ──apply──→ (deleted)

validate_team_join_request() classifies a pair, record_join_request()
opens a request and its cross chat, add_user_to_team() applies an accepted
move.
"""
from enum import Enum
import logging

from django.conf import settings
from django.db import transaction

from core.exceptions import (
    NotFoundError,
    UnauthorizedError,
    InvariantViolation,
    CapacityExceeded,
    InvalidTransition,
)
from .models import Team, Participant, JoinRequest, JoinMessage
from .teams import find_team_of_user

logger = logging.getLogger("compete.competitions")


class RequestValidity(str, Enum):
    VALID = "valid"
    BACKWARDS = "backwards"
    FULL = "full"
    COMMITTED = "committed"
    ACCEPTED = "accepted"
    INVITED = "invited"
    REQUESTED = "requested"


def team_size_limit() -> int:
    return getattr(settings, "TEAM_MAX_MEMBERS", 4)


def validate_team_join_request(inviter_team: Team, joiner) -> RequestValidity:
    """
    Determines whether a join between ``joiner`` and ``inviter_team`` is valid,
    and if not, why.

    Precondition: the team exists.

    Raises UnauthorizedError if the joiner has not entered the team's
    competition.
    """
    member_ids = list(
        Participant.objects.filter(team=inviter_team).values_list("user_id", flat=True)
    )
    if joiner.pk in member_ids:
        return RequestValidity.BACKWARDS

    if len(member_ids) >= team_size_limit():
        return RequestValidity.FULL

    joiner_team = find_team_of_user(joiner, inviter_team.competition_id)
    if joiner_team is None:
        raise UnauthorizedError("The user is not in the competition")

    # Only a solo team may be abandoned
    if len(joiner_team.members) > 1:
        return RequestValidity.COMMITTED

    join_request = JoinRequest.objects.filter(team=inviter_team, user=joiner).first()
    if join_request is None:
        return RequestValidity.VALID
    if join_request.team_consent and join_request.user_consent:
        return RequestValidity.ACCEPTED
    if join_request.team_consent:
        return RequestValidity.INVITED
    if join_request.user_consent:
        return RequestValidity.REQUESTED
    return RequestValidity.VALID


@transaction.atomic
def record_join_request(inviter_team: Team, joiner, pitch: str, team_consent: bool, sender) -> int:
    """
    Adds a join request and opens its cross chat with the pitch as the first
    message.

    Args:
        inviter_team: The team that is inviting or being asked
        joiner: The user that may switch teams
        pitch: Opening message of the cross chat
        team_consent: True for an invitation, False for a request to join
        sender: The verified user sending the pitch

    Returns the id of the new join request. Does not look for an existing
    request between the pair; classify first.
    """
    join_request = JoinRequest.objects.create(
        team=inviter_team,
        user=joiner,
        team_consent=team_consent,
        user_consent=not team_consent,
    )
    JoinMessage.objects.create(
        join_request=join_request,
        sender=sender,
        message=pitch,
    )

    logger.info(
        f"Join request recorded: id={join_request.pk}, team={inviter_team.pk}, "
        f"user={joiner.pk}, kind={'invite' if team_consent else 'request'}, sender={sender.pk}"
    )
    return join_request.pk


@transaction.atomic
def add_user_to_team(user, inviting_team: Team) -> None:
    """
    Moves the user onto a team and clears the join request.

    Preconditions:
    - Both parties have consented (validate_team_join_request returns ACCEPTED)
    - The user is in the team's competition

    Postconditions:
    - No join request exists between the user and the team
    - The user's team is ``inviting_team``
    - The user's previous team is deleted once nobody is left on it

    Raises:
        UnauthorizedError: the user is not in the competition
        NotFoundError: the team was deleted before the move
        InvariantViolation: the user's membership row is missing
        CapacityExceeded: the team filled up before this move committed
        InvalidTransition: the user is already on the team
    """
    team_of_joiner = find_team_of_user(user, inviting_team.competition_id)
    if team_of_joiner is None:
        raise UnauthorizedError("The user is not in the competition")

    if team_of_joiner.id == inviting_team.pk:
        raise InvalidTransition("The user is already on this team")

    origin_id = team_of_joiner.id

    # Lock both rosters in pk order so opposite moves cannot deadlock
    locked = {
        team.pk: team
        for team in Team.objects.select_for_update()
        .filter(pk__in=[origin_id, inviting_team.pk])
        .order_by("pk")
    }
    if inviting_team.pk not in locked:
        raise NotFoundError("The team does not exist")
    inviting_team = locked[inviting_team.pk]

    JoinRequest.objects.filter(team=inviting_team, user=user).delete()

    participation = (
        Participant.objects.select_for_update()
        .filter(team_id=origin_id, user=user)
        .first()
    )
    if participation is None:
        raise InvariantViolation("An internal server error occurred")

    if Participant.objects.filter(team=inviting_team).count() >= team_size_limit():
        logger.warning(
            f"Join rejected at commit: team={inviting_team.pk} is full, user={user.pk}"
        )
        raise CapacityExceeded("This team is full")

    participation.team = inviting_team
    participation.save(update_fields=["team"])

    logger.info(
        f"Team membership changed: user={user.pk}, from={origin_id}, to={inviting_team.pk}"
    )

    # Decide from the roster as it is now, not as it was before the locks
    if not Participant.objects.filter(team_id=origin_id).exists():
        Team.objects.filter(pk=origin_id).delete()
        logger.info(f"Team disbanded: team={origin_id}, last_member={user.pk}")
