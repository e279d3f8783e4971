# competitions/services.py
"""
Team formation operations exposed to the API.

Every function takes the verified caller explicitly and runs as a single
transaction. Classification outcomes that block an operation are raised as
DomainError subclasses here; the state machine itself only reports them.
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q

from core.constants import (
    ACTIVITY_COMPETITION_ENTERED,
    ACTIVITY_JOIN_REQUESTED,
    ACTIVITY_JOIN_INVITED,
    ACTIVITY_JOIN_ACCEPTED,
    ACTIVITY_JOIN_CANCELED,
)
from core.exceptions import (
    NotFoundError,
    UnauthorizedError,
    CapacityExceeded,
    InvalidTransition,
)
from core.services import ActivityService
from .models import Competition, Team, Participant, JoinRequest, JoinMessage, TeamMessage
from .policies import CompetitionPolicy
from .state_machine import (
    RequestValidity,
    validate_team_join_request,
    record_join_request,
    add_user_to_team,
)
from .teams import TeamView, verify_team, find_team_of_user

logger = logging.getLogger("compete.competitions")

User = get_user_model()


@dataclass
class JoinOutcome:
    status: RequestValidity
    team_id: int
    join_request_id: Optional[int] = None


@dataclass
class CrossChat:
    join_request: JoinRequest
    team_members: List
    joiner: object


# Classifications that block a new request or invitation
REJECTIONS = {
    RequestValidity.BACKWARDS: (InvalidTransition, "The user is already on this team"),
    RequestValidity.FULL: (CapacityExceeded, "This team is full"),
    RequestValidity.COMMITTED: (InvalidTransition, "The user's current team has other members"),
    RequestValidity.INVITED: (InvalidTransition, "The user has already been invited to this team"),
    RequestValidity.REQUESTED: (InvalidTransition, "The user has already asked to join this team"),
}


def _reject(validity, actor, team):
    error_class, message = REJECTIONS[validity]
    logger.warning(
        f"Join rejected: team={team.pk}, actor={actor.pk}, validity={validity.value}"
    )
    raise error_class(message)


def _accept(joiner, team, actor) -> JoinOutcome:
    add_user_to_team(joiner, team)
    ActivityService.log_activity(
        actor=actor,
        verb=ACTIVITY_JOIN_ACCEPTED,
        target=team,
        competition=team.competition,
        metadata={"team_id": team.pk, "user_id": joiner.pk},
    )
    return JoinOutcome(status=RequestValidity.ACCEPTED, team_id=team.pk)


# ─────────────────────────────────────────────────────────────
# Competitions
# ─────────────────────────────────────────────────────────────

def list_competitions(search=None):
    competitions = Competition.objects.annotate(participant_count=Count("participants"))
    if search:
        competitions = competitions.filter(
            Q(name__icontains=search) | Q(description__icontains=search)
        )
    return competitions


def get_competition(competition_id) -> Competition:
    competition = Competition.objects.filter(pk=competition_id).first()
    if competition is None:
        raise NotFoundError("The competition does not exist")
    return competition


@transaction.atomic
def enter_competition(user, competition_id, team_name: str = "") -> TeamView:
    """Enters the user in a competition on a new team of their own."""
    competition = get_competition(competition_id)

    if find_team_of_user(user, competition) is not None:
        raise InvalidTransition("You have already entered this competition")

    team = Team.objects.create(
        competition=competition,
        name=team_name or f"{user.name}'s team",
    )
    participation = Participant.objects.create(user=user, team=team)

    ActivityService.log_activity(
        actor=user,
        verb=ACTIVITY_COMPETITION_ENTERED,
        target=team,
        competition=competition,
        metadata={"team_id": team.pk, "team_name": team.name},
    )
    logger.info(f"Competition entered: competition={competition.pk}, user={user.pk}, team={team.pk}")

    view = verify_team(team.pk)
    view.membership = participation
    return view


# ─────────────────────────────────────────────────────────────
# Teams
# ─────────────────────────────────────────────────────────────

def get_own_team(user, competition_id) -> Optional[TeamView]:
    get_competition(competition_id)
    return find_team_of_user(user, competition_id)


def list_team_messages(user, team_id) -> List[TeamMessage]:
    view = verify_team(team_id)
    allowed, reason = CompetitionPolicy.can_send_team_message(user, view.team)
    if not allowed:
        raise UnauthorizedError(reason)
    return list(view.team.messages.select_related("sender"))


@transaction.atomic
def send_team_message(user, team_id, text: str) -> TeamMessage:
    view = verify_team(team_id)
    allowed, reason = CompetitionPolicy.can_send_team_message(user, view.team)
    if not allowed:
        raise UnauthorizedError(reason)
    return TeamMessage.objects.create(team=view.team, sender=user, message=text)


# ─────────────────────────────────────────────────────────────
# Join requests
# ─────────────────────────────────────────────────────────────

@transaction.atomic
def request_join(user, team_id, pitch: str = "") -> JoinOutcome:
    """
    The user asks to join a team.

    Answering an invitation from that team completes the move instead.
    """
    team = verify_team(team_id).team
    validity = validate_team_join_request(team, user)

    if validity == RequestValidity.VALID:
        join_request_id = record_join_request(team, user, pitch, team_consent=False, sender=user)

        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_JOIN_REQUESTED,
            target=team,
            competition=team.competition,
            metadata={"team_id": team.pk, "join_request_id": join_request_id},
        )
        return JoinOutcome(status=RequestValidity.REQUESTED, team_id=team.pk, join_request_id=join_request_id)

    if validity == RequestValidity.INVITED:
        JoinRequest.objects.filter(team=team, user=user).update(user_consent=True)
        validity = validate_team_join_request(team, user)

    if validity == RequestValidity.ACCEPTED:
        return _accept(user, team, actor=user)

    _reject(validity, user, team)


@transaction.atomic
def invite_to_team(user, joiner_id, competition_id, pitch: str = "") -> JoinOutcome:
    """
    The caller's team invites another competitor.

    Inviting someone who already asked to join accepts their request.
    """
    inviting = find_team_of_user(user, competition_id)
    if inviting is None:
        raise UnauthorizedError("You are not in this competition")
    team = inviting.team

    joiner = User.objects.filter(pk=joiner_id).first()
    if joiner is None:
        raise NotFoundError("The user does not exist")

    validity = validate_team_join_request(team, joiner)

    if validity == RequestValidity.VALID:
        join_request_id = record_join_request(team, joiner, pitch, team_consent=True, sender=user)

        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_JOIN_INVITED,
            target=team,
            competition=team.competition,
            metadata={"team_id": team.pk, "user_id": joiner.pk, "join_request_id": join_request_id},
        )
        return JoinOutcome(status=RequestValidity.INVITED, team_id=team.pk, join_request_id=join_request_id)

    if validity == RequestValidity.REQUESTED:
        JoinRequest.objects.filter(team=team, user=joiner).update(team_consent=True)
        validity = validate_team_join_request(team, joiner)

    if validity == RequestValidity.ACCEPTED:
        return _accept(joiner, team, actor=user)

    _reject(validity, user, team)


@transaction.atomic
def cancel_join_request(user, join_request_id) -> None:
    """Withdraws a request or revokes an invitation."""
    join_request = JoinRequest.objects.select_related("team", "team__competition").filter(pk=join_request_id).first()
    if join_request is None:
        raise NotFoundError("The join request does not exist")

    allowed, reason = CompetitionPolicy.can_cancel_join_request(user, join_request)
    if not allowed:
        raise UnauthorizedError(reason)

    team = join_request.team
    ActivityService.log_activity(
        actor=user,
        verb=ACTIVITY_JOIN_CANCELED,
        target=team,
        competition=team.competition,
        metadata={"team_id": team.pk, "user_id": join_request.user_id, "join_request_id": join_request.pk},
    )
    join_request.delete()
    logger.info(f"Join request canceled: id={join_request_id}, by={user.pk}")


# ─────────────────────────────────────────────────────────────
# Cross chats
# ─────────────────────────────────────────────────────────────

def _cross_chats(join_requests, viewer) -> List[CrossChat]:
    chats = []
    for join_request in join_requests:
        if not CompetitionPolicy.can_participate(join_request, viewer):
            continue
        chats.append(CrossChat(
            join_request=join_request,
            team_members=verify_team(join_request.team_id).members,
            joiner=join_request.user,
        ))
    return chats


def list_cross_chats_for_user(user, competition_id) -> List[CrossChat]:
    """Cross chats the user has with teams they were invited to or asked to join."""
    join_requests = (
        JoinRequest.objects
        .filter(user=user, team__competition_id=competition_id)
        .select_related("user")
        .prefetch_related("messages")
    )
    return _cross_chats(join_requests, user)


def list_cross_chats_for_team(user, competition_id) -> List[CrossChat]:
    """Cross chats between the user's team and its prospective joiners."""
    own_team = find_team_of_user(user, competition_id)
    if own_team is None:
        return []
    return _cross_chats(own_team.join_requests, user)


def _verify_cross_chat(user, join_request_id) -> JoinRequest:
    join_request = JoinRequest.objects.filter(pk=join_request_id).first()
    if join_request is None:
        raise NotFoundError("The join request does not exist")
    if not CompetitionPolicy.can_participate(join_request, user):
        raise UnauthorizedError("You cannot participate in this chat")
    return join_request


def list_cross_chat_messages(user, join_request_id) -> List[JoinMessage]:
    join_request = _verify_cross_chat(user, join_request_id)
    return list(join_request.messages.select_related("sender"))


@transaction.atomic
def send_cross_chat_message(user, join_request_id, text: str) -> JoinMessage:
    join_request = _verify_cross_chat(user, join_request_id)
    return JoinMessage.objects.create(join_request=join_request, sender=user, message=text)
