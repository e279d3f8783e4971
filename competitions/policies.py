# competitions/policies.py
"""
Centralized permission checks for teams and cross chats.

Views and services should use these methods instead of inline permission
logic. Predicates return bool; ``can_*`` actions return (bool, reason).
"""
from typing import Tuple

from .models import Team, Participant, JoinRequest


class CompetitionPolicy:

    @staticmethod
    def is_team_member(user, team) -> bool:
        """Check if user is currently on the team."""
        if user is None or team is None:
            return False
        team_id = getattr(team, "pk", team)
        return Participant.objects.filter(team_id=team_id, user_id=user.pk).exists()

    # ─────────────────────────────────────────────────────────────
    # Cross chat
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_participate(join_request: JoinRequest, viewer) -> bool:
        """
        Whether the viewer may read and send messages in a join request's
        cross chat: the joining user, or anyone on the team right now.
        """
        if viewer is None or join_request is None:
            return False

        viewer_id = getattr(viewer, "pk", viewer)
        if join_request.user_id == viewer_id:
            return True

        return Participant.objects.filter(team_id=join_request.team_id, user_id=viewer_id).exists()

    @staticmethod
    def can_cancel_join_request(user, join_request: JoinRequest) -> Tuple[bool, str]:
        """Either side may withdraw a pending request or revoke an invitation."""
        if CompetitionPolicy.can_participate(join_request, user):
            return True, ""
        return False, "You cannot cancel this join request"

    # ─────────────────────────────────────────────────────────────
    # Team chat
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_send_team_message(user, team: Team) -> Tuple[bool, str]:
        if CompetitionPolicy.is_team_member(user, team):
            return True, ""
        return False, "Only team members can post in the team chat"
