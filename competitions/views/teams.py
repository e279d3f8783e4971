# competitions/views/teams.py - Team chat and join flow

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from users.services import verify_user
from competitions import services
from competitions.serializers import (
    TeamMessageSerializer,
    MessageCreateSerializer,
    JoinRequestCreateSerializer,
    InviteSerializer,
    JoinOutcomeSerializer,
)


def _outcome_response(outcome):
    code = status.HTTP_200_OK if outcome.join_request_id is None else status.HTTP_201_CREATED
    return Response(JoinOutcomeSerializer(outcome).data, status=code)


class TeamMessagesView(APIView):
    """
    GET  /api/competitions/teams/<id>/messages/
    POST /api/competitions/teams/<id>/messages/  {"message": "..."}

    Team members only.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, team_id):
        user = verify_user(request)
        messages = services.list_team_messages(user, team_id)
        return Response(TeamMessageSerializer(messages, many=True).data)

    def post(self, request, team_id):
        user = verify_user(request)
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = services.send_team_message(user, team_id, serializer.validated_data["message"])
        return Response(TeamMessageSerializer(message).data, status=status.HTTP_201_CREATED)


class RequestJoinView(APIView):
    """
    POST /api/competitions/teams/<id>/join/
    Body: {"pitch": "why you want to join"}

    201 with status "requested" when a request was opened,
    200 with status "accepted" when it answered an invitation.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        user = verify_user(request)
        serializer = JoinRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = services.request_join(user, team_id, serializer.validated_data["pitch"])
        return _outcome_response(outcome)


class InviteToTeamView(APIView):
    """
    POST /api/competitions/<id>/invite/
    Body: {"joiner_id": 12, "pitch": "..."}

    Invites a competitor onto the caller's team. Inviting someone who asked
    to join accepts them.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, competition_id):
        user = verify_user(request)
        serializer = InviteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = services.invite_to_team(
            user,
            serializer.validated_data["joiner_id"],
            competition_id,
            serializer.validated_data["pitch"],
        )
        return _outcome_response(outcome)
