# competitions/views/competitions.py

from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from users.services import verify_user
from competitions import services
from competitions.teams import list_own_participations, list_competition_teams
from competitions.serializers import (
    CompetitionSerializer,
    TeamViewSerializer,
    OwnTeamSerializer,
    ParticipationSerializer,
    EnterCompetitionSerializer,
)


class CompetitionListView(generics.ListAPIView):
    """
    GET /api/competitions/?search=<text>
    """
    serializer_class = CompetitionSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return services.list_competitions(search=self.request.query_params.get("search"))


class CompetitionTeamsView(APIView):
    """
    GET /api/competitions/<id>/teams/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, competition_id):
        teams = list_competition_teams(competition_id)
        return Response(TeamViewSerializer(teams, many=True).data)


class EnterCompetitionView(APIView):
    """
    POST /api/competitions/<id>/enter/
    Body: {"team_name": "optional"}

    Enters the caller on a new team of their own.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, competition_id):
        user = verify_user(request)
        serializer = EnterCompetitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        view = services.enter_competition(user, competition_id, serializer.validated_data["team_name"])
        return Response(OwnTeamSerializer(view).data, status=status.HTTP_201_CREATED)


class OwnTeamView(APIView):
    """
    GET /api/competitions/<id>/team/

    The caller's team with join requests, invitations and chat.
    204 when the caller has not entered the competition.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, competition_id):
        user = verify_user(request)
        view = services.get_own_team(user, competition_id)
        if view is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(OwnTeamSerializer(view).data)


class MyParticipationsView(APIView):
    """
    GET /api/competitions/participations/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = verify_user(request)
        participations = list_own_participations(user)
        return Response(ParticipationSerializer(participations, many=True).data)
