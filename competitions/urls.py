from django.urls import path
from .views import (
    CompetitionListView,
    CompetitionTeamsView,
    EnterCompetitionView,
    OwnTeamView,
    MyParticipationsView,
    TeamMessagesView,
    RequestJoinView,
    InviteToTeamView,
    UserCrossChatsView,
    TeamCrossChatsView,
    JoinRequestDetailView,
    CrossChatMessagesView,
)

urlpatterns = [
    path("", CompetitionListView.as_view(), name="competition-list"),
    path("participations/", MyParticipationsView.as_view(), name="my-participations"),

    # Per competition
    path("<int:competition_id>/teams/", CompetitionTeamsView.as_view(), name="competition-teams"),
    path("<int:competition_id>/enter/", EnterCompetitionView.as_view(), name="competition-enter"),
    path("<int:competition_id>/team/", OwnTeamView.as_view(), name="competition-own-team"),
    path("<int:competition_id>/invite/", InviteToTeamView.as_view(), name="competition-invite"),
    path("<int:competition_id>/crosschats/user/", UserCrossChatsView.as_view(), name="crosschats-user"),
    path("<int:competition_id>/crosschats/team/", TeamCrossChatsView.as_view(), name="crosschats-team"),

    # Teams
    path("teams/<int:team_id>/messages/", TeamMessagesView.as_view(), name="team-messages"),
    path("teams/<int:team_id>/join/", RequestJoinView.as_view(), name="team-request-join"),

    # Join requests / cross chat
    path("join-requests/<int:join_request_id>/", JoinRequestDetailView.as_view(), name="join-request-detail"),
    path("join-requests/<int:join_request_id>/messages/", CrossChatMessagesView.as_view(), name="crosschat-messages"),
]
