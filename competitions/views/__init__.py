from .competitions import (
    CompetitionListView,
    CompetitionTeamsView,
    EnterCompetitionView,
    OwnTeamView,
    MyParticipationsView,
)
from .teams import TeamMessagesView, RequestJoinView, InviteToTeamView
from .crosschat import (
    UserCrossChatsView,
    TeamCrossChatsView,
    JoinRequestDetailView,
    CrossChatMessagesView,
)
