from rest_framework import serializers

from users.serializers import PublicUserSerializer
from .models import Competition, JoinRequest, JoinMessage, TeamMessage


class CompetitionSerializer(serializers.ModelSerializer):
    participant_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Competition
        fields = [
            'id',
            'name',
            'description',
            'thumbnail',
            'location_category',
            'access',
            'start_date',
            'end_date',
            'total_prize_value',
            'participant_count',
            'created_at',
        ]


class JoinRequestSerializer(serializers.ModelSerializer):
    user = PublicUserSerializer(read_only=True)
    status = serializers.SerializerMethodField()
    pitch = serializers.CharField(read_only=True)

    class Meta:
        model = JoinRequest
        fields = ['id', 'team', 'user', 'team_consent', 'user_consent', 'status', 'pitch', 'created_at']

    def get_status(self, obj):
        if obj.is_accepted:
            return "accepted"
        if obj.is_invitation:
            return "invited"
        if obj.is_request:
            return "requested"
        return "pending"


class JoinMessageSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)

    class Meta:
        model = JoinMessage
        fields = ['id', 'join_request', 'sender', 'message', 'created_at']


class TeamMessageSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)

    class Meta:
        model = TeamMessage
        fields = ['id', 'team', 'sender', 'message', 'created_at']


class TeamViewSerializer(serializers.Serializer):
    """Serializes a competitions.teams.TeamView."""
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source='team.name', read_only=True)
    competition = serializers.IntegerField(source='competition_id', read_only=True)
    created_at = serializers.DateTimeField(source='team.created_at', read_only=True)
    members = PublicUserSerializer(many=True, read_only=True)
    join_requests = JoinRequestSerializer(many=True, read_only=True)


class OwnTeamSerializer(TeamViewSerializer):
    """
    The caller's team dashboard: requests waiting on the team, invitations
    waiting on a user, and the team chat.
    """
    join_requests = serializers.SerializerMethodField()
    invitations = serializers.SerializerMethodField()
    messages = serializers.SerializerMethodField()
    membership_id = serializers.SerializerMethodField()

    def get_membership_id(self, view):
        return view.membership.pk if view.membership else None

    def get_join_requests(self, view):
        pending = [item for item in view.join_requests if item.is_request]
        return JoinRequestSerializer(pending, many=True).data

    def get_invitations(self, view):
        pending = [item for item in view.join_requests if item.is_invitation]
        return JoinRequestSerializer(pending, many=True).data

    def get_messages(self, view):
        return TeamMessageSerializer(view.team.messages.select_related('sender'), many=True).data


class ParticipationSerializer(serializers.Serializer):
    id = serializers.IntegerField(source='participation.pk', read_only=True)
    joined_at = serializers.DateTimeField(source='participation.joined_at', read_only=True)
    team_id = serializers.IntegerField(source='team.pk', read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    competition = CompetitionSerializer(read_only=True)


class CrossChatSerializer(serializers.Serializer):
    join_request = JoinRequestSerializer(read_only=True)
    team_members = PublicUserSerializer(many=True, read_only=True)
    joiner = PublicUserSerializer(read_only=True)


class JoinOutcomeSerializer(serializers.Serializer):
    status = serializers.CharField(source='status.value', read_only=True)
    team_id = serializers.IntegerField(read_only=True)
    join_request_id = serializers.IntegerField(read_only=True, allow_null=True)


# ---- Inputs -----------------------------------------------------------

class EnterCompetitionSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class JoinRequestCreateSerializer(serializers.Serializer):
    pitch = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")


class InviteSerializer(serializers.Serializer):
    joiner_id = serializers.IntegerField()
    pitch = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")


class MessageCreateSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=2000, trim_whitespace=True)
