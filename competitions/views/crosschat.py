# competitions/views/crosschat.py

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from users.services import verify_user
from competitions import services
from competitions.serializers import (
    CrossChatSerializer,
    JoinMessageSerializer,
    MessageCreateSerializer,
)


class UserCrossChatsView(APIView):
    """
    GET /api/competitions/<id>/crosschats/user/
    Chats between the caller and teams they may join.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, competition_id):
        user = verify_user(request)
        chats = services.list_cross_chats_for_user(user, competition_id)
        return Response(CrossChatSerializer(chats, many=True).data)


class TeamCrossChatsView(APIView):
    """
    GET /api/competitions/<id>/crosschats/team/
    Chats between the caller's team and its prospective joiners.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, competition_id):
        user = verify_user(request)
        chats = services.list_cross_chats_for_team(user, competition_id)
        return Response(CrossChatSerializer(chats, many=True).data)


class JoinRequestDetailView(APIView):
    """
    DELETE /api/competitions/join-requests/<id>/
    Withdraw a request or revoke an invitation.
    """
    permission_classes = [IsAuthenticated]

    def delete(self, request, join_request_id):
        user = verify_user(request)
        services.cancel_join_request(user, join_request_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CrossChatMessagesView(APIView):
    """
    GET  /api/competitions/join-requests/<id>/messages/
    POST /api/competitions/join-requests/<id>/messages/  {"message": "..."}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, join_request_id):
        user = verify_user(request)
        messages = services.list_cross_chat_messages(user, join_request_id)
        return Response(JoinMessageSerializer(messages, many=True).data)

    def post(self, request, join_request_id):
        user = verify_user(request)
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = services.send_cross_chat_message(user, join_request_id, serializer.validated_data["message"])
        return Response(JoinMessageSerializer(message).data, status=status.HTTP_201_CREATED)
