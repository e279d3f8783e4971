from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from core.models import DomainActivity
from core.constants import ACTIVITY_JOIN_ACCEPTED, ACTIVITY_JOIN_INVITED
from competitions.models import Competition, Team, Participant, JoinRequest, JoinMessage
from .helpers import make_user, make_team


class TeamFormationApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.competition = Competition.objects.create(
            name="Spring Hack",
            description="48 hours of building",
        )

        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.carol = make_user("carol")
        self.outsider = make_user("outsider")

        self.team_one = make_team(self.competition, self.alice, name="Solo")
        self.team_two = make_team(self.competition, self.bob, self.carol, name="Pair")

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def invite(self, joiner, pitch=""):
        return self.client.post(
            f"/api/competitions/{self.competition.pk}/invite/",
            {"joiner_id": joiner.pk, "pitch": pitch},
            format="json",
        )

    def request_join(self, team, pitch=""):
        return self.client.post(
            f"/api/competitions/teams/{team.pk}/join/",
            {"pitch": pitch},
            format="json",
        )

    def error_code(self, resp):
        body = resp.json()
        self.assertFalse(body["success"])
        return body["errors"]["code"]

    # ----- Join flow -------------------------------------------------------

    def test_invitation_then_request_moves_user(self):
        self.auth(self.bob)
        resp = self.invite(self.alice, pitch="We need a designer")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.json()
        self.assertEqual(data["status"], "invited")
        self.assertEqual(data["team_id"], self.team_two.pk)
        join_request_id = data["join_request_id"]

        self.auth(self.alice)
        resp = self.request_join(self.team_two)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["status"], "accepted")

        self.assertFalse(Team.objects.filter(pk=self.team_one.pk).exists())
        self.assertEqual(Participant.objects.filter(team=self.team_two).count(), 3)
        self.assertEqual(Participant.objects.get(user=self.alice).team_id, self.team_two.pk)
        self.assertFalse(JoinRequest.objects.filter(pk=join_request_id).exists())

        verbs = set(DomainActivity.objects.values_list("verb", flat=True))
        self.assertIn(ACTIVITY_JOIN_INVITED, verbs)
        self.assertIn(ACTIVITY_JOIN_ACCEPTED, verbs)

    def test_request_then_invitation_moves_user(self):
        self.auth(self.alice)
        resp = self.request_join(self.team_two, pitch="I write the backend")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.json()["status"], "requested")

        join_request = JoinRequest.objects.get(team=self.team_two, user=self.alice)
        self.assertTrue(join_request.user_consent)
        self.assertFalse(join_request.team_consent)
        self.assertEqual(join_request.pitch, "I write the backend")

        self.auth(self.carol)
        resp = self.invite(self.alice)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["status"], "accepted")

        self.assertEqual(Participant.objects.get(user=self.alice).team_id, self.team_two.pk)
        self.assertFalse(Team.objects.filter(pk=self.team_one.pk).exists())

    def test_repeat_request_is_rejected(self):
        self.auth(self.alice)
        self.request_join(self.team_two)

        resp = self.request_join(self.team_two)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(resp), "invalid_transition")

    def test_joining_own_team_is_rejected(self):
        self.auth(self.bob)
        resp = self.request_join(self.team_two)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(resp), "invalid_transition")

    def test_committed_user_cannot_be_invited(self):
        self.auth(self.alice)
        resp = self.invite(self.bob)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(resp), "invalid_transition")
        self.assertFalse(JoinRequest.objects.exists())

    def test_full_team_rejects_request(self):
        full_team = make_team(
            self.competition,
            make_user("dave"), make_user("erin"), make_user("gina"), make_user("hank"),
        )

        self.auth(self.alice)
        resp = self.request_join(full_team)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(resp), "capacity_exceeded")

    def test_request_from_outside_competition_is_forbidden(self):
        self.auth(self.outsider)
        resp = self.request_join(self.team_two)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.error_code(resp), "unauthorized")

    def test_invite_without_team_is_forbidden(self):
        self.auth(self.outsider)
        resp = self.invite(self.alice)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_invite_unknown_user(self):
        self.auth(self.bob)
        resp = self.client.post(
            f"/api/competitions/{self.competition.pk}/invite/",
            {"joiner_id": 9999},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.error_code(resp), "not_found")

    def test_request_to_missing_team(self):
        self.auth(self.alice)
        resp = self.client.post("/api/competitions/teams/9999/join/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_join_request(self):
        self.auth(self.bob)
        join_request_id = self.invite(self.alice).json()["join_request_id"]

        self.auth(self.outsider)
        resp = self.client.delete(f"/api/competitions/join-requests/{join_request_id}/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.alice)
        resp = self.client.delete(f"/api/competitions/join-requests/{join_request_id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(JoinRequest.objects.filter(pk=join_request_id).exists())

    # ----- Cross chat ------------------------------------------------------

    def test_cross_chat_access(self):
        self.auth(self.bob)
        join_request_id = self.invite(self.alice, pitch="Join us").json()["join_request_id"]
        url = f"/api/competitions/join-requests/{join_request_id}/messages/"

        self.auth(self.alice)
        resp = self.client.post(url, {"message": "Tell me more"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        self.auth(self.carol)
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([m["message"] for m in resp.json()], ["Join us", "Tell me more"])

        self.auth(self.outsider)
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.error_code(resp), "unauthorized")
        self.assertEqual(JoinMessage.objects.count(), 2)

    def test_cross_chat_listings(self):
        self.auth(self.bob)
        self.invite(self.alice)

        resp = self.client.get(f"/api/competitions/{self.competition.pk}/crosschats/team/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        chats = resp.json()
        self.assertEqual(len(chats), 1)
        self.assertEqual(chats[0]["joiner"]["id"], self.alice.pk)
        self.assertEqual({m["id"] for m in chats[0]["team_members"]}, {self.bob.pk, self.carol.pk})

        self.auth(self.alice)
        resp = self.client.get(f"/api/competitions/{self.competition.pk}/crosschats/user/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.json()), 1)
        self.assertEqual(resp.json()[0]["join_request"]["status"], "invited")

    # ----- Team chat -------------------------------------------------------

    def test_team_chat_is_members_only(self):
        url = f"/api/competitions/teams/{self.team_two.pk}/messages/"

        self.auth(self.bob)
        resp = self.client.post(url, {"message": "Standup at 9"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        self.auth(self.carol)
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()[0]["sender"]["id"], self.bob.pk)

        self.auth(self.alice)
        resp = self.client.post(url, {"message": "hi"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_blank_message_is_rejected(self):
        self.auth(self.bob)
        resp = self.client.post(
            f"/api/competitions/teams/{self.team_two.pk}/messages/",
            {"message": "   "},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("message", resp.json()["errors"])


class CompetitionApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user("alice")
        self.spring = Competition.objects.create(name="Spring Hack", description="Robots")
        self.autumn = Competition.objects.create(name="Autumn Jam", description="Games")

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def test_requires_authentication(self):
        resp = self.client.get("/api/competitions/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_and_search(self):
        self.auth(self.user)
        resp = self.client.get("/api/competitions/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual({c["name"] for c in resp.json()}, {"Spring Hack", "Autumn Jam"})

        resp = self.client.get("/api/competitions/", {"search": "games"})
        self.assertEqual([c["name"] for c in resp.json()], ["Autumn Jam"])

    def test_enter_competition(self):
        self.auth(self.user)
        url = f"/api/competitions/{self.spring.pk}/enter/"

        resp = self.client.post(url, {"team_name": "Gearheads"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.json()
        self.assertEqual(data["name"], "Gearheads")
        self.assertEqual([m["id"] for m in data["members"]], [self.user.pk])
        self.assertIsNotNone(data["membership_id"])

        resp = self.client.post(url, {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Participant.objects.filter(user=self.user).count(), 1)

    def test_enter_missing_competition(self):
        self.auth(self.user)
        resp = self.client.post("/api/competitions/9999/enter/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_own_team(self):
        self.auth(self.user)
        url = f"/api/competitions/{self.spring.pk}/team/"

        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)

        team = make_team(self.spring, self.user, name="Gearheads")
        joiner = make_user("bob")
        make_team(self.spring, joiner)
        JoinRequest.objects.create(team=team, user=joiner, user_consent=True)

        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual(data["id"], team.pk)
        self.assertEqual([r["user"]["id"] for r in data["join_requests"]], [joiner.pk])
        self.assertEqual(data["invitations"], [])

    def test_competition_teams(self):
        make_team(self.spring, self.user)
        make_team(self.spring, make_user("bob"), make_user("carol"))

        self.auth(self.user)
        resp = self.client.get(f"/api/competitions/{self.spring.pk}/teams/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([len(t["members"]) for t in resp.json()], [1, 2])

        resp = self.client.get("/api/competitions/9999/teams/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_my_participations(self):
        make_team(self.spring, self.user)
        make_team(self.autumn, self.user)

        self.auth(self.user)
        resp = self.client.get("/api/competitions/participations/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            {p["competition"]["id"] for p in resp.json()},
            {self.spring.pk, self.autumn.pk},
        )


class AccountApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user("alice")

    def test_health_check_is_public(self):
        resp = self.client.get("/api/health/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["status"], "ok")

    def test_me(self):
        self.client.force_authenticate(user=self.user)

        resp = self.client.get("/api/users/me/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["username"], "alice")

        resp = self.client.patch("/api/users/me/", {"display_name": "Alice A."}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.display_name, "Alice A.")

    def test_user_lookup_by_id(self):
        other = make_user("bob", display_name="Bobby")
        self.client.force_authenticate(user=self.user)

        resp = self.client.get(f"/api/users/{other.pk}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["name"], "Bobby")
