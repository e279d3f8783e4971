from django.contrib.auth import get_user_model

from competitions.models import Team, Participant

User = get_user_model()


def make_user(username, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass1234",
        **extra,
    )


def make_team(competition, *members, name=""):
    """Team in ``competition`` with ``members`` in roster order."""
    team = Team.objects.create(competition=competition, name=name)
    for member in members:
        Participant.objects.create(user=member, team=team)
    return team
