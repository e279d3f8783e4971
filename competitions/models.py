# competitions/models.py
from django.db import models
from django.conf import settings


class Competition(models.Model):
    ACCESS_OPEN = "open"
    ACCESS_INVITE = "invite"

    ACCESS_CHOICES = [
        (ACCESS_OPEN, "Open"),
        (ACCESS_INVITE, "Invite only"),
    ]

    LOCATION_ONLINE = "online"
    LOCATION_IN_PERSON = "in_person"
    LOCATION_HYBRID = "hybrid"

    LOCATION_CHOICES = [
        (LOCATION_ONLINE, "Online"),
        (LOCATION_IN_PERSON, "In person"),
        (LOCATION_HYBRID, "Hybrid"),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    thumbnail = models.CharField(max_length=1024, blank=True, null=True)
    location_category = models.CharField(max_length=32, choices=LOCATION_CHOICES, default=LOCATION_ONLINE)
    access = models.CharField(max_length=32, choices=ACCESS_CHOICES, default=ACCESS_OPEN)

    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    total_prize_value = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["created_at"], name="competition_created_idx"),
        ]

    def __str__(self):
        return self.name


class Team(models.Model):
    """
    A group of competitors entered in one competition.

    The roster is the set of Participant rows pointing here. A team with no
    participants must not exist: it is deleted in the same transaction that
    moves its last member out.
    """
    competition = models.ForeignKey(Competition, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["competition", "created_at"], name="team_comp_created_idx"),
        ]

    def __str__(self):
        return f"{self.name or f'Team {self.pk}'} ({self.competition.name})"

    @property
    def current_size(self):
        return self.participants.count()


class Participant(models.Model):
    """
    Membership row linking a user to their team in a competition.

    ``competition`` mirrors ``team.competition`` so the database can enforce
    one team per user per competition.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="participations")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="participants")
    competition = models.ForeignKey(Competition, on_delete=models.CASCADE, related_name="participants")
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "competition"], name="unique_participant_per_competition"),
        ]
        indexes = [
            models.Index(fields=["team", "joined_at"], name="participant_team_joined_idx"),
        ]

    def save(self, *args, **kwargs):
        self.competition_id = self.team.competition_id
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "team" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"competition"}
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user} in {self.team}"


class JoinRequest(models.Model):
    """
    Mutual-consent proposal to move ``user`` onto ``team``.

    An invitation starts with team_consent, a request with user_consent.
    Once both are set the move may be applied, which deletes the row.
    """
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="join_requests")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="join_requests")
    team_consent = models.BooleanField(default=False)
    user_consent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["team", "user"], name="unique_join_request_per_team_user"),
        ]
        indexes = [
            models.Index(fields=["user", "created_at"], name="joinrequest_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.user} -> {self.team}"

    @property
    def is_accepted(self):
        return self.team_consent and self.user_consent

    @property
    def is_invitation(self):
        return self.team_consent and not self.user_consent

    @property
    def is_request(self):
        return self.user_consent and not self.team_consent

    @property
    def pitch(self):
        # Served from prefetched messages when available
        first = next(iter(self.messages.all()), None)
        return first.message if first else ""


class JoinMessage(models.Model):
    """Cross chat message between a joining user and the team they may join."""
    join_request = models.ForeignKey(JoinRequest, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="join_messages")
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.sender}: {self.message[:40]}"


class TeamMessage(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="team_messages")
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.sender}: {self.message[:40]}"
