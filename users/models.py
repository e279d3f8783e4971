# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    display_name = models.CharField(max_length=150, blank=True, default="")
    profile_picture = models.CharField(max_length=1024, blank=True, null=True, help_text="Avatar URL")

    @property
    def name(self):
        return self.display_name or self.username

    def __str__(self):
        return self.username
