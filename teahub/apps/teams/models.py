from django.apps import apps
from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models

from teahub.apps.core.utils import team_key_for


class Team(models.Model):
    """An organization; every TEA entity is scoped to exactly one team."""

    key = models.CharField(
        max_length=30,
        unique=True,
        null=True,
        validators=[MinLengthValidator(9)],
        help_text="Public identifier, derived from the id on first save",
    )
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    members = models.ManyToManyField(settings.AUTH_USER_MODEL, through="Member", related_name="teams")

    class Meta:
        db_table = apps.get_app_config("teams").label + "_teams"
        ordering = ["name"]
        indexes = [models.Index(fields=["key"], name="teams_teams_key_idx")]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # The key encodes the primary key, so it can only be set once the row exists.
        if not self.key:
            self.key = team_key_for(self.pk)
            super().save(update_fields=["key"])


class Member(models.Model):
    """A user's membership of a team and their role in it."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="memberships")
    role = models.CharField(max_length=32, choices=settings.TEAMS_SUPPORTED_ROLES)
    is_default_team = models.BooleanField(default=False)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = apps.get_app_config("teams").label + "_members"
        ordering = ["joined_at", "id"]
        constraints = [models.UniqueConstraint(fields=["user", "team"], name="teams_unique_member")]

    def __str__(self) -> str:
        return f"{self.user_id}@{self.team_id}:{self.role}"
