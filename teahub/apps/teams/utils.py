from django.http import HttpRequest

from teahub.apps.core.utils import get_team_id_from_session

from .models import Member


def get_user_default_team(user) -> int | None:
    """Return the id of the team the user marked as default, if any."""
    membership = Member.objects.filter(user=user, is_default_team=True).only("team_id").first()
    return membership.team_id if membership else None


def get_current_team_id(request: HttpRequest) -> int | None:
    """
    Resolve the team the request acts on behalf of.

    The session selection wins, then the user's default team, then the first
    team the user is a member of. A session selection for a team the user does
    not belong to is ignored.
    """
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None

    team_id = get_team_id_from_session(request)
    if team_id and Member.objects.filter(user=user, team_id=team_id).exists():
        return team_id

    default_team_id = get_user_default_team(user)
    if default_team_id:
        return default_team_id

    first_membership = Member.objects.filter(user=user).order_by("joined_at", "id").first()
    if first_membership:
        return first_membership.team_id

    return None
