from secrets import token_urlsafe

from django.http import HttpRequest

# Team ids are spelled with these letters after a random prefix
KEY_ALPHABET = "abcdefghij"
KEY_PREFIX_LENGTH = 8


def team_key_for(team_id: int) -> str:
    """Build the public key of a team: a random prefix followed by the encoded id."""
    encoded = "".join(KEY_ALPHABET[int(digit)] for digit in str(team_id))
    return token_urlsafe(6)[:KEY_PREFIX_LENGTH] + encoded


def team_id_from_key(key: str) -> int:
    """
    Recover the team id embedded in a team key.

    Raises:
        ValueError: If the key is too short or its suffix is not an encoded id
    """
    encoded = key[KEY_PREFIX_LENGTH:]
    if not encoded:
        raise ValueError("Team key is too short")
    if any(char not in KEY_ALPHABET for char in encoded):
        raise ValueError("Team key has an invalid suffix")
    return int("".join(str(KEY_ALPHABET.index(char)) for char in encoded))


def get_team_id_from_session(request: HttpRequest) -> int | None:
    """
    Return the team selected in the session, by id or by public key.

    Malformed selections are treated as no selection.
    """
    selected = request.session.get("current_team") or {}
    try:
        if "id" in selected:
            return int(selected["id"])
        if "key" in selected:
            return team_id_from_key(selected["key"])
    except (TypeError, ValueError):
        return None
    return None
