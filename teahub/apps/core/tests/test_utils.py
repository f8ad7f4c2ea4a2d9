import logging

import pytest
from django.test import RequestFactory

from teahub.apps.core.services.logging import build_log_context, log_info, sanitize_for_log
from teahub.apps.core.utils import get_team_id_from_session, team_id_from_key, team_key_for


class TestTeamKeys:
    @pytest.mark.parametrize("value", [1, 42, 90210])
    def test_key_round_trip(self, value):
        assert team_id_from_key(team_key_for(value)) == value

    def test_short_key(self):
        with pytest.raises(ValueError):
            team_id_from_key("abc")

    def test_invalid_suffix(self):
        with pytest.raises(ValueError):
            team_id_from_key("12345678xyz")


class TestTeamFromSession:
    def _request(self, session: dict):
        request = RequestFactory().get("/")
        request.session = session
        return request

    def test_no_selection(self):
        assert get_team_id_from_session(self._request({})) is None

    def test_by_id(self):
        assert get_team_id_from_session(self._request({"current_team": {"id": "7"}})) == 7

    def test_by_key(self):
        key = team_key_for(15)
        assert get_team_id_from_session(self._request({"current_team": {"key": key}})) == 15

    def test_garbage(self):
        assert get_team_id_from_session(self._request({"current_team": {"id": "seven"}})) is None
        assert get_team_id_from_session(self._request({"current_team": {"key": "x"}})) is None


class TestLogging:
    def test_sanitize_strips_control_characters(self):
        assert sanitize_for_log("evil\nline\rbreak\x1b") == "evillinebreak"

    def test_sanitize_truncates(self):
        assert sanitize_for_log("a" * 300, max_length=10) == "a" * 10 + "..."

    def test_context_drops_none(self):
        assert build_log_context(product="p-1", fields=None) == {"product": "p-1"}

    def test_log_info_formats_event(self, caplog):
        logger = logging.getLogger("events.test")

        with caplog.at_level(logging.INFO, logger="events.test"):
            log_info(logger, "tea.product.created", product="p-1", team=3)

        assert caplog.records[-1].getMessage() == "tea.product.created product=p-1 team=3"
        assert caplog.records[-1].context == {"product": "p-1", "team": "3"}
