from pathlib import Path

import pytest
from dotenv import load_dotenv

pytest_plugins = [
    "teahub.apps.core.tests.fixtures",
    "teahub.apps.teams.fixtures",
    "teahub.apps.tea.tests.fixtures",
]


@pytest.fixture(scope="session", autouse=True)
def load_test_env():
    """Load test credentials from ``test_env`` once per session."""
    env_file = Path(__file__).parent / "test_env"
    if env_file.exists():
        load_dotenv(env_file)
    yield
