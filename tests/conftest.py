"""Pytest configuration and fixtures."""

from keystoneauth1 import fixture
import pytest

from image_tools import auth

AUTH_URL = "http://keystone.test/v3"
IMAGE_URL = "http://glance.test"

OPENRC = {
    "OS_AUTH_URL": AUTH_URL,
    "OS_USERNAME": "demo",
    "OS_PASSWORD": "secret",
    "OS_PROJECT_ID": "proj-1",
    "OS_PROJECT_NAME": "demo",
    "OS_USER_DOMAIN_NAME": "Default",
    "OS_REGION_NAME": "Kna1",
    "OS_IMAGE_URL": IMAGE_URL,
}


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all OS_* variables that could leak in from the shell."""
    for name in list(OPENRC) + ["OS_AUTH_TOKEN", "OS_PROJECT_DOMAIN_NAME"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def openrc(clean_env):
    for name, value in OPENRC.items():
        clean_env.setenv(name, value)
    return clean_env


@pytest.fixture
def token_session():
    return auth.token_session(IMAGE_URL, "tok")


@pytest.fixture
def keystone(requests_mock):
    """Answer the password grant with a token scoped to proj-1."""
    token = fixture.V3Token(project_id="proj-1", project_name="demo",
                            user_id="user-1", user_name="demo")
    return requests_mock.post(AUTH_URL + "/auth/tokens", json=token,
                              headers={"X-Subject-Token": "tok"},
                              status_code=201)


@pytest.fixture
def credentials():
    return auth.Credentials(AUTH_URL, "demo", "secret", "Default",
                            project_id="proj-1")
