# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

from keystoneauth1 import exceptions as ks_exceptions
from keystoneauth1.identity import v3
from keystoneauth1 import session
from keystoneauth1 import token_endpoint
from oslo_log import log

from image_tools import config
from image_tools import exceptions

LOG = log.getLogger(__name__)


class Credentials(object):
    """User credentials as found in the environment of an openrc file."""

    def __init__(self, auth_url, username, password, domain,
                 project_id=None, project_name=None):
        self.auth_url = auth_url
        self.username = username
        self.password = password
        self.domain = domain
        self.project_id = project_id
        self.project_name = project_name

    @classmethod
    def from_env(cls):
        project_id = config.get_env("OS_PROJECT_ID", required=False)
        project_name = config.get_env("OS_PROJECT_NAME", required=False)
        if not (project_id or project_name):
            raise exceptions.MissingEnvironment(
                name="OS_PROJECT_ID or OS_PROJECT_NAME")

        return cls(
            auth_url=config.get_env("OS_AUTH_URL"),
            username=config.get_env("OS_USERNAME"),
            password=config.get_env("OS_PASSWORD"),
            domain=config.get_domain_name(),
            project_id=project_id,
            project_name=project_name
        )


def password_session(credentials):
    """Exchange the credentials for a token and return the session."""

    auth = v3.Password(
        auth_url=credentials.auth_url,
        username=credentials.username,
        password=credentials.password,
        user_domain_name=credentials.domain,
        project_id=credentials.project_id,
        project_name=credentials.project_name,
        project_domain_name=credentials.domain
    )
    sess = session.Session(auth=auth)

    LOG.info("authenticate %s at %s" % (credentials.username,
                                        credentials.auth_url))
    try:
        sess.get_token()
    except ks_exceptions.Unauthorized:
        raise exceptions.AuthenticationFailed(
            reason="unauthorized user %s" % credentials.username)
    except ks_exceptions.ClientException as e:
        raise exceptions.AuthenticationFailed(reason=e)

    return sess


def token_session(endpoint, token):
    return session.Session(auth=token_endpoint.Token(endpoint, token))


def get_session(endpoint):
    """Use OS_AUTH_TOKEN when present, the password grant otherwise."""

    token = config.get_env("OS_AUTH_TOKEN", required=False)
    if token:
        LOG.debug("use token from OS_AUTH_TOKEN")
        return token_session(endpoint, token)
    return password_session(Credentials.from_env())


def get_project_id(sess):
    project_id = config.get_env("OS_PROJECT_ID", required=False)
    if not project_id:
        project_id = sess.get_project_id()
    return project_id
