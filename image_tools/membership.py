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
from oslo_log import log

from image_tools import exceptions

LOG = log.getLogger(__name__)

HEADERS = {"Content-Type": "application/json"}


def members_url(endpoint, image_id, project_id=None):
    url = "%s/v2/images/%s/members" % (endpoint.rstrip("/"), image_id)
    if project_id:
        url = "%s/%s" % (url, project_id)
    return url


def _request(sess, method, url, body, debug=False):
    if debug:
        LOG.info("%s %s %s" % (method, url, body))
    try:
        response = sess.request(url, method, json=body, headers=HEADERS)
    except ks_exceptions.ClientException as e:
        raise exceptions.RequestFailed(url=url, reason=e)
    if debug:
        LOG.info("%s %s" % (response.status_code, response.text))
    return response.text


def create_member(sess, endpoint, image_id, project_id, debug=False):
    """Share the image with the project, returns the raw response body."""

    LOG.info("share image %s with project %s" % (image_id, project_id))
    return _request(sess, "POST", members_url(endpoint, image_id),
                    {"member": project_id}, debug)


def accept_member(sess, endpoint, image_id, project_id, debug=False):
    LOG.info("accept image %s for project %s" % (image_id, project_id))
    return _request(sess, "PUT", members_url(endpoint, image_id, project_id),
                    {"status": "accepted"}, debug)
