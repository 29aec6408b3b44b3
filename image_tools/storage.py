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

import os

from openstack import connection
from openstack import exceptions as sdk_exceptions
from oslo_log import log

from image_tools import exceptions

LOG = log.getLogger(__name__)


def object_location(project_id, container, name):
    return "/v1/AUTH_%s/%s/%s" % (project_id, container, name)


def connect(sess, region):
    return connection.Connection(session=sess, region_name=region)


def upload(conn, filename, container, project_id):
    """Upload a local file and return its location in the object storage."""

    name = os.path.basename(filename)
    if not os.path.isfile(filename):
        raise exceptions.UploadFailed(filename=filename, container=container,
                                      reason="file not found")

    try:
        if not conn.get_container(container):
            LOG.info("create container %s" % container)
            conn.create_container(container)

        LOG.info("upload %s to container %s" % (filename, container))
        conn.create_object(container, name, filename=filename)
    except sdk_exceptions.SDKException as e:
        raise exceptions.UploadFailed(filename=filename, container=container,
                                      reason=e)

    return object_location(project_id, container, name)
