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

import json
import time
import uuid

from keystoneauth1 import exceptions as ks_exceptions
from oslo_log import log

from image_tools import config
from image_tools import exceptions

LOG = log.getLogger(__name__)

IMPORT_URL = "https://vmimport.%(region)s.%(domain)s/v1/imageimport"

SUCCEEDED = "succeeded"
FAILED = "failed"
UNKNOWN = "unknown"
TERMINAL_STATES = (SUCCEEDED, FAILED)


class ImportJob(object):
    """An uploaded object that should be registered as an image."""

    def __init__(self, name, location, os_type, image_id=None, checksum=None,
                 min_ram=None, min_disk=None):
        self.image_id = image_id or str(uuid.uuid4())
        self.name = name
        self.location = location
        self.os_type = os_type
        self.checksum = checksum
        self.min_ram = min_ram
        self.min_disk = min_disk
        self.import_id = None


class ImportStatus(object):

    def __init__(self, body):
        self.body = body
        self.status = body.get("import_status") or UNKNOWN
        try:
            self.progress = int(body["progress"])
        except (KeyError, TypeError, ValueError):
            self.progress = None

    @property
    def terminal(self):
        return self.status in TERMINAL_STATES

    @property
    def succeeded(self):
        return self.status == SUCCEEDED

    def __str__(self):
        if self.progress is None:
            return "%s" % self.status
        return "%s (%d%%)" % (self.status, self.progress)


class ImageImporter(object):
    """Registers uploaded objects with the import backend of a region.

    The backend works asynchronously: a submit returns an import id that is
    polled on a fixed interval until the import succeeded or failed, or until
    max_polls status checks were done.
    """

    def __init__(self, sess, region, catalog=None, domain='citycloud.com',
                 interval=10, max_polls=90, warmup=30, debug=False,
                 sleep=time.sleep):
        self.session = sess
        self.region = region
        self.catalog = catalog or config.RegionCatalog()
        self.url = IMPORT_URL % {"region": region, "domain": domain}
        self.interval = interval
        self.max_polls = max_polls
        self.warmup = warmup
        self.debug = debug
        self.sleep = sleep

    def build_payload(self, job, credentials):
        payload = {
            "id": job.image_id,
            "name": job.name,
            "location": job.location,
            "os_type": job.os_type
        }

        if self.catalog.needs_conversion(self.region):
            payload.update({
                "conversion": True,
                "disk_format": "raw",
                "user": credentials.username,
                "password": credentials.password,
                "domain": credentials.domain
            })

        for key in ["checksum", "min_ram", "min_disk"]:
            value = getattr(job, key)
            if value is not None:
                payload[key] = value

        return payload

    def _dump(self, title, data):
        if not self.debug:
            return
        if isinstance(data, dict) and "password" in data:
            data = dict(data, password="***")
        LOG.info("%s: %s" % (title, json.dumps(data, indent=2, sort_keys=True)))

    def submit(self, job, credentials):
        payload = self.build_payload(job, credentials)
        self._dump("submit payload", payload)

        LOG.info("submit image %s (%s) to %s" % (job.name, job.image_id,
                                                 self.url))
        # the payload may carry the user's password
        try:
            response = self.session.post(self.url, json=payload,
                                         authenticated=True, log=False)
            body = response.json()
        except ks_exceptions.ClientException as e:
            raise exceptions.SubmitError(image_id=job.image_id, reason=e)
        except ValueError:
            raise exceptions.SubmitError(image_id=job.image_id,
                                         reason="response is not JSON")
        self._dump("submit response", body)

        if not isinstance(body, dict) or not body.get("import_id"):
            raise exceptions.SubmitError(image_id=job.image_id,
                                         reason="import_id missing in response")

        job.import_id = body["import_id"]
        LOG.info("image %s submitted as import %s" % (job.image_id,
                                                      job.import_id))
        return job.import_id

    def get_status(self, import_id):
        url = "%s/%s/status" % (self.url, import_id)
        try:
            response = self.session.get(url, authenticated=True)
            body = response.json()
        except ks_exceptions.ClientException as e:
            raise exceptions.PollError(import_id=import_id, reason=e)
        except ValueError:
            raise exceptions.PollError(import_id=import_id,
                                       reason="response is not JSON")
        self._dump("status response", body)

        if not isinstance(body, dict):
            raise exceptions.PollError(import_id=import_id,
                                       reason="response is not a JSON object")
        return ImportStatus(body)

    def wait(self, import_id):
        """Poll the import until it is terminal or max_polls is reached.

        The last status is returned in both cases, it is up to the caller
        to check whether it succeeded.
        """

        LOG.info("wait %d seconds for import %s" % (self.warmup, import_id))
        self.sleep(self.warmup)

        status = None
        for attempt in range(1, self.max_polls + 1):
            status = self.get_status(import_id)
            LOG.info("import %s: %s [%d/%d]" % (import_id, status, attempt,
                                                self.max_polls))
            if status.terminal:
                break
            if attempt < self.max_polls:
                self.sleep(self.interval)

        return status

    def run(self, job, credentials):
        import_id = self.submit(job, credentials)
        return self.wait(import_id)


def check_result(status, import_id):
    if status.succeeded:
        return status
    if status.status == FAILED:
        raise exceptions.ImportFailed(status, import_id=import_id)
    raise exceptions.ImportTimeout(status, import_id=import_id)
