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
import sys
import time

from oslo_config import cfg
from oslo_log import log

from image_tools import auth
from image_tools import config
from image_tools import exceptions
from image_tools import importer
from image_tools import storage

PROJECT_NAME = 'import-image'
LOG = log.getLogger(PROJECT_NAME)


def run(conf, sleep=time.sleep):
    region = config.get_env("OS_REGION_NAME")
    credentials = auth.Credentials.from_env()
    catalog = config.RegionCatalog.from_file(conf.regions_file)

    sess = auth.password_session(credentials)
    project_id = auth.get_project_id(sess)

    conn = storage.connect(sess, region)
    location = storage.upload(conn, conf.filename, conf.container, project_id)

    job = importer.ImportJob(
        name=conf.image,
        location=location,
        os_type=conf.os_type,
        image_id=conf.image_id,
        checksum=conf.checksum,
        min_ram=conf.min_ram,
        min_disk=conf.min_disk
    )

    image_importer = importer.ImageImporter(
        sess, region, catalog,
        domain=conf.provider_domain,
        interval=conf.poll_interval,
        max_polls=conf.max_polls,
        warmup=conf.warmup,
        debug=conf.debug,
        sleep=sleep
    )
    status = image_importer.run(job, credentials)
    return importer.check_result(status, job.import_id)


def main(argv=None):
    conf = cfg.ConfigOpts()
    conf.register_cli_opts(config.import_opts)
    log.register_options(conf)
    conf(sys.argv[1:] if argv is None else argv, project=PROJECT_NAME)
    log.setup(conf, PROJECT_NAME)

    try:
        status = run(conf)
    except (exceptions.ImportFailed, exceptions.ImportTimeout) as e:
        LOG.error(e)
        print(json.dumps(e.status.body, indent=2, sort_keys=True))
        sys.exit(e.exit_code)
    except exceptions.ImageToolsException as e:
        LOG.error(e)
        sys.exit(e.exit_code)

    LOG.info("image %s imported" % status.body.get("id"))
    print(json.dumps(status.body, indent=2, sort_keys=True))


if __name__ == '__main__':
    main()
