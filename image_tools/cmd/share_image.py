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

import sys

from oslo_config import cfg
from oslo_log import log

from image_tools import auth
from image_tools import config
from image_tools import exceptions
from image_tools import membership

PROJECT_NAME = 'share-image'
LOG = log.getLogger(PROJECT_NAME)

opts = [
    cfg.StrOpt('image', positional=True, required=True,
               help='Image to share'),
    cfg.StrOpt('target', positional=True, required=True,
               help='Target project')
]


def share(conf):
    endpoint = config.get_env("OS_IMAGE_URL")
    sess = auth.get_session(endpoint)
    return membership.create_member(sess, endpoint, conf.image, conf.target,
                                    debug=conf.debug)


def main(argv=None):
    conf = cfg.ConfigOpts()
    conf.register_cli_opts(opts)
    log.register_options(conf)
    conf(sys.argv[1:] if argv is None else argv, project=PROJECT_NAME)
    log.setup(conf, PROJECT_NAME)

    try:
        print(share(conf))
    except exceptions.ImageToolsException as e:
        LOG.error(e)
        sys.exit(e.exit_code)


if __name__ == '__main__':
    main()
