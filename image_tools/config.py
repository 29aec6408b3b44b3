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

from oslo_config import cfg
from oslo_log import log
import yaml

from image_tools import exceptions

LOG = log.getLogger(__name__)

# regions where the import backend converts the disk and needs the
# credentials of the uploading user
CONVERSION_REGIONS = ['Fra1', 'Sto2']

DOMAIN_VARIABLES = ['OS_USER_DOMAIN_NAME', 'OS_PROJECT_DOMAIN_NAME']

import_opts = [
    cfg.StrOpt('filename', positional=True, required=True,
               help='Local image file to upload'),
    cfg.StrOpt('image', positional=True, required=True,
               help='Name of the registered image'),
    cfg.StrOpt('container', default='images',
               help='Object storage container for the upload'),
    cfg.StrOpt('os-type', default='linux',
               help='Operating system type of the image'),
    cfg.StrOpt('image-id',
               help='Image ID to register, generated when not set'),
    cfg.StrOpt('checksum',
               help='MD5 checksum of the image file'),
    cfg.IntOpt('min-ram', min=0,
               help='Minimum RAM in MB required to boot the image'),
    cfg.IntOpt('min-disk', min=0,
               help='Minimum disk size in GB required to boot the image'),
    cfg.IntOpt('poll-interval', default=10, min=0,
               help='Seconds between two status checks'),
    cfg.IntOpt('max-polls', default=90, min=1,
               help='Maximum number of status checks'),
    cfg.IntOpt('warmup', default=30, min=0,
               help='Seconds to wait after the submit before the first '
                    'status check'),
    cfg.StrOpt('provider-domain', default='citycloud.com',
               help='Domain of the regional image import endpoints'),
    cfg.StrOpt('regions-file',
               help='YAML file listing the conversion regions'),
]


def get_env(name, default=None, required=True):
    value = os.environ.get(name) or default
    if not value:
        if required:
            raise exceptions.MissingEnvironment(name=name)
        return value
    return value.rstrip()


def get_domain_name():
    for name in DOMAIN_VARIABLES:
        if os.environ.get(name):
            return os.environ[name].rstrip()
    raise exceptions.MissingEnvironment(name=" or ".join(DOMAIN_VARIABLES))


class RegionCatalog(object):
    """Knows which regions need conversion parameters on import."""

    def __init__(self, conversion_regions=None):
        if conversion_regions is None:
            conversion_regions = CONVERSION_REGIONS
        self.conversion_regions = [r.lower() for r in conversion_regions]

    def needs_conversion(self, region):
        return region.lower() in self.conversion_regions

    @classmethod
    def from_file(cls, path):
        if not path:
            return cls()

        LOG.debug("load regions from %s" % path)
        try:
            with open(path, "r") as fp:
                data = yaml.safe_load(fp) or {}
        except (IOError, yaml.YAMLError) as e:
            raise exceptions.InvalidConfiguration(path=path, reason=e)

        if not isinstance(data, dict):
            raise exceptions.InvalidConfiguration(
                path=path, reason="expected a mapping at the top level")

        regions = data.get("conversion_regions")
        if regions is not None and not (
                isinstance(regions, list) and
                all(isinstance(r, str) for r in regions)):
            raise exceptions.InvalidConfiguration(
                path=path, reason="conversion_regions must be a list of names")
        return cls(regions)
