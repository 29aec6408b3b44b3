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


class ImageToolsException(Exception):
    """Base class for all errors reported by the command line utilities."""

    exit_code = 1
    message = "an unknown error occurred"

    def __init__(self, message=None, **kwargs):
        if message is None:
            message = self.message % kwargs
        super(ImageToolsException, self).__init__(message)
        self.kwargs = kwargs


class MissingEnvironment(ImageToolsException):
    message = "%(name)s not specified"


class AuthenticationFailed(ImageToolsException):
    message = "authentication failed: %(reason)s"


class InvalidConfiguration(ImageToolsException):
    message = "invalid configuration in %(path)s: %(reason)s"


class RequestFailed(ImageToolsException):
    message = "request to %(url)s failed: %(reason)s"


class UploadFailed(ImageToolsException):
    message = "upload of %(filename)s to container %(container)s failed: %(reason)s"


class SubmitError(ImageToolsException):
    message = "submit of image %(image_id)s failed: %(reason)s"


class PollError(ImageToolsException):
    message = "status check of import %(import_id)s failed: %(reason)s"


class ImportFailed(ImageToolsException):
    message = "import %(import_id)s failed"

    def __init__(self, status, **kwargs):
        super(ImportFailed, self).__init__(**kwargs)
        self.status = status


class ImportTimeout(ImageToolsException):
    message = "import %(import_id)s did not finish, last status %(status)s"

    def __init__(self, status, **kwargs):
        super(ImportTimeout, self).__init__(status=status.status, **kwargs)
        self.status = status
