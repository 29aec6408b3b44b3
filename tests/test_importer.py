"""Tests for submitting and polling image imports."""

import logging

import pytest

from image_tools import config
from image_tools import exceptions
from image_tools import importer

SUBMIT_URL = "https://vmimport.%s.citycloud.com/v1/imageimport"
LOCATION = "/v1/AUTH_proj-1/images/disk.qcow2"

CONVERSION_FIELDS = ["conversion", "disk_format", "user", "password", "domain"]


class Sleeper(object):

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleeper():
    return Sleeper()


def make_importer(sess, region="Kna1", **kwargs):
    kwargs.setdefault("interval", 5)
    kwargs.setdefault("max_polls", 4)
    kwargs.setdefault("warmup", 20)
    return importer.ImageImporter(sess, region, config.RegionCatalog(),
                                  **kwargs)


def make_job(**kwargs):
    return importer.ImportJob("debian", LOCATION, "linux", image_id="img-1",
                              **kwargs)


def status_responses(*states):
    return [{"json": {"import_status": state}} for state in states]


@pytest.mark.parametrize("region", ["Kna1", "Lon1", "Tky1"])
def test_payload_without_conversion(token_session, credentials, region):
    payload = make_importer(token_session, region).build_payload(
        make_job(), credentials)

    assert payload == {
        "id": "img-1",
        "name": "debian",
        "location": LOCATION,
        "os_type": "linux",
    }
    for key in CONVERSION_FIELDS:
        assert key not in payload


@pytest.mark.parametrize("region", ["Fra1", "Sto2"])
def test_payload_with_conversion(token_session, credentials, region):
    payload = make_importer(token_session, region).build_payload(
        make_job(), credentials)

    assert payload["conversion"] is True
    assert payload["disk_format"] == "raw"
    assert payload["user"] == "demo"
    assert payload["password"] == "secret"
    assert payload["domain"] == "Default"


def test_payload_optional_fields(token_session, credentials):
    image_importer = make_importer(token_session)

    payload = image_importer.build_payload(
        make_job(checksum="abc", min_ram=512, min_disk=0), credentials)
    assert payload["checksum"] == "abc"
    assert payload["min_ram"] == 512
    assert payload["min_disk"] == 0

    payload = image_importer.build_payload(make_job(min_ram=1024),
                                           credentials)
    assert payload["min_ram"] == 1024
    assert "checksum" not in payload
    assert "min_disk" not in payload


def test_job_generates_image_id():
    first = importer.ImportJob("debian", LOCATION, "linux")
    second = importer.ImportJob("debian", LOCATION, "linux")
    assert first.image_id != second.image_id


def test_submit(requests_mock, token_session, credentials):
    requests_mock.post(SUBMIT_URL % "Kna1", json={"import_id": "imp-1"})
    job = make_job()

    import_id = make_importer(token_session).submit(job, credentials)

    assert import_id == "imp-1"
    assert job.import_id == "imp-1"
    assert requests_mock.last_request.json()["id"] == "img-1"
    assert requests_mock.last_request.headers["X-Auth-Token"] == "tok"


@pytest.mark.parametrize("body", [{"error": "quota"}, {"import_id": None},
                                  {"import_id": ""}])
def test_submit_without_import_id(requests_mock, token_session, credentials,
                                  sleeper, body):
    requests_mock.post(SUBMIT_URL % "Kna1", json=body)
    image_importer = make_importer(token_session, sleep=sleeper)

    with pytest.raises(exceptions.SubmitError):
        image_importer.run(make_job(), credentials)
    assert requests_mock.call_count == 1
    assert sleeper.calls == []


def test_submit_http_error(requests_mock, token_session, credentials):
    requests_mock.post(SUBMIT_URL % "Kna1", status_code=500)

    with pytest.raises(exceptions.SubmitError):
        make_importer(token_session).submit(make_job(), credentials)


def test_wait_until_succeeded(requests_mock, token_session, sleeper):
    status_url = SUBMIT_URL % "Kna1" + "/imp-1/status"
    responses = status_responses("queued", "queued")
    responses.append({"json": {"import_status": "succeeded", "progress": 100,
                               "id": "img-1", "name": "debian",
                               "min_ram": 0, "min_disk": 0}})
    requests_mock.get(status_url, responses)

    status = make_importer(token_session, sleep=sleeper).wait("imp-1")

    assert requests_mock.call_count == 3
    assert sleeper.calls == [20, 5, 5]
    assert status.succeeded
    assert status.progress == 100
    assert status.body["id"] == "img-1"


def test_wait_stops_on_failed(requests_mock, token_session, sleeper):
    requests_mock.get(SUBMIT_URL % "Kna1" + "/imp-1/status",
                      status_responses("queued", "failed", "succeeded"))

    status = make_importer(token_session, sleep=sleeper).wait("imp-1")

    assert requests_mock.call_count == 2
    assert status.status == "failed"
    with pytest.raises(exceptions.ImportFailed):
        importer.check_result(status, "imp-1")


def test_wait_exhausts_budget(requests_mock, token_session, sleeper):
    requests_mock.get(SUBMIT_URL % "Kna1" + "/imp-1/status",
                      json={"import_status": "queued", "progress": 10})

    status = make_importer(token_session, sleep=sleeper).wait("imp-1")

    assert requests_mock.call_count == 4
    assert sleeper.calls == [20, 5, 5, 5]
    assert status.status == "queued"
    assert not status.terminal
    with pytest.raises(exceptions.ImportTimeout) as e:
        importer.check_result(status, "imp-1")
    assert e.value.status is status


def test_wait_poll_error_is_fatal(requests_mock, token_session, sleeper):
    requests_mock.get(SUBMIT_URL % "Kna1" + "/imp-1/status",
                      [{"json": {"import_status": "queued"}},
                       {"status_code": 503}])

    with pytest.raises(exceptions.PollError):
        make_importer(token_session, sleep=sleeper).wait("imp-1")
    assert requests_mock.call_count == 2


def test_status_defaults():
    status = importer.ImportStatus({})
    assert status.status == "unknown"
    assert status.progress is None
    assert str(status) == "unknown"
    assert str(importer.ImportStatus({"import_status": "queued",
                                      "progress": "42"})) == "queued (42%)"


def test_unknown_status_is_not_success():
    with pytest.raises(exceptions.ImportTimeout):
        importer.check_result(importer.ImportStatus({}), "imp-1")


def test_status_null_is_unknown(requests_mock, token_session, sleeper):
    requests_mock.get(SUBMIT_URL % "Kna1" + "/imp-1/status",
                      json={"import_status": None})

    status = make_importer(token_session, max_polls=1,
                           sleep=sleeper).wait("imp-1")

    assert status.status == "unknown"
    assert not status.terminal
    with pytest.raises(exceptions.ImportTimeout):
        importer.check_result(status, "imp-1")


@pytest.mark.parametrize("body", [["queued"], "queued"])
def test_status_not_an_object(requests_mock, token_session, sleeper, body):
    requests_mock.get(SUBMIT_URL % "Kna1" + "/imp-1/status", json=body)

    with pytest.raises(exceptions.PollError) as e:
        make_importer(token_session, sleep=sleeper).wait("imp-1")
    assert "not a JSON object" in str(e.value)
    assert requests_mock.call_count == 1


def test_debug_dump_masks_password(requests_mock, token_session, credentials,
                                   caplog):
    caplog.set_level(logging.INFO, logger="image_tools.importer")
    requests_mock.post(SUBMIT_URL % "Fra1", json={"import_id": "imp-1"})

    make_importer(token_session, "Fra1", debug=True).submit(make_job(),
                                                            credentials)

    assert requests_mock.last_request.json()["password"] == "secret"
    assert '"password": "***"' in caplog.text
    assert "secret" not in caplog.text
