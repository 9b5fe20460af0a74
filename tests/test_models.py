# File: tests/test_models.py
import json

import pytest

from pageripper.errors import GENERIC_TARGET_MESSAGE, FetchError, InvalidTargetError
from pageripper.models import RELATIVE_TARGET_MESSAGE, RipReport, ScrapeTarget


@pytest.mark.parametrize(
    "raw",
    ["https://example.com", "http://localhost:8080/page?x=1", "https://sub.site.test/a/b/"],
)
def test_absolute_targets_are_accepted(raw):
    target = ScrapeTarget.parse(raw)
    assert str(target) == raw


@pytest.mark.parametrize(
    "raw,message",
    [
        (None, GENERIC_TARGET_MESSAGE),
        ("", GENERIC_TARGET_MESSAGE),
        ("example.com", GENERIC_TARGET_MESSAGE),
        ("mailto:someone@example.com", GENERIC_TARGET_MESSAGE),
        ("http://[::1", GENERIC_TARGET_MESSAGE),
        ("/example.html", RELATIVE_TARGET_MESSAGE),
    ],
)
def test_invalid_targets_are_rejected(raw, message):
    with pytest.raises(InvalidTargetError) as excinfo:
        ScrapeTarget.parse(raw)
    assert excinfo.value.message == message


def test_target_hostname():
    assert ScrapeTarget.parse("https://Example.COM:443/x").hostname == "example.com"


def test_fetch_error_message():
    assert FetchError("https://down.test").message == "Could not retrieve URL: https://down.test"


def test_report_json_uses_service_keys():
    report = RipReport(links=["https://a.com"], hostnames={"a.com": 1})
    data = json.loads(report.json())
    assert data == {"links": ["https://a.com"], "hostnames": {"a.com": 1}, "ripcount": 0}
    assert "\n" in report.json(pretty=True)
