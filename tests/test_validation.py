import pytest

from tagtally.core.exceptions import FormatError, ContentError
from tagtally.utils.validation import validate_formatting, validate_content, validate_payload

from conftest import video_url


def test_valid_payload_returns_urls_in_order():
    urls = [video_url(3), video_url(1), video_url(2)]
    assert validate_payload({"api_key": "k", "urls": urls}) == urls


def test_empty_url_list_is_structurally_valid():
    assert validate_payload({"api_key": "k", "urls": []}) == []


@pytest.mark.parametrize("payload", [
    None,
    [],
    "urls",
    {"api_key": "k"},
    {"api_key": "k", "urls": "https://www.tiktokv.com/share/video/1"},
    {"api_key": "k", "urls": [1, 2]},
    {"api_key": "k", "urls": [video_url(1), None]},
])
def test_malformed_payload_raises_format_error(payload):
    with pytest.raises(FormatError):
        validate_payload(payload)


def test_strict_mode_rejects_extra_keys():
    payload = {"api_key": "k", "urls": [video_url(1)], "extra": True}
    assert not validate_formatting(payload, strict=True)
    assert validate_formatting(payload, strict=False)


def test_strict_mode_accepts_canonical_payload():
    assert validate_formatting({"api_key": "k", "urls": [video_url(1)]}, strict=True)


def test_single_bad_prefix_raises_content_error():
    urls = [video_url(1), "https://www.tiktok.com/@someone/video/2", video_url(3)]
    with pytest.raises(ContentError):
        validate_payload({"api_key": "k", "urls": urls})


def test_prefix_is_configurable():
    assert validate_content(["https://vm.example/abc"], prefix="https://vm.example/")
    assert not validate_content([video_url(1)], prefix="https://vm.example/")
