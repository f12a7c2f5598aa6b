"""Tests for clone_request."""

import requests

from authtransport.transport.request import clone_request


def _prepare(**kwargs):
    defaults = {"method": "POST", "url": "https://api.example.com/items", "json": {"a": 1}}
    defaults.update(kwargs)
    return requests.Request(**defaults).prepare()


class TestCloneRequest:
    def test_clone_is_new_object(self):
        original = _prepare()
        clone = clone_request(original)

        assert clone is not original
        assert clone.headers is not original.headers

    def test_copies_fields(self):
        original = _prepare(headers={"X-Trace": "t1"})
        clone = clone_request(original)

        assert clone.method == "POST"
        assert clone.url == "https://api.example.com/items"
        assert clone.body == original.body
        assert clone.headers["X-Trace"] == "t1"

    def test_setting_header_on_clone_leaves_original(self):
        original = _prepare(headers={"Authorization": "Basic old"})
        clone = clone_request(original)

        clone.headers["Authorization"] = "Bearer new"
        clone.headers["X-Extra"] = "1"

        assert original.headers["Authorization"] == "Basic old"
        assert "X-Extra" not in original.headers

    def test_headers_stay_case_insensitive(self):
        clone = clone_request(_prepare(headers={"Content-Type": "application/json"}))
        assert clone.headers["content-type"] == "application/json"

    def test_request_without_headers(self):
        original = requests.PreparedRequest()
        original.method = "GET"
        original.url = "https://api.example.com/"

        clone = clone_request(original)
        clone.headers["Authorization"] = "Bearer x"

        assert original.headers is None
