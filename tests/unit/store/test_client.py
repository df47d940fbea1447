"""Tests for the KV v2 HTTP client: URLs, status mapping, and decoding."""

from __future__ import annotations

import json
import unittest
from unittest import mock

import requests

from lazyvault.errors import AccessDenied, DecodeFailed, RequestFailed
from lazyvault.store import Entry, Secret, VaultClient


def _response(status: int, body: object = None, *, raw: str | None = None, reason: str = "") -> mock.Mock:
    response = mock.Mock(spec=requests.Response)
    response.status_code = status
    response.reason = reason or {200: "OK", 403: "Forbidden", 404: "Not Found", 500: "Internal Server Error"}.get(status, "")
    response.text = raw if raw is not None else json.dumps(body)
    if raw is not None:
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", raw, 0)
    else:
        response.json.return_value = body
    return response


class _FakeSession:
    def __init__(self, *responses: object) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict | None, float]] = []
        self._responses = list(responses)

    def get(self, url: str, params: dict | None = None, timeout: float = 0.0):
        self.calls.append((url, params, timeout))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(session: _FakeSession) -> VaultClient:
    return VaultClient("http://vault:8200/", "tok", timeout=3.0, session_factory=lambda: session)


class ListDirTests(unittest.TestCase):
    def test_lists_keys_and_marks_containers(self) -> None:
        session = _FakeSession(_response(200, {"data": {"keys": ["bar/", "foo"]}}))

        entries = _client(session).list_dir("secret", "/")

        self.assertEqual(entries, [Entry("bar/", True), Entry("foo", False)])
        self.assertEqual(session.calls, [("http://vault:8200/v1/secret/metadata/", {"list": "true"}, 3.0)])
        self.assertEqual(session.headers, {"X-Vault-Token": "tok", "Accept": "application/json"})

    def test_forbidden_raises_access_denied(self) -> None:
        with self.assertRaises(AccessDenied):
            _client(_FakeSession(_response(403, {"errors": ["permission denied"]}))).list_dir("secret", "/ops/")

    def test_other_status_raises_request_failed(self) -> None:
        with self.assertRaises(RequestFailed) as ctx:
            _client(_FakeSession(_response(500, {"errors": []}))).list_dir("secret", "/")
        self.assertIn("500", str(ctx.exception))

    def test_transport_error_raises_request_failed(self) -> None:
        session = _FakeSession(requests.ConnectionError("refused"))
        with self.assertRaises(RequestFailed):
            _client(session).list_dir("secret", "/")

    def test_malformed_body_raises_decode_failed(self) -> None:
        with self.assertRaises(DecodeFailed):
            _client(_FakeSession(_response(200, raw="<html>"))).list_dir("secret", "/")
        with self.assertRaises(DecodeFailed):
            _client(_FakeSession(_response(200, {"data": {"keys": "nope"}}))).list_dir("secret", "/")

    def test_missing_keys_is_empty(self) -> None:
        self.assertEqual(_client(_FakeSession(_response(200, {"data": None}))).list_dir("secret", "/"), [])


class GetSecretTests(unittest.TestCase):
    def test_reads_data_and_metadata(self) -> None:
        body = {"data": {"data": {"c": "d"}, "metadata": {"version": 2}}}
        session = _FakeSession(_response(200, body))

        secret = _client(session).get_secret("secret", "/bar/baz")

        self.assertEqual(secret.data, {"c": "d"})
        self.assertEqual(secret.metadata, {"version": 2})
        self.assertEqual(secret.url, "http://vault:8200/ui/vault/secrets/secret/show/bar/baz")
        self.assertEqual(session.calls[0][0], "http://vault:8200/v1/secret/data/bar/baz")

    def test_not_found_with_metadata_is_a_valid_secret(self) -> None:
        body = {"data": {"data": None, "metadata": {"deletion_time": "2024-01-01T00:00:00Z"}}}

        secret = _client(_FakeSession(_response(404, body))).get_secret("secret", "/gone")

        self.assertIsNone(secret.data)
        self.assertEqual(secret.metadata, {"deletion_time": "2024-01-01T00:00:00Z"})

    def test_not_found_without_payload_is_an_error(self) -> None:
        with self.assertRaises(RequestFailed):
            _client(_FakeSession(_response(404, {"errors": []}))).get_secret("secret", "/missing")

    def test_error_status_with_unparsable_body_is_request_failure(self) -> None:
        with self.assertRaises(RequestFailed):
            _client(_FakeSession(_response(502, raw="bad gateway"))).get_secret("secret", "/x")

    def test_ok_status_with_unparsable_body_is_decode_failure(self) -> None:
        with self.assertRaises(DecodeFailed):
            _client(_FakeSession(_response(200, raw="{"))).get_secret("secret", "/x")

    def test_wrong_shapes_are_decode_failures(self) -> None:
        with self.assertRaises(DecodeFailed):
            _client(_FakeSession(_response(200, {"data": {"data": ["x"]}}))).get_secret("secret", "/x")


class ListMountsTests(unittest.TestCase):
    def test_returns_sorted_kv_mounts(self) -> None:
        body = {
            "data": {
                "secret": {
                    "secret3/": {"type": "kv"},
                    "cubbyhole/": {"type": "cubbyhole"},
                    "secret/": {"type": "kv"},
                }
            }
        }
        session = _FakeSession(_response(200, body))

        self.assertEqual(_client(session).list_mounts(), ["secret", "secret3"])
        self.assertEqual(session.calls[0][0], "http://vault:8200/v1/sys/internal/ui/mounts")

    def test_bad_shape_raises_decode_failed(self) -> None:
        with self.assertRaises(DecodeFailed):
            _client(_FakeSession(_response(200, {"data": {}}))).list_mounts()


class SecretDocumentTests(unittest.TestCase):
    def test_to_json_uses_nested_data_envelope(self) -> None:
        secret = Secret(data={"c": "d"}, metadata=None, url="http://vault/ui")

        self.assertEqual(
            json.loads(secret.to_json()),
            {"url": "http://vault/ui", "data": {"data": {"c": "d"}, "metadata": None}},
        )
        self.assertIn('\n  "data": {', secret.to_json())


if __name__ == "__main__":
    unittest.main()
