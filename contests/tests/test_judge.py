import base64
from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from contests import judge


def b64(value):
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


@override_settings(JUDGE0_API_KEY="")
class MockExecutionTests(SimpleTestCase):
    def test_without_api_key_returns_canned_output(self):
        with mock.patch("contests.judge.SESSION.post") as post:
            result = judge.execute_code("print(1)", "python")

        post.assert_not_called()
        self.assertEqual(result.output, judge.MOCK_OUTPUT)
        self.assertEqual(result.execution_time, 50.0)
        self.assertEqual(result.error, "")


@override_settings(JUDGE0_API_KEY="secret", JUDGE0_HOST="judge.example.com", JUDGE0_TIMEOUT=7)
class Judge0ClientTests(SimpleTestCase):
    def test_request_payload_and_decoding(self):
        payload = {
            "stdout": b64("3\n"),
            "stderr": None,
            "compile_output": None,
            "time": "0.042",
            "memory": 2048,
            "status": {"id": 3, "description": "Accepted"},
        }
        with mock.patch("contests.judge.SESSION.post", return_value=FakeResponse(payload)) as post:
            result = judge.execute_code("print(sum(map(int, input().split())))", "python", "1 2", time_limit=2)

        args, kwargs = post.call_args
        self.assertEqual(args[0], "https://judge.example.com/submissions")
        self.assertEqual(kwargs["params"], {"base64_encoded": "true", "wait": "true"})
        self.assertEqual(kwargs["timeout"], 7)
        self.assertEqual(kwargs["headers"]["X-RapidAPI-Key"], "secret")
        self.assertEqual(kwargs["json"]["language_id"], 71)
        self.assertEqual(kwargs["json"]["stdin"], b64("1 2"))
        self.assertEqual(kwargs["json"]["cpu_time_limit"], 2)
        self.assertEqual(kwargs["json"]["memory_limit"], judge.DEFAULT_MEMORY_LIMIT * 1024)

        self.assertEqual(result.output, "3\n")
        self.assertAlmostEqual(result.execution_time, 42.0)
        self.assertEqual(result.memory_used, 2.0)
        self.assertFalse(result.timed_out or result.crashed or result.failed_to_compile)

    def test_compile_error_is_reported(self):
        payload = {"compile_output": b64("error: expected ';'"), "status": {"id": 6}}
        with mock.patch("contests.judge.SESSION.post", return_value=FakeResponse(payload)):
            result = judge.execute_code("int main(){}", "cpp")

        self.assertTrue(result.failed_to_compile)
        self.assertEqual(result.error, "error: expected ';'")
        self.assertEqual(result.output, "")

    def test_status_ids(self):
        self.assertTrue(judge.ExecutionResult(status_id=5).timed_out)
        self.assertTrue(judge.ExecutionResult(status_id=7).crashed)
        self.assertTrue(judge.ExecutionResult(status_id=12).crashed)
        self.assertFalse(judge.ExecutionResult(status_id=13).crashed)

    def test_network_failure_returns_unavailable(self):
        with mock.patch("contests.judge.SESSION.post", side_effect=requests.ConnectionError("down")):
            result = judge.execute_code("print(1)", "python")

        self.assertEqual(result.error, judge.UNAVAILABLE_MESSAGE)

    def test_http_error_returns_unavailable(self):
        with mock.patch("contests.judge.SESSION.post", return_value=FakeResponse({}, status_code=429)):
            result = judge.execute_code("print(1)", "python")

        self.assertEqual(result.error, judge.UNAVAILABLE_MESSAGE)

    def test_unsupported_language(self):
        with mock.patch("contests.judge.SESSION.post") as post:
            result = judge.execute_code("puts 1", "ruby")

        post.assert_not_called()
        self.assertEqual(result.error, "Unsupported language: ruby")

    def test_undecodable_output_returns_unavailable(self):
        payload = {"stdout": "!!notbase64", "status": {"id": 3}}
        with mock.patch("contests.judge.SESSION.post", return_value=FakeResponse(payload)):
            with self.assertLogs("contests.judge", level="WARNING"):
                result = judge.execute_code("print(1)", "python")

        self.assertEqual(result.error, judge.UNAVAILABLE_MESSAGE)
        self.assertIsNone(result.status_id)
        self.assertTrue(result.unavailable)

    def test_unavailable_flag(self):
        self.assertTrue(judge.ExecutionResult(error=judge.UNAVAILABLE_MESSAGE).unavailable)
        self.assertFalse(judge.ExecutionResult(error="Traceback", status_id=11).unavailable)
        self.assertFalse(judge.ExecutionResult(output=judge.MOCK_OUTPUT).unavailable)
