import unittest

from skillmap_ai.ai_core.common.exceptions import ServiceUnavailable
from skillmap_ai.ai_core.common.retry_policy import RetryPolicy, is_service_unavailable


class _StatusError(Exception):
    def __init__(self, code: int) -> None:
        super().__init__(f"status {code}")
        self.code = code


class RetryPolicyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps = []
        self.policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=self.sleeps.append)

    def test_transient_error_exhausts_attempts_with_doubling_backoff(self) -> None:
        """
        503 오류만 계속되면 정확히 3번 시도하고 1초, 2초를 기다리는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        attempts = []

        def always_unavailable():
            attempts.append(1)
            raise ServiceUnavailable("503")

        with self.assertRaises(ServiceUnavailable):
            self.policy.call(always_unavailable)
        self.assertEqual(len(attempts), 3)
        self.assertEqual(self.sleeps, [1.0, 2.0])

    def test_non_transient_error_is_not_retried(self) -> None:
        attempts = []

        def bad_request():
            attempts.append(1)
            raise _StatusError(400)

        with self.assertRaises(_StatusError):
            self.policy.call(bad_request)
        self.assertEqual(len(attempts), 1)
        self.assertEqual(self.sleeps, [])

    def test_recovers_after_transient_error(self) -> None:
        replies = [ServiceUnavailable("503"), "ok"]

        def flaky():
            reply = replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply

        self.assertEqual(self.policy.call(flaky), "ok")
        self.assertEqual(self.sleeps, [1.0])

    def test_predicate_reads_status_attributes(self) -> None:
        self.assertTrue(is_service_unavailable(_StatusError(503)))
        self.assertFalse(is_service_unavailable(_StatusError(429)))
        self.assertFalse(is_service_unavailable(ValueError("boom")))

    def test_delay_for_doubles(self) -> None:
        policy = RetryPolicy(base_delay=0.5)
        self.assertEqual([policy.delay_for(n) for n in (1, 2, 3)], [0.5, 1.0, 2.0])

    def test_rejects_invalid_bounds(self) -> None:
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)


if __name__ == "__main__":
    unittest.main()
