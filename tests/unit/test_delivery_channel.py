"""Unit tests for the delivery channel, transport and ledger."""

from unittest.mock import Mock

import pytest
import requests
import simpy

from rumcollector.delivery import (
    DeliveryChannel,
    DeliveryLedger,
    HttpTransport,
    resolve_endpoint,
)
from rumcollector.reports import LoadTimingReport
from rumcollector.session import SessionContext

ENDPOINT = "https://collector.test/rum"


def make_report(name="TTFB", value=100.0):
    context = SessionContext(
        session_id="_abc",
        pathname="/",
        screen_width=800,
        screen_height=600,
        browser_string="UA",
    )
    return LoadTimingReport(name=name, value=value, delta=value, context=context)


class TestDeliveryChannel:
    """Test fire-and-forget delivery on the page loop."""

    def test_deliver_does_not_transmit_synchronously(self):
        env = simpy.Environment()
        transport = Mock()
        transport.put.return_value = 200
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)

        channel.deliver(make_report())

        transport.put.assert_not_called()
        env.run()
        transport.put.assert_called_once()

    def test_body_envelope(self):
        env = simpy.Environment()
        transport = Mock()
        transport.put.return_value = 204
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)
        report = make_report()

        channel.deliver(report)
        env.run()

        url, body = transport.put.call_args[0]
        assert url == ENDPOINT
        assert body == {"metric": report.to_dict()}
        record = channel.ledger.records[0]
        assert record.status == "SUCCESS"
        assert record.status_code == 204
        assert record.attempts == 1

    def test_failure_is_logged_not_raised(self, caplog):
        env = simpy.Environment()
        transport = Mock()
        transport.put.side_effect = requests.ConnectionError("unreachable")
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)

        channel.deliver(make_report("TTFB"))
        channel.deliver(make_report("LCP"))
        env.run()

        assert transport.put.call_count == 2
        assert [r.status for r in channel.ledger.records] == ["FAILED", "FAILED"]
        assert "unreachable" in channel.ledger.records[0].error
        assert "failed" in caplog.text

    def test_non_requests_error_does_not_stop_loop(self):
        """Errors from a custom transport are recorded; later reports still go out."""
        env = simpy.Environment()
        transport = Mock()
        transport.put.side_effect = [ConnectionRefusedError("refused"), 200]
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)

        channel.deliver(make_report("TTFB"))
        channel.deliver(make_report("LCP"))
        env.run()

        first, second = channel.ledger.records
        assert transport.put.call_count == 2
        assert first.status == "FAILED"
        assert first.status_code is None
        assert "refused" in first.error
        assert second.status == "SUCCESS"

    def test_http_error_status_recorded(self):
        env = simpy.Environment()
        response = Mock(status_code=503)
        transport = Mock()
        transport.put.side_effect = requests.HTTPError("unavailable", response=response)
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)

        channel.deliver(make_report())
        env.run()

        assert channel.ledger.records[0].status_code == 503

    def test_no_retry_by_default(self):
        env = simpy.Environment()
        transport = Mock()
        transport.put.side_effect = requests.Timeout("slow")
        channel = DeliveryChannel(env, ENDPOINT, transport=transport)

        channel.deliver(make_report())
        env.run()

        assert transport.put.call_count == 1

    def test_bounded_retry(self):
        env = simpy.Environment()
        transport = Mock()
        transport.put.side_effect = [requests.ConnectionError("down"), 200]
        channel = DeliveryChannel(env, ENDPOINT, transport=transport, retry_attempts=2)

        channel.deliver(make_report())
        env.run()

        record = channel.ledger.records[0]
        assert transport.put.call_count == 2
        assert record.attempts == 2
        assert record.status == "SUCCESS"
        assert record.error is None

    def test_concurrent_deliveries_are_independent(self):
        """A slow delivery does not hold back later ones."""
        env = simpy.Environment()
        transport = Mock()
        transport.put.return_value = 200
        channel = DeliveryChannel(env, ENDPOINT, transport=transport, delivery_latency_s=1.0)

        def producer():
            channel.deliver(make_report("TTFB"))
            yield env.timeout(0.5)
            channel.deliver(make_report("LCP"))

        env.process(producer())
        env.run()

        completions = [r.completed_at_s for r in channel.ledger.records]
        assert completions == [1.0, 1.5]
        assert all(r.dispatched_at_s + 1.0 == r.completed_at_s for r in channel.ledger.records)

    def test_requires_endpoint(self):
        with pytest.raises(ValueError):
            DeliveryChannel(simpy.Environment(), "")

    def test_rejects_negative_retries(self):
        with pytest.raises(ValueError):
            DeliveryChannel(simpy.Environment(), ENDPOINT, transport=Mock(), retry_attempts=-1)


class TestHttpTransport:

    def test_put_json(self):
        session = Mock()
        session.put.return_value.status_code = 200
        transport = HttpTransport(session=session)

        status = transport.put(ENDPOINT, {"metric": {"name": "CLS"}})

        assert status == 200
        session.put.assert_called_once_with(ENDPOINT, json={"metric": {"name": "CLS"}}, timeout=None)
        session.put.return_value.raise_for_status.assert_called_once()

    def test_non_success_raises(self):
        session = Mock()
        session.put.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        transport = HttpTransport(session=session, timeout_s=5)

        with pytest.raises(requests.HTTPError):
            transport.put(ENDPOINT, {})
        assert session.put.call_args.kwargs["timeout"] == 5


class TestResolveEndpoint:

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("RUM_ENDPOINT", "https://env.test")
        assert resolve_endpoint("https://explicit.test") == "https://explicit.test"

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("RUM_ENDPOINT", "https://env.test")
        assert resolve_endpoint() == "https://env.test"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("RUM_ENDPOINT", raising=False)
        assert resolve_endpoint() is None


class TestDeliveryLedger:

    def test_summary(self):
        ledger = DeliveryLedger()
        ok = ledger.log_dispatch("CLS", 1.0)
        bad = ledger.log_dispatch("LCP", 2.0)
        ledger.log_dispatch("FID", 3.0)
        ledger.log_success(ok, 1.1, 200)
        ledger.log_failure(bad, 2.1, "boom", status_code=503)

        summary = ledger.generate_summary_report()

        assert summary["deliveries"] == {
            "total": 3,
            "successful": 1,
            "failed": 1,
            "pending": 1,
            "success_rate": pytest.approx(1 / 3),
        }
        assert summary["by_metric"] == {"CLS": 1, "LCP": 1, "FID": 1}

    def test_dataframe(self):
        ledger = DeliveryLedger()
        assert ledger.get_deliveries_df().empty

        ledger.log_dispatch("TTFB", 0.2)
        df = ledger.get_deliveries_df()

        assert list(df["report_name"]) == ["TTFB"]
        assert list(df["status"]) == ["PENDING"]
