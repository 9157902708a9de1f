"""Integration tests: replay full page sessions through the collector."""

import json
from unittest.mock import Mock, patch

import pandas as pd
import pytest
import requests
import yaml

from rumcollector.orchestration import RumCollector
from rumcollector.reports import report_from_dict
from rumcollector.utils.config_validator import ConfigurationError

ENDPOINT = "https://collector.test/rum"


def session_config():
    return {
        "collector": {
            "max_session_time_s": 30,
            "random_seed": 42,
            "delivery_latency_s": 0.25,
        },
        "page": {
            "innerWidth": 1280,
            "innerHeight": 720,
            "navigator": {"userAgent": "Mozilla/5.0 Integration"},
            "document": {
                "location": {"pathname": "/products/42"},
                "scripts": [
                    {"src": "https://shop.test/_next/main.js", "attributes": ["defer"]},
                    {},
                ],
            },
            "performance": {
                "marks": [{"name": "docStart", "startTime": -250}],
                "measures": [{"name": "Next.js-hydration", "duration": 31.0}],
            },
        },
        "emissions": [
            {"kind": "TTFB", "at_s": 0.25, "metric": {"value": 140, "delta": 140}},
            {"kind": "LCP", "at_s": 1.0, "metric": {"value": 1600, "delta": 1600, "entries": []}},
            {"kind": "FID", "at_s": 2.0, "metric": {"value": 9, "delta": 9}},
            {
                "kind": "CLS",
                "at_s": 12.0,
                "metric": {
                    "value": 0.3,
                    "delta": 0.3,
                    "entries": [
                        {"value": 0.005},
                        {
                            "value": 0.25,
                            "sources": [{
                                "node": {"classList": ["promo"], "parentElement": {"classList": ["main"]}},
                                "previousRect": {"height": 0, "width": 1280},
                                "currentRect": {"height": 250, "width": 1280},
                            }],
                        },
                        {"value": 0.045, "sources": [{"node": {"classList": ["footer"]}}]},
                    ],
                },
            },
        ],
    }


def sent_reports(transport):
    return [call.args[1]["metric"] for call in transport.put.call_args_list]


class TestRumCollector:
    """Test mounting and running a page session end to end."""

    def test_all_metrics_delivered(self):
        transport = Mock()
        transport.put.return_value = 200
        collector = RumCollector(session_config(), endpoint=ENDPOINT, transport=transport)

        summary = collector.run()

        assert summary["deliveries"]["total"] == 4
        assert summary["deliveries"]["successful"] == 4
        assert summary["by_metric"] == {"TTFB": 1, "LCP": 1, "FID": 1, "CLS": 1}
        assert summary["session"]["pathname"] == "/products/42"
        assert summary["session"]["metrics_emitted"] == 4

        reports = sent_reports(transport)
        assert [r["name"] for r in reports] == ["TTFB", "LCP", "FID", "CLS"]
        assert all(url == ENDPOINT for url, _ in (c.args for c in transport.put.call_args_list))

    def test_reports_share_one_context(self):
        transport = Mock()
        transport.put.return_value = 200
        collector = RumCollector(session_config(), endpoint=ENDPOINT, transport=transport)

        collector.run()

        reports = sent_reports(transport)
        session_ids = {r["sessionID"] for r in reports}
        assert session_ids == {collector.context.session_id}
        assert all(r["screenWidth"] == 1280 and r["platform"] is None for r in reports)

    def test_report_contents(self):
        transport = Mock()
        transport.put.return_value = 200
        collector = RumCollector(session_config(), endpoint=ENDPOINT, transport=transport)

        collector.run()
        ttfb, lcp, fid, cls = sent_reports(transport)

        assert "size" not in lcp and "url" not in lcp
        assert fid["documentLoadTimeMS"] == 250
        assert fid["scriptsOnPage"] == 2
        assert set(fid["scripts"]) == {"main.js", "inlineScript0"}
        assert fid["hydrationMS"] == 31.0
        assert fid["beforeHydrationMS"] is None
        assert cls["shift_1"]["sourceElementClassLists"] == ["promo"]
        assert cls["shift_1"]["endHeight"] == 250
        assert cls["shift_2"]["sourceElementParentClassList"] == []
        assert "shift_3" not in cls

        for report in (ttfb, lcp, fid, cls):
            assert report_from_dict(report).to_dict() == report

    def test_malformed_shift_entry_isolated(self):
        """A shift entry without a value does not block the other metrics or entries."""
        config = session_config()
        cls_entries = config["emissions"][3]["metric"]["entries"]
        cls_entries.insert(0, {"sources": [{"node": {"classList": ["z"]}}]})
        transport = Mock()
        transport.put.return_value = 200

        summary = RumCollector(config, endpoint=ENDPOINT, transport=transport).run()

        assert summary["deliveries"]["successful"] == 4
        cls = sent_reports(transport)[3]
        assert cls["shift_1"]["sourceElementClassLists"] == ["promo"]
        assert cls["shift_2"]["value"] == 0.045

    def test_malformed_emission_dropped(self):
        config = session_config()
        config["emissions"][3]["metric"]["entries"] = "not-a-list"
        transport = Mock()
        transport.put.return_value = 200

        summary = RumCollector(config, endpoint=ENDPOINT, transport=transport).run()

        assert [r["name"] for r in sent_reports(transport)] == ["TTFB", "LCP", "FID"]
        assert summary["session"]["metrics_emitted"] == 3

    def test_seeded_session_id_is_reproducible(self):
        ids = []
        for _ in range(2):
            transport = Mock()
            transport.put.return_value = 200
            collector = RumCollector(session_config(), endpoint=ENDPOINT, transport=transport)
            collector.run()
            ids.append(collector.context.session_id)
        assert ids[0] == ids[1]

    def test_unreachable_endpoint(self):
        """Failed deliveries neither raise nor block later metrics."""
        with patch("requests.Session.put", side_effect=requests.ConnectionError("refused")) as put:
            collector = RumCollector(session_config(), endpoint="http://127.0.0.1:9/rum")
            summary = collector.run()

        assert put.call_count == 4
        assert summary["deliveries"]["failed"] == 4
        assert summary["session"]["metrics_emitted"] == 4

    def test_session_ends_before_late_delivery(self):
        config = session_config()
        config["collector"]["max_session_time_s"] = 12.1
        transport = Mock()
        transport.put.return_value = 200

        summary = RumCollector(config, endpoint=ENDPOINT, transport=transport).run()

        assert summary["deliveries"]["pending"] == 1
        assert summary["deliveries"]["successful"] == 3

    def test_outputs_written(self, tmp_path):
        config = session_config()
        config["output"] = {
            "summary_json_path": str(tmp_path / "out" / "summary.json"),
            "deliveries_csv_path": str(tmp_path / "out" / "deliveries.csv"),
        }
        transport = Mock()
        transport.put.return_value = 200

        RumCollector(config, endpoint=ENDPOINT, transport=transport).run()

        summary = json.loads((tmp_path / "out" / "summary.json").read_text())
        assert summary["deliveries"]["total"] == 4
        df = pd.read_csv(tmp_path / "out" / "deliveries.csv")
        assert list(df["report_name"]) == ["TTFB", "LCP", "FID", "CLS"]


class TestCollectorConfiguration:

    def test_endpoint_from_environment(self, monkeypatch):
        monkeypatch.setenv("RUM_ENDPOINT", "https://env.test/rum")
        collector = RumCollector(session_config(), transport=Mock())
        assert collector.endpoint == "https://env.test/rum"

    def test_config_endpoint_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("RUM_ENDPOINT", "https://env.test/rum")
        config = session_config()
        config["collector"]["endpoint"] = "https://config.test/rum"
        assert RumCollector(config, transport=Mock()).endpoint == "https://config.test/rum"

    def test_missing_endpoint(self, monkeypatch):
        monkeypatch.delenv("RUM_ENDPOINT", raising=False)
        with pytest.raises(ConfigurationError):
            RumCollector(session_config())

    def test_missing_section(self):
        config = session_config()
        del config["page"]
        with pytest.raises(ConfigurationError):
            RumCollector(config, endpoint=ENDPOINT)

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "session.yaml"
        path.write_text(yaml.safe_dump(session_config()))

        collector = RumCollector.from_yaml_file(str(path), endpoint=ENDPOINT, transport=Mock())

        assert collector.config["collector"]["random_seed"] == 42

    def test_mount_marks_document_end(self):
        collector = RumCollector(session_config(), endpoint=ENDPOINT, transport=Mock())
        collector.mount()

        assert collector.window.performance.marks[-1].name == "docEnd"
        assert collector.context is not None
        assert len(collector.emitter.handlers) == 4
