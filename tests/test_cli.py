import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

from urbanstocks.cli import main
from urbanstocks.config import load_config
from urbanstocks.io_ne import NaturalEarthClient, NormalizerError

CONFIG_TEXT = """
paths:
  countries_geojson: public/webdata/countries.geojson
  city_index: public/webdata/index/country_to_cities.json
  logs_dir: build/logs
source:
  url: https://example.test/ne.geojson
  request_timeout_s: 5
explorer:
  default_metric: population
"""


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config_path = self.root / "config.yaml"
        self.config_path.write_text(CONFIG_TEXT, encoding="utf-8")
        index = self.root / "public" / "webdata" / "index" / "country_to_cities.json"
        index.parent.mkdir(parents=True)
        index.write_text(json.dumps({"FRA": [], "USA": [], "XYZ": []}), encoding="utf-8")
        self.output = self.root / "public" / "webdata" / "countries.geojson"

    def tearDown(self) -> None:
        logging.shutdown()
        logging.getLogger().handlers.clear()
        self._tmp.cleanup()

    def test_config_paths_resolve_relative_to_file(self) -> None:
        cfg = load_config(self.config_path)
        self.assertEqual(cfg.paths.countries_geojson, self.output.resolve())
        self.assertEqual(cfg.source.url, "https://example.test/ne.geojson")
        self.assertEqual(cfg.normalize.iso_fields, ("ISO_A3", "ISO_A3_EH", "ADM0_A3"))
        self.assertEqual(cfg.explorer.default_metric.value, "population")

    def test_fix_countries_exits_zero_with_missing_codes(self) -> None:
        payload = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {"ISO_A3": "FRA", "NAME": "France"}, "geometry": None},
                {"type": "Feature", "properties": {"ISO_A3": "USA", "NAME": "United States"}, "geometry": None},
            ],
        }
        with mock.patch.object(NaturalEarthClient, "fetch_countries", return_value=payload):
            code = main(["fix-countries", "--config", str(self.config_path)])
        self.assertEqual(code, 0)
        written = json.loads(self.output.read_text(encoding="utf-8"))
        self.assertEqual([f["properties"]["iso3"] for f in written["features"]], ["FRA", "USA"])

    def test_fix_countries_fetch_failure_exits_nonzero(self) -> None:
        with mock.patch.object(
            NaturalEarthClient, "fetch_countries", side_effect=NormalizerError("HTTP 404")
        ):
            code = main(["fix-countries", "--config", str(self.config_path)])
        self.assertEqual(code, 1)
        self.assertFalse(self.output.exists())

    def test_fix_countries_network_error_exits_nonzero(self) -> None:
        with mock.patch.object(
            NaturalEarthClient, "fetch_countries", side_effect=requests.ConnectionError("down")
        ):
            code = main(["fix-countries", "--config", str(self.config_path)])
        self.assertEqual(code, 1)

    def test_check_without_output_file_fails(self) -> None:
        self.assertEqual(main(["check", "--config", str(self.config_path)]), 1)

    def test_explore_replays_events(self) -> None:
        events = self.root / "events.yaml"
        events.write_text(
            "- {action: select_country, iso3: DEU, name: Germany}\n"
            "- {action: select_city, city_id: '5', name: Berlin}\n"
            "- {action: reset_to_country}\n",
            encoding="utf-8",
        )
        with self.assertLogs("urbanstocks.cli", level="INFO") as logs:
            code = main(["explore", str(events), "--config", str(self.config_path)])
        self.assertEqual(code, 0)
        self.assertIn("Global / Germany / [Berlin]", logs.output[1])
        self.assertIn("metric=population", logs.output[1])

    def test_explore_rejects_bad_event(self) -> None:
        events = self.root / "events.yaml"
        events.write_text("- {action: fly}\n", encoding="utf-8")
        self.assertEqual(main(["explore", str(events), "--config", str(self.config_path)]), 1)


if __name__ == "__main__":
    unittest.main()
