import unittest
import uuid
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

import round_main
from roundkeeper.config import Config, RoundConfig, load_config


VALID_YAML = """
round:
  seed: 7
  check_invariants: false
simulation:
  tie_probability: 0.25
  entrants: [Alpha, Bravo, Charlie]
logging:
  level: debug
"""


class LoadConfigTests(unittest.TestCase):
    def _write_config(self, text: str) -> Path:
        path = Path(f".test_config_{uuid.uuid4().hex}.yaml")
        self.addCleanup(lambda: path.unlink(missing_ok=True))
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_valid_config(self) -> None:
        config = load_config(self._write_config(VALID_YAML))
        self.assertEqual(config.round, RoundConfig(seed=7, check_invariants=False))
        self.assertEqual(config.simulation.entrants, ["Alpha", "Bravo", "Charlie"])
        self.assertEqual(config.simulation.tie_probability, 0.25)
        self.assertEqual(config.log_level, "DEBUG")

    def test_missing_sections_use_defaults(self) -> None:
        config = load_config(self._write_config("simulation:\n  entrants: [1, 2]\n"))
        self.assertIsNone(config.round.seed)
        self.assertEqual(config.simulation.entrants, ["1", "2"])
        self.assertEqual(config.simulation.tie_probability, 0.0)
        self.assertEqual(config.log_level, "INFO")

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(f".missing_{uuid.uuid4().hex}.yaml"))

    def test_too_few_entrants_raises(self) -> None:
        with self.assertRaisesRegex(ValueError, "at least 2"):
            load_config(self._write_config("simulation:\n  entrants: [Alpha]\n"))

    def test_duplicate_entrants_raise(self) -> None:
        with self.assertRaisesRegex(ValueError, "duplicates"):
            load_config(self._write_config("simulation:\n  entrants: [Alpha, Alpha]\n"))

    def test_tie_probability_out_of_range_raises(self) -> None:
        text = "simulation:\n  tie_probability: 1.5\n  entrants: [Alpha, Bravo]\n"
        with self.assertRaisesRegex(ValueError, "tie_probability"):
            load_config(self._write_config(text))

    def test_unknown_log_level_raises(self) -> None:
        text = "simulation:\n  entrants: [Alpha, Bravo]\nlogging:\n  level: loud\n"
        with self.assertRaisesRegex(ValueError, "logging.level"):
            load_config(self._write_config(text))

    def test_malformed_section_raises_value_error(self) -> None:
        with self.assertRaisesRegex(ValueError, "Invalid config.yaml structure"):
            load_config(self._write_config("round: [1, 2]\nsimulation:\n  entrants: [a, b]\n"))

    def test_default_config(self) -> None:
        config = Config()
        self.assertEqual(config.simulation.entrants, [])
        self.assertIsNone(config.round.seed)

    def test_non_bool_check_invariants_raises(self) -> None:
        text = 'round:\n  check_invariants: "no"\nsimulation:\n  entrants: [Alpha, Bravo]\n'
        with self.assertRaisesRegex(ValueError, "check_invariants must be true/false"):
            load_config(self._write_config(text))

    def test_entrants_as_string_raises(self) -> None:
        with self.assertRaisesRegex(ValueError, "must be a list"):
            load_config(self._write_config("simulation:\n  entrants: abcd\n"))


class MainConfigErrorTests(unittest.TestCase):
    def _run_main(self, *argv: str) -> tuple[int, str]:
        out = Console(record=True, width=200, legacy_windows=False)
        with patch.object(round_main, "console", out):
            with self.assertRaises(SystemExit) as ctx:
                round_main._main(list(argv))
        return ctx.exception.code, out.export_text()

    def test_missing_config_exits_with_status_1(self) -> None:
        code, text = self._run_main("--config", f".missing_{uuid.uuid4().hex}.yaml")
        self.assertEqual(code, 1)
        self.assertIn("Config file not found", text)

    def test_invalid_config_exits_with_status_1(self) -> None:
        path = Path(f".test_config_{uuid.uuid4().hex}.yaml")
        self.addCleanup(lambda: path.unlink(missing_ok=True))
        path.write_text("simulation:\n  entrants: [Alpha]\n", encoding="utf-8")
        code, text = self._run_main("--config", str(path))
        self.assertEqual(code, 1)
        self.assertIn("Config error", text)
