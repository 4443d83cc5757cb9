"""Tests for run configuration loading and precedence."""

import json
import os
import tempfile
import unittest

from core.run_config import (
    ConfigValidationError,
    RunConfig,
    apply_env_overrides,
    load_config_payload,
    load_run_config,
    parse_run_config,
    resolve_strict_config_validation,
)


class TestRunConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def write(self, name: str, text: str) -> str:
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_defaults(self) -> None:
        config = load_run_config(environ={})
        self.assertEqual(config, RunConfig())
        self.assertEqual(config.max_workers, 1)
        self.assertTrue(config.continue_on_error)
        self.assertTrue(config.resolve_interface_bases)

    def test_yaml_file(self) -> None:
        path = self.write(
            "archlens.yaml",
            "include: ['App.*']\n"
            "exclude: '*.Tests'\n"
            "output: out/model.json\n"
            "max_workers: 4\n"
            "continue_on_error: false\n"
            "resolve_interface_bases: false\n"
            "log_level: debug\n",
        )
        config = load_run_config(path, environ={})
        self.assertEqual(config.include, ("App.*",))
        self.assertEqual(config.exclude, ("*.Tests",))
        self.assertEqual(config.output, "out/model.json")
        self.assertEqual(config.max_workers, 4)
        self.assertFalse(config.continue_on_error)
        self.assertFalse(config.resolve_interface_bases)
        self.assertEqual(config.log_level, "DEBUG")

    def test_json_file(self) -> None:
        path = self.write("archlens.json", json.dumps({"report_dir": "reports", "max_workers": 2}))
        config = load_run_config(path, environ={})
        self.assertEqual(config.report_dir, "reports")
        self.assertEqual(config.max_workers, 2)

    def test_config_path_from_environment(self) -> None:
        path = self.write("archlens.yaml", "max_workers: 3\n")
        config = load_run_config(environ={"ARCHLENS_CONFIG": path})
        self.assertEqual(config.max_workers, 3)

    def test_environment_overrides_file(self) -> None:
        path = self.write("archlens.yaml", "max_workers: 3\nlog_level: INFO\n")
        config = load_run_config(
            path,
            environ={
                "ARCHLENS_MAX_WORKERS": "8",
                "ARCHLENS_LOG_LEVEL": "warning",
                "ARCHLENS_REPORT_DIR": "out/reports",
            },
        )
        self.assertEqual(config.max_workers, 8)
        self.assertEqual(config.log_level, "WARNING")
        self.assertEqual(config.report_dir, "out/reports")

    def test_empty_file(self) -> None:
        path = self.write("archlens.yaml", "")
        self.assertEqual(load_config_payload(path), {})

    def test_missing_file_non_strict(self) -> None:
        missing = os.path.join(self.tmpdir.name, "missing.yaml")
        self.assertEqual(load_config_payload(missing), {})

    def test_missing_file_strict(self) -> None:
        missing = os.path.join(self.tmpdir.name, "missing.yaml")
        with self.assertRaises(ConfigValidationError):
            load_config_payload(missing, strict=True)

    def test_malformed_yaml(self) -> None:
        path = self.write("archlens.yaml", "include: [unterminated\n")
        self.assertEqual(load_config_payload(path), {})
        with self.assertRaises(ConfigValidationError):
            load_config_payload(path, strict=True)

    def test_non_mapping_payload(self) -> None:
        path = self.write("archlens.yaml", "- just\n- a list\n")
        self.assertEqual(load_config_payload(path), {})
        with self.assertRaises(ConfigValidationError):
            load_config_payload(path, strict=True)

    def test_bad_values_fall_back_to_defaults(self) -> None:
        config = parse_run_config(
            {
                "max_workers": 0,
                "log_level": "LOUD",
                "include": [1, 2],
                "continue_on_error": "yes",
                "colour": "blue",
            }
        )
        self.assertEqual(config, RunConfig())

    def test_bad_values_strict(self) -> None:
        for payload in (
            {"max_workers": "many"},
            {"max_workers": 0},
            {"log_level": "LOUD"},
            {"include": {"a": 1}},
            {"reject_syntax_errors": "no"},
            {"colour": "blue"},
        ):
            with self.subTest(payload=payload):
                with self.assertRaises(ConfigValidationError):
                    parse_run_config(payload, strict=True)

    def test_parse_layers_over_base(self) -> None:
        base = RunConfig(include=("App.*",), max_workers=2)
        config = parse_run_config({"exclude": ["*.Tests"]}, base=base)
        self.assertEqual(config.include, ("App.*",))
        self.assertEqual(config.exclude, ("*.Tests",))
        self.assertEqual(config.max_workers, 2)

    def test_env_bad_workers(self) -> None:
        config = apply_env_overrides(RunConfig(), environ={"ARCHLENS_MAX_WORKERS": "x"})
        self.assertEqual(config.max_workers, 1)
        with self.assertRaises(ConfigValidationError):
            apply_env_overrides(RunConfig(), environ={"ARCHLENS_MAX_WORKERS": "x"}, strict=True)

    def test_resolve_strict_config_validation(self) -> None:
        self.assertFalse(resolve_strict_config_validation(environ={}))
        self.assertTrue(resolve_strict_config_validation(default=True, environ={}))
        self.assertTrue(
            resolve_strict_config_validation(environ={"ARCHLENS_STRICT_CONFIG_VALIDATION": "true"})
        )
        self.assertFalse(
            resolve_strict_config_validation(environ={"ARCHLENS_STRICT_CONFIG_VALIDATION": "0"})
        )


if __name__ == "__main__":
    unittest.main()
