"""
Tests for YAML configuration loading and validation
"""

import copy
import tempfile
import unittest
from pathlib import Path

from polyring.config_loader import (
    DEFAULT_CONFIG,
    ConfigurationError,
    create_bundle_from_config,
    ensure_valid,
    load_config,
    resolve_seed,
    validate_config,
)


class TestLoadConfig(unittest.TestCase):
    """Test reading configuration files"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name: str, text: str) -> str:
        path = self.dir / name
        path.write_text(text)
        return str(path)

    def test_defaults_only(self):
        """Test that no path yields the defaults"""
        config = load_config(None)
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertEqual(validate_config(config), [])

    def test_partial_config_merged(self):
        """Test that missing keys fall back to defaults"""
        path = self.write("config.yaml", "farm:\n  population_size: 50\n  random_seed: 3\n")
        config = load_config(path)

        self.assertEqual(config["farm"]["population_size"], 50)
        self.assertEqual(config["farm"]["random_seed"], 3)
        self.assertEqual(config["farm"]["elites"], DEFAULT_CONFIG["farm"]["elites"])
        self.assertEqual(config["shapes"], DEFAULT_CONFIG["shapes"])

    def test_empty_file(self):
        """Test that an empty file is the same as the defaults"""
        path = self.write("empty.yaml", "")
        self.assertEqual(load_config(path), DEFAULT_CONFIG)

    def test_missing_file(self):
        """Test that a missing file is a configuration error"""
        with self.assertRaises(ConfigurationError):
            load_config(str(self.dir / "nope.yaml"))

    def test_invalid_yaml(self):
        """Test that malformed YAML is a configuration error"""
        path = self.write("bad.yaml", "farm: [1, 2\n")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_non_mapping_sections(self):
        """Test that the root and each section must be mappings"""
        with self.assertRaises(ConfigurationError):
            load_config(self.write("list.yaml", "- 1\n- 2\n"))
        with self.assertRaises(ConfigurationError):
            load_config(self.write("section.yaml", "farm: 12\n"))

    def test_defaults_not_shared(self):
        """Test that loaded configs do not alias the defaults"""
        config = load_config(None)
        config["farm"]["population_size"] = 1
        self.assertNotEqual(DEFAULT_CONFIG["farm"]["population_size"], 1)


class TestValidateConfig(unittest.TestCase):
    """Test configuration validation"""

    def setUp(self):
        self.config = copy.deepcopy(DEFAULT_CONFIG)

    def test_bad_values_reported(self):
        """Test that each bad value produces an issue"""
        self.config["farm"]["population_size"] = 0
        self.config["farm"]["mutation_percentage"] = 120
        self.config["output"]["cell_side"] = -1
        self.config["shapes"]["mirror"] = "yes"

        issues = validate_config(self.config)

        self.assertEqual(len(issues), 4)
        self.assertTrue(any("population_size" in issue for issue in issues))
        self.assertTrue(any("mutation_percentage" in issue for issue in issues))
        self.assertTrue(any("cell_side" in issue for issue in issues))
        self.assertTrue(any("mirror" in issue for issue in issues))

    def test_elites_bound(self):
        """Test that elites may not exceed the population"""
        self.config["farm"]["population_size"] = 5
        self.config["farm"]["elites"] = 6
        self.assertEqual(validate_config(self.config),
                         ["farm.elites cannot exceed farm.population_size"])

    def test_seed_forms(self):
        """Test accepted and rejected seed values"""
        for seed in (None, "random", 7, "42"):
            self.config["farm"]["random_seed"] = seed
            self.assertEqual(validate_config(self.config), [], seed)

        self.config["farm"]["random_seed"] = "abc"
        self.assertEqual(len(validate_config(self.config)), 1)

    def test_ensure_valid(self):
        """Test that ensure_valid raises with every issue listed"""
        ensure_valid(self.config)

        self.config["farm"]["max_generations"] = 0
        self.config["output"]["file"] = ""
        with self.assertRaises(ConfigurationError) as ctx:
            ensure_valid(self.config)
        self.assertIn("max_generations", str(ctx.exception))
        self.assertIn("output.file", str(ctx.exception))


class TestConfigHelpers(unittest.TestCase):
    """Test seed resolution and bundle creation"""

    def test_resolve_seed(self):
        """Test integer, digit string and random seeds"""
        self.assertEqual(resolve_seed(5), 5)
        self.assertEqual(resolve_seed("123"), 123)

        drawn = resolve_seed("random")
        self.assertIsInstance(drawn, int)
        self.assertGreaterEqual(drawn, 0)
        self.assertIsInstance(resolve_seed(None), int)

    def test_bundle_from_config(self):
        """Test loading the shapes named by the configuration"""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shapes.txt"
            path.write_text("***\n\n**\n*\n")

            config = copy.deepcopy(DEFAULT_CONFIG)
            config["shapes"] = {"file": str(path), "mirror": False, "rotate": True}
            bundle = create_bundle_from_config(config)

        self.assertEqual(len(bundle), 2)
        self.assertEqual(bundle.variant_count(0), 2)
        self.assertEqual(bundle.variant_count(1), 4)

    def test_bundle_missing_file(self):
        """Test that a missing shapes file is a configuration error"""
        config = copy.deepcopy(DEFAULT_CONFIG)
        config["shapes"]["file"] = "/nonexistent/shapes.txt"
        with self.assertRaises(ConfigurationError):
            create_bundle_from_config(config)


if __name__ == '__main__':
    unittest.main()
