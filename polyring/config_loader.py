"""
Configuration Loading System

Loads YAML configuration files and converts them to the shape bundle and
optimizer settings used by the ring farm.
"""

import time
from typing import Any, Dict, List, Optional

import yaml

from .bundle import Bundle, load_bundle


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "shapes": {
        "file": "data/pentomino.txt",
        "mirror": True,
        "rotate": True,
    },
    "farm": {
        "random_seed": 0,
        "population_size": 200,
        "max_generations": 50,
        "elites": 10,
        "mutation_percentage": 70,
        "mutation_attempts": 10,
    },
    "output": {
        "file": "output/layouts.html",
        "cell_side": 20,
        "plot": None,
    },
}


def load_config(config_path: Optional[str] = "config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file, filling in defaults

    Args:
        config_path: Path to the configuration file, or None for defaults only

    Returns:
        Configuration dictionary with all sections present
    """
    loaded: Dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    config = {}
    for section, defaults in DEFAULT_CONFIG.items():
        values = loaded.get(section) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"Section '{section}' must be a mapping")
        config[section] = {**defaults, **values}

    return config


def resolve_seed(random_seed: Any) -> int:
    """Turn the configured seed into an integer, drawing one from the clock if asked"""
    if random_seed is None or random_seed == "random":
        random_seed = int(time.time() * 1000000) % 2147483647
        print(f"Using random seed: {random_seed}")
    elif isinstance(random_seed, str) and random_seed.isdigit():
        random_seed = int(random_seed)
    return random_seed


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    shapes_config = config.get("shapes", {})
    if not shapes_config.get("file"):
        issues.append("Missing shapes file (shapes.file)")
    for flag in ("mirror", "rotate"):
        if not isinstance(shapes_config.get(flag), bool):
            issues.append(f"shapes.{flag} must be true or false")

    farm_config = config.get("farm", {})
    for key in ("population_size", "max_generations", "mutation_attempts"):
        value = farm_config.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            issues.append(f"farm.{key} must be a positive integer, got: {value}")

    elites = farm_config.get("elites")
    if not isinstance(elites, int) or isinstance(elites, bool) or elites < 0:
        issues.append(f"farm.elites must be a non-negative integer, got: {elites}")
    elif isinstance(farm_config.get("population_size"), int) and elites > farm_config["population_size"]:
        issues.append("farm.elites cannot exceed farm.population_size")

    percentage = farm_config.get("mutation_percentage")
    if not isinstance(percentage, (int, float)) or isinstance(percentage, bool) or not 0 <= percentage <= 100:
        issues.append(f"farm.mutation_percentage must be between 0 and 100, got: {percentage}")

    seed = farm_config.get("random_seed")
    if not (seed is None or seed == "random" or (isinstance(seed, int) and not isinstance(seed, bool))
            or (isinstance(seed, str) and seed.isdigit())):
        issues.append(f"farm.random_seed must be an integer or 'random', got: {seed}")

    output_config = config.get("output", {})
    cell_side = output_config.get("cell_side")
    if not isinstance(cell_side, int) or isinstance(cell_side, bool) or cell_side <= 0:
        issues.append(f"output.cell_side must be a positive integer, got: {cell_side}")
    if not output_config.get("file"):
        issues.append("Missing output file (output.file)")

    return issues


def ensure_valid(config: Dict[str, Any]):
    """Raise ConfigurationError listing every validation issue"""
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(issues))


def create_bundle_from_config(config: Dict[str, Any]) -> Bundle:
    """Load the shape bundle named in the configuration"""
    shapes_config = config["shapes"]
    try:
        return load_bundle(
            shapes_config["file"],
            mirror=shapes_config["mirror"],
            rotate=shapes_config["rotate"]
        )
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Failed to load shapes: {e}")


def print_config_summary(config: Dict[str, Any]):
    """Print a summary of the configuration"""
    print("=" * 60)
    print("CONFIGURATION SUMMARY")
    print("=" * 60)

    shapes_config = config.get("shapes", {})
    print(f"Shapes file: {shapes_config.get('file', 'N/A')}")
    print(f"Mirror: {shapes_config.get('mirror')}, Rotate: {shapes_config.get('rotate')}")

    farm_config = config.get("farm", {})
    print(f"\nFarm:")
    print(f"  Seed: {farm_config.get('random_seed')}")
    print(f"  Population: {farm_config.get('population_size')}")
    print(f"  Generations: {farm_config.get('max_generations')}")
    print(f"  Elites: {farm_config.get('elites')}")
    print(f"  Mutation: {farm_config.get('mutation_percentage')}% "
          f"({farm_config.get('mutation_attempts')} attempts)")

    output_config = config.get("output", {})
    print(f"\nOutput: {output_config.get('file')} (cell side {output_config.get('cell_side')}px)")

    issues = validate_config(config)
    if issues:
        print(f"\nValidation Issues ({len(issues)}):")
        for issue in issues:
            print(f"  - {issue}")
    else:
        print("\nConfiguration is valid ✓")

    print("=" * 60)
