"""
CLI module for the ring farm.

Applies command-line overrides to the loaded configuration, builds the
bundle and farm, and writes each generation's top layouts to disk.
"""

from typing import Any, Optional

from polyring.config_loader import (
    create_bundle_from_config,
    ensure_valid,
    resolve_seed,
)
from polyring.svg_exporter import SvgExporter

from .data_models import FarmConfig, GenerationReport
from .orchestration import Farm


# Command-line option name -> (config section, key)
OVERRIDES = {
    "shapes_file": ("shapes", "file"),
    "seed": ("farm", "random_seed"),
    "population": ("farm", "population_size"),
    "generations": ("farm", "max_generations"),
    "elites": ("farm", "elites"),
    "mutation_percentage": ("farm", "mutation_percentage"),
    "mutation_attempts": ("farm", "mutation_attempts"),
    "output": ("output", "file"),
    "cell_side": ("output", "cell_side"),
    "plot": ("output", "plot"),
}


def apply_overrides(config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay command-line values on a loaded configuration.

    Args:
        config: Configuration from load_config
        overrides: Option values; None means "not given"

    Returns:
        New configuration dictionary
    """
    result = {section: dict(values) for section, values in config.items()}

    for name, (section, key) in OVERRIDES.items():
        value = overrides.get(name)
        if value is not None:
            result[section][key] = value

    if overrides.get("no_mirror"):
        result["shapes"]["mirror"] = False
    if overrides.get("no_rotate"):
        result["shapes"]["rotate"] = False

    return result


def create_farm_config(config: dict[str, Any]) -> FarmConfig:
    """Build FarmConfig from the 'farm' section."""
    farm_config = config["farm"]
    return FarmConfig.from_percentage(
        farm_config["mutation_percentage"],
        population_size=farm_config["population_size"],
        max_generations=farm_config["max_generations"],
        elite_count=farm_config["elites"],
        mutation_attempts=farm_config["mutation_attempts"],
        seed=resolve_seed(farm_config["random_seed"]),
    )


def run_from_config(config: dict[str, Any]) -> Optional[GenerationReport]:
    """
    Validate configuration and run the farm.

    The HTML output file is rewritten after every generation so it always
    shows the latest top layouts.

    Args:
        config: Complete configuration (after overrides)

    Returns:
        Report of the last generation

    Raises:
        ConfigurationError: If the configuration or shapes file is invalid
    """
    print("Validating configuration...")
    ensure_valid(config)

    bundle = create_bundle_from_config(config)
    print(f"Loaded {len(bundle)} shapes "
          f"({sum(len(v) for v in bundle)} variants, {bundle.total_cells()} cells)")

    farm_config = create_farm_config(config)
    print(f"Random seed: {farm_config.seed}")

    output_config = config["output"]
    exporter = SvgExporter(output_config["cell_side"])
    output_file = output_config["file"]

    def dump_layouts(report: GenerationReport):
        print(f"  {report.summary()}")
        exporter.export_html(report.top_layouts, output_file)

    farm = Farm(bundle, farm_config)
    report = farm.run(on_generation=dump_layouts)

    print()
    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Generations: {report.iteration + 1}")
    print(f"Best score: {report.best_score:g}")
    print(f"Unique top layouts: {len(report.top_layouts)}")
    print(f"Layouts file: {output_file}")

    plot_path = output_config.get("plot")
    if plot_path:
        # Non-interactive backend, the preview is only written to disk
        import matplotlib
        matplotlib.use('Agg')
        from polyring.visualization import plot_layout

        plot_layout(report.best_layout, plot_path)
        print(f"Best layout plot: {plot_path}")

    return report
