"""
Scenario files

A scenario is one YAML document holding a `simulation:` mapping. Shipped
scenarios live in scenarios/simulation/ and can be referred to by name.
"""

from pathlib import Path
from typing import Union

import yaml

from .simulation import SimulationConfig

PathLike = Union[str, Path]

SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios" / "simulation"


class ConfigLoader:
    """Reads and writes SimulationConfig scenarios"""

    @staticmethod
    def parse_simulation(text: str, source: str = "<string>") -> SimulationConfig:
        """
        Build a validated SimulationConfig from YAML text

        Raises:
            ValueError: Malformed YAML, a document that is not a mapping,
                or a configuration that fails validation
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"{source}: invalid YAML ({e})") from e

        if not isinstance(data, dict):
            raise ValueError(f"{source}: expected a mapping, got {type(data).__name__}")

        config = SimulationConfig.from_dict(data)
        config.validate()
        return config

    @staticmethod
    def load_simulation(file_path: PathLike) -> SimulationConfig:
        """
        Load a scenario file

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: See parse_simulation
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        return ConfigLoader.parse_simulation(file_path.read_text(encoding='utf-8'), str(file_path))

    @staticmethod
    def resolve_scenario(name: PathLike) -> Path:
        """Path of a scenario given as a file path or as a shipped scenario name"""
        path = Path(name)
        if path.exists():
            return path
        shipped = SCENARIO_DIR / path.with_suffix(".yaml").name
        if shipped.exists():
            return shipped
        raise FileNotFoundError(f"No scenario '{name}' (looked in {SCENARIO_DIR})")

    @staticmethod
    def save_simulation(config: SimulationConfig, file_path: PathLike):
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)


def load_simulation_config(file_path: PathLike) -> SimulationConfig:
    """Load a scenario by path or by shipped name ("default", "small_shutdown")"""
    return ConfigLoader.load_simulation(ConfigLoader.resolve_scenario(file_path))


def save_simulation_config(config: SimulationConfig, file_path: PathLike):
    ConfigLoader.save_simulation(config, file_path)
