"""Configuration persistence manager for the k-means color reducer.

This module handles loading and saving of quantization defaults to/from JSON files.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Tuple

from models import CONFIG_FILE, QuantizationConfig


class ConfigManager:
    """Handles loading and saving of quantization configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.kquant_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> QuantizationConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            QuantizationConfig with loaded or default values
        """
        config = QuantizationConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                    # Update config with loaded values (fallback to defaults)
                    config.num_colors = int(data.get("num_colors", config.num_colors))
                    config.iterations = int(data.get("iterations", config.iterations))
                    config.method = str(data.get("method", config.method))
                    seed = data.get("seed", config.seed)
                    config.seed = int(seed) if seed is not None else None
                    tolerance = data.get("tolerance", config.tolerance)
                    config.tolerance = float(tolerance) if tolerance is not None else None
                    config.output_path = str(data.get("output_path", config.output_path))
                print(f"✓ Loaded configuration from {self.config_path}")
        except Exception as e:
            print(f"Warning: Could not load config file: {e}")
            config = QuantizationConfig()

        return config

    def save(self, config: QuantizationConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: QuantizationConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w") as f:
                json.dump(asdict(config), f, indent=2)
            return True, None
        except Exception as e:
            return False, str(e)
