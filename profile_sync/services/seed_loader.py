"""Service for loading the reference server's seed profile from YAML."""

import yaml
from pathlib import Path
from typing import Optional
from profile_sync.models.response_models import ComprehensiveProfile


class ProfileSeedLoader:
    """Service to load and validate a seed profile from YAML files."""

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the seed loader.

        Args:
            data_dir: Directory containing YAML files. Defaults to profile_sync/data/
        """
        if data_dir is None:
            package_dir = Path(__file__).parent.parent
            data_dir = package_dir / "data"
        self.data_dir = data_dir

    def load_profile(self, name: str = "sample-profile") -> ComprehensiveProfile:
        """
        Load a seed profile.

        Args:
            name: File name without the .yaml extension

        Returns:
            ComprehensiveProfile: Validated profile

        Raises:
            FileNotFoundError: If the YAML file doesn't exist
            ValueError: If the YAML or the profile structure is invalid
        """
        filepath = self.data_dir / f"{name}.yaml"

        if not filepath.exists():
            raise FileNotFoundError(
                f"Seed profile not found: {filepath}. "
                f"Expected file at: {filepath.absolute()}"
            )

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML format in {filepath}: {e}")

        try:
            return ComprehensiveProfile(**(data or {}))
        except Exception as e:
            raise ValueError(
                f"Invalid profile structure in {filepath}. "
                f"Validation error: {e}"
            )
