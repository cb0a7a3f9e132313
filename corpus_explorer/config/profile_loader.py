"""Profile loader for corpus and segmentation settings."""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from .settings import get_profiles_dir


@dataclass
class ProfileConfig:
    """Configuration profile describing one analysis run."""
    name: str
    description: str = ""
    base_url: Optional[str] = None
    documents: List[Dict[str, Any]] = field(default_factory=list)
    segmenter: Dict[str, Any] = field(default_factory=dict)
    fetch: Dict[str, Any] = field(default_factory=dict)
    subsets: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    stem: bool = True
    top_n: int = 10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileConfig':
        """Create ProfileConfig from dictionary."""
        documents = data.get('documents') or []
        if not isinstance(documents, list):
            raise ValueError(f"'documents' must be a list, got {type(documents).__name__}")
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            base_url=data.get('base_url'),
            documents=documents,
            segmenter=data.get('segmenter') or {},
            fetch=data.get('fetch') or {},
            subsets=data.get('subsets') or {},
            stem=bool(data.get('stem', True)),
            top_n=int(data.get('top_n', 10)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'base_url': self.base_url,
            'documents': self.documents,
            'segmenter': self.segmenter,
            'fetch': self.fetch,
            'subsets': self.subsets,
            'stem': self.stem,
            'top_n': self.top_n,
        }


def load_profile(profile_name: str = "default") -> ProfileConfig:
    """Load a configuration profile.

    Args:
        profile_name: Name of profile to load (without .yaml extension),
            or a path to a YAML file

    Returns:
        ProfileConfig object

    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    candidate = Path(profile_name)
    if candidate.suffix in (".yaml", ".yml"):
        profile_path = candidate
    else:
        profile_path = get_profiles_dir() / f"{profile_name}.yaml"

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")

    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_name}: {e}")

    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile {profile_name} must be a mapping")

    try:
        return ProfileConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error loading profile {profile_name}: {e}")


def list_available_profiles() -> list[str]:
    """List all available profile names.

    Returns:
        List of profile names (without .yaml extension)
    """
    profiles_dir = get_profiles_dir()

    if not profiles_dir.exists():
        return ["default"]

    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else ["default"]


def get_default_profile() -> ProfileConfig:
    """Get default profile (always available).

    Returns:
        Default ProfileConfig
    """
    try:
        return load_profile("default")
    except FileNotFoundError:
        return ProfileConfig(name="default", description="Default configuration")
