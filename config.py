"""Configuration loading and validation for service-versions-updater."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


DEFAULT_CONFIG_PATH = Path("config.toml")

PROVIDER_NAMES = ("paper", "folia", "velocity", "waterfall", "purpur", "vanilla")

DEFAULTS = {
    "manifest_path": "serviceVersions.json",
    "paper_api_url": "https://fill.papermc.io/v3",
    "purpur_api_url": "https://api.purpurmc.org/v2",
    "vanilla_manifest_url": "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json",
    "request_timeout": 30.0,
    "providers": list(PROVIDER_NAMES),
}


@dataclass
class Config:
    manifest_path: Path
    paper_api_url: str
    purpur_api_url: str
    vanilla_manifest_url: str
    request_timeout: float
    providers: list[str]

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        manifest_path_override: str | None = None,
    ) -> "Config":
        """Load configuration from TOML file with defaults."""
        config_data = dict(DEFAULTS)

        path = config_path or DEFAULT_CONFIG_PATH
        if path.exists():
            with open(path, "rb") as f:
                file_config = tomllib.load(f)
                config_data.update(file_config)

        if manifest_path_override:
            config_data["manifest_path"] = manifest_path_override

        providers = [str(name).lower() for name in config_data["providers"]]
        unknown = sorted(set(providers) - set(PROVIDER_NAMES))
        if unknown:
            raise ValueError(f"Unknown providers in config: {', '.join(unknown)}")

        return cls(
            manifest_path=Path(config_data["manifest_path"]).expanduser(),
            paper_api_url=config_data["paper_api_url"].rstrip("/"),
            purpur_api_url=config_data["purpur_api_url"].rstrip("/"),
            vanilla_manifest_url=config_data["vanilla_manifest_url"],
            request_timeout=float(config_data["request_timeout"]),
            # Run order is fixed regardless of how the list is written
            providers=[name for name in PROVIDER_NAMES if name in providers],
        )
