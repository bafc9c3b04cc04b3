"""Shared fixtures for service-versions-updater tests."""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config


PAPER_API = "https://fill.example.com/v3"
PURPUR_API = "https://purpur.example.com/v2"
VANILLA_MANIFEST = "https://meta.example.com/mc/game/version_manifest_v2.json"


@pytest.fixture
def sample_manifest():
    """Sample serviceVersions.json contents."""
    return {
        "PROXY": {
            "VELOCITY": {"3_4_0": {"url": "https://old/velocity-3.4.0.jar"}},
            "BUNGEECORD": {"latest": {"url": "https://ci.example.com/BungeeCord.jar"}},
            "WATERFALL": {},
        },
        "SERVER": {
            "PAPER": {"1_21_1": {"url": "https://old/paper-1.21.1.jar"}},
            "PUFFERFISH": {"1_20": {"url": "https://ci.example.com/pufferfish-1.20.jar"}},
            "PURPUR": {},
            "FOLIA": {},
            "VANILLA": {"1_21": {"url": "https://old/server.jar", "snapshot": False}},
        },
    }


@pytest.fixture
def manifest_file(tmp_path, sample_manifest):
    """sample_manifest written to disk."""
    path = tmp_path / "serviceVersions.json"
    path.write_text(json.dumps(sample_manifest, indent=2))
    return path


@pytest.fixture
def sample_config(tmp_path):
    """Pre-configured Config instance pointing at fake API hosts."""
    return Config(
        manifest_path=tmp_path / "serviceVersions.json",
        paper_api_url=PAPER_API,
        purpur_api_url=PURPUR_API,
        vanilla_manifest_url=VANILLA_MANIFEST,
        request_timeout=5.0,
        providers=["paper", "folia", "velocity", "waterfall", "purpur", "vanilla"],
    )


@pytest.fixture
def config_toml_content():
    """Sample config.toml content."""
    return f"""
manifest_path = "/srv/data/serviceVersions.json"
paper_api_url = "{PAPER_API}/"
purpur_api_url = "{PURPUR_API}"
vanilla_manifest_url = "{VANILLA_MANIFEST}"
request_timeout = 10
providers = ["vanilla", "paper"]
"""
