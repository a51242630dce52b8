"""Tests for flagdash_bootstrap.config.models."""

from __future__ import annotations

from flagdash_bootstrap.config.models import BootstrapConfig
from flagdash_bootstrap.core.models import PlatformKey


class TestBootstrapConfig:
    def test_api_host_derived_from_release_host(self) -> None:
        assert BootstrapConfig().resolved_api_host == "api.github.com"
        assert BootstrapConfig(release_host="ghe.example.com").resolved_api_host == "api.ghe.example.com"

    def test_explicit_api_host(self) -> None:
        config = BootstrapConfig(api_host="ghe.example.com/api/v3")
        assert config.resolved_api_host == "ghe.example.com/api/v3"

    def test_checksum_for(self) -> None:
        config = BootstrapConfig(checksums={"linux-amd64": "abc"})
        assert config.checksum_for(PlatformKey("linux", "amd64")) == "abc"
        assert config.checksum_for(PlatformKey("darwin", "arm64")) is None

    def test_sources_are_copied(self) -> None:
        config = BootstrapConfig()
        config.get_sources().append("x")
        assert config.get_sources() == []
