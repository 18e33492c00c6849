"""Tests for configuration loading."""

from pathlib import Path

import pytest

from mise_nix.config import find_config_file, load_config
from mise_nix.constants import DEFAULT_NIXHUB_URL
from mise_nix.exceptions import ConfigParseError, ConfigValidationError


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


class TestLoadConfig:
    """Test load_config with explicit environments."""

    def test_defaults(self, home):
        """Without overrides the cache lives under $HOME/.cache/mise."""
        config = load_config({"HOME": str(home)})
        assert config.cache_dir == home / ".cache" / "mise"
        assert config.current_dir == ""
        assert config.allow_local_flakes is False
        assert config.allow_unfree is False
        assert config.nix_binary == "nix"
        assert config.nixhub_url == DEFAULT_NIXHUB_URL

    def test_cache_dir_override(self, home, tmp_path):
        """MISE_CACHE_DIR wins over the HOME default."""
        config = load_config({"HOME": str(home), "MISE_CACHE_DIR": str(tmp_path / "c")})
        assert config.cache_dir == tmp_path / "c"

    def test_pwd_is_trusted(self, home):
        """PWD is taken as given."""
        config = load_config({"HOME": str(home), "PWD": "/somewhere/else"})
        assert config.current_dir == "/somewhere/else"

    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("YES", True), ("0", False), ("no", False)])
    def test_boolean_env(self, home, value, expected):
        """Boolean switches accept common spellings."""
        config = load_config({"HOME": str(home), "MISE_NIX_ALLOW_LOCAL_FLAKES": value})
        assert config.allow_local_flakes is expected

    def test_nixpkgs_unfree_variable(self, home):
        """NIXPKGS_ALLOW_UNFREE is honoured too."""
        config = load_config({"HOME": str(home), "NIXPKGS_ALLOW_UNFREE": "1"})
        assert config.allow_unfree is True

    def test_config_file(self, home):
        """Values are read from ~/.config/mise-nix/config.toml."""
        config_dir = home / ".config" / "mise-nix"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text(
            '[nix]\nallow_local_flakes = true\nnix_binary = "/opt/nix/bin/nix"\n'
        )
        config = load_config({"HOME": str(home)})
        assert config.allow_local_flakes is True
        assert config.nix_binary == "/opt/nix/bin/nix"

    def test_env_overrides_file(self, home, tmp_path):
        """Environment variables win over the file."""
        path = tmp_path / "custom.toml"
        path.write_text("[nix]\nallow_unfree = true\n")
        config = load_config({"HOME": str(home), "MISE_NIX_CONFIG": str(path), "MISE_NIX_ALLOW_UNFREE": "false"})
        assert config.allow_unfree is False

    def test_invalid_toml(self, home, tmp_path):
        """A broken file is a ConfigParseError."""
        path = tmp_path / "broken.toml"
        path.write_text("[nix\n")
        with pytest.raises(ConfigParseError):
            load_config({"HOME": str(home), "MISE_NIX_CONFIG": str(path)})

    def test_wrong_type(self, home, tmp_path):
        """A non-boolean switch is a ConfigValidationError."""
        path = tmp_path / "bad.toml"
        path.write_text('[nix]\nallow_unfree = "yes"\n')
        with pytest.raises(ConfigValidationError):
            load_config({"HOME": str(home), "MISE_NIX_CONFIG": str(path)})


class TestFindConfigFile:
    """Test config file lookup order."""

    def test_none_when_missing(self, home):
        """No file means no config file."""
        assert find_config_file({"HOME": str(home)}) is None

    def test_xdg_config_home(self, home, tmp_path):
        """XDG_CONFIG_HOME is searched before ~/.config."""
        xdg = tmp_path / "xdg"
        (xdg / "mise-nix").mkdir(parents=True)
        (xdg / "mise-nix" / "config.toml").write_text("[nix]\n")
        assert find_config_file({"HOME": str(home), "XDG_CONFIG_HOME": str(xdg)}) == xdg / "mise-nix" / "config.toml"
