"""
Tests for config loading, built-in profiles, and config check.
"""

import textwrap
from pathlib import Path

import pytest

from envsetup.core.config.loader import (
    ConfigError,
    find_config_file,
    load_builtin_profile,
    load_profile,
    resolve_profile,
)
from envsetup.core.data import builtin_profile_path
from envsetup.core.use_cases.config_check import check_config

MINIMAL = textwrap.dedent("""\
    name: test-mac
    platform: macos
    package_manager: homebrew
    package_sets:
      - name: formulas
        packages: [git, neovim]
""")


def _write(tmp_path: Path, content: str, name: str = "setup.yml") -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


# ── Loader ───────────────────────────────────────────────────────────


class TestLoadProfile:
    def test_flat(self, tmp_path: Path):
        profile = load_profile(_write(tmp_path, MINIMAL))
        assert profile.name == "test-mac"
        assert profile.package_sets[0].packages == ["git", "neovim"]

    def test_wrapped_in_setup_key(self, tmp_path: Path):
        wrapped = "setup:\n" + textwrap.indent(MINIMAL, "  ")
        profile = load_profile(_write(tmp_path, wrapped))
        assert profile.package_manager == "homebrew"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_profile(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_profile(_write(tmp_path, "platform: [macos\n"))

    def test_not_a_mapping(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="mapping"):
            load_profile(_write(tmp_path, "- git\n- neovim\n"))

    def test_schema_error(self, tmp_path: Path):
        bad = "platform: windows\npackage_manager: homebrew\n"
        with pytest.raises(ConfigError, match="Invalid setup configuration"):
            load_profile(_write(tmp_path, bad))

    def test_unknown_manager(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_profile(_write(tmp_path, "platform: macos\npackage_manager: macports\n"))


class TestFindConfigFile:
    def test_walks_up(self, tmp_path: Path):
        config = _write(tmp_path, MINIMAL)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config.resolve()

    def test_not_found(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        found = find_config_file(empty)
        assert found is None or not str(found).startswith(str(empty))


class TestBuiltinProfiles:
    def test_paths(self):
        assert builtin_profile_path("macos").is_file()
        assert builtin_profile_path("windows").is_file()
        assert builtin_profile_path("linux") is None

    def test_macos(self):
        profile = load_builtin_profile("macos")
        assert profile.package_manager == "homebrew"
        assert not profile.require_elevation
        sets = {s.name: s for s in profile.package_sets}
        assert "git" in sets["formulas"].packages
        assert "win32yank" in sets["formulas"].packages
        assert sets["casks"].kind == "cask"
        assert profile.toolchain.installer_package == "rustup-init"
        assert "cargo-edit" in profile.toolchain.tools

    def test_windows(self):
        profile = load_builtin_profile("windows")
        assert profile.package_manager == "scoop"
        assert profile.require_elevation
        assert "extras" in profile.sources
        assert profile.toolchain.installer_package == "rustup"

    def test_aliyun_mirror(self):
        mirror = load_builtin_profile("macos").toolchain.mirror
        assert mirror.env["RUSTUP_DIST_SERVER"] == "https://mirrors.aliyun.com/rustup"
        assert mirror.env["RUSTUP_UPDATE_ROOT"] == "https://mirrors.aliyun.com/rustup/rustup"
        assert mirror.config_file == "~/.cargo/config.toml"
        assert "~/.cargo/config" in mirror.config_aliases
        assert "sparse+https://mirrors.aliyun.com/crates.io-index/" in mirror.config_template

    def test_starship_profiles(self):
        profile = load_builtin_profile("macos")
        markers = {p.marker for p in profile.profiles if p.marker}
        assert "starship init zsh" in markers

    def test_unsupported_platform(self):
        with pytest.raises(ConfigError, match="No built-in profile"):
            load_builtin_profile("linux")


class TestResolveProfile:
    def test_explicit_path(self, tmp_path: Path):
        config = _write(tmp_path, MINIMAL)
        profile, path = resolve_profile(config)
        assert profile.name == "test-mac"
        assert path == config

    def test_platform_mismatch(self, tmp_path: Path):
        config = _write(tmp_path, MINIMAL)
        with pytest.raises(ConfigError, match="targets 'macos'"):
            resolve_profile(config, "windows")

    def test_builtin_fallback(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("envsetup.core.config.loader.find_config_file", lambda: None)
        profile, path = resolve_profile(None, "windows")
        assert profile.platform == "windows"
        assert path is None

    def test_found_upward(self, tmp_path: Path, monkeypatch):
        config = _write(tmp_path, MINIMAL)
        nested = tmp_path / "project"
        nested.mkdir()
        monkeypatch.chdir(nested)
        profile, path = resolve_profile()
        assert profile.name == "test-mac"
        assert path == config.resolve()


# ── Config check ─────────────────────────────────────────────────────


class TestCheckConfig:
    def test_valid(self, tmp_path: Path):
        result = check_config(_write(tmp_path, MINIMAL))
        assert result.valid
        assert not result.builtin
        assert result.to_dict()["package_sets"] == {"formulas": 2}

    def test_builtin_is_valid(self):
        for platform in ("macos", "windows"):
            result = check_config(builtin_profile_path(platform), platform)
            assert result.valid, result.errors

    def test_load_error(self, tmp_path: Path):
        result = check_config(tmp_path / "missing.yml")
        assert not result.valid
        assert result.errors

    def test_duplicate_set_names(self, tmp_path: Path):
        content = MINIMAL + "  - name: formulas\n    packages: [fd]\n"
        result = check_config(_write(tmp_path, content))
        assert not result.valid
        assert any("Duplicate" in e for e in result.errors)

    def test_cask_on_scoop(self, tmp_path: Path):
        content = textwrap.dedent("""\
            platform: windows
            package_manager: scoop
            require_elevation: true
            package_sets:
              - name: apps
                kind: cask
                packages: [wezterm]
        """)
        result = check_config(_write(tmp_path, content))
        assert not result.valid
        assert any("cask" in e for e in result.errors)

    def test_warnings(self, tmp_path: Path):
        content = textwrap.dedent("""\
            platform: windows
            package_manager: scoop
            package_sets:
              - name: apps
                packages: [git, git]
              - name: empty
            toolchain:
              mirror:
                config_file: ~/.cargo/config.toml
        """)
        result = check_config(_write(tmp_path, content))
        assert result.valid
        joined = "\n".join(result.warnings)
        assert "more than once" in joined
        assert "'empty' is empty" in joined
        assert "config_template" in joined
        assert "no tools" in joined
        assert "require_elevation" in joined
