"""Test store configuration loading and adapter factory."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from jobstore.config import StoreConfig, default_base_directory, load_store_config
from jobstore.constants import DEFAULT_DIRECTORIES, ENV_BASE_DIR, ENV_BOOTSTRAP
from jobstore.errors import ConfigError
from jobstore.storage import FilesystemAdapter, make_adapter


class TestStoreConfig:
    """Test StoreConfig defaults and validation."""

    def test_defaults(self):
        config = StoreConfig()
        assert config.provider == "fs"
        assert config.base_directory == default_base_directory()
        assert config.directories == DEFAULT_DIRECTORIES
        assert config.bootstrap is False

    def test_defaults_not_shared(self):
        """Mutating one config's directories leaves the defaults alone."""
        config = StoreConfig()
        config.directories["extra"] = "extra"
        assert "extra" not in StoreConfig().directories
        assert "extra" not in DEFAULT_DIRECTORIES

    @pytest.mark.parametrize("bad", ["/abs", "../up", "a/../../b", ""])
    def test_rejects_unsafe_directories(self, bad):
        with pytest.raises(ValidationError):
            StoreConfig(directories={"results": bad})

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_rejects_blank_base_directory(self, blank):
        """A blank base directory is an error, not the working directory."""
        with pytest.raises(ConfigError, match="base_directory required"):
            StoreConfig(base_directory=blank)


class TestLoadStoreConfig:
    """Test YAML loading and environment overrides."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_store_config(tmp_path / "nope.yaml")
        assert config == StoreConfig()

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "jobstore.yaml").write_text(f"base_directory: {tmp_path / 'data'}\n")
        assert load_store_config().base_directory == tmp_path / "data"

    def test_load_yaml(self, tmp_path):
        cfg = tmp_path / "store.yaml"
        cfg.write_text(f"""base_directory: {tmp_path / 'data'}
bootstrap: true
directories:
  results: out/results
  execution: out/execution
""")
        config = load_store_config(cfg)
        assert config.base_directory == tmp_path / "data"
        assert config.bootstrap is True
        assert config.directories == {"results": "out/results", "execution": "out/execution"}

    def test_storage_section(self, tmp_path):
        """Settings may be nested under a top-level storage key."""
        cfg = tmp_path / "app.yaml"
        cfg.write_text(f"storage:\n  base_directory: {tmp_path / 'nested'}\n")
        assert load_store_config(cfg).base_directory == tmp_path / "nested"

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "empty.yaml"
        cfg.write_text("")
        assert load_store_config(cfg) == StoreConfig()

    def test_invalid_yaml(self, tmp_path):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("base_directory: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_store_config(cfg)

    def test_non_mapping(self, tmp_path):
        cfg = tmp_path / "list.yaml"
        cfg.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a mapping"):
            load_store_config(cfg)

    @pytest.mark.parametrize("section", ["storage:\n", "storage: null\n", "storage:\n  - a\n"])
    def test_storage_section_not_mapping(self, tmp_path, section):
        cfg = tmp_path / "bad-section.yaml"
        cfg.write_text(section)
        with pytest.raises(ConfigError, match="Expected a mapping under 'storage'"):
            load_store_config(cfg)

    def test_blank_env_base_dir(self, tmp_path, monkeypatch):
        """An empty JOBSTORE_BASE_DIR is rejected instead of using the cwd."""
        monkeypatch.setenv(ENV_BASE_DIR, "")
        with pytest.raises(ConfigError, match="base_directory required"):
            load_store_config(tmp_path / "none.yaml")

    def test_invalid_values(self, tmp_path):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("directories:\n  results: /etc\n")
        with pytest.raises(ConfigError, match="Invalid store configuration"):
            load_store_config(cfg)

    def test_env_overrides(self, tmp_path, monkeypatch):
        cfg = tmp_path / "store.yaml"
        cfg.write_text(f"base_directory: {tmp_path / 'from-file'}\nbootstrap: false\n")
        monkeypatch.setenv(ENV_BASE_DIR, str(tmp_path / "from-env"))
        monkeypatch.setenv(ENV_BOOTSTRAP, "yes")

        config = load_store_config(cfg)
        assert config.base_directory == tmp_path / "from-env"
        assert config.bootstrap is True

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("false", False), ("0", False)])
    def test_bootstrap_flag_values(self, tmp_path, monkeypatch, value, expected):
        monkeypatch.setenv(ENV_BOOTSTRAP, value)
        assert load_store_config(tmp_path / "none.yaml").bootstrap is expected


class TestMakeAdapter:
    """Test the adapter factory."""

    def test_blank_base_directory(self, tmp_path, monkeypatch):
        """The factory never roots a store at the working directory."""
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="base_directory required"):
            make_adapter(StoreConfig(base_directory=""))
        assert list(tmp_path.iterdir()) == []

    def test_fs_provider(self, tmp_path):
        config = StoreConfig(base_directory=tmp_path / "fs", bootstrap=True)
        adapter = make_adapter(config)
        assert isinstance(adapter, FilesystemAdapter)
        assert adapter.base_directory == (tmp_path / "fs").resolve()
        assert (tmp_path / "fs" / "jobs-results").is_dir()

    def test_base_directory_is_a_file(self, tmp_path):
        base = tmp_path / "file"
        base.write_text("not a dir")
        with pytest.raises(ConfigError, match="not a directory"):
            make_adapter(StoreConfig(base_directory=base))

    def test_unsupported_provider(self, tmp_path):
        with pytest.raises(NotImplementedError, match="s3"):
            make_adapter(StoreConfig(provider="s3", base_directory=tmp_path))
