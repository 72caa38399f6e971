"""Tests for configuration loading and validation."""

import pytest
import yaml

from multidistances.config import ConfigManager, MultiDistancesConfig
from multidistances.errors import ConfigurationError


class TestMultiDistancesConfig:
    """Test the configuration dataclass."""

    def test_defaults(self):
        config = MultiDistancesConfig()
        assert config.metric == "ncd-xz"
        assert config.strategy == "maximin"
        assert config.precalc is True
        assert config.workers == 1
        config.validate()

    def test_from_dict_ignores_unknown_keys(self):
        config = MultiDistancesConfig.from_dict({"metric": "jaro", "colour": "blue"})
        assert config.metric == "jaro"
        assert not hasattr(config, "colour")

    def test_dict_round_trip(self):
        config = MultiDistancesConfig(metric="cosine", q=3, extensions=["txt"])
        assert MultiDistancesConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize("field,value", [
        ("q", 0),
        ("workers", 0),
        ("top_n", 0),
        ("strategy", "random"),
        ("log_level", "LOUD"),
        ("q", "two"),
        ("q", True),
        ("workers", None),
        ("top_n", 2.5),
        ("compression_level", "max"),
        ("strategy", 3),
        ("log_level", 10),
        ("metric", None),
        ("precalc", "yes"),
        ("recursive", 1),
        ("extensions", "txt"),
    ])
    def test_validate_rejects(self, field, value):
        config = MultiDistancesConfig(**{field: value})
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert field in exc_info.value.message

    def test_validate_reports_every_error(self):
        config = MultiDistancesConfig(q=0, workers=0)
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert len(exc_info.value.details["errors"]) == 2

    def test_wrong_types_reported_together(self):
        config = MultiDistancesConfig(q="two", log_level=10, workers=None)
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert len(exc_info.value.details["errors"]) == 3

    def test_compression_level_may_be_null(self):
        MultiDistancesConfig(compression_level=None).validate()
        MultiDistancesConfig(compression_level=3).validate()

    def test_strategy_spellings_accepted(self):
        MultiDistancesConfig(strategy="MaxiMean").validate()
        MultiDistancesConfig(strategy="maxi-min").validate()


class TestConfigManager:
    """Test loading and saving configuration files."""

    def test_missing_file_gives_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.yml")
        assert manager.load() == MultiDistancesConfig()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yml"
        written = ConfigManager(path).save(MultiDistancesConfig(metric="jaccard", q=4))
        assert written == path

        loaded = ConfigManager(path).load()
        assert loaded.metric == "jaccard"
        assert loaded.q == 4

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"strategy": "maximean"}))
        config = ConfigManager(path).load()
        assert config.strategy == "maximean"
        assert config.metric == "ncd-xz"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert ConfigManager(path).load() == MultiDistancesConfig()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("metric: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"metric": "jaro", "workers": 2}))
        monkeypatch.setenv("MULTIDISTANCES_METRIC", "cosine")
        monkeypatch.setenv("MULTIDISTANCES_WORKERS", "4")
        monkeypatch.setenv("MULTIDISTANCES_PRECALC", "no")

        config = ConfigManager(path).load()
        assert config.metric == "cosine"
        assert config.workers == 4
        assert config.precalc is False

    def test_invalid_env_integer(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MULTIDISTANCES_Q", "two")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(tmp_path / "absent.yml").load()
        assert exc_info.value.parameter == "q"

    def test_display(self, tmp_path):
        from io import StringIO
        from rich.console import Console

        out = StringIO()
        manager = ConfigManager(tmp_path / "absent.yml", console=Console(file=out, width=120))
        manager.display()
        assert "ncd-xz" in out.getvalue()
