import logging

import pytest

from litminer.config import AnalysisConfig, DEFAULT_CHAPTER_PATTERN, load_config
from litminer.exceptions import ConfigError


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.lowercase is True
        assert config.per == 100.0
        assert config.chapter_pattern == DEFAULT_CHAPTER_PATTERN
        assert config.polarity_backend == "vader"
        assert config.extra_stopwords == []

    def test_round_trip(self):
        config = AnalysisConfig(top_n=5, extra_stopwords=["ahab"], seed=3)
        assert AnalysisConfig.from_dict(config.to_dict()) == config

    def test_unknown_key_raises(self):
        with pytest.raises(ConfigError, match="colour"):
            AnalysisConfig.from_dict({"colour": "blue"})


class TestLoadConfig:
    def test_none_returns_defaults(self):
        assert load_config(None) == AnalysisConfig()

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "litminer.yaml"
        path.write_text("top_n: 10\nremove_stopwords: false\nextra_stopwords: [ahab]\n")
        config = load_config(path)
        assert config.top_n == 10
        assert config.remove_stopwords is False
        assert config.extra_stopwords == ["ahab"]

    def test_unwraps_litminer_section(self, tmp_path):
        path = tmp_path / "project.yaml"
        path.write_text("litminer:\n  per: 1000\n  seed: 42\n")
        config = load_config(path)
        assert config.per == 1000
        assert config.seed == 42

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == AnalysisConfig()

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("top_n: [1, 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_unknown_key_in_file_raises(self, tmp_path):
        path = tmp_path / "typo.yaml"
        path.write_text("top_m: 3\n")
        with pytest.raises(ConfigError, match="top_m"):
            load_config(path)


class TestSetupLogger:
    def test_attaches_single_rich_handler(self):
        from rich.logging import RichHandler
        from litminer.utils.logger import setup_logger

        logger = setup_logger("litminer.test_logger", level=logging.DEBUG)
        setup_logger("litminer.test_logger", level=logging.DEBUG)
        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG
