"""
Tests for configuration management.

Tests:
- Built-in defaults
- Partial YAML files merged over defaults
- Validation of thresholds, limits and the default sort
- The search engine honouring configured defaults
"""

import pytest
import yaml

from standards_search.exceptions import ConfigurationError
from standards_search.matching.types import Query
from standards_search.models import SortField
from standards_search.search.engine import SearchEngine
from standards_search.search.types import SortDirection
from standards_search.utils.config_manager import ConfigManager
from tests.fixtures.test_data import NAME_ASCENDING, ids


def write_config(tmp_path, content: str):
    path = tmp_path / "search_config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_defaults_without_file(self):
        config = ConfigManager()
        assert config.get_threshold('fuzzy') == 0.8
        assert config.get_threshold('duplicate') == 0.82
        assert config.get_param('duplicates', 'max_results') == 5
        assert config.get_param('suggestions', 'limit') == 5
        assert config.get_param('filters', 'expiring_soon_days') == 30
        assert config.validate_config() == []

    def test_missing_path_uses_defaults(self, tmp_path):
        config = ConfigManager(tmp_path / "absent.yaml")
        assert config.get_all_config() == ConfigManager.DEFAULT_CONFIG

    def test_default_path_is_valid(self):
        config = ConfigManager.from_default_path()
        assert config.validate_config() == []

    def test_partial_file_merged(self, tmp_path):
        path = write_config(tmp_path, "thresholds:\n  fuzzy: 0.7\nsuggestions:\n  limit: 3\n")
        config = ConfigManager(path)

        assert config.get_threshold('fuzzy') == 0.7
        assert config.get_threshold('duplicate') == 0.82
        assert config.get_param('suggestions', 'limit') == 3
        assert config.get_param('sorting', 'field') == 'name'
        assert config.config_path == path

    def test_empty_file(self, tmp_path, caplog):
        path = write_config(tmp_path, "")
        with caplog.at_level("WARNING"):
            config = ConfigManager(path)
        assert config.get_all_config() == ConfigManager.DEFAULT_CONFIG
        assert "Empty config file" in caplog.text

    @pytest.mark.parametrize("content", [
        "thresholds:\n  fuzzy: 1.5\n",
        "thresholds:\n  duplicate: high\n",
        "thresholds:\n  fuzzy: true\n",
        "duplicates:\n  max_results: -1\n",
        "suggestions:\n  limit: 2.5\n",
        "filters:\n  expiring_soon_days: soon\n",
        "sorting:\n  field: colour\n",
        "sorting:\n  direction: sideways\n",
    ])
    def test_invalid_values(self, tmp_path, content):
        path = write_config(tmp_path, content)
        with pytest.raises(ConfigurationError):
            ConfigManager(path)

    def test_malformed_yaml(self, tmp_path):
        path = write_config(tmp_path, "thresholds: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            ConfigManager(path)

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load_config(tmp_path / "absent.yaml")

    def test_unknown_keys(self):
        config = ConfigManager()
        with pytest.raises(KeyError):
            config.get_threshold('semantic')
        with pytest.raises(KeyError):
            config.get_param('sorting', 'secondary')

    def test_update_threshold(self):
        config = ConfigManager()
        config.update_threshold('fuzzy', 0.65)
        assert config.get_threshold('fuzzy') == 0.65

        with pytest.raises(ConfigurationError):
            config.update_threshold('fuzzy', 1.1)
        assert config.get_threshold('fuzzy') == 0.65

    def test_reset_to_defaults(self):
        config = ConfigManager()
        config.update_threshold('duplicate', 0.5)
        config.reset_to_defaults()
        assert config.get_threshold('duplicate') == 0.82

    def test_get_all_config_is_copy(self):
        config = ConfigManager()
        snapshot = config.get_all_config()
        snapshot['thresholds']['fuzzy'] = 0.1
        assert config.get_threshold('fuzzy') == 0.8

    def test_defaults_not_shared(self):
        first = ConfigManager()
        first.update_threshold('fuzzy', 0.3)
        assert ConfigManager().get_threshold('fuzzy') == 0.8


class TestEngineConfiguration:
    """The search engine reads its defaults from the ConfigManager."""

    def test_fuzzy_threshold(self, records):
        config = ConfigManager()
        config.update_threshold('fuzzy', 1.0)
        engine = SearchEngine(records, config=config)

        result = engine.search("glucse")
        assert result.records == []
        assert result.query.threshold == 1.0

        # an explicit Query keeps its own threshold
        assert len(engine.search(Query("glucse", threshold=0.8)).records) == 2

    def test_default_sort(self, tmp_path, records):
        path = write_config(tmp_path, "sorting:\n  field: lab_expiry_date\n  direction: desc\n")
        engine = SearchEngine(records, config=ConfigManager(path))

        result = engine.search()
        assert result.sort.field is SortField.LAB_EXPIRY
        assert result.sort.direction is SortDirection.DESCENDING
        assert ids(result.records)[0] == 'LS-004'

    def test_default_sort_without_file(self, engine):
        assert ids(engine.search().records) == NAME_ASCENDING

    def test_suggestion_limit(self, tmp_path, records):
        path = write_config(tmp_path, "suggestions:\n  limit: 1\n")
        engine = SearchEngine(records, config=ConfigManager(path))
        assert engine.suggest("sigma") == ["Glucose Standard"]

    def test_duplicate_settings(self, tmp_path, records):
        path = write_config(tmp_path, "thresholds:\n  duplicate: 0.0\nduplicates:\n  max_results: 2\n")
        engine = SearchEngine(records, config=ConfigManager(path))
        assert len(engine.find_similar("Glucose Standard")) == 2

    def test_expiring_soon_days(self, tmp_path, records, fixed_now):
        path = write_config(tmp_path, "filters:\n  expiring_soon_days: 60\n")
        engine = SearchEngine(records, config=ConfigManager(path))
        assert ids(engine.expiring_soon(now=fixed_now)) == ['LS-001', 'LS-007']
