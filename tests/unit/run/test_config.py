"""
Unit tests for Config class.
"""

import logging
import os
import pytest

from evoneat.errors     import InvalidConfig
from evoneat.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


@pytest.fixture
def valid_config_file(test_config_dir):
    return os.path.join(test_config_dir, 'valid.txt')


@pytest.fixture
def write_config(valid_config_file, tmp_path):
    """Return a function writing a variant of the valid configuration file."""
    with open(valid_config_file, encoding='utf-8') as f:
        lines = f.read().splitlines()

    def write(remove=(), replace=None, append=()):
        replace = replace or {}
        out = []
        for line in lines:
            key = line.split('=')[0].strip()
            if key in remove:
                continue
            if key in replace:
                line = f"{key} = {replace[key]}"
            out.append(line)
        out.extend(append)
        path = tmp_path / 'config.txt'
        path.write_text('\n'.join(out), encoding='utf-8')
        return str(path)

    return write


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_init_without_file_creates_default_config(self):
        """Test that Config() without file creates a usable default config."""
        config = Config()

        assert config.population_size == 50
        assert config.num_inputs == 10
        assert config.num_outputs == 2
        assert config.activation_default == 'sigmoid'
        assert config.initial_connections == 'full'
        config.validate()

    def test_init_with_nonexistent_file_raises_error(self):
        with pytest.raises(InvalidConfig, match="Configuration file .* not found"):
            Config('nonexistent_file.txt')

    def test_init_with_valid_file(self, valid_config_file):
        config = Config(valid_config_file)

        assert config.population_size == 30
        assert config.fitness_threshold == 3.9
        assert config.no_fitness_termination is False
        assert config.reset_on_extinction is True
        assert config.activation_default == 'tanh'
        assert config.num_inputs == 2
        assert config.num_outputs == 1
        assert config.initial_connections == 'full'
        assert config.weight_init_type == 'normal'
        assert config.weight_min_value == -5.0
        assert config.weight_max_value == 5.0
        assert config.max_stagnation == 20
        assert config.bad_species_threshold == 0.25

    def test_value_types(self, valid_config_file):
        config = Config(valid_config_file)

        assert isinstance(config.population_size, int)
        assert isinstance(config.conn_add_prob, float)
        assert isinstance(config.enabled_default, bool)
        assert isinstance(config.activation_default, str)


# ============================================================================
# Test Optional Keys
# ============================================================================

class TestOptionalKeys:
    """Test keys that may be omitted."""

    def test_hidden_layers_default(self, valid_config_file):
        config = Config(valid_config_file)
        assert config.num_hidden_layers == 0
        assert config.num_hidden_nodes == 1

    def test_hidden_layers_given(self, write_config):
        config = Config(write_config(append=["num_hidden_layers = 2", "num_hidden_nodes = 4"]))
        assert config.num_hidden_layers == 2
        assert config.num_hidden_nodes == 4


# ============================================================================
# Test File Format
# ============================================================================

class TestFileFormat:
    """Test comments, blank lines, indentation and unknown keys."""

    def test_comments_and_blank_lines_ignored(self, write_config):
        config = Config(write_config(append=["", "# population_size = 7", "   ", "#"]))
        assert config.population_size == 30

    def test_indented_lines(self, write_config):
        config = Config(write_config(replace={'population_size': '40'}, remove=()))
        assert config.population_size == 40

        path = write_config(remove=('population_size',), append=["    population_size = 12"])
        assert Config(path).population_size == 12

    def test_unknown_key_warns(self, write_config, caplog):
        with caplog.at_level(logging.WARNING, logger='evoneat.run.config'):
            Config(write_config(append=["mystery_knob = 3"]))

        assert "Unknown key: mystery_knob" in caplog.text


# ============================================================================
# Test Errors
# ============================================================================

class TestConfigErrors:
    """Test InvalidConfig is raised for bad files."""

    def test_missing_key(self, write_config):
        with pytest.raises(InvalidConfig, match="compatibility_threshold"):
            Config(write_config(remove=('compatibility_threshold',)))

    @pytest.mark.parametrize("key, value", [
        ('population_size',        'many'),
        ('conn_add_prob',          'often'),
        ('no_fitness_termination', 'perhaps'),
    ])
    def test_bad_type(self, write_config, key, value):
        with pytest.raises(InvalidConfig, match=key):
            Config(write_config(replace={key: value}))

    @pytest.mark.parametrize("key, value", [
        ('activation_default',  'gaussian'),
        ('initial_connections', 'partial'),
        ('weight_init_type',    'xavier'),
        ('weight_min_value',    '10.0'),
        ('population_size',     '0'),
        ('num_inputs',          '0'),
        ('min_species_size',    '0'),
    ])
    def test_inconsistent_values(self, write_config, key, value):
        with pytest.raises(InvalidConfig):
            Config(write_config(replace={key: value}))

    def test_invalid_config_is_a_value_error(self, write_config):
        with pytest.raises(ValueError):
            Config(write_config(replace={'population_size': '-1'}))
