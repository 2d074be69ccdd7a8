import configparser
import logging
import os

from evoneat.activations import activations
from evoneat.errors      import InvalidConfig

logger = logging.getLogger(__name__)

# The configuration file is a flat 'key = value' list; 'configparser'
# needs a section header, so one is prepended before parsing.
_SECTION = 'NEAT'

# key => (type, required)
_KEYS = {
    # [NEAT]
    'population_size'                   : (int,   True),
    'fitness_threshold'                 : (float, True),
    'no_fitness_termination'            : (bool,  True),
    'reset_on_extinction'               : (bool,  True),

    # [GENOME]
    'activation_default'                : (str,   True),
    'activation_mutate_rate'            : (float, True),
    'num_inputs'                        : (int,   True),
    'num_outputs'                       : (int,   True),
    'num_hidden_layers'                 : (int,   False),
    'num_hidden_nodes'                  : (int,   False),
    'compatibility_disjoint_coefficient': (float, True),
    'compatibility_weight_coefficient'  : (float, True),
    'conn_add_prob'                     : (float, True),
    'conn_delete_prob'                  : (float, True),
    'enabled_default'                   : (bool,  True),
    'enabled_mutate_rate'               : (float, True),
    'initial_connections'               : (str,   True),
    'node_add_prob'                     : (float, True),
    'node_delete_prob'                  : (float, True),
    'weight_init_mean'                  : (float, True),
    'weight_init_stdev'                 : (float, True),
    'weight_init_type'                  : (str,   True),
    'weight_max_value'                  : (float, True),
    'weight_min_value'                  : (float, True),
    'weight_mutate_rate'                : (float, True),
    'weight_replace_rate'               : (float, True),

    # [STAGNATION]
    'max_stagnation'                    : (int,   True),
    'species_elitism'                   : (int,   True),

    # [REPRODUCTION]
    'elitism'                           : (int,   True),
    'survival_threshold'                : (float, True),
    'min_species_size'                  : (int,   True),

    # [SPECIES]
    'compatibility_threshold'           : (float, True),
    'bad_species_threshold'             : (float, True),
}

# Values of the optional keys when absent from the file
_OPTIONAL_DEFAULTS = {
    'num_hidden_layers': 0,
    'num_hidden_nodes' : 1,
}

INITIAL_CONNECTIONS = ('full', 'none')
WEIGHT_INIT_TYPES   = ('normal', 'uniform')

class Config:
    """
    Configuration parameters of the NEAT engine.

    A Config is either read from a plain-text 'key = value' file (one pair
    per line, '#' comments and blank lines ignored), or created empty with
    usable defaults and then adjusted attribute by attribute.

    Raises:
        InvalidConfig: the file is missing, a required key is absent, a value
                       cannot be converted to the expected type, or the values
                       are inconsistent with each other
    """

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing a configuration file, or create a default Config.

        Parameters:
            config_file: Path to the configuration file.
                         If None, creates a default Config for manual attribute setting.
        """

        # Default config for testing/manual setup
        if config_file is None:

            # [NEAT]
            self.population_size        = 50
            self.fitness_threshold      = 100.0
            self.no_fitness_termination = False
            self.reset_on_extinction    = True

            # [GENOME]
            self.activation_default                 = 'sigmoid'
            self.activation_mutate_rate             = 0.1
            self.num_inputs                         = 10
            self.num_outputs                        = 2
            self.num_hidden_layers                  = 0
            self.num_hidden_nodes                   = 1
            self.compatibility_disjoint_coefficient = 1.0
            self.compatibility_weight_coefficient   = 0.5
            self.conn_add_prob                      = 0.1
            self.conn_delete_prob                   = 0.0
            self.enabled_default                    = True
            self.enabled_mutate_rate                = 0.1
            self.initial_connections                = 'full'
            self.node_add_prob                      = 0.1
            self.node_delete_prob                   = 0.0
            self.weight_init_mean                   = 0.0
            self.weight_init_stdev                  = 1.0
            self.weight_init_type                   = 'normal'
            self.weight_max_value                   = 1.0
            self.weight_min_value                   = -1.0
            self.weight_mutate_rate                 = 0.9
            self.weight_replace_rate                = 0.1

            # [STAGNATION]
            self.max_stagnation  = 15
            self.species_elitism = 2

            # [REPRODUCTION]
            self.elitism            = 2
            self.survival_threshold = 0.2
            self.min_species_size   = 2

            # [SPECIES]
            self.compatibility_threshold = 3.0
            self.bad_species_threshold   = 0.25

            return

        if not os.path.exists(config_file):
            raise InvalidConfig(f"Configuration file '{config_file}' not found")

        # Indented lines would be read as continuation lines; strip them.
        with open(config_file, encoding='utf-8') as f:
            content = '\n'.join(line.strip() for line in f)

        parser = configparser.ConfigParser(delimiters=('=',), comment_prefixes=('#',),
                                           interpolation=None)
        try:
            parser.read_string(f"[{_SECTION}]\n{content}", source=config_file)
        except configparser.Error as e:
            raise InvalidConfig(f"Cannot parse configuration file '{config_file}': {e}") from e

        section = parser[_SECTION]

        for key in section:
            if key not in _KEYS:
                logger.warning("Unknown key: %s", key)

        for key, (value_type, required) in _KEYS.items():
            if key not in section:
                if required:
                    raise InvalidConfig(f"Missing configuration key '{key}'")
                setattr(self, key, _OPTIONAL_DEFAULTS[key])
                continue

            try:
                if value_type == int:
                    value = section.getint(key)
                elif value_type == float:
                    value = section.getfloat(key)
                elif value_type == bool:
                    value = section.getboolean(key)
                else:
                    value = section.get(key)
            except ValueError as e:
                raise InvalidConfig(f"Bad value for configuration key '{key}': {section.get(key)!r}") from e
            setattr(self, key, value)

        self.validate()

    def validate(self) -> None:
        """
        Check that the configuration values are consistent.

        Raises:
            InvalidConfig: if any value is out of its allowed range
        """
        if self.activation_default not in activations:
            raise InvalidConfig(f"Unknown activation function '{self.activation_default}'")
        if self.initial_connections not in INITIAL_CONNECTIONS:
            raise InvalidConfig(f"'initial_connections' must be one of {INITIAL_CONNECTIONS}, "
                                f"got '{self.initial_connections}'")
        if self.weight_init_type not in WEIGHT_INIT_TYPES:
            raise InvalidConfig(f"'weight_init_type' must be one of {WEIGHT_INIT_TYPES}, "
                                f"got '{self.weight_init_type}'")
        if self.weight_min_value > self.weight_max_value:
            raise InvalidConfig("'weight_min_value' is greater than 'weight_max_value'")
        if self.population_size < 1:
            raise InvalidConfig("'population_size' must be at least 1")
        if self.num_inputs < 1 or self.num_outputs < 1:
            raise InvalidConfig("'num_inputs' and 'num_outputs' must be at least 1")
        if self.num_hidden_layers < 0:
            raise InvalidConfig("'num_hidden_layers' cannot be negative")
        if self.num_hidden_layers > 0 and self.num_hidden_nodes < 1:
            raise InvalidConfig("'num_hidden_nodes' must be at least 1 when hidden layers are requested")
        if self.min_species_size < 1:
            raise InvalidConfig("'min_species_size' must be at least 1")
        if self.species_elitism < 0 or self.max_stagnation < 0:
            raise InvalidConfig("'species_elitism' and 'max_stagnation' cannot be negative")
