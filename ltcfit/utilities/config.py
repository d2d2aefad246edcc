'''
This file contains the Config class which is used to load and store the fitting settings from the config.yaml file.
'''

import os
import yaml
from ltcfit.utilities.locations import Locations

EXPORT_FORMATS = ('npy', 'c', 'js')

class Config:
    def __init__(self, config_path=None):
        # Initialize Locations
        self.locations = Locations()

        # Use provided config path or search in standard locations
        if config_path is None:
            # Look in private first, then public
            for candidate in self.locations.get_default_config_files():
                if os.path.exists(candidate):
                    config_path = candidate
                    break
            else:
                raise FileNotFoundError("No configuration file found in standard locations")

        # Load configuration
        with open(config_path, 'r') as file:
            self.config_data = yaml.safe_load(file) or {}

        # Load settings from the YAML file
        self.load_settings()

    def load_settings(self):
        # General settings
        self.silent_mode = self.config_data.get('silent_mode', False)
        self.log_cells = self.config_data.get('log_cells', False)
        self.brdf = self.config_data.get('brdf', 'ggx')

        # Table and sampling parameters
        self.table_size = int(self.config_data.get('table_size', 64))
        self.n_samples = int(self.config_data.get('n_samples', 32))
        self.min_alpha = float(self.config_data.get('min_alpha', 1e-4))

        # Optimizer parameters
        self.epsilon = float(self.config_data.get('epsilon', 0.05))
        self.tolerance = float(self.config_data.get('tolerance', 1e-5))
        self.max_iterations = int(self.config_data.get('max_iterations', 100))

        # Output settings
        self.output_directory = self.config_data.get('output_directory', self.locations.ltc_tables)
        self.output_name = self.config_data.get('output_name', f"ltc_{self.brdf}")
        self.export_formats = list(self.config_data.get('export_formats', EXPORT_FORMATS))

    def validate(self):
        """
        Check the loaded settings for values the fitter cannot work with.
        Raises ValueError describing the first problem found.
        """
        if self.table_size < 2:
            raise ValueError(f"table_size must be at least 2, got {self.table_size}")
        if self.n_samples < 1:
            raise ValueError(f"n_samples must be at least 1, got {self.n_samples}")
        if self.min_alpha <= 0:
            raise ValueError(f"min_alpha must be positive, got {self.min_alpha}")
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")

        unknown_formats = [fmt for fmt in self.export_formats if fmt not in EXPORT_FORMATS]
        if unknown_formats:
            raise ValueError(f"Unknown export formats: {unknown_formats}. Available formats: {list(EXPORT_FORMATS)}")
