import os

class Locations:
    def __init__(self):
        self.project_root = self._find_project_root()

        # Base directories
        self.data = os.path.join(self.project_root, "data")
        self.private = os.path.join(self.project_root, "private")

        # Public data subdirectories
        self.config = os.path.join(self.data, "config")
        self.ltc_tables = os.path.join(self.data, "ltc_tables")

    def _find_project_root(self):
        """Find the project root directory by looking for .git folder or fallback to parent of the ltcfit package or current working directory"""
        current = os.path.abspath(os.path.dirname(__file__))
        while True:
            # If .git folder exists, this is the project root.
            if os.path.exists(os.path.join(current, '.git')):
                return current
            # If we're at the package directory, project root is its parent.
            if os.path.basename(current) == "ltcfit":
                return os.path.dirname(current)
            parent = os.path.dirname(current)
            # If we've reached the filesystem root or cannot move up further, fallback to cwd.
            if parent == current:
                return os.getcwd()
            current = parent

    def get_config_path(self):
        return self.config

    def get_default_config_files(self):
        """Candidate config files, private first."""
        return [
            os.path.join(self.private, "data", "config", "config.yaml"),
            os.path.join(self.config, "config.yaml"),
        ]

    def get_ltc_table_path(self, filename, directory=None):
        # A custom output directory from the config takes precedence over the default one
        if directory is not None:
            return os.path.join(directory, filename)
        return os.path.join(self.ltc_tables, filename)

    def ensure_directories_exist(self, output_directory=None):
        """
        Ensure that the table output directory exists.
        """
        if output_directory is None:
            output_directory = self.ltc_tables
        os.makedirs(output_directory, exist_ok=True)
