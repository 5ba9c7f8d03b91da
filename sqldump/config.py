"""
Configuration loading and validation for the SQL dump engine.
"""

import os
import re
from typing import Any

import yaml

from .models import ErrorPolicy


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
    LIST_KEYS = ('include_tables', 'exclude_tables', 'include_tables_regex', 'exclude_tables_regex')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems = []
        instances = self.config.get('instances', {})

        on_error = self.get_defaults().get('on_error')
        if on_error is not None and on_error not in {p.value for p in ErrorPolicy}:
            problems.append(f"defaults: unknown on_error policy '{on_error}'")

        for i, db in enumerate(self.get_databases()):
            name = db.get('name')
            if not name:
                problems.append(f"databases[{i}]: missing 'name'")
                continue
            instance = db.get('instance', 'primary')
            if instance not in instances:
                problems.append(f"{name}: instance '{instance}' not found in configuration")
            for key in self.LIST_KEYS:
                if key in db and not isinstance(db[key], list):
                    problems.append(f"{name}: '{key}' must be a list")
            tables = db.get('tables', '*')
            if tables != '*' and not isinstance(tables, list):
                problems.append(f"{name}: 'tables' must be '*' or a list")
            if 'on_error' in db and db['on_error'] not in {p.value for p in ErrorPolicy}:
                problems.append(f"{name}: unknown on_error policy '{db['on_error']}'")

        return problems

    def get_instance(self, instance_name: str) -> dict[str, Any]:
        """Get database instance configuration."""
        instances = self.config.get('instances', {})
        if instance_name not in instances:
            raise ValueError(f"Instance '{instance_name}' not found in configuration")
        return instances[instance_name]

    def get_databases(self) -> list[dict[str, Any]]:
        """Get list of databases to dump."""
        return self.config.get('databases', [])

    def get_defaults(self) -> dict[str, Any]:
        """Get default settings."""
        return self.config.get('defaults', {})

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
