"""
Configuration management for NordVPN TUI.
"""

import json
import os
from dataclasses import dataclass, asdict, fields
from typing import Optional

from .backend import DEFAULT_NORDVPN_PATH, DEFAULT_TIMEOUT


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Configuration settings."""
    
    # Name or path of the nordvpn executable
    nordvpn_path: str = DEFAULT_NORDVPN_PATH
    
    # Seconds to wait for a single nordvpn command
    command_timeout: float = DEFAULT_TIMEOUT
    
    # Log file path; nothing is logged when unset
    log_file: Optional[str] = None
    
    # Log level name
    log_level: str = "WARNING"
    
    # Whether to show the key help line in the footer
    show_help: bool = True



_FIELD_TYPES = {f.name: f.type for f in fields(Config)}


def _convert_value(key: str, value):
    """
    Convert a raw value to the type of a Config field.
    
    Raises:
        ValueError: If the value cannot be converted.
        TypeError: If the value has an unusable type.
    """
    field_type = _FIELD_TYPES[key]
    
    if field_type is bool:
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        return bool(value)
    
    if field_type is float:
        if isinstance(value, bool):
            raise ValueError(f"Invalid number for {key}: {value!r}")
        return float(value)
    
    if key == "log_file":
        if value is None or str(value).strip().lower() in ("", "none"):
            return None
        return str(value)
    
    if key == "log_level":
        value = str(value).upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return value
    
    return str(value)


class ConfigManager:
    """Manages configuration file."""
    
    DEFAULT_CONFIG_DIR = "~/.config/nordvpn-tui"
    CONFIG_FILENAME = "config.json"
    
    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config manager.
        
        Args:
            config_dir: Custom config directory path.
        """
        if config_dir:
            self.config_dir = os.path.expanduser(config_dir)
        else:
            self.config_dir = os.path.expanduser(self.DEFAULT_CONFIG_DIR)
        
        self.config_path = os.path.join(self.config_dir, self.CONFIG_FILENAME)
        self._config: Optional[Config] = None
    
    def load(self) -> Config:
        """
        Load configuration from file.
        
        Unknown keys are ignored; an unreadable file gives the defaults.
        
        Returns:
            Config object with loaded or default settings.
        """
        if self._config is not None:
            return self._config
        
        self._config = Config()
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                self._config = Config(**{
                    k: _convert_value(k, v) for k, v in data.items() if k in _FIELD_TYPES
                })
            except (OSError, json.JSONDecodeError, TypeError, ValueError, AttributeError):
                self._config = Config()
        
        return self._config
    
    def save(self, config: Optional[Config] = None) -> None:
        """
        Save configuration to file.
        
        Args:
            config: Config to save. Uses current config if None.
        """
        if config is not None:
            self._config = config
        
        if self._config is None:
            self._config = Config()
        
        os.makedirs(self.config_dir, exist_ok=True)
        
        with open(self.config_path, 'w') as f:
            json.dump(asdict(self._config), f, indent=2)
    
    def set(self, key: str, value) -> None:
        """
        Set a config value and save.
        
        Values are converted to the type of the field.
        
        Raises:
            ValueError: If key is unknown or value cannot be converted.
        """
        config = self.load()
        if key not in _FIELD_TYPES:
            raise ValueError(f"Invalid config key: {key}")
        
        try:
            value = _convert_value(key, value)
        except TypeError as e:
            raise ValueError(f"Invalid value for {key}: {value!r}") from e
        
        setattr(config, key, value)
        self.save(config)
    
    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = Config()
        self.save()
    
    @property
    def config(self) -> Config:
        """Get current config."""
        return self.load()
