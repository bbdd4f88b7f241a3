"""
Configuration settings for Threat Intel Blocklist
"""

import os
import json
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from azure.identity import AzureAuthorityHosts

from ti_blocklist.exceptions import ConfigurationError

# Default configuration
DEFAULT_CONFIG = {
    # Service principal used to query the workspace
    'TENANT_ID': '',
    'CLIENT_ID': '',
    'CLIENT_SECRET': '',
    'AUTHORITY_HOST': AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,

    # Log Analytics workspace holding ThreatIntelligenceIndicator
    'WORKSPACE_ID': '',

    # Indicator filtering
    'MIN_CONFIDENCE': None,
    'EXCLUSION_LIST_ALIAS': None,
    'IPV4_COLUMN_NAME': None,

    'LOG_LEVEL': 'INFO',
}

ENV_PREFIX = 'TI_'
SECRET_KEYS = ('CLIENT_SECRET',)


def is_partial_exclusion(alias, column):
    """Exactly one of the watchlist alias and column is set (empty counts as unset)."""
    return bool(alias) != bool(column)


@dataclass(frozen=True)
class ThreatIntelConfig:
    """Settings bound to a single threat intel query."""

    tenant_id: str
    client_id: str
    client_secret: str
    workspace_id: str
    min_confidence: Optional[int]
    exclusion_list_alias: Optional[str] = None
    ipv4_column_name: Optional[str] = None
    authority_host: str = AzureAuthorityHosts.AZURE_PUBLIC_CLOUD

    @property
    def has_exclusion_list(self):
        return bool(self.exclusion_list_alias) and bool(self.ipv4_column_name)

    @property
    def has_partial_exclusion_list(self):
        return is_partial_exclusion(self.exclusion_list_alias, self.ipv4_column_name)


def get_config_dir():
    """Get the configuration directory path."""
    return Path.home() / '.ThreatIntelBlocklist'


def get_config_file(formats='json'):
    """Get the configuration file path."""
    config_dir = get_config_dir()
    if formats == 'yaml':
        return config_dir / 'config.yaml'
    else:
        return config_dir / 'config.json'


def _load_file_config():
    config_file_yaml = get_config_file('yaml')
    config_file_json = get_config_file('json')

    # Try YAML first, then JSON
    if config_file_yaml.exists():
        try:
            with open(config_file_yaml, 'r') as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    return yaml_config
        except (yaml.YAMLError, IOError) as e:
            print(f"Warning: Could not load YAML configuration: {e}")

    if config_file_json.exists():
        try:
            with open(config_file_json, 'r') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"Warning: Could not load JSON configuration: {e}")

    return {}


def _load_env_config():
    env_config = {}
    for key in DEFAULT_CONFIG:
        value = os.getenv(ENV_PREFIX + key)
        if value:
            env_config[key] = value
    return env_config


def load_config():
    """Load configuration from defaults, config file and TI_* environment variables."""
    config = DEFAULT_CONFIG.copy()
    config.update(_load_file_config())
    config.update(_load_env_config())
    return config


def _parse_confidence(value):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value.strip())
    raise ValueError(value)


def validate_config(config, require_credentials=True):
    """Validate configuration values.

    With require_credentials=False only the settings that shape the query are checked.
    """
    errors = []

    if require_credentials:
        for key in ('TENANT_ID', 'CLIENT_ID', 'CLIENT_SECRET', 'WORKSPACE_ID'):
            if not config.get(key):
                errors.append(f"{key} is required")

    try:
        confidence = _parse_confidence(config.get('MIN_CONFIDENCE'))
    except ValueError:
        errors.append("MIN_CONFIDENCE must be an integer")
    else:
        if confidence is None:
            errors.append("MIN_CONFIDENCE is required")
        elif confidence < 0 or confidence > 100:
            errors.append("MIN_CONFIDENCE must be between 0 and 100")

    if is_partial_exclusion(config.get('EXCLUSION_LIST_ALIAS'), config.get('IPV4_COLUMN_NAME')):
        errors.append("EXCLUSION_LIST_ALIAS and IPV4_COLUMN_NAME must be set together")

    return errors


def get_threat_intel_config(config=None, require_credentials=True):
    """Build a ThreatIntelConfig, raising ConfigurationError on invalid settings."""
    if config is None:
        config = load_config()

    errors = validate_config(config, require_credentials)
    if errors:
        raise ConfigurationError("Invalid threat intel configuration: " + "; ".join(errors))

    return ThreatIntelConfig(
        tenant_id=config.get('TENANT_ID', ''),
        client_id=config.get('CLIENT_ID', ''),
        client_secret=config.get('CLIENT_SECRET', ''),
        workspace_id=config.get('WORKSPACE_ID', ''),
        min_confidence=_parse_confidence(config['MIN_CONFIDENCE']),
        exclusion_list_alias=config.get('EXCLUSION_LIST_ALIAS') or None,
        ipv4_column_name=config.get('IPV4_COLUMN_NAME') or None,
        authority_host=config.get('AUTHORITY_HOST') or AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
    )


def mask_secrets(config):
    masked = dict(config)
    for key in SECRET_KEYS:
        value = masked.get(key)
        if value:
            value = str(value)
            masked[key] = value[:4] + '***' if len(value) > 8 else '***'
    return masked


def export_config(formats='json', config=None):
    """Export current configuration to string, with secrets masked."""
    if config is None:
        config = load_config()
    config = mask_secrets(config)

    if formats == 'yaml':
        return yaml.dump(config, indent=2, default_flow_style=False)
    else:
        return json.dumps(config, indent=2)


def get_setting(key, default=None):
    """Get a specific setting value."""
    config = load_config()
    return config.get(key, default)


def get_log_level():
    return get_setting('LOG_LEVEL', 'INFO')
