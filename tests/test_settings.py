"""
Mock tests for configuration loading and validation
"""

import json
from dataclasses import replace
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml

from ti_blocklist.config import settings
from ti_blocklist.config.settings import (
    export_config,
    get_threat_intel_config,
    is_partial_exclusion,
    load_config,
    validate_config,
)
from ti_blocklist.exceptions import ConfigurationError


def valid_config(**overrides):
    config = settings.DEFAULT_CONFIG.copy()
    config.update({
        'TENANT_ID': 'tenant',
        'CLIENT_ID': 'client',
        'CLIENT_SECRET': 'super-secret-value',
        'WORKSPACE_ID': 'workspace',
        'MIN_CONFIDENCE': 70,
    })
    config.update(overrides)
    return config


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_dir = Path(self.temp_dir.name)
        patcher = patch('ti_blocklist.config.settings.get_config_dir', return_value=self.config_dir)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.temp_dir.cleanup)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = load_config()
        self.assertEqual(config, settings.DEFAULT_CONFIG)

    @patch.dict(os.environ, {}, clear=True)
    def test_yaml_file(self):
        with open(self.config_dir / 'config.yaml', 'w') as f:
            yaml.dump({'WORKSPACE_ID': 'from-yaml', 'MIN_CONFIDENCE': 60}, f)

        config = load_config()
        self.assertEqual(config['WORKSPACE_ID'], 'from-yaml')
        self.assertEqual(config['MIN_CONFIDENCE'], 60)

    @patch.dict(os.environ, {}, clear=True)
    def test_json_file(self):
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'EXCLUSION_LIST_ALIAS': 'allowed', 'IPV4_COLUMN_NAME': 'SourceIP'}, f)

        config = load_config()
        self.assertEqual(config['EXCLUSION_LIST_ALIAS'], 'allowed')
        self.assertEqual(config['IPV4_COLUMN_NAME'], 'SourceIP')

    @patch.dict(os.environ, {}, clear=True)
    def test_corrupt_json_falls_back_to_defaults(self):
        with open(self.config_dir / 'config.json', 'w') as f:
            f.write('{not json')

        with patch('builtins.print') as mock_print:
            config = load_config()
        self.assertEqual(config, settings.DEFAULT_CONFIG)
        mock_print.assert_called_once()

    def test_environment_overrides_file(self):
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'WORKSPACE_ID': 'from-file'}, f)

        with patch.dict(os.environ, {'TI_WORKSPACE_ID': 'from-env', 'TI_MIN_CONFIDENCE': '85'}, clear=True):
            config = load_config()
        self.assertEqual(config['WORKSPACE_ID'], 'from-env')
        self.assertEqual(config['MIN_CONFIDENCE'], '85')


class TestValidateConfig(unittest.TestCase):

    def test_valid(self):
        self.assertEqual(validate_config(valid_config()), [])

    def test_missing_credentials(self):
        errors = validate_config(valid_config(TENANT_ID='', CLIENT_SECRET=''))
        self.assertIn('TENANT_ID is required', errors)
        self.assertIn('CLIENT_SECRET is required', errors)

    def test_missing_confidence(self):
        self.assertIn('MIN_CONFIDENCE is required', validate_config(valid_config(MIN_CONFIDENCE=None)))

    def test_confidence_out_of_range(self):
        self.assertIn('MIN_CONFIDENCE must be between 0 and 100', validate_config(valid_config(MIN_CONFIDENCE=150)))

    def test_confidence_not_integer(self):
        self.assertIn('MIN_CONFIDENCE must be an integer', validate_config(valid_config(MIN_CONFIDENCE='high')))

    def test_partial_exclusion(self):
        errors = validate_config(valid_config(EXCLUSION_LIST_ALIAS='allowed'))
        self.assertIn('EXCLUSION_LIST_ALIAS and IPV4_COLUMN_NAME must be set together', errors)


class TestPartialExclusion(unittest.TestCase):

    def test_is_partial_exclusion(self):
        self.assertTrue(is_partial_exclusion('allowed', None))
        self.assertTrue(is_partial_exclusion('', 'SourceIP'))
        self.assertFalse(is_partial_exclusion('allowed', 'SourceIP'))
        self.assertFalse(is_partial_exclusion(None, ''))

    def test_config_property_matches_validation(self):
        config = get_threat_intel_config(valid_config(), require_credentials=False)
        partial = replace(config, ipv4_column_name='SourceIP')

        self.assertFalse(config.has_partial_exclusion_list)
        self.assertTrue(partial.has_partial_exclusion_list)
        self.assertFalse(partial.has_exclusion_list)


class TestGetThreatIntelConfig(unittest.TestCase):

    def test_builds_dataclass(self):
        config = get_threat_intel_config(valid_config(MIN_CONFIDENCE='75'))

        self.assertEqual(config.workspace_id, 'workspace')
        self.assertEqual(config.min_confidence, 75)
        self.assertIsNone(config.exclusion_list_alias)
        self.assertFalse(config.has_exclusion_list)

    def test_exclusion_fields(self):
        config = get_threat_intel_config(valid_config(EXCLUSION_LIST_ALIAS='allowed', IPV4_COLUMN_NAME='SourceIP'))

        self.assertTrue(config.has_exclusion_list)
        self.assertFalse(config.has_partial_exclusion_list)

    def test_empty_exclusion_fields_are_absent(self):
        config = get_threat_intel_config(valid_config(EXCLUSION_LIST_ALIAS='', IPV4_COLUMN_NAME=''))

        self.assertIsNone(config.exclusion_list_alias)
        self.assertIsNone(config.ipv4_column_name)

    def test_query_settings_only(self):
        config = get_threat_intel_config(
            {'MIN_CONFIDENCE': 60, 'EXCLUSION_LIST_ALIAS': None, 'IPV4_COLUMN_NAME': None},
            require_credentials=False,
        )

        self.assertEqual(config.min_confidence, 60)
        self.assertEqual(config.tenant_id, '')

    def test_query_settings_still_validated(self):
        with self.assertRaises(ConfigurationError):
            get_threat_intel_config({'MIN_CONFIDENCE': None}, require_credentials=False)

    def test_invalid_raises(self):
        with self.assertRaises(ConfigurationError) as ctx:
            get_threat_intel_config(valid_config(IPV4_COLUMN_NAME='SourceIP', MIN_CONFIDENCE=None))
        self.assertIn('MIN_CONFIDENCE is required', str(ctx.exception))
        self.assertIn('must be set together', str(ctx.exception))


class TestExportConfig(unittest.TestCase):

    def test_json_masks_secret(self):
        exported = json.loads(export_config('json', valid_config()))

        self.assertEqual(exported['CLIENT_SECRET'], 'supe***')
        self.assertEqual(exported['TENANT_ID'], 'tenant')

    def test_yaml(self):
        exported = yaml.safe_load(export_config('yaml', valid_config(CLIENT_SECRET='short')))

        self.assertEqual(exported['CLIENT_SECRET'], '***')
        self.assertEqual(exported['MIN_CONFIDENCE'], 70)

    def test_numeric_secret_is_masked(self):
        """Test that a secret YAML parsed as a number is still masked."""
        exported = json.loads(export_config('json', valid_config(CLIENT_SECRET=123456789012)))

        self.assertEqual(exported['CLIENT_SECRET'], '1234***')


if __name__ == '__main__':
    unittest.main()
