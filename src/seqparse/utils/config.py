#!/usr/bin/env python
import io
import os
import logging

import yaml

LOG = logging.getLogger(__name__)

__all__ = [
    'CONFIG_ENV_VAR',
    'DEFAULT_CONFIG',
    'load_config',
    'get_config',
    'reset_config',
]

CONFIG_ENV_VAR = 'SEQPARSE_CONFIG'

DEFAULT_CONFIG = {
    # Number of consecutive missing frames before range detection gives up
    'maxSequenceHole': 1000,
    # Sum the size of every file added to a FileSequence
    'sizeEstimation': False,
    # Level applied to the seqparse logger, untouched if None
    'logLevel': None,
}

_CONFIG = None


def load_config(path=None):
    """
    Load the seqparse settings from a yaml file

    Values found in the file are merged over DEFAULT_CONFIG.

    Ex:
        maxSequenceHole: 50
        sizeEstimation: true
        logLevel: debug

    Args:
        path (str, optional): Yaml file to read.
            If not supplied, the SEQPARSE_CONFIG environment variable is used,
            and if that isn't set only the defaults are returned.

    Raises:
        ValueError: if the file doesn't exist or doesn't hold a mapping

    Returns:
        dict
    """
    config = dict(DEFAULT_CONFIG)

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
        if path is None:
            return config

    if not os.path.isfile(path):
        raise ValueError("Config file doesn't exist: {0}".format(path))

    with io.open(path, encoding='utf8') as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping: {0}".format(path))

    for key, value in data.items():
        if key not in DEFAULT_CONFIG:
            LOG.warning("Unknown config key {0} in {1}".format(key, path))
            continue
        config[key] = value

    maxHole = config['maxSequenceHole']
    if isinstance(maxHole, bool) or not isinstance(maxHole, int) or maxHole < 1:
        raise ValueError("maxSequenceHole must be a positive integer, got {0}".format(maxHole))
    config['sizeEstimation'] = bool(config['sizeEstimation'])

    if config['logLevel']:
        logging.getLogger('seqparse').setLevel(str(config['logLevel']).upper())

    LOG.debug("Loaded config from {0}".format(path))
    return config


def get_config():
    """
    Current settings, loaded on first access
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config():
    """
    Forget the cached settings so the next get_config reloads them
    """
    global _CONFIG
    _CONFIG = None
