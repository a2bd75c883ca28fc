import yaml
import os
from cerberus import Validator
from dotenv import load_dotenv
from src.util.errors import ConfigError
from src.util.logger import log, set_level

load_dotenv()
settings = {}

DEFAULT_SCHEMA_PATH = os.path.abspath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'config', 'settings-schema.yml')
)

def get_settings():
    global settings
    if settings == {}:
        load_settings()
    return settings

def load_settings(config_path=None, schema_path=None):
    if config_path is None:
        config_path = os.getenv("CONFIG_FILE")
        if not config_path:
            raise ConfigError("CONFIG_FILE environment variable is not set and no config_path provided")

    if not os.path.exists(config_path):
        log(f'Config file not found: {config_path}', "ERROR")
        raise ConfigError(f'Config file not found: {config_path}')

    with open(config_path, 'r') as yaml_file:
        loaded_yaml = yaml.safe_load(yaml_file) or {}

    if schema_path is None:
        schema_path = os.getenv("SETTINGS_SCHEMA", DEFAULT_SCHEMA_PATH)
    if not os.path.exists(schema_path):
        log(f'Schema file not found: {schema_path}', "ERROR")
        raise ConfigError(f'Schema file not found: {schema_path}')

    with open(schema_path, 'r') as schema_file:
        schema = yaml.safe_load(schema_file)

    v = Validator(schema) # type: ignore
    if not v.validate(loaded_yaml): # type: ignore
        log(f'Invalid config file: {v.errors}', "ERROR")
        raise ConfigError(f'Invalid config file: {v.errors}') # type: ignore

    global settings
    settings = v.document
    set_level(settings['log']['level'])
    return settings

def reset_settings():
    global settings
    settings = {}
