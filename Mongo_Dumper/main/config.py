import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from Mongo_Dumper.blockchain.blockchainerror import SyncInitError
from Mongo_Dumper.blockchain.constants import Constants


# Option name → (attribute, type, default)
CONFIG_OPTIONS = {
    "mongo-uri": ("mongo_uri", str, Constants.MONGO_URI),
    "mongo-database": ("mongo_database", str, Constants.MONGO_DATABASE),
    "mongo-collection": ("mongo_collection", str, Constants.MONGO_COLLECTION),
    "data-dir": ("store_path", str, Constants.DEFAULT_STORE_PATH),
    "chunk-size": ("chunk_size", int, Constants.BULK_WRITE_CHUNK_SIZE),
    "sync-interval": ("sync_interval", float, Constants.SYNC_INTERVAL_SECONDS),
    "log-level": ("log_level", str, Constants.LOG_LEVEL),
}


def env_var_name(option: str) -> str:
    return option.upper().replace("-", "_")


class Config:
    """
    Resolved process settings.

    Each option is taken from the first source that sets it:
      1. command line flag
      2. environment variable (mongo-uri → MONGO_URI)
      3. YAML or JSON config file (keys spelled like the flags)
      4. built-in default
    """

    def __init__(self, mongo_uri: str = Constants.MONGO_URI, mongo_database: str = Constants.MONGO_DATABASE,
                 mongo_collection: str = Constants.MONGO_COLLECTION,
                 store_path: str = Constants.DEFAULT_STORE_PATH,
                 chunk_size: int = Constants.BULK_WRITE_CHUNK_SIZE,
                 sync_interval: float = Constants.SYNC_INTERVAL_SECONDS,
                 log_level: str = Constants.LOG_LEVEL):
        self.mongo_uri = mongo_uri
        self.mongo_database = mongo_database
        self.mongo_collection = mongo_collection
        self.store_path = store_path
        self.chunk_size = chunk_size
        self.sync_interval = sync_interval
        self.log_level = log_level

    @classmethod
    def load(cls, cli_values: Optional[Mapping[str, Any]] = None, environ: Optional[Mapping[str, str]] = None,
             config_file: Optional[str] = None) -> "Config":
        """
        Args:
            cli_values: Parsed flags keyed by option name ("mongo-uri"); None means unset.
            environ: Environment to read, os.environ when omitted.
            config_file: Explicit config path (.yaml/.yml or .json). When omitted the default
                file is read only if it exists.
        """
        cli_values = cli_values or {}
        environ = os.environ if environ is None else environ
        file_values = cls._read_config_file(config_file)

        resolved = {}
        for option, (attribute, option_type, default) in CONFIG_OPTIONS.items():
            if cli_values.get(option) is not None:
                raw, source = cli_values[option], "flag"
            elif environ.get(env_var_name(option)):
                raw, source = environ[env_var_name(option)], "environment"
            elif file_values.get(option) is not None:
                raw, source = file_values[option], "config file"
            else:
                resolved[attribute] = default
                continue
            resolved[attribute] = cls._coerce(option, option_type, raw, source)

        config = cls(**resolved)
        config.validate()
        return config

    @staticmethod
    def _read_config_file(config_file: Optional[str]) -> Dict[str, Any]:
        path = config_file or Constants.CONFIG_FILE
        if not config_file and not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.endswith((".yaml", ".yml")):
                    values = yaml.safe_load(f)
                else:
                    values = json.load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise SyncInitError("Unable to read the config file.", e, config_file=path) from e
        if not isinstance(values, dict):
            raise SyncInitError("Config file must contain a mapping of option names to values.", config_file=path)
        logging.info(f"[Config] Using config file: {path}")
        return values

    @staticmethod
    def _coerce(option: str, option_type, raw, source: str):
        try:
            return option_type(raw)
        except (TypeError, ValueError) as e:
            raise SyncInitError(f"Invalid value {raw!r} for '{option}' from {source}.", e) from e

    def validate(self):
        if self.chunk_size < 1:
            raise SyncInitError("chunk-size must be at least 1.", chunk_size=self.chunk_size)
        if self.sync_interval < 0:
            raise SyncInitError("sync-interval cannot be negative.", sync_interval=self.sync_interval)
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise SyncInitError(f"Unknown log level '{self.log_level}'.")

    def to_dict(self) -> Dict[str, Any]:
        """Settings for logging; credentials in the URI are masked."""
        values = {attribute: getattr(self, attribute) for attribute, _, _ in CONFIG_OPTIONS.values()}
        scheme, _, rest = self.mongo_uri.partition("://")
        if "@" in rest:
            values["mongo_uri"] = f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
        return values
