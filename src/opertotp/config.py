import configparser
import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .hashes import ProviderReference

logger = logging.getLogger(__name__)

SECTION = "totp"
_TRUE = {"1", "yes", "true", "on"}
_FALSE = {"0", "no", "false", "off"}


@dataclass
class TOTPConfig:
    """
    Settings read from the ``[totp]`` section, e.g.::

        [totp]
        hash = sha256
        window = 5
    """

    hash: str = "sha256"
    window: int = 5
    constant_time: bool = True
    secret: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TOTPConfig":
        """
        Builds a config from loosely typed values, keeping the default for
        anything missing or malformed.
        """
        config = cls()
        known = {f.name for f in fields(cls)}
        for key, value in mapping.items():
            if key not in known:
                logger.debug("ignoring unknown totp setting %r", key)
                continue
            if value is None:
                continue
            if key == "window":
                try:
                    window = int(value)
                except (TypeError, ValueError):
                    logger.warning("invalid totp window %r, using %d", value, config.window)
                    continue
                if window < 0:
                    logger.warning("negative totp window %d, using %d", window, config.window)
                    continue
                config.window = window
            elif key == "constant_time":
                if isinstance(value, bool):
                    config.constant_time = value
                elif str(value).strip().lower() in _TRUE:
                    config.constant_time = True
                elif str(value).strip().lower() in _FALSE:
                    config.constant_time = False
                else:
                    logger.warning("invalid totp constant_time %r, using %s", value, config.constant_time)
            else:
                value = str(value).strip()
                if value:
                    setattr(config, key, value)
        return config

    def rehash(self, reference: ProviderReference) -> ProviderReference:
        """
        Points ``reference`` at the configured hash. An unknown hash leaves it
        empty, so code generation reports the provider as unavailable.
        """
        reference.set_provider(self.hash)
        if not reference:
            logger.warning("TOTP hash provider %r is not loaded", self.hash)
        return reference


def load_config(path: Optional[str] = None) -> TOTPConfig:
    """
    Reads the ``[totp]`` section of an INI file. A missing file or section
    gives the defaults.
    """
    if path is None:
        return TOTPConfig()
    parser = configparser.ConfigParser()
    if not parser.read(path, encoding="utf-8"):
        logger.warning("config file %s not found, using defaults", path)
        return TOTPConfig()
    if not parser.has_section(SECTION):
        logger.debug("no [%s] section in %s", SECTION, path)
        return TOTPConfig()
    return TOTPConfig.from_mapping(dict(parser.items(SECTION)))
