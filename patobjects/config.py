"""Package settings

Defaults can be overridden from a ``.patobjects.toml`` file in the home (or
condor scratch) directory, e.g.::

    default_discriminator = "combinedSecondaryVertexBJetTags"
    log_level = "DEBUG"

The file is read on the first call to `get_settings`, not on import.
"""
import os
from functools import lru_cache
from dataclasses import dataclass, fields
from typing import Optional

import toml


@dataclass
class Settings:
    default_discriminator: str = "trackCountingHighEffBJetTags"
    "b-tag discriminator returned by ``Jet.b_discriminator`` for an empty or 'default' label"
    tag_info_suffix: str = "TagInfos"
    "Suffix stripped from tag-info labels on insertion and lookup"
    log_level: str = "INFO"
    "Level used by `patobjects.logger.setup_logger` when none is passed"

    @staticmethod
    def read_patobjects_config(path: Optional[str] = None) -> dict:
        config_path = path
        if config_path is None:
            if "HOME" in os.environ:
                config_path = os.path.join(os.environ["HOME"], ".patobjects.toml")
            elif "_CONDOR_SCRATCH_DIR" in os.environ:
                config_path = os.path.join(
                    os.environ["_CONDOR_SCRATCH_DIR"], ".patobjects.toml"
                )

        if config_path is not None and os.path.exists(config_path):
            with open(config_path) as f:
                return toml.loads(f.read())
        else:
            return dict()

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        """Build settings from the defaults updated with the TOML file contents"""
        values = cls.read_patobjects_config(path)
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(
                "Unknown patobjects settings: {}".format(", ".join(sorted(unknown)))
            )
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """The package settings, loaded once on first use"""
    return Settings.load()
