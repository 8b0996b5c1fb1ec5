import logging
import os
import tomllib
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CONFIG_TABLE = "tensor"


@dataclass(frozen=True, slots=True)
class TensorConfig:
    """Policy shared read-only by every tensor built with it."""

    freezeable: bool = True
    broadcastable: bool = True
    static_allocation_limit: int = 64

    def __post_init__(self) -> None:
        for name in ("freezeable", "broadcastable"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a bool")
        if isinstance(self.static_allocation_limit, bool) or not isinstance(
            self.static_allocation_limit, int
        ):
            raise TypeError("static_allocation_limit must be an int")
        if self.static_allocation_limit < 0:
            raise ValueError("static_allocation_limit must be non-negative")

    @classmethod
    def load(cls, config_path: str | os.PathLike[str]) -> "TensorConfig":
        """
        Load a tensor configuration from a TOML file.

        Parameters
        ----------
        config_path : str | os.PathLike[str]
            Filesystem path to a TOML file containing a "tensor" table.

        Returns
        -------
        TensorConfig
            Instance populated from the "tensor" table; missing keys keep
            their defaults.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        tensor_data = data.get(CONFIG_TABLE, {})
        config = cls(**tensor_data)
        logger.debug("loaded tensor config %s from %s", config, config_path)
        return config


DEFAULT_CONFIG = TensorConfig()


__all__ = ["DEFAULT_CONFIG", "TensorConfig"]
