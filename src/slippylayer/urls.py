"""Layer configuration and XYZ URL construction."""
from dataclasses import dataclass

from . import config
from .errors import ConfigurationError
from .tiles import TileAddress


@dataclass(frozen=True)
class LayerConfig:
    """Immutable settings shared by the resolver and the layer.

    Parameters
    ----------
    display_name : str, optional
        Label shown in layer lists, by default "Slippy Map".
    base_url : str, optional
        Tile host prefix; ``{z}/{x}/{y}.png`` is appended to it.
    num_levels : int, optional
        Number of levels the host serves, i.e. its maximum zoom, by default 19.
    """
    display_name: str = config.DEFAULTS["display_name"]
    base_url: str = config.DEFAULTS["base_url"]
    num_levels: int = config.DEFAULTS["num_levels"]

    def __post_init__(self):
        if self.num_levels < 1:
            raise ConfigurationError(f"num_levels must be >= 1, got {self.num_levels}")

    @classmethod
    def from_settings(cls, **overrides):
        """Build a config from the Dynaconf settings.

        Keyword arguments that are not None take precedence over settings.
        """
        values = dict(display_name=config.get("display_name"),
                      base_url=config.get("base_url"),
                      num_levels=int(config.get("num_levels")))
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class UrlResolver:
    """Turn tile addresses into request URLs for a slippy tile host."""

    def __init__(self, layer_config: LayerConfig):
        self.config = layer_config

    def url_for(self, address: TileAddress) -> str:
        return f"{self.config.base_url}{address.zoom}/{address.column}/{address.row}.png"
