"""Command-line interface for the slippy layer.

Provides commands to inspect tile addressing and to download reprojected
tiles using the Typer framework.
"""
import logging
import pathlib
from typing import Optional

import mercantile
import typer
from tqdm import tqdm

from . import config
from .layer import SlippyImageLayer
from .service import TileService
from .tiles import MAX_LATITUDE, TileAddress, sector_for
from .urls import LayerConfig, UrlResolver

app = typer.Typer(help="Slippy map tiles reprojected for geographic globes.")

BATCH_SIZE = 64


@app.callback()
def main(env: str = typer.Option("DEFAULT", help="Dynaconf environment to use."),
         verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if env != "DEFAULT":
        config.change_env(env)


def _layer(base_url=None, resampling=None, num_workers=None):
    layer_config = LayerConfig.from_settings(base_url=base_url)
    service = TileService(num_levels=layer_config.num_levels, num_workers=num_workers)
    return SlippyImageLayer(service, layer_config, resampling=resampling)


@app.command()
def url(level: int, column: int, row: int,
        base_url: Optional[str] = typer.Option(None, help="Tile host prefix.")):
    """Print the request URL of a tile."""
    resolver = UrlResolver(LayerConfig.from_settings(base_url=base_url))
    typer.echo(resolver.url_for(TileAddress(level, column, row)))


@app.command()
def sector(level: int, column: int, row: int):
    """Print the latitude/longitude bounds of a tile."""
    s = sector_for(TileAddress(level, column, row))
    typer.echo(f"lat [{s.min_latitude:.6f}, {s.max_latitude:.6f}] "
               f"lon [{s.min_longitude:.6f}, {s.max_longitude:.6f}]")


@app.command()
def fetch(level: int, column: int, row: int, output: pathlib.Path,
          base_url: Optional[str] = typer.Option(None, help="Tile host prefix."),
          resampling: Optional[str] = typer.Option(None, help="nearest or bilinear.")):
    """Download one tile, reproject it and write it as PNG."""
    layer = _layer(base_url, resampling, num_workers=1)
    address = TileAddress(level, column, row)
    bitmap = layer.service.fetch([address])[address]
    if address not in layer.service:
        typer.echo(f"Failed to fetch {layer.resolver.url_for(address)}", err=True)
        raise typer.Exit(code=1)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(bitmap.to_bytes())
    typer.echo(f"Wrote {output}")


@app.command()
def prefetch(level: int,
             tile_dir: Optional[pathlib.Path] = typer.Option(None, help="Output directory."),
             west: float = typer.Option(-180.0), south: float = typer.Option(-MAX_LATITUDE),
             east: float = typer.Option(180.0), north: float = typer.Option(MAX_LATITUDE),
             base_url: Optional[str] = typer.Option(None, help="Tile host prefix."),
             resampling: Optional[str] = typer.Option(None, help="nearest or bilinear.")):
    """Download and reproject every tile of a level inside a bounding box.

    Tiles are written to ``{tile_dir}/{z}/{x}/{y}.png`` with ``z = level + 1``.
    """
    tile_dir = pathlib.Path(tile_dir or config.get("tile_dir"))
    layer = _layer(base_url, resampling)
    addresses = [TileAddress.from_xyz(t)
                 for t in mercantile.tiles(west, south, east, north, zooms=level + 1)]

    failed = 0
    with tqdm(total=len(addresses), desc=f"level {level}") as progress:
        for start in range(0, len(addresses), BATCH_SIZE):
            batch = addresses[start:start + BATCH_SIZE]
            for address, bitmap in layer.service.fetch(batch).items():
                if address not in layer.service:
                    failed += 1
                    continue
                path = tile_dir / str(address.zoom) / str(address.column)
                path.mkdir(parents=True, exist_ok=True)
                (path / f"{address.row}.png").write_bytes(bitmap.to_bytes())
            progress.update(len(batch))

    typer.echo(f"{len(addresses) - failed}/{len(addresses)} tiles written to {tile_dir}")
    if failed:
        raise typer.Exit(code=1)
