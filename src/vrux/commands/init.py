"""Init command implementation."""

from pathlib import Path

from ..config import write_config_template
from ..core import get_vrux_dir
from ..output import get_output_context
from .common import ROOT_OPTION


def init(root: Path = ROOT_OPTION) -> None:
    """Initialize vrux in a project directory."""
    ctx = get_output_context()
    vrux_dir = get_vrux_dir(root)
    config_path = vrux_dir / "config.toml"

    vrux_dir.mkdir(parents=True, exist_ok=True)

    if not config_path.exists():
        write_config_template(vrux_dir)
        ctx.success(f"Created config template: {config_path}", {"config": str(config_path)})
    else:
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")
