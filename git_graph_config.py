# git_graph_config.py

from dataclasses import dataclass, fields, replace

# Colors for different columns (branches), cycled by column index
BRANCH_COLORS = (
    "#00d9ff",  # cyan
    "#ff006e",  # magenta
    "#00ff88",  # green
    "#ff8c00",  # orange
    "#a855f7",  # purple
    "#fbbf24",  # yellow
    "#06b6d4",  # teal
    "#f43f5e",  # rose
    "#84cc16",  # lime
    "#8b5cf6",  # violet
)

LEGEND_CAP = 8


@dataclass(frozen=True)
class GraphConfig:
    """Spacing, palette and legend settings for the commit graph."""

    row_height: int = 48  # vertical space between commits
    column_width: int = 24  # horizontal space between lanes
    left_margin: int = 40
    node_radius: int = 5
    line_width: int = 2
    palette: tuple[str, ...] = BRANCH_COLORS
    legend_cap: int = LEGEND_CAP
    max_label_chars: int = 14

    def color_for_column(self, column: int) -> str:
        return self.palette[column % len(self.palette)]

    @classmethod
    def from_dict(cls, values: dict | None) -> "GraphConfig":
        """Build a config from a settings mapping.

        Unknown keys are ignored so that older settings files keep loading.
        Raises ValueError for values the layout cannot work with.
        """
        config = cls()
        if not values:
            return config

        known = {f.name for f in fields(cls)}
        overrides = {key: value for key, value in values.items() if key in known}
        if "palette" in overrides:
            overrides["palette"] = tuple(overrides["palette"])
        config = replace(config, **overrides)

        for name in ("row_height", "column_width", "node_radius", "line_width", "max_label_chars"):
            if getattr(config, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(config, name)!r}")
        if config.left_margin < 0:
            raise ValueError(f"left_margin must not be negative, got {config.left_margin!r}")
        if not config.palette:
            raise ValueError("palette must contain at least one color")
        if config.legend_cap <= 0:
            raise ValueError(f"legend_cap must be positive, got {config.legend_cap!r}")
        return config

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["palette"] = list(self.palette)
        return data


DEFAULT_CONFIG = GraphConfig()
