"""Pydantic configuration models for page2md."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '200kb', '1mb', '5gb'

    Examples:
        >>> ByteSize._parse('200kb')
        204800
        >>> ByteSize._parse('1mb')
        1048576
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Order matters: check longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '200kb', '1mb', or integer bytes.")


PluginName = Literal["tables", "strikethrough", "task_lists", "youtube_embed", "vimeo_embed"]

DEFAULT_PLUGINS: list[PluginName] = [
    "tables",
    "strikethrough",
    "task_lists",
    "youtube_embed",
    "vimeo_embed",
]


class ServerConfig(BaseModel):
    """Configuration for the HTTP listener."""

    host: str = Field("0.0.0.0", description="Interface to bind")
    port: int = Field(8087, ge=1, le=65535, description="TCP port to listen on")

    model_config = {"extra": "forbid"}


class NetworkConfig(BaseModel):
    """Configuration for fetching target pages."""

    user_agent: str = Field("WebpageToMarkdown Bot/1.0", description="User-Agent header sent upstream")
    timeout: float = Field(30.0, gt=0, description="Total request timeout in seconds")
    max_retries: int = Field(0, ge=0, description="Retry attempts for transient failures")
    max_redirects: int = Field(10, ge=0, description="Redirect hops followed; each target must pass the URL policy")
    max_content_size: ByteSize = Field(
        ByteSize(10 * 1024 * 1024),
        description="Maximum page size (e.g., '5mb')",
    )
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    validate_content_type: bool = Field(True, description="Reject responses that are not HTML")

    model_config = {"extra": "forbid"}


class SecurityConfig(BaseModel):
    """URL policy applied before anything is fetched."""

    allowed_schemes: list[str] = Field(default_factory=lambda: ["http", "https"])
    allowed_domains: Optional[list[str]] = Field(None, description="If set, only these hosts are fetched")
    block_private_ips: bool = Field(True, description="Refuse private, loopback and link-local IP literals")

    model_config = {"extra": "forbid"}


class RenderConfig(BaseModel):
    """Markdown style rules and enabled extension plugins."""

    heading_style: Literal["atx", "setext"] = "atx"
    horizontal_rule: Literal["---", "***", "___"] = "---"
    bullet_list_marker: Literal["-", "*", "+"] = "-"
    code_block_style: Literal["fenced", "indented"] = "fenced"
    code_fence: Literal["```", "~~~"] = "```"
    link_style: Literal["inlined", "referenced"] = "inlined"
    strong_delimiter: Literal["**", "__"] = "**"
    em_delimiter: Literal["_", "*"] = "_"
    plugins: list[PluginName] = Field(default_factory=lambda: list(DEFAULT_PLUGINS))

    model_config = {"extra": "forbid"}

    def has_plugin(self, name: str) -> bool:
        return name in self.plugins


class PerformanceConfig(BaseModel):
    """Configuration for performance tuning."""

    cpu_workers: int = Field(
        4,
        ge=1,
        description="Thread pool workers for extraction and rendering",
    )
    max_pending: Optional[int] = Field(
        None,
        ge=1,
        description="Extraction/render jobs allowed in flight at once (default: 4 per worker)",
    )

    model_config = {"extra": "forbid"}


# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "PAGE2MD_USER_AGENT": ("network", "user_agent"),
    "PAGE2MD_TIMEOUT": ("network", "timeout"),
    "PAGE2MD_LOG_LEVEL": (None, "log_level"),
}


class ServiceConfig(BaseModel):
    """
    Root configuration model for page2md.

    Example:
        config = ServiceConfig(
            server=ServerConfig(port=9000),
            network=NetworkConfig(timeout=10),
        )

    YAML format:
        server:
          port: 9000
        network:
          user_agent: MyBot/2.0
          timeout: 10
        render:
          plugins: [tables, strikethrough]
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Return a copy with environment overrides applied."""
        if environ is None:
            environ = os.environ

        data = self.model_dump()
        for var, (section, key) in ENV_OVERRIDES.items():
            value = environ.get(var)
            if not value:
                continue
            if section is None:
                data[key] = value.upper() if key == "log_level" else value
            else:
                data[section][key] = value
        return type(self).model_validate(data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Build the default config with environment overrides (PORT, HOST, PAGE2MD_*)."""
        return cls().with_env(environ)

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ServiceConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ServiceConfig":
        """Load config from YAML file."""
        return cls.from_yaml(Path(path).read_text())
