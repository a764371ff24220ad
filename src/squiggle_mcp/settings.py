"""Settings module for the Squiggle MCP Server.

This module provides a settings model shared by both transports using pydantic-settings.
"""

import re
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_package_version() -> str:
    """Get the version of the squiggle-mcp package from pyproject.toml.

    Returns:
        The package version or a default value if not found
    """
    current_dir = Path(__file__).parent
    for _ in range(4):
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.exists():
            try:
                content = pyproject_path.read_text()
                version_match = re.search(r'^version\s*=\s*"([^"]+)"', content, re.MULTILINE)
                if version_match:
                    return version_match.group(1)
            except OSError:
                pass
        current_dir = current_dir.parent

    return "dev-version"


class Settings(BaseSettings):
    """Settings for the Squiggle MCP Server.

    This class handles loading and validating configuration from environment variables.
    It is built once at startup and handed to the transports; nothing reads the
    environment ad hoc after that.
    """

    version: str = Field(
        default_factory=get_package_version,
        description="Package version from pyproject.toml",
    )

    node_executable: str = Field(
        default="node",
        description="Node.js interpreter used to run the Squiggle bridge script",
        alias="NODE_EXECUTABLE",
    )
    squiggle_lang_module: str = Field(
        default="@quri/squiggle-lang",
        description="Module specifier (or file:// URL) the bridge imports the Squiggle language from",
        alias="SQUIGGLE_LANG_MODULE",
    )
    bridge_script: Path | None = Field(
        default=None,
        description="Override for the packaged bridge script",
        alias="SQUIGGLE_BRIDGE_SCRIPT",
    )
    expose_example_resource: bool = Field(
        default=False,
        description="Also publish the example resource over stdio (HTTP always publishes it)",
        alias="EXPOSE_EXAMPLE_RESOURCE",
    )

    json_response: bool = Field(
        default=False,
        description="Answer HTTP POSTs with plain JSON instead of an SSE stream",
        alias="JSON_RESPONSE",
    )

    host: str = Field(default="localhost", description="Host to bind to", alias="HOST")
    port: int = Field(default=3000, description="Port to listen on", alias="PORT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", description="Logging level", alias="LOG_LEVEL"
    )
    debug: bool = Field(default=False, description="Enable debug mode", alias="DEBUG")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        validate_default=True,
    )


try:
    settings = Settings()
except Exception as e:
    sys.stderr.write(f"Error loading settings: {str(e)}\n")
    sys.stderr.write("Check the HOST, PORT and LOG_LEVEL values in your environment or .env file\n")
    raise
