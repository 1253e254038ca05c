"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ReloadPolicy(Enum):
    """How often a component module is executed.

    ``ALWAYS`` re-executes the module file on every render so edits show
    up without a restart.  ``ONCE`` executes it on first use and reuses
    the loaded module afterwards.
    """

    ALWAYS = "always"
    ONCE = "once"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(base_dir="site", debug=True, cache_max_age=60.0)

    Directory fields are relative to ``base_dir`` unless absolute.
    """

    # Project layout
    base_dir: str | Path = "."
    source_dir: str | Path = "src"
    routes_dir: str | Path = "src/routes"
    app_dir: str | Path = "src/app"
    client_dir: str | Path = "dist/client"

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Component loading (None = ALWAYS in debug, ONCE otherwise)
    reload_policy: ReloadPolicy | None = None

    # Response cache
    cache_enabled: bool = True
    cache_max_age: float = 300.0  # seconds
    cache_warm: bool = True

    # HTML post-processing
    lazy_images: bool = True
    client_scripts: bool = True

    # Liveness check for hosts that idle out quiet services
    keepalive_path: str = "/__tern_keepalive"

    log_level: str = "info"

    @property
    def resolved_reload_policy(self) -> ReloadPolicy:
        """The effective reload policy after applying the debug default."""
        if self.reload_policy is not None:
            return self.reload_policy
        return ReloadPolicy.ALWAYS if self.debug else ReloadPolicy.ONCE

    @property
    def base_path(self) -> Path:
        return Path(self.base_dir).resolve()

    @property
    def source_path(self) -> Path:
        return self.base_path / self.source_dir

    @property
    def routes_path(self) -> Path:
        return self.base_path / self.routes_dir

    @property
    def app_path(self) -> Path:
        return self.base_path / self.app_dir

    @property
    def client_path(self) -> Path:
        return self.base_path / self.client_dir
