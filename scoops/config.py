"""Scoop directory layout and search settings."""

import json
import os
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from scoops.errors import HomeDirectoryError, warn
from scoops.models import SourceDescriptor, SourceKind

RASA_DIRECTORY_URL = "https://rasa.github.io/scoop-directory/by-score.html"


def _read_settings(config_file: Path, errors: list[str]) -> dict:
    """Read scoop's config.json, returning an empty dict when unusable."""
    try:
        with open(config_file, encoding="utf-8-sig") as f:
            settings = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        warn(errors, f"Ignoring unreadable scoop config {config_file}: {e}")
        return {}

    if not isinstance(settings, dict):
        warn(errors, f"Ignoring scoop config {config_file}: expected a JSON object")
        return {}
    return settings


def _setting(settings: dict, key: str) -> str:
    value = settings.get(key)
    return value if isinstance(value, str) else ""


class ScoopConfig(BaseModel):
    """Resolved scoop directories and search settings for one run."""

    user_home: Path = Field(description="Invoking user's home directory")
    config_home: Path = Field(description="$XDG_CONFIG_HOME or ~/.config")
    config_file: Path = Field(description="Scoop config.json location")
    root_dir: Path = Field(description="Scoop root ($SCOOP)")
    global_dir: Path = Field(description="Scoop global apps root ($SCOOP_GLOBAL)")
    cache_dir: Path = Field(description="Scoop download cache ($SCOOP_CACHE)")
    proxy: str = Field(default="", description="Proxy as host[:port]")
    cache_duration: timedelta = Field(
        default=timedelta(days=1), description="Age after which cached downloads are refreshed"
    )
    max_workers: int = Field(default=8, description="Parallel bucket scans per buckets folder")
    git_timeout: Optional[float] = Field(
        default=None, description="Seconds before a git clone/pull is abandoned"
    )

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None,
        errors: Optional[list[str]] = None,
    ) -> "ScoopConfig":
        """Resolve scoop's directories the way scoop itself does.

        Environment variables take precedence over config.json, which takes
        precedence over the built-in defaults.

        Args:
            environ: Environment to read. Defaults to os.environ.
            home: Home directory override. Defaults to Path.home().
            errors: List receiving warnings about an unusable config file.

        Returns:
            The resolved configuration.

        Raises:
            HomeDirectoryError: If no home directory can be determined.
        """
        environ = os.environ if environ is None else environ
        errors = [] if errors is None else errors

        if home is None:
            try:
                home = Path.home()
            except (RuntimeError, KeyError) as e:
                raise HomeDirectoryError(f"Could not determine user's home dir: {e}") from e

        config_home = Path(environ.get("XDG_CONFIG_HOME") or home / ".config")
        config_file = config_home / "scoop" / "config.json"
        settings = _read_settings(config_file, errors)

        root_dir = Path(
            environ.get("SCOOP") or _setting(settings, "root_path") or home / "scoop"
        )
        global_dir = Path(
            environ.get("SCOOP_GLOBAL")
            or _setting(settings, "global_path")
            or Path(environ.get("ProgramData") or "C:\\ProgramData") / "scoop"
        )
        cache_dir = Path(
            environ.get("SCOOP_CACHE") or _setting(settings, "cache_path") or root_dir / "cache"
        )

        return cls(
            user_home=home,
            config_home=config_home,
            config_file=config_file,
            root_dir=root_dir,
            global_dir=global_dir,
            cache_dir=cache_dir,
            proxy=_setting(settings, "proxy"),
        )

    @property
    def buckets_dir(self) -> Path:
        return self.root_dir / "buckets"

    @property
    def registry_file(self) -> Path:
        """Scoop's list of known bucket names and their repositories."""
        return self.root_dir / "apps" / "scoop" / "current" / "buckets.json"

    @property
    def apps_dir(self) -> Path:
        return self.root_dir / "apps"

    @property
    def global_apps_dir(self) -> Path:
        return self.global_dir / "apps"

    def bucket_cache_dir(self) -> Path:
        """Return the directory holding downloaded buckets, creating it if needed."""
        path = self.cache_dir / "buckets"
        path.mkdir(mode=0o700, parents=True, exist_ok=True)
        return path

    def named_sources(self) -> dict[str, SourceDescriptor]:
        """Built-in aliases usable as `:name` in a source descriptor."""
        return {
            "active": SourceDescriptor(kind=SourceKind.BUCKETS, path=str(self.buckets_dir)),
            "rasa": SourceDescriptor(kind=SourceKind.HTML, path=RASA_DIRECTORY_URL),
        }
