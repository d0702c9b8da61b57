"""Startup settings: CLI flags with environment fallbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .logger import ConfigurationError

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

DEFAULT_PER_PAGE = 10
DEFAULT_LISTEN_ADDR = "127.0.0.1:3032"


def env_value(name: str) -> Optional[str]:
    val = os.environ.get(name)
    if val is None or val.strip() == "":
        return None
    return val.strip()


def parse_listen_addr(addr: str) -> Tuple[str, int]:
    """Split ``host:port`` (``[::1]:port`` for IPv6). An empty host binds all interfaces."""
    host, sep, port_s = (addr or "").strip().rpartition(":")
    if not sep or not port_s:
        raise ConfigurationError(f"listen address must be host:port, got {addr!r}")
    try:
        port = int(port_s)
    except ValueError:
        raise ConfigurationError(f"invalid port in listen address {addr!r}") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"port out of range in listen address {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port


@dataclass(frozen=True)
class Settings:
    filename: Path
    per_page: int
    host: str
    port: int
    template_dir: Path

    @property
    def listen_addr(self) -> str:
        return f"{self.host}:{self.port}"


def resolve_source(filename: Optional[str] = None, per_page: Optional[int] = None) -> Tuple[Path, int]:
    """Resolve the links filename and page size from explicit values or ``LINKPAGER_*``."""
    filename = filename or env_value("LINKPAGER_FILENAME")
    if not filename:
        raise ConfigurationError("a links filename is required")

    if per_page is None:
        raw = env_value("LINKPAGER_PER_PAGE")
        if raw is None:
            per_page = DEFAULT_PER_PAGE
        else:
            try:
                per_page = int(raw)
            except ValueError:
                raise ConfigurationError(f"LINKPAGER_PER_PAGE must be an integer, got {raw!r}") from None
    if per_page < 1:
        raise ConfigurationError(f"per-page must be at least 1, got {per_page}")
    return Path(filename), int(per_page)


def load_settings(
    filename: Optional[str] = None,
    per_page: Optional[int] = None,
    listen_addr: Optional[str] = None,
    template_dir: Optional[str] = None,
) -> Settings:
    """Resolve settings from explicit values, then ``LINKPAGER_*`` variables.

    Raises ``ConfigurationError`` for a missing filename, a non-positive page
    size, a malformed listen address or a missing template directory.
    """
    path, per_page = resolve_source(filename, per_page)

    if listen_addr is None:
        listen_addr = env_value("LINKPAGER_LISTEN_ADDR") or DEFAULT_LISTEN_ADDR
    host, port = parse_listen_addr(listen_addr)

    tdir = Path(template_dir or env_value("LINKPAGER_TEMPLATE_DIR") or PACKAGE_TEMPLATES_DIR)
    if not tdir.is_dir():
        raise ConfigurationError(f"template directory not found: {tdir}")

    return Settings(
        filename=path,
        per_page=per_page,
        host=host,
        port=port,
        template_dir=tdir,
    )


__all__ = ["Settings", "load_settings", "resolve_source", "parse_listen_addr", "PACKAGE_TEMPLATES_DIR"]
