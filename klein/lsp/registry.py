"""Mapping from file extensions to language-server configurations."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerConfig:
    """How to start one language server."""

    command: str
    args: tuple[str, ...]
    language_id: str
    root_markers: tuple[str, ...]


_AVAILABLE_SERVERS = (
    "rust",
    "python",
    "javascript",
    "typescript",
    "c",
    "cpp",
    "go",
    "java",
    "html",
    "css",
    "json",
    "yaml",
    "markdown",
    "toml",
)


class LspRegistry:
    """Maps file extensions (without the dot) to server configurations.

    Only servers named in ``enabled_lsps`` are registered; with no list,
    none are.
    """

    def __init__(self, enabled_lsps: Iterable[str] | None = None) -> None:
        enabled = None if enabled_lsps is None else {s.lower() for s in enabled_lsps}
        log.warning("LSP: initializing registry with enabled servers: %s", enabled)

        def is_enabled(language: str) -> bool:
            return enabled is not None and language.lower() in enabled

        servers: dict[str, ServerConfig] = {}

        def register(config: ServerConfig, *extensions: str) -> None:
            for ext in extensions:
                servers[ext] = config

        if is_enabled("rust"):
            register(ServerConfig("rust-analyzer", (), "rust", ("Cargo.toml",)), "rs")

        if is_enabled("python"):
            register(
                ServerConfig(
                    "pyright-langserver",
                    ("--stdio",),
                    "python",
                    ("pyproject.toml", "setup.py", "requirements.txt"),
                ),
                "py",
            )

        if is_enabled("javascript") or is_enabled("typescript"):
            register(
                ServerConfig(
                    "typescript-language-server", ("--stdio",), "javascript", ("package.json",)
                ),
                "js",
                "jsx",
            )
            register(
                ServerConfig(
                    "typescript-language-server",
                    ("--stdio",),
                    "typescript",
                    ("tsconfig.json", "package.json"),
                ),
                "ts",
                "tsx",
            )

        if is_enabled("c"):
            markers = ("compile_commands.json", "CMakeLists.txt")
            register(ServerConfig("clangd", (), "c", markers), "c", "h")
            register(ServerConfig("clangd", (), "cpp", markers), "cpp", "hpp", "cc")

        if is_enabled("go"):
            register(ServerConfig("gopls", ("serve",), "go", ("go.mod",)), "go")

        if is_enabled("java"):
            register(ServerConfig("jdtls", (), "java", ("pom.xml", "build.gradle")), "java")

        if is_enabled("html"):
            register(ServerConfig("vscode-html-languageserver", ("--stdio",), "html", ()), "html")

        if is_enabled("css"):
            register(ServerConfig("vscode-css-languageserver", ("--stdio",), "css", ()), "css")

        if is_enabled("json"):
            register(ServerConfig("vscode-json-languageserver", ("--stdio",), "json", ()), "json")

        if is_enabled("yaml"):
            register(
                ServerConfig("yaml-language-server", ("--stdio",), "yaml", ()), "yaml", "yml"
            )

        if is_enabled("markdown"):
            register(
                ServerConfig("marksman", ("server",), "markdown", ()), "md", "markdown"
            )

        if is_enabled("toml"):
            register(ServerConfig("taplo", ("lsp", "stdio"), "toml", ()), "toml")

        self._servers = servers

    def find_server_for_file(self, path: str | os.PathLike) -> ServerConfig | None:
        """Server configuration for the file's extension, or None."""
        suffix = Path(path).suffix
        if not suffix:
            return None
        return self._servers.get(suffix[1:])

    def language_id_for_file(self, path: str | os.PathLike) -> str | None:
        """Language id for the file, such as "rust" for a .rs file."""
        config = self.find_server_for_file(path)
        return None if config is None else config.language_id

    def set_server(self, extension: str, config: ServerConfig) -> None:
        """Add or replace the configuration for an extension."""
        self._servers[extension] = config

    @staticmethod
    def available_servers() -> tuple[str, ...]:
        """Identifiers of every language server that can be enabled."""
        return _AVAILABLE_SERVERS