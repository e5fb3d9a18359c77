"""Feature flags derived from a language server's reported capabilities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LspFeatureFlags:
    """Which editor features a server supports, as plain booleans."""

    hover: bool = False
    completion: bool = False
    completion_trigger_chars: list[str] = field(default_factory=list)
    definition: bool = False
    references: bool = False
    formatting: bool = False
    rename: bool = False
    code_action: bool = False
    signature_help: bool = False
    document_symbols: bool = False
    workspace_symbols: bool = False
    semantic_tokens: bool = False
    inlay_hints: bool = False

    @classmethod
    def from_capabilities(cls, caps: Mapping[str, Any] | None) -> LspFeatureFlags:
        """Build flags from the ``capabilities`` object of an initialize result.

        A provider counts as present whenever its key holds a non-null value.
        """
        caps = caps or {}

        def present(key: str) -> bool:
            return caps.get(key) is not None

        completion = False
        trigger_chars: list[str] = []
        provider = caps.get("completionProvider")
        if provider is not None:
            completion = True
            if isinstance(provider, Mapping):
                triggers = provider.get("triggerCharacters") or []
                trigger_chars = [s[0] for s in triggers if isinstance(s, str) and s]

        return cls(
            hover=present("hoverProvider"),
            completion=completion,
            completion_trigger_chars=trigger_chars,
            definition=present("definitionProvider"),
            references=present("referencesProvider"),
            formatting=present("documentFormattingProvider"),
            rename=present("renameProvider"),
            code_action=present("codeActionProvider"),
            signature_help=present("signatureHelpProvider"),
            document_symbols=present("documentSymbolProvider"),
            workspace_symbols=present("workspaceSymbolProvider"),
            semantic_tokens=present("semanticTokensProvider"),
            inlay_hints=present("inlayHintProvider"),
        )