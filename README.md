# klein

Pieces of a keyboard-driven terminal IDE, as a plain Python library with
no third-party runtime dependencies.

## What is inside

### Language Server Protocol client pieces — `klein.lsp`

- `klein.lsp.codec` — `Content-Length` framing for JSON-RPC messages.
  `encode(msg)` returns the wire bytes (`Content-Length: N\r\n\r\n` and a
  compact JSON body). `await decode(reader)` reads one message from an
  `asyncio.StreamReader`; the header name is matched case-insensitively
  and other headers are ignored. It raises `CodecError` on end of stream,
  a missing, invalid or zero `Content-Length`, or invalid JSON.
- `klein.lsp.doc_sync` — `DocSyncEngine` tracks which documents are open.
  `open_document` starts a document at version 1 (reopening resets it),
  `change_document` bumps and returns the version (or `None` for an
  untracked path), and `is_open`, `version`, `language_id`,
  `close_document` and `open_documents` report and clear the state.
- `klein.lsp.capabilities` — `LspFeatureFlags.from_capabilities(caps)`
  turns the `capabilities` object of an `initialize` result into
  booleans: `hover`, `completion`, `definition`, `references`,
  `formatting`, `rename`, `code_action`, `signature_help`,
  `document_symbols`, `workspace_symbols`, `semantic_tokens` and
  `inlay_hints`, plus `completion_trigger_chars` (the first character of
  each trigger string). A provider counts as present whenever its key
  holds a non-null value.
- `klein.lsp.registry` — `LspRegistry(enabled_lsps)` maps file extensions
  to a `ServerConfig` (`command`, `args`, `language_id`,
  `root_markers`). Servers are opt-in: only languages named in
  `enabled_lsps` (case-insensitive) are registered, and with no list
  none are. `find_server_for_file`, `language_id_for_file` and
  `set_server` look up and override entries;
  `LspRegistry.available_servers()` lists the languages it knows:
  rust, python, javascript, typescript, c, cpp, go, java, html, css,
  json, yaml, markdown and toml.
- `klein.lsp.actor` — `await spawn_actor(command, args, working_dir,
  language_id, event_queue)` starts a server process and an asyncio task
  that owns its stdin and stdout, returning a `SpawnedActor` with
  `handle`, `task` and `process`. Through the `ActorHandle`,
  `await send_request(method, params)` returns the result or raises
  `LspRequestError`, `send_notification` queues a notification, and
  `request_shutdown` runs the `shutdown`/`exit` handshake and stops the
  process. Server notifications arrive on `event_queue` as
  `LspServerNotification(method, params)`; if the server's output ends
  or cannot be read, pending requests fail with "server crashed" and a
  `klein/serverCrashed` notification is queued. Requests initiated by
  the server are answered with a method-not-found error.

### Editor support

- `klein.sidebar` — `Sidebar(root_path)` and `FileNode`: a lazily
  expanded file tree with directories listed first, hidden entries
  filtered unless `show_hidden` is set, and a flattened list of
  `FlatEntry(path, depth, is_dir)` rows. `select_next`,
  `select_previous`, `page_down`, `page_up`, `start` and `end` move the
  selection (keeping it visible within `last_height`) and return the
  selected path when it is a file. `toggle_selected` expands or
  collapses a directory or returns the selected file; `refresh` reloads
  from disk while keeping expanded directories open.
- `klein.layout` — `Rect` (with `right`, `bottom` and `area`) and the
  screen-splitting helpers `get_main_layout`,
  `get_maximized_terminal_layout`, `get_editor_layout` and
  `centered_rect`.
- `klein.menus` — the top-bar menus (`TopBarMenu`, each with a padded
  `title`), their (shortcut, description) lists from `get_menu_items`,
  and `dropdown_offset`, the column where a menu's dropdown opens.
- `klein.ansi` — `strip_ansi` removes CSI, OSC and charset escape
  sequences from terminal output, applies backspaces and drops carriage
  returns and other control characters except newline and tab.

## Examples

Tracking documents for a language server:

```python
from pathlib import Path

from klein.lsp.doc_sync import DocSyncEngine

engine = DocSyncEngine()
path = Path("main.rs")

language_id, version = engine.open_document(path, "rust")   # ("rust", 1)
engine.change_document(path)                                 # 2
engine.is_open(path)                                         # True
engine.close_document(path)                                  # True
```

Looking up a server for a file:

```python
from klein.lsp.registry import LspRegistry

registry = LspRegistry(["rust", "python"])
registry.language_id_for_file("src/main.rs")             # "rust"
registry.find_server_for_file("app.py").command          # "pyright-langserver"
registry.find_server_for_file("main.go")                 # None, go not enabled
```

Talking to a running server:

```python
import asyncio

from klein.lsp.actor import spawn_actor


async def main() -> None:
    events: asyncio.Queue = asyncio.Queue()
    actor = await spawn_actor("rust-analyzer", [], ".", "rust", events)
    result = await actor.handle.send_request(
        "initialize", {"processId": None, "rootUri": None, "capabilities": {}}
    )
    actor.handle.send_notification("initialized", {})
    print(result.get("capabilities"))
    actor.handle.request_shutdown()
    await actor.task


asyncio.run(main())
```

Cleaning terminal output:

```python
from klein.ansi import strip_ansi

strip_ansi("\x1b[31merror\x1b[0m: build failed\r\n")   # "error: build failed\n"
```

Language servers have to be installed separately and be on your `PATH`
(for example `rust-analyzer`, `pyright-langserver`, `gopls` or `clangd`).

## What this package does not do

- There is no command and no terminal user interface; the package is a
  library of parts.
- There is no component that starts servers on demand per file,
  performs the `initialize` handshake, or sends `textDocument/*`
  requests and notifications for you: `spawn_actor` and `ActorHandle`
  carry whatever methods and parameters you give them.
- There is no conversion between character columns and the UTF-16
  offsets of LSP positions, nor between paths and `file://` URIs.
- There is no project-wide file or text search.