"""Menus of the top bar and the shortcuts each one lists."""

from __future__ import annotations

import enum


class TopBarMenu(enum.Enum):
    """The top-bar menus, in display order."""

    NAVIGATION = "Navigation"
    EDIT = "Edit"
    FILES = "Files"
    PANELS = "Panels"
    SIDEBAR = "Sidebar"
    CODE = "Code"
    HELP = "Help"

    @property
    def title(self) -> str:
        """Label shown in the bar, padded with a space on each side."""
        return f" {self.value} "


# One section per menu; each entry line is "shortcut => description".
_MENU_TABLE = """
[Navigation]
Home / End => Start / End of line
Ctrl+Home / Ctrl+End => Top / Bottom of file
PgUp / PgDn => Scroll page
Ctrl+D / Ctrl+U => Page down / up
Shift+Arrows => Extend selection

[Edit]
Delete => Forward delete
Ctrl+X => Cut
Ctrl+C => Copy
Ctrl+V => Paste
Ctrl+A => Select all
Ctrl+Z => Undo

[Files]
Ctrl+P => Find file (fzf)
Ctrl+G => Project search (rg)
Ctrl+S => Save file
Ctrl+W => Close file
Ctrl+Shift+Z => Next tab
Ctrl+Shift+X => Close tab

[Panels]
Ctrl+F => Focus sidebar
Ctrl+E => Focus editor
Ctrl+T => Focus terminal
Ctrl+B => Toggle sidebar
Ctrl+J => Toggle terminal
Esc => Restore layout

[Sidebar]
. => Toggle hidden files
Enter => Open file / toggle folder
Home => Jump to top
End => Jump to bottom
Ctrl+D => Page down
Ctrl+U => Page up

[Code]
Ctrl+Space => Autocomplete
Alt+G d => Go to definition
Alt+G r => References
Alt+G n => Rename symbol
Alt+F => Format document
Alt+Enter => Code actions

[Help]
Ctrl+H => Toggle help overlay
Esc => Close help
"""


def _parse_table(table: str) -> dict[TopBarMenu, tuple[tuple[str, str], ...]]:
    sections: dict[TopBarMenu, list[tuple[str, str]]] = {}
    current: list[tuple[str, str]] | None = None
    for raw in table.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            current = sections.setdefault(TopBarMenu(line[1:-1]), [])
            continue
        if current is None:
            raise ValueError(f"menu entry outside of a section: {line!r}")
        shortcut, _, description = line.partition(" => ")
        current.append((shortcut, description))
    return {menu: tuple(entries) for menu, entries in sections.items()}


_MENU_ITEMS = _parse_table(_MENU_TABLE)


def get_menu_items(menu: TopBarMenu) -> list[tuple[str, str]]:
    """(shortcut, description) pairs listed under ``menu``."""
    return list(_MENU_ITEMS[menu])


def dropdown_offset(menu: TopBarMenu) -> int:
    """Column, relative to the bar's left edge, where the menu's dropdown opens.

    Each preceding title takes its own width plus one cell for the divider.
    """
    offset = 0
    for other in TopBarMenu:
        if other is menu:
            break
        offset += len(other.title) + 1
    return offset