import pytest

from klein.menus import TopBarMenu, dropdown_offset, get_menu_items


def test_menu_order_and_titles():
    titles = [menu.title for menu in TopBarMenu]
    assert titles == [
        " Navigation ",
        " Edit ",
        " Files ",
        " Panels ",
        " Sidebar ",
        " Code ",
        " Help ",
    ]
    assert dropdown_offset(TopBarMenu.HELP) == 54


def test_help_menu_items():
    assert get_menu_items(TopBarMenu.HELP) == [
        ("Ctrl+H", "Toggle help overlay"),
        ("Esc", "Close help"),
    ]


def test_edit_menu_contains_undo():
    assert ("Ctrl+Z", "Undo") in get_menu_items(TopBarMenu.EDIT)
    assert get_menu_items(TopBarMenu.EDIT)[0] == ("Delete", "Forward delete")


def test_code_menu_lists_lsp_actions():
    descriptions = [desc for _, desc in get_menu_items(TopBarMenu.CODE)]
    assert "Go to definition" in descriptions
    assert "Rename symbol" in descriptions
    assert descriptions[-1] == "Code actions"


def test_navigation_menu_entries_with_slashes():
    assert get_menu_items(TopBarMenu.NAVIGATION)[1] == (
        "Ctrl+Home / Ctrl+End",
        "Top / Bottom of file",
    )


@pytest.mark.parametrize("menu", list(TopBarMenu))
def test_every_menu_has_distinct_shortcuts(menu):
    items = get_menu_items(menu)
    assert len(items) >= 1
    shortcuts = [shortcut for shortcut, _ in items]
    assert len(set(shortcuts)) == len(shortcuts)


def test_menu_items_are_a_fresh_list():
    items = get_menu_items(TopBarMenu.FILES)
    items.clear()
    assert get_menu_items(TopBarMenu.FILES)[0] == ("Ctrl+P", "Find file (fzf)")


def test_first_menu_opens_at_left_edge():
    assert dropdown_offset(TopBarMenu.NAVIGATION) == 0


def test_second_menu_offset():
    assert dropdown_offset(TopBarMenu.EDIT) == 13


def test_offsets_increase_along_the_bar():
    offsets = [dropdown_offset(menu) for menu in TopBarMenu]
    assert offsets == sorted(offsets)
    assert len(set(offsets)) == len(offsets)
    for (before, after), menu in zip(zip(offsets, offsets[1:]), TopBarMenu):
        assert after - before > len(menu.title)