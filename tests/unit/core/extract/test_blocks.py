"""Unit tests for core/extract/blocks.py"""

import pytest

from mdtree.core.extract.blocks import (
    _checkbox,
    build_block,
    build_blocks,
    has_task_list_items,
    is_task_list_item,
    is_task_list_item_checked,
    is_tight_list,
    list_item_blocks,
    list_start,
)
from mdtree.core.models import (
    Blockquote,
    BulletedList,
    CodeBlock,
    Emphasis,
    Heading,
    ListItem,
    NumberedList,
    Paragraph,
    TaskList,
    TaskListItem,
    Text,
    ThematicBreak,
)
from mdtree.core.node import HTMLNode


def _para(value: str) -> Paragraph:
    return Paragraph(inlines=[Text(value=value)])


def test_paragraph(fragment):
    """p maps to a paragraph of its inlines."""
    block = build_block(fragment("<p>a <em>b</em></p>"))
    assert block == Paragraph(inlines=[Text(value="a "), Emphasis(children=[Text(value="b")])])


@pytest.mark.parametrize("level", range(1, 7))
def test_heading_levels(fragment, level):
    """h1..h6 map to headings of the matching level."""
    block = build_block(fragment(f"<h{level}>Title</h{level}>"))
    assert block == Heading(level=level, inlines=[Text(value="Title")])


def test_code_block_with_lang(fragment):
    """pre maps to a code block with its lang attribute as info."""
    block = build_block(fragment('<pre lang="python"><code>print(1)\n</code></pre>'))
    assert block == CodeBlock(info="python", content="print(1)\n")


def test_code_block_without_lang(fragment):
    """A pre without lang has no info."""
    block = build_block(fragment("<pre><code>x</code></pre>"))
    assert block == CodeBlock(info=None, content="x")


def test_thematic_break(fragment):
    """hr maps to a thematic break."""
    assert build_block(fragment("<hr>")) == ThematicBreak()


def test_blockquote_recurses(fragment):
    """blockquote collects the blocks built from its children, in order."""
    block = build_block(fragment("<blockquote>\n<p>a</p>\n<hr>\n<p>b</p>\n</blockquote>"))
    assert block == Blockquote(children=[_para("a"), ThematicBreak(), _para("b")])


def test_table_produces_nothing(fragment):
    """Tables produce no block."""
    assert build_block(fragment("<table><tr><td>1</td></tr></table>")) is None


def test_table_does_not_affect_siblings(fragment):
    """A table among siblings is skipped without disturbing the others."""
    node = fragment("<blockquote><p>a</p><table><tr><td>1</td></tr></table><p>b</p></blockquote>")
    assert build_block(node) == Blockquote(children=[_para("a"), _para("b")])


def test_unknown_element_degrades_to_paragraph(fragment):
    """An unrecognized element with text becomes a paragraph of that text."""
    assert build_block(fragment("<div>raw <span>html</span></div>")) == _para("raw html")


def test_unknown_empty_element_is_dropped(fragment):
    """An unrecognized element without text produces nothing."""
    assert build_block(fragment("<div></div>")) is None


def test_text_run_is_not_a_block():
    """Non-element nodes never produce a block."""
    assert build_block(HTMLNode.text_run("loose text")) is None


# --- lists ---

def test_bulleted_list(fragment):
    """A plain ul maps to a tight bulleted list of items."""
    block = build_block(fragment("<ul>\n<li>a</li>\n<li>b</li>\n</ul>"))
    assert block == BulletedList(
        tight=True,
        items=[ListItem(blocks=[_para("a")]), ListItem(blocks=[_para("b")])],
    )


def test_numbered_list_with_start(fragment):
    """An ol keeps its start attribute."""
    block = build_block(fragment('<ol start="3"><li>a</li><li>b</li></ol>'))
    assert block == NumberedList(
        tight=True,
        start=3,
        items=[ListItem(blocks=[_para("a")]), ListItem(blocks=[_para("b")])],
    )


@pytest.mark.parametrize("markup,expected", [
    ("<ol><li>a</li></ol>",               1),
    ('<ol start="0"><li>a</li></ol>',     0),
    ('<ol start="12"><li>a</li></ol>',    12),
    ('<ol start="abc"><li>a</li></ol>',   1),
    ('<ol start="-2"><li>a</li></ol>',    1),
    ('<ul start="5"><li>a</li></ul>',     1),
    ('<ol start="+4"><li>a</li></ol>',    4),
    ('<ol start="1_0"><li>a</li></ol>',   1),
    ('<ol start=" 3"><li>a</li></ol>',    1),
    ('<ol start="3 "><li>a</li></ol>',    1),
    ('<ol start="\u0663"><li>a</li></ol>', 1),
    ('<ol start=""><li>a</li></ol>',      1),
])
def test_list_start(fragment, markup, expected):
    """start defaults to 1 when absent, not a plain ASCII integer, or negative."""
    assert list_start(fragment(markup)) == expected


def test_loose_list(fragment):
    """A list whose first item starts with a paragraph is loose."""
    node = fragment("<ul>\n<li>\n<p>a</p>\n</li>\n<li>\n<p>b</p>\n</li>\n</ul>")
    assert build_block(node) == BulletedList(
        tight=False,
        items=[ListItem(blocks=[_para("a")]), ListItem(blocks=[_para("b")])],
    )


@pytest.mark.parametrize("markup,expected", [
    ("<ul><li>a</li><li><p>b</p></li></ul>",  True),
    ("<ul><li><p>a</p></li><li>b</li></ul>",  False),
    ("<ol><li><p>a</p></li></ol>",            False),
    ("<ol><li><em>a</em></li></ol>",          True),
    ("<ul></ul>",                             True),
    ("<p>not a list</p>",                     False),
])
def test_tightness_follows_first_item_only(fragment, markup, expected):
    """Only the first item's first child decides tightness for the whole list."""
    assert is_tight_list(fragment(markup)) is expected


def test_list_item_decomposition(fragment):
    """Leading inline children form one paragraph, followed by the nested blocks."""
    node = fragment("<li>a <em>b</em>\n<ul><li>c</li></ul>\n<p>d</p></li>")
    assert list_item_blocks(node) == [
        Paragraph(inlines=[Text(value="a "), Emphasis(children=[Text(value="b")])]),
        BulletedList(tight=True, items=[ListItem(blocks=[_para("c")])]),
        _para("d"),
    ]


def test_list_item_without_leading_inlines(fragment):
    """No paragraph is synthesized when the item starts with a block."""
    node = fragment("<li><p>a</p>tail</li>")
    assert list_item_blocks(node) == [_para("a")]


def test_list_item_blocks_of_non_item(fragment):
    """Only li elements decompose into blocks."""
    assert list_item_blocks(fragment("<p>a</p>")) == []


def test_non_item_children_are_skipped(fragment):
    """Children of a list that are not li elements produce no item."""
    block = build_block(fragment("<ul><li>a</li>stray</ul>"))
    assert block.items == (ListItem(blocks=[_para("a")]),)


# --- task lists ---

@pytest.mark.parametrize("markup", [
    '<li><input type="checkbox"> a</li>',
    '<li><p><input type="checkbox"> a</p></li>',
])
def test_task_list_item_detection(fragment, markup):
    """A checkbox directly inside the item, or first inside its paragraph, marks a task item."""
    assert is_task_list_item(fragment(markup))


@pytest.mark.parametrize("markup", [
    "<li>a</li>",
    '<li><p>a <input type="checkbox"></p></li>',
    '<li><div><input type="checkbox"></div></li>',
    '<p><input type="checkbox"></p>',
])
def test_not_task_list_item(fragment, markup):
    """Items without a checkbox in a recognised position are plain items."""
    assert not is_task_list_item(fragment(markup))


@pytest.mark.parametrize("markup,expected", [
    ('<li><input type="checkbox" checked> a</li>',        True),
    ('<li><input type="checkbox"> a</li>',                False),
    ('<li><p><input type="checkbox" checked> a</p></li>', True),
    ('<li><p><input type="checkbox"> a</p></li>',         False),
    ('<li><input type="checkbox" checked="checked"></li>', True),
])
def test_task_list_item_checked(fragment, markup, expected):
    """Checked state reads the checked attribute at either nesting depth."""
    assert is_task_list_item_checked(fragment(markup)) is expected


def test_task_list_item_scenario(fragment):
    """A checked item keeps its text with the marker's leading space removed."""
    block = build_block(fragment('<ul><li><input type="checkbox" checked> buy milk</li></ul>'))
    assert block == TaskList(
        tight=True,
        items=[TaskListItem(is_completed=True, blocks=[_para("buy milk")])],
    )


def test_one_task_item_makes_a_task_list(fragment):
    """Any task item turns the whole list into a task list, including plain items."""
    block = build_block(fragment('<ol><li>plain</li><li><input type="checkbox"> todo</li></ol>'))
    assert isinstance(block, TaskList)
    assert block.items == (
        TaskListItem(is_completed=False, blocks=[_para("plain")]),
        TaskListItem(is_completed=False, blocks=[_para("todo")]),
    )
    assert has_task_list_items(fragment('<ol><li><input type="checkbox"> todo</li></ol>'))


def test_loose_task_list(fragment):
    """A checkbox wrapped in a paragraph yields a loose task list, trimmed the same way."""
    node = fragment('<ul><li><p><input type="checkbox" checked> done</p></li></ul>')
    assert build_block(node) == TaskList(
        tight=False,
        items=[TaskListItem(is_completed=True, blocks=[_para("done")])],
    )


def test_trim_only_touches_first_text(fragment):
    """Only the first text inline of the first block loses its leading whitespace."""
    node = fragment('<ul><li><input type="checkbox">  a <em> b</em>\n<p>  c</p></li></ul>')
    item = build_block(node).items[0]
    assert item.blocks == (
        Paragraph(inlines=[Text(value="a "), Emphasis(children=[Text(value=" b")])]),
        _para("  c"),
    )


def test_trim_skips_non_text_first_inline(fragment):
    """When the first inline is not text nothing is trimmed."""
    node = fragment('<ul><li><input type="checkbox"><em> a</em> b</li></ul>')
    item = build_block(node).items[0]
    assert item.blocks[0] == Paragraph(inlines=[Emphasis(children=[Text(value=" a")]), Text(value=" b")])


def test_build_blocks_keeps_order(fragment):
    """build_blocks preserves document order and drops absent blocks."""
    node = fragment("<div><h1>T</h1><table></table><p>a</p><hr></div>")
    assert build_blocks(node.children) == [
        Heading(level=1, inlines=[Text(value="T")]),
        _para("a"),
        ThematicBreak(),
    ]


# --- comments ---

def test_comment_before_first_item_does_not_affect_tightness(fragment):
    """A comment ahead of the first li is skipped when deciding tightness."""
    node = fragment("<ul>\n<!-- c -->\n<li><p>a</p></li>\n</ul>")
    assert is_tight_list(node) is False
    assert build_block(node) == BulletedList(tight=False, items=[ListItem(blocks=[_para("a")])])


def test_comment_before_checkbox_keeps_checked_state(fragment):
    """A comment ahead of the checkbox input does not hide the checked marker."""
    node = fragment('<ul><li><!-- c --><input type="checkbox" checked> a</li></ul>')
    assert is_task_list_item_checked(node.children[0])
    assert build_block(node) == TaskList(
        tight=True,
        items=[TaskListItem(is_completed=True, blocks=[_para("a")])],
    )


@pytest.mark.parametrize("markup", [
    '<li><input type="checkbox"> a</li>',
    '<li><p><input type="checkbox"> a</p></li>',
])
def test_checkbox_locates_the_input(fragment, markup):
    """The located checkbox is the input itself, even when wrapped in a paragraph."""
    assert _checkbox(fragment(markup)).name == "input"
