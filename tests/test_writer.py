"""Unit tests for the hierarchical row writer."""

import io
import re

import pytest

from configdiff.bookmarks import bookmark_code
from configdiff.diffgram import diff_snapshots
from configdiff.layout import PrintLayout
from configdiff.model import ColumnType, Snapshot, Table
from configdiff.writer import RowWriter

from conftest import fill_hierarchy


def _render(diffgram, placeholder: str = "-") -> str:
    out = io.StringIO()
    RowWriter(out, diffgram, placeholder=placeholder).write_table_rows()
    return out.getvalue()


def _bookmark_pair(layout_kwargs) -> Snapshot:
    """``Links(id int, name, scope)`` with *layout_kwargs* applied to column 1."""
    pilot = Snapshot("Links")
    pilot.add_table(Table("Links", [("id", ColumnType.INTEGER), "name", "scope"], primary_key=(0,)))
    pilot.layout.add(0, 0, sort_order=0)
    pilot.layout.add(0, 1, **layout_kwargs)
    pilot.layout.add(0, 2, hidden=True)
    return pilot


def _without_partitions() -> PrintLayout:
    """Hierarchy layout with the Partitions level fully hidden."""
    layout = PrintLayout()
    layout.add(0, 0, sort_order=0)
    layout.add(0, 1)
    layout.add(1, 0, hidden=True)
    layout.add(1, 1, sort_order=0)
    layout.add(1, 2)
    layout.add(2, 2, hidden=True, sort_order=0)
    return layout


class TestWriteRows:
    """Tests for RowWriter.write_rows argument handling."""

    def test_empty_rows_write_nothing(self, flat_pair) -> None:
        """Test an empty row list is not an error and produces no output."""
        out = io.StringIO()
        writer = RowWriter(out, diff_snapshots(*flat_pair))
        assert writer.write_rows([]) == 0
        writer.write_table_rows()
        assert out.getvalue() == ""

    def test_none_rows_raise(self, flat_pair) -> None:
        """Test a missing row list is a caller error."""
        writer = RowWriter(io.StringIO(), diff_snapshots(*flat_pair))
        with pytest.raises(ValueError):
            writer.write_rows(None)

    def test_none_constructor_arguments_raise(self, flat_pair) -> None:
        """Test the writer needs a sink and a diffgram."""
        diffgram = diff_snapshots(*flat_pair)
        with pytest.raises(ValueError):
            RowWriter(None, diffgram)
        with pytest.raises(ValueError):
            RowWriter(io.StringIO(), None)


class TestFlatTable:
    """Rendering a single-level table."""

    def test_added_row(self, flat_pair) -> None:
        """Test an added row renders one cell per visible column."""
        pilot, production = flat_pair
        pilot.tables[0].add_row([1, "x", "p"])

        html = _render(diff_snapshots(pilot, production))

        assert html == (
            '<tr class="Added">'
            '<td class="Added" rowspan="1">1</td>'
            '<td class="Added" rowspan="1">x</td>'
            '<td class="Added" rowspan="1">p</td>'
            "</tr>\n"
        )

    def test_unchanged_row_can_hide(self, flat_pair) -> None:
        """Test unchanged rows of an unchanged section carry CanHide."""
        pilot, production = flat_pair
        pilot.tables[0].add_row([1, "x", "p"])
        production.tables[0].add_row([1, "x", "p"])

        html = _render(diff_snapshots(pilot, production))

        assert html.startswith('<tr class="Unchanged CanHide">')
        assert '<td class="Unchanged" rowspan="1">x</td>' in html

    def test_modified_cells(self, flat_pair) -> None:
        """Test changed cells show old and new; equal and key cells stay plain."""
        pilot, production = flat_pair
        pilot.tables[0].add_row([1, "new", "p"])
        production.tables[0].add_row([1, "old", "p"])

        html = _render(diff_snapshots(pilot, production))

        assert '<td class="Modified" rowspan="1">1</td>' in html
        assert (
            '<td class="Modified" rowspan="1">'
            '<span class="Deleted">old</span><span class="Modified">new</span></td>'
        ) in html
        assert '<td class="Modified" rowspan="1">p</td>' in html

    def test_modified_null_to_value(self, flat_pair) -> None:
        """Test a null old value renders as an empty deleted span."""
        pilot, production = flat_pair
        pilot.tables[0].add_row([1, "x", "set"])
        production.tables[0].add_row([1, "x", None])

        html = _render(diff_snapshots(pilot, production))

        assert '<span class="Deleted"></span><span class="Modified">set</span>' in html

    def test_deleted_row_uses_production_values(self, flat_pair) -> None:
        """Test a deleted row renders its production values with the Deleted class."""
        pilot, production = flat_pair
        production.tables[0].add_row([3, "z", "r"])

        html = _render(diff_snapshots(pilot, production))

        assert html == (
            '<tr class="Deleted">'
            '<td class="Deleted" rowspan="1">3</td>'
            '<td class="Deleted" rowspan="1">z</td>'
            '<td class="Deleted" rowspan="1">r</td>'
            "</tr>\n"
        )

    def test_cell_text_is_escaped(self, flat_pair) -> None:
        """Test values are HTML-escaped."""
        pilot, production = flat_pair
        pilot.tables[0].add_row([1, "<b>&</b>", None])

        html = _render(diff_snapshots(pilot, production))

        assert "&lt;b&gt;&amp;&lt;/b&gt;" in html
        assert "<b>" not in html

    def test_hidden_columns_not_rendered(self, flat_pair) -> None:
        """Test hidden columns get no cell."""
        pilot, production = flat_pair
        pilot.layout = PrintLayout()
        pilot.layout.add(0, 0, hidden=True)
        pilot.layout.add(0, 1)
        pilot.tables[0].add_row([1, "x", "p"])

        html = _render(diff_snapshots(pilot, production))

        assert html.count("<td") == 1
        assert ">x</td>" in html


class TestHierarchy:
    """Rendering master/detail rows across table levels."""

    def test_row_spans_and_physical_rows(self, hierarchy_pair) -> None:
        """Test parents share a row with their first child and span the rest."""
        pilot, production = hierarchy_pair
        fill_hierarchy(pilot)
        fill_hierarchy(production)

        html = _render(diff_snapshots(pilot, production))
        rows = html.strip().split("\n")

        # A: s1 (p1, p2), s2 (p3); B: s1 (p1)
        assert len(rows) == 4
        assert html.count("<tr") == html.count("</tr>") == 4
        assert '<td class="Unchanged" rowspan="3">A</td>' in rows[0]
        assert '<td class="Unchanged" rowspan="2">s1</td>' in rows[0]
        assert rows[0].count("<td") == 5
        assert rows[1].count("<td") == 1 and ">p2<" in rows[1]
        assert rows[2].count("<td") == 3 and ">s2<" in rows[2]
        assert rows[3].count("<td") == 5 and ">B<" in rows[3]

    def test_every_row_has_full_width(self, hierarchy_pair) -> None:
        """Test cells plus spans from rows above fill every physical row."""
        pilot, production = hierarchy_pair
        fill_hierarchy(pilot, partition_a2="p2-new")
        fill_hierarchy(production)

        html = _render(diff_snapshots(pilot, production))

        pending = []
        for line in html.strip().split("\n"):
            spans = [int(s) for s in re.findall(r'rowspan="(\d+)"', line)]
            carried = sum(1 for remaining in pending if remaining > 0)
            assert carried + len(spans) == 5
            pending = [r - 1 for r in pending if r - 1 > 0] + [s - 1 for s in spans if s > 1]

    def test_childless_row_gets_filler_cells(self, hierarchy_pair) -> None:
        """Test a row without children is padded to the section width."""
        pilot, production = hierarchy_pair
        pilot.tables[0].add_row(["C", "Empty profile"])

        html = _render(diff_snapshots(pilot, production), placeholder="n/a")

        assert html.count("<td") == 5
        assert html.count('<td class="Added" rowspan="1">n/a</td>') == 3

    def test_childless_step_gets_filler_cell(self, hierarchy_pair) -> None:
        """Test padding starts after the cells already written."""
        pilot, production = hierarchy_pair
        pilot.tables[0].add_row(["C", "Profile"])
        pilot.tables[1].add_row(["C", "s1", "export"])

        html = _render(diff_snapshots(pilot, production))

        assert html.count("<td") == 5
        assert html.count(">-</td>") == 1

    def test_change_classes_in_hierarchy(self, hierarchy_pair) -> None:
        """Test changed subtrees are visible and unchanged ones hideable."""
        pilot, production = hierarchy_pair
        fill_hierarchy(pilot, partition_a2="p2-new")
        fill_hierarchy(production)

        html = _render(diff_snapshots(pilot, production))
        rows = html.strip().split("\n")

        assert rows[0].startswith('<tr class="Unchanged">')
        assert any(r.startswith('<tr class="Added">') for r in rows)
        assert any(r.startswith('<tr class="Deleted">') for r in rows)
        assert rows[-1].startswith('<tr class="Unchanged CanHide">')


    def test_hidden_bottom_level_closes_rows(self, hierarchy_pair) -> None:
        """Test a level with no visible columns adds no rows or cells."""
        pilot, production = hierarchy_pair
        pilot.layout = _without_partitions()
        fill_hierarchy(pilot)
        fill_hierarchy(production)

        html = _render(diff_snapshots(pilot, production))
        rows = html.strip().split("\n")

        # A: s1, s2; B: s1
        assert len(rows) == 3
        assert html.count("<tr") == html.count("</tr>") == 3
        assert all(r.endswith("</tr>") and r.count("<tr") == 1 for r in rows)
        assert '<td class="Unchanged" rowspan="2">A</td>' in rows[0]
        assert '<td class="Unchanged" rowspan="1">s1</td>' in rows[0]
        assert [r.count("<td") for r in rows] == [4, 2, 4]

    def test_only_root_level_visible(self, hierarchy_pair) -> None:
        """Test parents with children get one row each when no child level shows."""
        pilot, production = hierarchy_pair
        layout = PrintLayout()
        layout.add(0, 0, sort_order=0)
        layout.add(0, 1)
        pilot.layout = layout
        fill_hierarchy(pilot)
        fill_hierarchy(production)

        html = _render(diff_snapshots(pilot, production))

        assert html.count("<tr") == html.count("</tr>") == 2
        assert html.count("<td") == 4
        assert 'rowspan="1">A</td>' in html
        assert html.count('rowspan="1"') == 4



class TestBookmarks:
    """Bookmark anchors and jump links in cells."""

    def test_bookmark_anchor(self) -> None:
        """Test a bookmark cell renders a named anchor scoped by the referenced column."""
        pilot = _bookmark_pair({"bookmark_index": 2})
        production = pilot.clone_schema()
        pilot.tables[0].add_row([1, "Contoso", "AD"])

        html = _render(diff_snapshots(pilot, production))

        code = bookmark_code("Contoso", "AD")
        assert f'<a class="Added" name="{code}">Contoso</a>' in html

    def test_jump_link(self) -> None:
        """Test a jump cell links to the matching anchor."""
        pilot = _bookmark_pair({"jump_to_bookmark_index": 2})
        production = pilot.clone_schema()
        pilot.tables[0].add_row([1, "Contoso", "AD"])
        production.tables[0].add_row([1, "Contoso", "AD"])

        html = _render(diff_snapshots(pilot, production))

        code = bookmark_code("Contoso", "AD")
        assert f'<a class="Unchanged" href="#{code}">Contoso</a>' in html

    @pytest.mark.parametrize("scope", ["", None])
    def test_jump_link_without_target_is_plain_text(self, scope) -> None:
        """Test an empty jump target renders plain text."""
        pilot = _bookmark_pair({"jump_to_bookmark_index": 2})
        production = pilot.clone_schema()
        pilot.tables[0].add_row([1, "Fabrikam", scope])

        html = _render(diff_snapshots(pilot, production))

        assert "<a " not in html
        assert '<td class="Added" rowspan="1">Fabrikam</td>' in html

    def test_modified_jump_link(self) -> None:
        """Test both versions of a modified cell link, the old one as Deleted."""
        pilot = _bookmark_pair({"jump_to_bookmark_index": 2})
        production = pilot.clone_schema()
        pilot.tables[0].add_row([1, "New", "AD"])
        production.tables[0].add_row([1, "Old", "AD"])

        html = _render(diff_snapshots(pilot, production))

        old, new = bookmark_code("Old", "AD"), bookmark_code("New", "AD")
        assert f'<span class="Deleted"><a class="Deleted" href="#{old}">Old</a></span>' in html
        assert f'<span class="Modified"><a class="Modified" href="#{new}">New</a></span>' in html
