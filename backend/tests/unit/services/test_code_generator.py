"""
Unit Tests for the React page generator
"""
import json
from types import SimpleNamespace

import pytest

from app.services.code_generator import (
    BASE_IMPORTS,
    BoxSnapshot,
    ComponentSnapshot,
    ComponentType,
    LayoutSnapshot,
    component_name,
    export_file_name,
    generate_page_code,
    render_box,
    render_component,
    required_imports,
)


def layout_of(name, *boxes):
    return LayoutSnapshot(name=name, boxes=tuple(boxes))


def box_of(*components, **kwargs):
    return BoxSnapshot(components=tuple(components), **kwargs)


def component(type_, **props):
    return ComponentSnapshot(type=type_, props=props)


class TestNaming:
    """Component and file names derived from the layout name"""

    def test_component_name_strips_non_alphanumerics(self):
        assert component_name("My Résumé #1") == "MyRsum1"

    def test_component_name_empty_falls_back(self):
        assert component_name("") == "GeneratedPage"
        assert component_name("我的页面") == "GeneratedPage"

    def test_component_name_leading_digit(self):
        assert component_name("2024 plan") == "Page2024plan"

    def test_export_file_name(self):
        assert export_file_name("My Page") == "My_Page.jsx"
        assert export_file_name("a-b.c") == "a_b_c.jsx"

    def test_export_file_name_empty(self):
        assert export_file_name("") == "layout.jsx"


class TestGeneratePageCode:
    """Whole-page generation"""

    def test_empty_layout(self):
        code = generate_page_code(layout_of("Empty"))

        assert code.startswith("import React from 'react';\nimport { Layout } from 'antd';\n\nconst Empty = () => {\n")
        assert "onChange" not in code
        assert "      <Layout.Content>\n      </Layout.Content>" in code
        assert code.endswith("};\n\nexport default Empty;\n")

    def test_imports_deduplicated_and_sorted(self):
        code = generate_page_code(layout_of(
            "Page",
            box_of(component("button", content="a"), component("button", content="b")),
            box_of(component("table", data=[]), component("button", content="c")),
        ))
        import_lines = [line for line in code.splitlines() if line.startswith("import ")]

        assert import_lines == sorted(import_lines)
        assert import_lines.count("import { Button } from 'antd';") == 1
        assert "import { Table } from 'antd';" in import_lines
        assert set(BASE_IMPORTS) <= set(import_lines)

    def test_date_and_range_share_one_import(self):
        code = generate_page_code(layout_of("D", box_of(component("date"), component("dateRange"))))

        assert code.count("import { DatePicker } from 'antd';") == 1

    def test_interactive_component_adds_handler(self):
        code = generate_page_code(layout_of("Form", box_of(component("radio", options=["A", "B"]))))

        assert "  const onChange = (value) => console.log(value);\n" in code
        assert "onChange={onChange}" in code

    def test_static_components_have_no_handler(self):
        code = generate_page_code(layout_of("Static", box_of(component("text", content="Hi"))))

        assert "const onChange" not in code

    def test_unknown_type_renders_comment(self):
        code = generate_page_code(layout_of("X", box_of(component("slider"))))

        assert "{/* Unknown component type: slider */}" in code
        assert "slider" not in "".join(line for line in code.splitlines() if line.startswith("import"))

    def test_boxes_in_order(self):
        code = generate_page_code(layout_of(
            "Order",
            box_of(component("text", content="first")),
            box_of(component("text", content="second")),
        ))

        assert code.index('"first"') < code.index('"second"')

    def test_from_model(self):
        model = SimpleNamespace(
            name="Shop",
            boxes=[SimpleNamespace(
                position_x=5, position_y=6, width="50%", columns=2,
                components=[SimpleNamespace(type="button", width=None, height=None, props={"content": "Buy"})],
            )],
        )

        code = generate_page_code(LayoutSnapshot.from_model(model))

        assert "const Shop = () => {" in code
        assert '{"Buy"}' in code
        assert '"gridTemplateColumns": "repeat(2, 1fr)"' in code


class TestRenderBox:
    """Box container styles"""

    def _style(self, box):
        first_line = render_box(box).splitlines()[0]
        return json.loads(first_line[len("<div style={"):-len("}>")])

    def test_position_and_grid(self):
        style = self._style(box_of(position_x=10, position_y=20.5, width="50%", columns=3))

        assert style["left"] == "10px"
        assert style["top"] == "20.5px"
        assert style["width"] == "50%"
        assert style["gridTemplateColumns"] == "repeat(3, 1fr)"
        assert style["display"] == "grid"

    def test_numeric_width_is_percentage(self):
        assert self._style(box_of(width=40))["width"] == "40%"
        assert self._style(box_of(width="75"))["width"] == "75%"

    def test_pixel_width_kept(self):
        assert self._style(box_of(width="320px"))["width"] == "320px"

    def test_blank_width_defaults(self):
        assert self._style(box_of(width=""))["width"] == "100%"

    def test_columns_clamped(self):
        assert self._style(box_of(columns=0))["gridTemplateColumns"] == "repeat(1, 1fr)"
        assert self._style(box_of(columns="abc"))["gridTemplateColumns"] == "repeat(1, 1fr)"

    def test_empty_box(self):
        assert render_box(box_of()).splitlines()[-1] == "</div>"
        assert len(render_box(box_of()).splitlines()) == 2


class TestRenderComponent:
    """Per-type markup"""

    def test_button_text_is_escaped(self):
        markup = render_component(component("button", content='Say "hi" <b>'))

        assert markup.startswith("<Button")
        assert '{"Say \\"hi\\" <b>"}' in markup

    def test_text(self):
        assert "<Typography.Paragraph" in render_component(component("text", content="Hello"))

    def test_image(self):
        markup = render_component(component("image", src="/uploads/a.png", alt="logo"))

        assert 'src={"/uploads/a.png"}' in markup
        assert 'alt={"logo"}' in markup

    def test_checkbox_default_value_list(self):
        markup = render_component(component("checkbox", options=["x", "y"], value="x"))

        assert 'defaultValue={["x"]}' in markup
        assert markup.count("<Checkbox key=") == 2

    def test_date_range(self):
        markup = render_component(component("dateRange", start="from", end="to"))

        assert markup.startswith("<DatePicker.RangePicker")
        assert 'placeholder={["from", "to"]}' in markup

    def test_table_from_rows(self):
        markup = render_component(component("table", data=[["Name", "Age"], ["Ann", 30]]))

        assert '{"title": "Name", "dataIndex": "col0", "key": "col0"}' in markup
        assert '{"key": "0", "col0": "Ann", "col1": 30}' in markup

    def test_table_without_data(self):
        assert "dataSource={[]}" in render_component(component("table"))

    def test_unknown_type_comment_cannot_close_early(self):
        markup = render_component(component("evil*/}"))

        assert markup == "{/* Unknown component type: evil* /} */}"

    def test_non_mapping_props(self):
        markup = render_component(ComponentSnapshot.from_dict({"type": "card", "props": "bad"}))

        assert markup.startswith("<Card")


class TestRequiredImports:
    def test_unknown_types_ignored(self):
        imports = required_imports([component("slider"), component("image")])

        assert imports == {"import { Image } from 'antd';"}

    def test_every_type_has_an_import(self):
        for component_type in ComponentType:
            assert required_imports([component(component_type.value)])

    @pytest.mark.parametrize("component_type", list(ComponentType))
    def test_single_type_page_imports_exactly_base_plus_type(self, component_type):
        page = layout_of("Page", box_of(component(component_type.value)), box_of(component(component_type.value)))

        import_lines = generate_page_code(page).split("\n\n", 1)[0].split("\n")

        expected = set(BASE_IMPORTS) | required_imports([component(component_type.value)])
        assert import_lines == sorted(expected)
        assert len(import_lines) == len(BASE_IMPORTS) + 1
