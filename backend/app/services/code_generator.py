"""
Layout Code Generator

Turns a saved layout (boxes of typed components) into the source of a
standalone React page built on antd. Generation is pure and total: unknown
component tags, empty boxes and odd prop values all produce output, never an
exception, because stored layouts may come from older editor versions.
"""

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

BASE_IMPORTS = (
    "import React from 'react';",
    "import { Layout } from 'antd';",
)

DEFAULT_COMPONENT_NAME = "GeneratedPage"
DEFAULT_FILE_STEM = "layout"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class ComponentType(str, Enum):
    BUTTON = "button"
    TEXT = "text"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    IMAGE = "image"
    DATE = "date"
    DATE_RANGE = "dateRange"
    TABLE = "table"
    CARD = "card"

    @classmethod
    def resolve(cls, tag: Any) -> Optional["ComponentType"]:
        """Map a stored tag to a known type, None when the tag is not recognised"""
        try:
            return cls(tag)
        except ValueError:
            return None


COMPONENT_IMPORTS: Dict[ComponentType, str] = {
    ComponentType.BUTTON: "import { Button } from 'antd';",
    ComponentType.TEXT: "import { Typography } from 'antd';",
    ComponentType.RADIO: "import { Radio } from 'antd';",
    ComponentType.CHECKBOX: "import { Checkbox } from 'antd';",
    ComponentType.IMAGE: "import { Image } from 'antd';",
    ComponentType.DATE: "import { DatePicker } from 'antd';",
    ComponentType.DATE_RANGE: "import { DatePicker } from 'antd';",
    ComponentType.TABLE: "import { Table } from 'antd';",
    ComponentType.CARD: "import { Card } from 'antd';",
}

# Types whose markup references the generated onChange handler
INTERACTIVE_TYPES = frozenset({
    ComponentType.RADIO,
    ComponentType.CHECKBOX,
    ComponentType.DATE,
    ComponentType.DATE_RANGE,
})


# ==================== Snapshots ====================

@dataclass(frozen=True)
class ComponentSnapshot:
    type: str
    width: Optional[str] = None
    height: Optional[int] = None
    props: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComponentSnapshot":
        props = data.get("props")
        return cls(
            type=str(data.get("type", "")),
            width=data.get("width"),
            height=data.get("height"),
            props=props if isinstance(props, Mapping) else {},
        )


@dataclass(frozen=True)
class BoxSnapshot:
    position_x: float = 0
    position_y: float = 0
    width: Any = "100%"
    columns: int = 1
    components: Tuple[ComponentSnapshot, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoxSnapshot":
        layout = data.get("layout") if isinstance(data.get("layout"), Mapping) else {}
        return cls(
            position_x=data.get("position_x", 0) or 0,
            position_y=data.get("position_y", 0) or 0,
            width=data.get("width", "100%"),
            columns=data.get("columns", layout.get("columns", 1)),
            components=tuple(ComponentSnapshot.from_dict(c) for c in data.get("components") or []),
        )


@dataclass(frozen=True)
class LayoutSnapshot:
    name: str
    boxes: Tuple[BoxSnapshot, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutSnapshot":
        return cls(
            name=str(data.get("name") or ""),
            boxes=tuple(BoxSnapshot.from_dict(b) for b in data.get("boxes") or []),
        )

    @classmethod
    def from_model(cls, layout) -> "LayoutSnapshot":
        """Build from a Layout ORM row whose boxes and components are loaded"""
        return cls(
            name=layout.name or "",
            boxes=tuple(
                BoxSnapshot(
                    position_x=box.position_x or 0,
                    position_y=box.position_y or 0,
                    width=box.width,
                    columns=box.columns,
                    components=tuple(
                        ComponentSnapshot(
                            type=component.type,
                            width=component.width,
                            height=component.height,
                            props=component.props or {},
                        )
                        for component in box.components
                    ),
                )
                for box in layout.boxes
            ),
        )


# ==================== Naming ====================

def component_name(layout_name: str) -> str:
    """Identifier for the generated component: ASCII alphanumerics of the layout name"""
    name = _NON_ALNUM.sub("", layout_name or "")
    if not name:
        return DEFAULT_COMPONENT_NAME
    if name[0].isdigit():
        return f"Page{name}"
    return name


def export_file_name(layout_name: str) -> str:
    """Download file name: every non-alphanumeric character becomes '_'"""
    stem = _NON_ALNUM.sub("_", layout_name or "") or DEFAULT_FILE_STEM
    return f"{stem}.jsx"


# ==================== Rendering ====================

def _js(value: Any) -> str:
    """Render a Python value as a JS literal"""
    return json.dumps(value, ensure_ascii=False, default=str)


def _style(props: Mapping[str, Any]) -> str:
    style = props.get("style")
    return _js(style if isinstance(style, Mapping) else {})


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _options(props: Mapping[str, Any]) -> List[str]:
    options = props.get("options")
    if not isinstance(options, (list, tuple)):
        return []
    return [_text(option) for option in options]


def _table_source(props: Mapping[str, Any]) -> Tuple[List[Any], List[Any]]:
    """
    Resolve (dataSource, columns) for a table.

    Accepts antd-shaped data (list of records + list of column dicts) as is.
    A list of row lists is read as a header row followed by data rows.
    """
    data = props.get("data")
    columns = props.get("columns")
    if not isinstance(data, list):
        data = []

    if data and all(isinstance(row, (list, tuple)) for row in data):
        header = [_text(cell) for cell in data[0]]
        keys = [f"col{index}" for index in range(len(header))]
        built_columns = [
            {"title": title, "dataIndex": key, "key": key}
            for title, key in zip(header, keys)
        ]
        rows = []
        for row_index, row in enumerate(data[1:]):
            record: Dict[str, Any] = {"key": str(row_index)}
            record.update({key: cell for key, cell in zip(keys, row)})
            rows.append(record)
        return rows, built_columns

    if not isinstance(columns, list):
        columns = []
    return data, columns


def _render_button(props: Mapping[str, Any]) -> str:
    return f"<Button style={{{_style(props)}}}>{{{_js(_text(props.get('content')))}}}</Button>"


def _render_text(props: Mapping[str, Any]) -> str:
    return (
        f"<Typography.Paragraph style={{{_style(props)}}}>"
        f"{{{_js(_text(props.get('content')))}}}</Typography.Paragraph>"
    )


def _render_image(props: Mapping[str, Any]) -> str:
    return (
        f"<Image src={{{_js(_text(props.get('src')))}}} alt={{{_js(_text(props.get('alt')))}}} "
        f"preview={{false}} style={{{_style(props)}}} />"
    )


def _render_card(props: Mapping[str, Any]) -> str:
    return (
        f"<Card title={{{_js(_text(props.get('title')))}}} style={{{_style(props)}}}>"
        f"{{{_js(_text(props.get('content')))}}}</Card>"
    )


def _render_table(props: Mapping[str, Any]) -> str:
    data_source, columns = _table_source(props)
    return (
        f"<Table dataSource={{{_js(data_source)}}} columns={{{_js(columns)}}} "
        f"pagination={{false}} style={{{_style(props)}}} />"
    )


def _render_radio(props: Mapping[str, Any]) -> str:
    options = "\n".join(
        f"  <Radio key={{{_js(option)}}} value={{{_js(option)}}}>{{{_js(option)}}}</Radio>"
        for option in _options(props)
    )
    value = props.get("value")
    return (
        f"<Radio.Group defaultValue={{{_js(value)}}} onChange={{onChange}}>\n"
        f"{options}\n"
        f"</Radio.Group>"
    )


def _render_checkbox(props: Mapping[str, Any]) -> str:
    options = "\n".join(
        f"  <Checkbox key={{{_js(option)}}} value={{{_js(option)}}}>{{{_js(option)}}}</Checkbox>"
        for option in _options(props)
    )
    value = props.get("value")
    if not isinstance(value, list):
        value = [] if value is None else [value]
    return (
        f"<Checkbox.Group defaultValue={{{_js(value)}}} onChange={{onChange}}>\n"
        f"{options}\n"
        f"</Checkbox.Group>"
    )


def _render_date(props: Mapping[str, Any]) -> str:
    return (
        f"<DatePicker placeholder={{{_js(_text(props.get('value')))}}} "
        f"onChange={{onChange}} style={{{_style(props)}}} />"
    )


def _render_date_range(props: Mapping[str, Any]) -> str:
    placeholder = [_text(props.get("start")), _text(props.get("end"))]
    return (
        f"<DatePicker.RangePicker placeholder={{{_js(placeholder)}}} "
        f"onChange={{onChange}} style={{{_style(props)}}} />"
    )


RENDERERS: Dict[ComponentType, Callable[[Mapping[str, Any]], str]] = {
    ComponentType.BUTTON: _render_button,
    ComponentType.TEXT: _render_text,
    ComponentType.RADIO: _render_radio,
    ComponentType.CHECKBOX: _render_checkbox,
    ComponentType.IMAGE: _render_image,
    ComponentType.DATE: _render_date,
    ComponentType.DATE_RANGE: _render_date_range,
    ComponentType.TABLE: _render_table,
    ComponentType.CARD: _render_card,
}


def render_component(component: ComponentSnapshot) -> str:
    component_type = ComponentType.resolve(component.type)
    if component_type is None:
        tag = component.type.replace("*/", "* /")
        return f"{{/* Unknown component type: {tag} */}}"
    return RENDERERS[component_type](component.props)


def required_imports(components: Iterable[ComponentSnapshot]) -> Set[str]:
    imports = set()
    for component in components:
        component_type = ComponentType.resolve(component.type)
        if component_type is not None:
            imports.add(COMPONENT_IMPORTS[component_type])
    return imports


def _number(value: Any, default: float = 0) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return default
    return int(value) if float(value).is_integer() else value


def _box_width(width: Any) -> str:
    """Numeric widths are percentages, strings ('50%', '320px') are kept verbatim"""
    if isinstance(width, (int, float)) and not isinstance(width, bool):
        return f"{_number(width)}%"
    text = _text(width).strip()
    if not text:
        return "100%"
    if re.fullmatch(r"\d+(\.\d+)?", text):
        return f"{text}%"
    return text


def _box_columns(columns: Any) -> int:
    try:
        return max(1, int(columns))
    except (TypeError, ValueError):
        return 1


def _indent(block: str, spaces: int) -> str:
    pad = " " * spaces
    return "\n".join(pad + line if line else line for line in block.splitlines())


def render_box(box: BoxSnapshot) -> str:
    style = {
        "position": "relative",
        "left": f"{_number(box.position_x)}px",
        "top": f"{_number(box.position_y)}px",
        "width": _box_width(box.width),
        "display": "grid",
        "gridTemplateColumns": f"repeat({_box_columns(box.columns)}, 1fr)",
        "gap": "16px",
        "padding": "16px",
    }
    body = "\n".join(render_component(component) for component in box.components)
    lines = [f"<div style={{{_js(style)}}}>"]
    if body:
        lines.append(_indent(body, 2))
    lines.append("</div>")
    return "\n".join(lines)


def generate_page_code(layout: LayoutSnapshot) -> str:
    """Generate the React page source for a layout snapshot"""
    imports = set(BASE_IMPORTS)
    needs_handler = False
    rendered_boxes = []

    for box in layout.boxes:
        imports |= required_imports(box.components)
        needs_handler = needs_handler or any(
            ComponentType.resolve(component.type) in INTERACTIVE_TYPES
            for component in box.components
        )
        rendered_boxes.append(render_box(box))

    name = component_name(layout.name)
    content = "\n".join(rendered_boxes)

    body = ["  return (", "    <Layout>", "      <Layout.Content>"]
    if content:
        body.append(_indent(content, 8))
    body += ["      </Layout.Content>", "    </Layout>", "  );"]

    lines = sorted(imports)
    lines.append("")
    lines.append(f"const {name} = () => {{")
    if needs_handler:
        lines.append("  const onChange = (value) => console.log(value);")
        lines.append("")
    lines.extend(body)
    lines.append("};")
    lines.append("")
    lines.append(f"export default {name};")
    return "\n".join(lines) + "\n"
