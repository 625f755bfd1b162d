"""
React Component Generator

Renders react-hook-form forms and list/detail pages for an entity into the
configured UI library (libs/<uiProject>/src/lib).
"""

import logging
from pathlib import Path
from typing import Dict

from tibr.schema import EntityDescription, PropertySchema
from tibr.generation.naming import class_name, field_label, plural_route

logger = logging.getLogger(__name__)

PAGE_TYPES = ("list", "detail")

TS_TYPE_MAP: Dict[str, str] = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "object": "Record<string, unknown>",
    "array": "unknown[]",
}


def ts_type_for(prop: PropertySchema) -> str:
    """TypeScript type for a field; enums become string-literal unions."""
    if prop.is_enum:
        if not prop.enum:
            return "never"
        return " | ".join("'" + v.replace("'", "\\'") + "'" for v in prop.enum)
    return TS_TYPE_MAP.get(prop.type, "string")


def form_component_name(entity: str) -> str:
    return f"{class_name(entity)}Form"


def page_component_name(entity: str, page_type: str) -> str:
    suffix = "List" if page_type == "list" else "Detail"
    return f"{class_name(entity)}{suffix}"


def _form_field(prop: PropertySchema) -> str:
    label = field_label(prop.name)
    return f'''      <div className="form-field">
        <label htmlFor="{prop.name}">{label}</label>
        <input id="{prop.name}" {{...register('{prop.name}', {{ required: true }})}} />
        {{errors.{prop.name} && <span>{label} is required</span>}}
      </div>'''


def render_form(entity: EntityDescription) -> str:
    """Render <Entity>Form.tsx for an entity schema."""
    name = class_name(entity.name)
    comp_name = form_component_name(entity.name)
    values_type = f"{name}FormValues"

    interface_fields = "\n".join(f"  {p.name}: {ts_type_for(p)};" for p in entity.properties)
    fields = "\n".join(_form_field(p) for p in entity.properties)

    return f'''import React from 'react';
import {{ useForm }} from 'react-hook-form';

export interface {values_type} {{
{interface_fields}
}}

export const {comp_name}: React.FC<{{
  onSubmit: (data: {values_type}) => void;
}}> = ({{ onSubmit }}) => {{
  const {{ register, handleSubmit, formState: {{ errors }} }} = useForm<{values_type}>();

  return (
    <form onSubmit={{handleSubmit(onSubmit)}}>
{fields}
      <button type="submit">Save</button>
    </form>
  );
}};
'''


def render_list_page(entity: str) -> str:
    name = class_name(entity)
    page_name = page_component_name(entity, "list")

    return f'''import React, {{ useEffect, useState }} from 'react';
import {{ {name}FormValues }} from './{form_component_name(entity)}';

export const {page_name}: React.FC = () => {{
  const [items, setItems] = useState<{name}FormValues[]>([]);

  useEffect(() => {{
    fetch('/api/{plural_route(entity)}')
      .then(res => res.json())
      .then(data => setItems(data));
  }}, []);

  return (
    <div>
      <h1>{name} List</h1>
      <ul>
        {{items.map(item => (
          <li key={{(item as any).id}}>{{JSON.stringify(item)}}</li>
        ))}}
      </ul>
    </div>
  );
}};
'''


def render_detail_page(entity: str) -> str:
    name = class_name(entity)
    page_name = page_component_name(entity, "detail")

    return f'''import React, {{ useEffect, useState }} from 'react';
import {{ useParams }} from 'react-router-dom';
import {{ {name}FormValues }} from './{form_component_name(entity)}';

export const {page_name}: React.FC = () => {{
  const {{ id }} = useParams<{{ id: string }}>();
  const [item, setItem] = useState<{name}FormValues | null>(null);

  useEffect(() => {{
    fetch('/api/{plural_route(entity)}/' + id)
      .then(res => res.json())
      .then(data => setItem(data));
  }}, [id]);

  if (!item) return <div>Loading...</div>;

  return (
    <div>
      <h1>{name} Detail</h1>
      <pre>{{JSON.stringify(item, null, 2)}}</pre>
    </div>
  );
}};
'''


def write_form(entity: EntityDescription, ui_lib_dir: Path) -> Path:
    """Write <Entity>Form.tsx into the UI library and return its path."""
    ui_lib_dir = Path(ui_lib_dir)
    ui_lib_dir.mkdir(parents=True, exist_ok=True)

    file_path = ui_lib_dir / f"{form_component_name(entity.name)}.tsx"
    file_path.write_text(render_form(entity), encoding="utf-8")
    logger.info(f"Generated form component at {file_path}")
    return file_path


def write_page(entity: str, page_type: str, ui_lib_dir: Path) -> Path:
    """Write <Entity>List.tsx or <Entity>Detail.tsx and return its path."""
    if page_type not in PAGE_TYPES:
        raise ValueError(f"Unknown page type: {page_type}")

    ui_lib_dir = Path(ui_lib_dir)
    ui_lib_dir.mkdir(parents=True, exist_ok=True)

    content = render_list_page(entity) if page_type == "list" else render_detail_page(entity)
    file_path = ui_lib_dir / f"{page_component_name(entity, page_type)}.tsx"
    file_path.write_text(content, encoding="utf-8")
    logger.info(f"Generated {page_type} page at {file_path}")
    return file_path
