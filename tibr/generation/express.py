"""
Express API Generator

Renders PostgREST-backed service classes, their Express controllers, and
plain route stubs under apps/api/src/app.
"""

import logging
from pathlib import Path
from typing import List

from tibr.generation.naming import class_name, plural_route, route_name

logger = logging.getLogger(__name__)

API_APP_DIR = Path("apps") / "api" / "src" / "app"


def render_service(entity: str) -> str:
    cls = class_name(entity)

    return f'''import fetch from 'node-fetch';

/**
 * Business logic for {cls}
 */
export class {cls}Service {{
  private baseUrl = process.env.POSTGREST_URL || 'http://localhost:3000/{plural_route(entity)}';

  async findAll() {{
    const res = await fetch(this.baseUrl);
    return res.json();
  }}

  async findOne(id: string) {{
    const res = await fetch(`${{this.baseUrl}}?id=eq.${{id}}`);
    const data = await res.json();
    return data[0];
  }}

  async create(payload: any) {{
    await fetch(this.baseUrl, {{
      method: 'POST',
      headers: {{ 'Content-Type': 'application/json' }},
      body: JSON.stringify(payload),
    }});
  }}

  async update(id: string, payload: any) {{
    await fetch(`${{this.baseUrl}}?id=eq.${{id}}`, {{
      method: 'PATCH',
      headers: {{ 'Content-Type': 'application/json' }},
      body: JSON.stringify(payload),
    }});
  }}

  async remove(id: string) {{
    await fetch(`${{this.baseUrl}}?id=eq.${{id}}`, {{
      method: 'DELETE',
    }});
  }}
}}
'''


def render_controller(entity: str) -> str:
    name = route_name(entity)
    cls = class_name(entity)

    return f'''import {{ Router }} from 'express';
import {{ {cls}Service }} from './{name}.service';

const router = Router();
const svc = new {cls}Service();

router.get('/', async (req, res) => {{
  const items = await svc.findAll();
  res.json(items);
}});

router.get('/:id', async (req, res) => {{
  const item = await svc.findOne(req.params.id);
  res.json(item);
}});

router.post('/', async (req, res) => {{
  await svc.create(req.body);
  res.sendStatus(201);
}});

router.patch('/:id', async (req, res) => {{
  await svc.update(req.params.id, req.body);
  res.sendStatus(204);
}});

router.delete('/:id', async (req, res) => {{
  await svc.remove(req.params.id);
  res.sendStatus(204);
}});

export default router;
'''


def render_route_stub(name: str) -> str:
    route = route_name(name)

    return f'''import {{ Router }} from 'express';
const router = Router();

router.get('/{route}', (req, res) => {{
  res.json({{ message: '{name} endpoint' }});
}});

export default router;
'''


def write_service(entity: str, project_root: Path) -> List[Path]:
    """Write <entity>.service.ts and <entity>.controller.ts; returns both paths."""
    name = route_name(entity)
    base_dir = Path(project_root) / API_APP_DIR / name
    base_dir.mkdir(parents=True, exist_ok=True)

    service_path = base_dir / f"{name}.service.ts"
    service_path.write_text(render_service(entity), encoding="utf-8")

    controller_path = base_dir / f"{name}.controller.ts"
    controller_path.write_text(render_controller(entity), encoding="utf-8")

    logger.info(f"Generated service and controller for {class_name(entity)} in {base_dir}")
    return [service_path, controller_path]


def write_route_stub(name: str, project_root: Path) -> Path:
    target_dir = Path(project_root) / API_APP_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    file_path = target_dir / f"{route_name(name)}.ts"
    file_path.write_text(render_route_stub(name), encoding="utf-8")
    logger.info(f"Generated route stub at {file_path}")
    return file_path
