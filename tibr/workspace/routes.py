"""
Route Registration

Rewrites the dynamic route-registration block of the API main.ts so every
app/<name>/<name>.controller.js router is mounted at /api/<name>s.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from tibr.errors import MalformedInputError, MissingInputError

logger = logging.getLogger(__name__)

START_TAG = "// ─── DYNAMIC ROUTE REGISTRATION ─────────────────────────────────────────────"
END_TAG = "// └───────────────────────────────────────────────────────────────────────────────"

MAIN_TS_CANDIDATES = [
    Path("libs") / "api" / "src" / "main.ts",
    Path("apps") / "api" / "business-api" / "src" / "main.ts",
]

REGISTRATION_SNIPPET = [
    START_TAG,
    "const controllersDir = path.join(__dirname, 'app');",
    "fs.readdirSync(controllersDir, { withFileTypes: true })",
    "  .filter(d => d.isDirectory())",
    "  .forEach(d => {",
    "    const router = require(path.join(controllersDir, d.name, d.name + '.controller.js')).default;",
    "    app.use('/api/' + d.name + 's', router);",
    "  });",
    END_TAG,
]


def find_main_ts(root: Path, candidates: Sequence[Path] = MAIN_TS_CANDIDATES) -> Optional[Path]:
    root = Path(root)
    return next((root / c for c in candidates if (root / c).is_file()), None)


def replace_registration_block(lines: List[str], source="main.ts") -> List[str]:
    """Swap the lines between (and including) the marker tags for the snippet."""
    start_idx = next((i for i, line in enumerate(lines) if START_TAG in line), -1)
    end_idx = next((i for i, line in enumerate(lines) if END_TAG in line), -1)

    if start_idx == -1 or end_idx == -1 or end_idx <= start_idx:
        raise MalformedInputError(source, "registration block tags not found or malformed")

    return lines[:start_idx] + REGISTRATION_SNIPPET + lines[end_idx + 1:]


def register_routes(main_path: Path) -> Path:
    """Rewrite the registration block of main_path in place."""
    main_path = Path(main_path)
    if not main_path.is_file():
        raise MissingInputError(main_path, f"main.ts not found at {main_path}")

    content = main_path.read_text(encoding="utf-8")
    new_lines = replace_registration_block(content.splitlines(), source=main_path)

    new_content = "\n".join(new_lines)
    if content.endswith("\n"):
        new_content += "\n"
    main_path.write_text(new_content, encoding="utf-8")
    logger.info(f"Updated route registration in {main_path}")
    return main_path
