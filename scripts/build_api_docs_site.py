from __future__ import annotations

import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from price_fetcher.main import app
DEFAULT_SITE_API_DIR = REPO_ROOT / "docs" / "site" / "api"


def build(out_dir: Path = DEFAULT_SITE_API_DIR) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    openapi_path = out_dir / "openapi.json"
    openapi_path.write_text(
        json.dumps(app.openapi(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return openapi_path


def main() -> None:
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SITE_API_DIR
    print(build(out_dir))


if __name__ == "__main__":
    main()
