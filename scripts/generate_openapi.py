import argparse
import json
from pathlib import Path

from lido_social.main import app


def write_openapi(output_path: Path) -> Path:
    """Dumps the API schema, keys sorted so regenerated files diff cleanly."""
    schema = app.openapi()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Write the OpenAPI schema of the social API.")
    parser.add_argument("--output", type=Path, default=Path("docs") / "openapi.json")
    args = parser.parse_args()
    path = write_openapi(args.output)
    print(f"OpenAPI spec successfully written to {path}")
