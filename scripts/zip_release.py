import os
import zipfile
from pathlib import Path

EXCLUDED_SUFFIXES = (".pyc", ".pyo")


def create_zip():
    root_dir = Path(__file__).parent.parent
    source_dir = root_dir / "custom_components" / "smart_breeder"
    dist_dir = root_dir / "dist"
    output_zip = dist_dir / "smart_breeder.zip"

    dist_dir.mkdir(exist_ok=True)
    output_zip.unlink(missing_ok=True)

    print(f"Packaging {source_dir.name} into {output_zip}...")

    count = 0
    with zipfile.ZipFile(output_zip, "w", zipfile.ZIP_DEFLATED) as zipf:
        for root, dirs, files in os.walk(source_dir):
            dirs[:] = [d for d in dirs if d != "__pycache__"]
            for file in sorted(files):
                if file.endswith(EXCLUDED_SUFFIXES):
                    continue
                file_path = Path(root) / file
                zipf.write(file_path, file_path.relative_to(source_dir))
                count += 1

    print(f"Wrote {count} files to {output_zip}")


if __name__ == "__main__":
    create_zip()
