import json
import os
import tempfile


def _write_atomic(path, content):
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    # nome temporaneo unico: due salvataggi concorrenti non si pestano i piedi
    fd, tmp = tempfile.mkstemp(dir=directory, prefix=f".{os.path.basename(path)}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
    except Exception:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def dump_json(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_atomic(path, data):
    """Serialize `data` as pretty JSON and swap it into place."""
    _write_atomic(str(path), dump_json(data))


def resolve_in_repo(repo_root, relpath):
    """Join a configured relative path onto the site repo root.

    Absolute paths are returned unchanged; relative ones must not escape the repo.
    """
    if os.path.isabs(relpath):
        return os.path.normpath(relpath)
    root = os.path.abspath(repo_root)
    full = os.path.normpath(os.path.join(root, relpath))
    if full != root and not full.startswith(root + os.sep):
        raise ValueError(f"Path {relpath!r} escapes repository root {root!r}")
    return full
