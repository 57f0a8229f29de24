# octogrbl/utils.py
import re

SAFE_FILENAME_RE = re.compile(r"[A-Za-z0-9._ ()-]+")

def make_safe_filename(name: str, default: str = "job") -> str:
    """Strips characters the print host could misread in a multipart filename."""
    if not name:
        return default
    name = name.strip()
    parts = SAFE_FILENAME_RE.findall(name)
    cleaned = "".join(parts).strip()
    cleaned = re.sub(r'\.{2,}', '', cleaned)
    cleaned = cleaned.strip('.')
    return cleaned or default

def ensure_extension(filename: str, extension: str = ".gcode") -> str:
    """Appends ``extension`` unless the name already ends with it."""
    if not extension:
        return filename
    return filename if filename.lower().endswith(extension.lower()) else f"{filename}{extension}"
