import json
import os
import tempfile
from typing import List

from src.models import Edition


def write_editions(editions: List[Edition], output_file: str) -> None:
    """Serialize editions to the archive JSON shape, replacing the file only once fully written"""
    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=output_dir or '.', prefix='.tmp-', suffix='.json')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump([edition.to_dict() for edition in editions], f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, output_file)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def load_editions(input_file: str) -> List[Edition]:
    with open(input_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Unexpected JSON shape in {input_file}: expected a list of editions")

    return [Edition.from_dict(item) for item in data]
