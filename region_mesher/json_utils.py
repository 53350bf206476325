"""
JSON formatting utilities.

Mesh files are mostly long runs of small numeric tuples. Standard
json.dumps() with indent spreads every vertex over five lines; here we
keep the overall structure indented but fold each numeric leaf array
onto one line.
"""

import json
import re
from typing import Any

# A leaf array of numbers that json.dumps() spread across lines
_NUMERIC_LEAF_ARRAY = re.compile(r'\[\s*\n\s*([-+\deE.,\s]+?)\s*\n\s*\]')


def _fold(match: "re.Match") -> str:
    return '[' + re.sub(r',\s+', ', ', match.group(1).strip()) + ']'


def dumps_compact_arrays(data: Any, indent: int = 2) -> str:
    """
    Serialize data as indented JSON with numeric leaf arrays on one line.

    Example:
        >>> print(dumps_compact_arrays({"vertices": [[0.0, 1.0, 0.0]]}))
        {
          "vertices": [
            [0.0, 1.0, 0.0]
          ]
        }

    Args:
        data: JSON-serializable data
        indent: Spaces per indentation level

    Returns:
        JSON string
    """
    return _NUMERIC_LEAF_ARRAY.sub(_fold, json.dumps(data, indent=indent, ensure_ascii=False))
