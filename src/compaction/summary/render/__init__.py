"""Summary renderers, one per language family."""

from compaction.summary.render.base import BaseRenderer, first_line
from compaction.summary.render.csharp import CSharpRenderer
from compaction.summary.render.gdscript import GDScriptRenderer
from compaction.summary.render.php import PhpRenderer
from compaction.summary.render.python import PythonRenderer
from compaction.summary.render.rust import RustRenderer
from compaction.summary.render.typescript import TypeScriptRenderer

__all__ = [
    "BaseRenderer",
    "CSharpRenderer",
    "GDScriptRenderer",
    "PhpRenderer",
    "PythonRenderer",
    "RustRenderer",
    "TypeScriptRenderer",
    "first_line",
]
