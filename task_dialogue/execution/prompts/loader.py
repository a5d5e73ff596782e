"""
Jinja2 loader for oracle prompts.

Templates ship inside the package (execution/prompts/templates) and are
resolved through a PackageLoader, so they work from an installed wheel as
well as from a source checkout.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from jinja2 import Environment, PackageLoader, select_autoescape

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".jinja2"


def template_names() -> List[str]:
    return [
        getattr(Template, attr)
        for attr in dir(Template)
        if not attr.startswith("_")
    ]


def validate_templates():
    """Every Template constant must have a file. Fails fast at import."""
    missing = [
        name for name in template_names()
        if not (TEMPLATES_DIR / f"{name}{TEMPLATE_SUFFIX}").exists()
    ]
    if missing:
        raise FileNotFoundError(f"Prompt templates missing in {TEMPLATES_DIR}: {missing}")


validate_templates()


@lru_cache(maxsize=1)
def _get_environment() -> Environment:
    return Environment(
        loader=PackageLoader("task_dialogue.execution.prompts", "templates"),
        autoescape=select_autoescape(default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def render(template_name: str, **context) -> str:
    """
    Render a prompt template.

    Args:
        template_name: A Template constant (no file extension)
        **context: Variables exposed to the template

    Returns:
        The rendered prompt, stripped of surrounding whitespace
    """
    template = _get_environment().get_template(f"{template_name}{TEMPLATE_SUFFIX}")
    return template.render(**context).strip()
