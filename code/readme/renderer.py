import logging
import re
from typing import Any, Dict, Optional

from jinja2 import Environment, PackageLoader

from readme.doc_tree import Node

logger = logging.getLogger(__name__)

BLOCKS_TEMPLATE = "blocks.md.j2"
BLOCK_TYPES = ["paragraph", "heading", "blockquote", "code", "list"]
MARKDOWN_SPECIAL_RE = re.compile(r"([\\`*_\[\]<])")


def markdown_text(value: str) -> str:
    """Échappe les caractères qui seraient interprétés comme balisage Markdown."""
    return MARKDOWN_SPECIAL_RE.sub(r"\\\1", str(value))


def inline_code(value: str) -> str:
    if "`" not in value:
        return f"`{value}`"
    return f"`` {value} ``"


def fenced(value: str, lang: Optional[str] = None) -> str:
    fence = "```"
    while fence in value:
        fence += "`"
    return f"{fence}{lang or ''}\n{value}\n{fence}"


def quote_lines(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in str(text).split("\n"))


def create_environment() -> Environment:
    env = Environment(loader=PackageLoader("readme"), autoescape=False)
    env.filters["markdown_text"] = markdown_text
    env.filters["inline_code"] = inline_code
    env.filters["fenced"] = fenced
    env.filters["quote_lines"] = quote_lines
    env.globals["block_types"] = BLOCK_TYPES
    return env


jinja_env = create_environment()


def _blank_lines_between(previous: Node, current: Node, heading_gap: Dict[Any, Dict[str, int]]) -> int:
    blank_lines = 1
    if current["type"] == "heading":
        blank_lines = max(blank_lines, heading_gap.get(current["depth"], {}).get("before", 1))
    if previous["type"] == "heading":
        blank_lines = max(blank_lines, heading_gap.get(previous["depth"], {}).get("after", 1))
    return blank_lines


def render_markdown(root: Node, heading_gap: Optional[Dict[Any, Dict[str, int]]] = None) -> str:
    """
    Sérialise l'arbre en Markdown. Les blocs de premier niveau sont séparés
    par une ligne vide, ou davantage autour des titres selon `heading_gap`
    ({niveau: {"before": n, "after": n}}). Le texte retourné se termine par
    exactement un retour à la ligne.
    """
    heading_gap = heading_gap or {}
    macros = jinja_env.get_template(BLOCKS_TEMPLATE).module

    output = []
    previous = None
    for node in root["children"]:
        if previous is not None:
            output.append("\n" * (_blank_lines_between(previous, node, heading_gap) + 1))
        output.append(str(macros.render_node(node)))
        previous = node
    markdown = "".join(output).rstrip("\n") + "\n"
    logger.debug(f"Markdown rendu ({len(markdown)} caractères, {len(root['children'])} blocs).")
    return markdown
