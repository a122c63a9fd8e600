"""
Arbre de document Markdown sous forme de dicts (à la manière de unist/mdast).

    u("heading", {"depth": 2}, [u("text", "Install")])
    -> {"type": "heading", "depth": 2, "children": [{"type": "text", "value": "Install"}]}
"""
from typing import Any, Dict, List, Optional, Union

Node = Dict[str, Any]


def u(node_type: str,
      props: Optional[Union[Dict[str, Any], List[Node], str]] = None,
      value: Optional[Union[List[Node], str]] = None) -> Node:
    """Construit un noeud. `props` peut être omis : u("text", "x"), u("blockquote", [...])."""
    if isinstance(props, (list, str)):
        props, value = None, props
    node: Node = {"type": node_type}
    if props:
        node.update(props)
    if isinstance(value, list):
        node["children"] = value
    elif value is not None:
        node["value"] = value
    return node


def heading(depth: int, label: str) -> Node:
    return u("heading", {"depth": depth}, [u("text", label)])


def paragraph(text: str) -> Node:
    return u("paragraph", [u("text", text)])


def to_plain_text(node: Node) -> str:
    """Concatène les valeurs textuelles d'un noeud et de ses descendants."""
    if "value" in node and node["type"] in ("text", "inlineCode"):
        return node["value"]
    return "".join(to_plain_text(child) for child in node.get("children", []))


def find_heading(children: List[Node], label: str, depth: Optional[int] = None) -> Optional[int]:
    """Index du premier titre dont le texte vaut `label` (et de niveau `depth` si donné), sinon None."""
    for index, child in enumerate(children):
        if child["type"] != "heading" or (depth is not None and child["depth"] != depth):
            continue
        if to_plain_text(child) == label:
            return index
    return None


def section_end(children: List[Node], heading_index: int) -> int:
    """Index du prochain titre de niveau inférieur ou égal (fin de section)."""
    depth = children[heading_index]["depth"]
    for index in range(heading_index + 1, len(children)):
        child = children[index]
        if child["type"] == "heading" and child["depth"] <= depth:
            return index
    return len(children)


def replace_section_content(root: Node, label: str, content: List[Node], depth: int = 2) -> bool:
    """
    Remplace le contenu situé sous le titre `label` (jusqu'au titre suivant de
    même niveau). Retourne False si le titre est absent.
    """
    children = root["children"]
    index = find_heading(children, label, depth=depth)
    if index is None:
        return False
    end = section_end(children, index)
    children[index + 1:end] = content
    return True
