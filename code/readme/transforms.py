"""
Transformations appliquées à l'arbre du README avant sérialisation.

Chaque transformation remplit la section d'un titre de niveau 2 déjà présent
dans l'arbre et remplace son contenu précédent (ré-exécution sans effet).
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from readme.doc_tree import Node, u, find_heading, replace_section_content, to_plain_text

logger = logging.getLogger(__name__)

# Format npm "Nom <email> (url)"
AUTHOR_STRING_RE = re.compile(r"^\s*([^<(]*?)\s*(?:<([^>]*)>)?\s*(?:\(([^)]*)\))?\s*$")


def _inline_with_link(template: str, label: str, url: str) -> List[Node]:
    """Découpe `template` autour de `{link}` et y insère un lien."""
    before, _, after = template.partition("{link}")
    children = []
    if before:
        children.append(u("text", before))
    children.append(u("link", {"url": url}, [u("text", label)]))
    if after:
        children.append(u("text", after))
    return children


def contributors_section(root: Node, label: str, homepage: str, contributors_config: Dict[str, Any]) -> Node:
    contributors_file = contributors_config["file"]
    url = contributors_config["url"].format(homepage=homepage, file=contributors_file)
    content = [u("paragraph", _inline_with_link(contributors_config["sentence"], contributors_file, url))]
    if not replace_section_content(root, label, content):
        logger.warning(f"Titre '{label}' absent: section contributeurs non générée.")
    return root


def install_section(root: Node, label: str, package_name: str, install_config: Dict[str, Any]) -> Node:
    registry_url = install_config["registry_url"].format(name=package_name)
    content = [
        u("paragraph", _inline_with_link(install_config["intro"], install_config["registry_label"], registry_url)),
        u("code", {"lang": None}, install_config["command"].format(name=package_name)),
    ]
    if not replace_section_content(root, label, content):
        logger.warning(f"Titre '{label}' absent: section d'installation non générée.")
    return root


def parse_author(author: Any) -> Tuple[Optional[str], Optional[str]]:
    """Retourne (nom, url) depuis un champ `author` objet ou chaîne npm."""
    if isinstance(author, dict):
        return author.get("name") or None, author.get("url") or None
    if isinstance(author, str) and author.strip():
        match = AUTHOR_STRING_RE.match(author)
        if match:
            return match.group(1) or None, match.group(3) or None
        return author.strip(), None
    return None, None


def license_section(root: Node, label: str, license_name: Optional[str], author: Any) -> Node:
    if not license_name:
        logger.warning(f"Aucune licence déclarée: section '{label}' laissée vide.")
        replace_section_content(root, label, [])
        return root

    author_name, author_url = parse_author(author)
    children = [u("text", f"{license_name} © " if author_name else license_name)]
    if author_name and author_url:
        children.append(u("link", {"url": author_url}, [u("text", author_name)]))
    elif author_name:
        children.append(u("text", author_name))

    if not replace_section_content(root, label, [u("paragraph", children)]):
        logger.warning(f"Titre '{label}' absent: section licence non générée.")
    return root


def slugify_heading(text: str) -> str:
    """Ancre façon GitHub : minuscules, ponctuation retirée, espaces -> '-'."""
    return re.sub(r"[^\w\- ]", "", text.strip().lower()).replace(" ", "-")


def heading_slugs(children: List[Node]) -> Dict[int, str]:
    """Ancre de chaque titre (index -> slug), doublons suffixés -1, -2..."""
    occurrences: Dict[str, int] = {}
    slugs = {}
    for index, child in enumerate(children):
        if child["type"] != "heading":
            continue
        base = slugify_heading(to_plain_text(child))
        slug = base
        if base in occurrences:
            occurrences[base] += 1
            slug = f"{base}-{occurrences[base]}"
        else:
            occurrences[base] = 0
        slugs[index] = slug
    return slugs


def _unlinked(children: List[Node]) -> List[Node]:
    # Pas de lien imbriqué dans un lien de la table
    flat = []
    for child in children:
        flat.extend(_unlinked(child["children"]) if child["type"] == "link" else [child])
    return flat


def table_of_contents(root: Node, label: str, max_depth: int = 6) -> Node:
    """Liste imbriquée de liens vers les titres qui suivent le titre `label`."""
    children = root["children"]
    toc_index = find_heading(children, label)
    if toc_index is None:
        logger.warning(f"Titre '{label}' absent: table des matières non générée.")
        return root
    # Vider d'abord l'ancienne table pour que les ancres soient recalculées sur l'arbre final
    replace_section_content(root, label, [], depth=children[toc_index]["depth"])
    slugs = heading_slugs(children)

    toc_list = u("list", {"ordered": False}, [])
    stack: List[Tuple[int, Node]] = []
    for index in range(toc_index + 1, len(children)):
        child = children[index]
        if child["type"] != "heading" or child["depth"] > max_depth:
            continue
        depth = child["depth"]
        item = u("listItem", [
            u("paragraph", [u("link", {"url": f"#{slugs[index]}"}, _unlinked(child["children"]))]),
        ])
        while stack and stack[-1][0] > depth:
            stack.pop()
        if not stack:
            stack.append((depth, toc_list))
        elif stack[-1][0] < depth:
            nested = u("list", {"ordered": False}, [])
            stack[-1][1]["children"][-1]["children"].append(nested)
            stack.append((depth, nested))
        stack[-1][1]["children"].append(item)

    if toc_list["children"]:
        children.insert(toc_index + 1, toc_list)
    return root


def run_transforms(root: Node,
                   package_name: str,
                   manifest: Dict[str, Any],
                   homepage: str,
                   config: Dict[str, Any]) -> Node:
    """Enchaîne contributeurs, installation, licence puis table des matières."""
    sections = config["sections"]
    contributors_section(root, sections["contributors"], homepage, config["contributors"])
    install_section(root, sections["install"], package_name, config["install"])
    license_section(root, sections["license"], manifest.get("license"), manifest.get("author"))
    table_of_contents(root, sections["table_of_contents"], max_depth=config.get("toc_max_depth", 6))
    return root
