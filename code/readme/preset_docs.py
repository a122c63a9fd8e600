"""
Génération du README d'un preset : une section par plugin embarqué, triée
par nom de plugin, encadrée des sections standard du projet.
"""
import logging
import pprint
from pathlib import Path
from typing import Any, Dict, List, Optional

import global_config
from lib.utils import MaintenanceError, write_text_if_changed
from manifest import manifest_io
from readme import preset_loader, transforms
from readme.config_loader import get_readme_config
from readme.doc_tree import Node, u, heading
from readme.preset_loader import PluginDescriptor
from readme.renderer import render_markdown

logger = logging.getLogger(__name__)


class ReadmeError(MaintenanceError):
    """README impossible à écrire."""


def format_options(options: Any) -> str:
    return pprint.pformat(options, sort_dicts=False)


def plugin_section(descriptor: PluginDescriptor, config: Dict[str, Any]) -> List[Node]:
    """Titre niveau 3, citation de la description éventuelle, phrase de configuration."""
    label = u("inlineCode", descriptor.identifier)
    if descriptor.repository:
        label = u("link", {"url": descriptor.repository}, [label])
    nodes = [u("heading", {"depth": 3}, [label])]

    if descriptor.description:
        nodes.append(u("blockquote", [u("text", descriptor.description)]))

    sentences = config["sentences"]
    # Toute configuration "fausse" ({}, False, None...) est traitée comme la configuration par défaut
    if not descriptor.options:
        nodes.append(u("paragraph", [u("text", sentences["default_configuration"])]))
    else:
        nodes.append(u("paragraph", [u("text", sentences["custom_configuration"])]))
        nodes.append(u("code", {"lang": config["options_code_lang"]}, format_options(descriptor.options)))
    return nodes


def build_preset_tree(package_name: str,
                      manifest: Dict[str, Any],
                      descriptors: List[PluginDescriptor],
                      config: Dict[str, Any]) -> Node:
    sections = config["sections"]
    plugins = []
    for descriptor in descriptors:
        plugins.extend(plugin_section(descriptor, config))

    children = [
        u("heading", {"depth": 1}, [u("text", package_name)]),
    ]
    if manifest.get("description"):
        children.append(u("blockquote", [u("text", manifest["description"])]))
    children += [
        heading(2, sections["table_of_contents"]),
        heading(2, sections["plugins"]),
        *plugins,
        heading(2, sections["install"]),
        heading(2, sections["contributors"]),
        heading(2, sections["license"]),
    ]
    return u("root", children)


def render_preset_readme(package_name: str,
                         manifest: Dict[str, Any],
                         descriptors: List[PluginDescriptor],
                         homepage: str = global_config.PROJECT_HOMEPAGE,
                         config: Optional[Dict[str, Any]] = None) -> str:
    config = config or get_readme_config()
    tree = build_preset_tree(package_name, manifest, descriptors, config)
    transforms.run_transforms(tree, package_name, manifest, homepage, config)
    return render_markdown(tree, heading_gap=config.get("heading_gap"))


def update_preset(package_dir: Path,
                  packages_dir: Optional[Path] = None,
                  homepage: str = global_config.PROJECT_HOMEPAGE,
                  entry_module: str = global_config.PRESET_ENTRY_MODULE,
                  factory_name: str = global_config.PRESET_FACTORY_NAME,
                  plugin_attribute: str = global_config.PLUGIN_NAME_ATTRIBUTE,
                  manifest_filename: str = global_config.MANIFEST_FILENAME,
                  readme_filename: str = global_config.README_FILENAME,
                  config: Optional[Dict[str, Any]] = None,
                  dry_run: bool = False) -> bool:
    """
    Régénère le README d'un preset. Manifeste illisible ou factory en échec :
    erreur fatale. Retourne True si le README a changé.
    """
    package_dir = Path(package_dir)
    packages_dir = Path(packages_dir) if packages_dir else package_dir.parent
    package_name = package_dir.name

    manifest = manifest_io.load_package_manifest(package_dir / manifest_filename)
    entries = preset_loader.load_preset_plugins(package_dir, entry_module=entry_module, factory_name=factory_name)
    descriptors = preset_loader.describe_plugins(entries, packages_dir,
                                                 attribute=plugin_attribute,
                                                 manifest_filename=manifest_filename)
    logger.info(f"Preset '{package_name}': {len(descriptors)} plugin(s) documenté(s).")

    markdown = render_preset_readme(package_name, manifest, descriptors, homepage=homepage, config=config)
    readme_path = package_dir / readme_filename
    try:
        return write_text_if_changed(readme_path, markdown, dry_run=dry_run)
    except OSError as e:
        logger.critical(f"Erreur critique écriture README vers {readme_path}: {e}")
        raise ReadmeError(f"Écriture impossible de {readme_path}: {e}") from e
