"""
Chargement de la factory d'un preset et introspection de ses plugins.

Un preset expose, dans son module d'entrée (par défaut `index.py`), une
factory sans argument qui retourne soit un objet ayant un attribut `plugins`,
soit directement une séquence. Chaque entrée est un couple `(plugin, options)`,
un 1-uplet `(plugin,)` ou le plugin seul. Le nom enregistré d'un plugin est lu
sur l'objet obtenu en l'instanciant (`plugin()`).
"""
import importlib.util
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import global_config
from lib.utils import MaintenanceError
from manifest import manifest_io

logger = logging.getLogger(__name__)

PluginEntry = Tuple[Any, Any]


class PresetError(MaintenanceError):
    """Factory de preset introuvable, non invocable ou plugin sans nom."""


@dataclass(frozen=True)
class PluginMetadata:
    description: Optional[str] = None
    repository: Optional[str] = None


@dataclass(frozen=True)
class PluginDescriptor:
    identifier: str
    options: Any = None
    metadata: Optional[PluginMetadata] = None

    @property
    def description(self) -> Optional[str]:
        return self.metadata.description if self.metadata else None

    @property
    def repository(self) -> Optional[str]:
        return self.metadata.repository if self.metadata else None


def _module_name_for(package_dir: Path) -> str:
    return "_preset_" + re.sub(r"\W", "_", package_dir.name)


def load_preset_factory(package_dir: Path,
                        entry_module: str = global_config.PRESET_ENTRY_MODULE,
                        factory_name: str = global_config.PRESET_FACTORY_NAME) -> Callable[[], Any]:
    """Importe le module d'entrée du preset par chemin et retourne sa factory."""
    package_dir = Path(package_dir)
    module_path = package_dir / entry_module
    if not module_path.is_file():
        raise PresetError(f"Module d'entrée du preset introuvable: {module_path}")

    logger.debug(f"Chargement module preset: {module_path}")
    spec = importlib.util.spec_from_file_location(_module_name_for(package_dir), module_path)
    if spec is None or spec.loader is None:
        raise PresetError(f"Impossible de préparer l'import de {module_path}")
    module = importlib.util.module_from_spec(spec)
    # Le module doit figurer dans sys.modules pendant son exécution (dataclasses, annotations différées)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(spec.name, None)
        logger.error(f"Import du preset '{package_dir.name}' échoué: {type(e).__name__} - {e}")
        raise PresetError(f"Import de {module_path} échoué: {e}") from e

    factory = getattr(module, factory_name, None)
    if factory is None:
        raise PresetError(f"'{factory_name}' absent de {module_path}")
    if not callable(factory):
        raise PresetError(f"'{factory_name}' de {module_path} n'est pas invocable")
    return factory


def _as_entry(raw_entry: Any) -> PluginEntry:
    if isinstance(raw_entry, (tuple, list)):
        if not raw_entry:
            raise PresetError("Entrée de plugin vide dans la liste du preset")
        plugin = raw_entry[0]
        options = raw_entry[1] if len(raw_entry) > 1 else None
        return plugin, options
    return raw_entry, None


def load_preset_plugins(package_dir: Path,
                        entry_module: str = global_config.PRESET_ENTRY_MODULE,
                        factory_name: str = global_config.PRESET_FACTORY_NAME) -> List[PluginEntry]:
    """Invoque la factory du preset (sans argument) et retourne ses entrées (plugin, options)."""
    factory = load_preset_factory(package_dir, entry_module=entry_module, factory_name=factory_name)
    try:
        instance = factory()
    except Exception as e:
        logger.error(f"Invocation de la factory du preset '{Path(package_dir).name}' échouée: {e}")
        raise PresetError(f"Factory du preset {package_dir} en échec: {e}") from e

    raw_plugins = getattr(instance, "plugins", instance)
    try:
        entries = [_as_entry(raw) for raw in raw_plugins]
    except TypeError as e:
        raise PresetError(f"La factory du preset {package_dir} ne retourne pas de liste de plugins: {e}") from e
    logger.debug(f"{len(entries)} plugin(s) déclaré(s) par '{Path(package_dir).name}'.")
    return entries


def plugin_name(plugin: Any, attribute: str = global_config.PLUGIN_NAME_ATTRIBUTE) -> str:
    """Instancie le plugin et lit son nom enregistré."""
    try:
        instance = plugin() if callable(plugin) else plugin
    except Exception as e:
        raise PresetError(f"Instanciation du plugin {plugin!r} échouée: {e}") from e

    if isinstance(instance, dict):
        name = instance.get(attribute)
    else:
        name = getattr(instance, attribute, None)
    if not isinstance(name, str) or not name:
        raise PresetError(f"Le plugin {plugin!r} n'expose pas de nom ('{attribute}').")
    return name


def sort_plugins(entries: List[PluginEntry],
                 attribute: str = global_config.PLUGIN_NAME_ATTRIBUTE) -> List[PluginEntry]:
    """Tri stable par nom de plugin (comparaison de chaînes brute, sensible à la casse)."""
    return sorted(entries, key=lambda entry: plugin_name(entry[0], attribute))


def _repository_url(repository: Any) -> Optional[str]:
    if isinstance(repository, dict):
        repository = repository.get("url")
    return repository if isinstance(repository, str) and repository else None


def find_plugin_metadata(packages_dir: Path, identifier: str,
                         manifest_filename: str = global_config.MANIFEST_FILENAME) -> Optional[PluginMetadata]:
    """
    Métadonnées du paquet frère `<packages_dir>/<identifier>`. None pour les
    plugins sans paquet dédié (processeurs du coeur) ou au manifeste invalide.
    """
    sibling_manifest = manifest_io.find_package_manifest(Path(packages_dir) / identifier / manifest_filename)
    if sibling_manifest is None:
        logger.debug(f"Pas de paquet frère pour le plugin '{identifier}'.")
        return None
    description = sibling_manifest.get("description")
    return PluginMetadata(
        description=description if isinstance(description, str) and description else None,
        repository=_repository_url(sibling_manifest.get("repository")),
    )


def describe_plugins(entries: List[PluginEntry], packages_dir: Path,
                     attribute: str = global_config.PLUGIN_NAME_ATTRIBUTE,
                     manifest_filename: str = global_config.MANIFEST_FILENAME) -> List[PluginDescriptor]:
    """Trie les entrées et construit un `PluginDescriptor` par plugin."""
    descriptors = []
    for plugin, options in sort_plugins(entries, attribute):
        identifier = plugin_name(plugin, attribute)
        descriptors.append(PluginDescriptor(
            identifier=identifier,
            options=options,
            metadata=find_plugin_metadata(packages_dir, identifier, manifest_filename),
        ))
    return descriptors
