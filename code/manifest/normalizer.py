"""
Normalisation des manifestes `package.json` du monorepo.

Chaque paquet reçoit les métadonnées canoniques du projet (nom, dépôt,
homepage, bug tracker, moteur node minimal) et ses plages de dépendances
caret sont élargies à la version majeure.
"""
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import global_config
from manifest import manifest_io

logger = logging.getLogger(__name__)

DEPENDENCY_FIELDS = ("dependencies", "devDependencies")


def widen_version_range(version: Any) -> Any:
    """`^X.Y.Z` (X ne commençant pas par 0) devient `^X.0.0`; le reste passe tel quel."""
    if not isinstance(version, str) or not version.startswith("^"):
        return version
    if version[1:2] == "0":
        return version
    return version.split(".")[0] + ".0.0"


def semver_major(dependencies: Dict[str, Any]) -> Dict[str, Any]:
    """Applique `widen_version_range` à chaque entrée, dans l'ordre d'origine."""
    widened = {}
    for dependency, version in dependencies.items():
        new_version = widen_version_range(version)
        if new_version != version:
            logger.debug(f"Plage élargie: {dependency} {version} -> {new_version}")
        widened[dependency] = new_version
    return widened


def repository_url(homepage: str, package_name: str) -> str:
    return f"{homepage}/tree/master/packages/{package_name}"


def normalize_manifest(manifest: Dict[str, Any],
                       package_name: str,
                       homepage: str = global_config.PROJECT_HOMEPAGE,
                       engine_node: str = global_config.NODE_ENGINE_RANGE) -> Dict[str, Any]:
    """
    Retourne une copie normalisée du manifeste. Fonction pure : même
    (package_name, manifeste) => même résultat.
    """
    normalized = copy.deepcopy(manifest)

    normalized["name"] = package_name
    normalized["repository"] = repository_url(homepage, package_name)
    normalized["homepage"] = homepage

    if not isinstance(normalized.get("bugs"), dict):
        normalized["bugs"] = {}
    normalized["bugs"]["url"] = f"{homepage}/issues"

    if not isinstance(normalized.get("engines"), dict):
        normalized["engines"] = {}
    normalized["engines"]["node"] = engine_node

    for field in DEPENDENCY_FIELDS:
        if normalized.get(field):
            normalized[field] = semver_major(normalized[field])

    return normalized


def update_package(package_dir: Path,
                   homepage: str = global_config.PROJECT_HOMEPAGE,
                   engine_node: str = global_config.NODE_ENGINE_RANGE,
                   manifest_filename: str = global_config.MANIFEST_FILENAME,
                   dry_run: bool = False,
                   package_name: Optional[str] = None) -> bool:
    """Normalise et réécrit le manifeste d'un paquet. Retourne True si le fichier a changé."""
    package_dir = Path(package_dir)
    package_name = package_name or package_dir.name
    manifest_path = package_dir / manifest_filename

    manifest = manifest_io.load_package_manifest(manifest_path)
    normalized = normalize_manifest(manifest, package_name, homepage=homepage, engine_node=engine_node)
    changed = manifest_io.save_package_manifest(normalized, manifest_path, dry_run=dry_run)
    logger.debug(f"Paquet '{package_name}' normalisé (modifié: {changed}).")
    return changed
