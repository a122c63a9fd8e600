import json
from pathlib import Path
import logging
from typing import Any, Dict, Optional

from lib.utils import MaintenanceError, write_text_if_changed

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler()) # Evite msg si non configuré


class ManifestError(MaintenanceError):
    """Manifeste de paquet illisible, invalide ou impossible à écrire."""


def load_package_manifest(manifest_path: Path) -> Dict[str, Any]:
    manifest_path = Path(manifest_path)
    logger.debug(f"Lecture manifeste: {manifest_path}")
    if not manifest_path.is_file():
        logger.error(f"Fichier manifeste introuvable: {manifest_path}")
        raise ManifestError(f"Manifeste introuvable: {manifest_path}")
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f: data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Parsing JSON manifeste échoué {manifest_path}: {e}")
        raise ManifestError(f"JSON invalide dans {manifest_path}: {e}") from e
    except OSError as e:
        logger.error(f"Erreur lecture manifeste {manifest_path}: {e}")
        raise ManifestError(f"Lecture impossible de {manifest_path}: {e}") from e
    if not isinstance(data, dict):
        logger.error(f"Structure manifeste invalide (objet JSON attendu): {manifest_path}")
        raise ManifestError(f"Le manifeste {manifest_path} n'est pas un objet JSON.")
    return data


def find_package_manifest(manifest_path: Path) -> Optional[Dict[str, Any]]:
    """
    Variante optionnelle de `load_package_manifest` : None si le manifeste
    n'existe pas, n'est pas en UTF-8 ou n'est pas un objet JSON valide.
    Les autres erreurs remontent.
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.is_file():
        logger.debug(f"Pas de manifeste à {manifest_path}")
        return None
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f: data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Manifeste ignoré (JSON ou encodage invalide) {manifest_path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def dump_package_manifest(manifest_data: Dict[str, Any]) -> str:
    return json.dumps(manifest_data, indent=2, ensure_ascii=False) + "\n"


def save_package_manifest(manifest_data: Dict[str, Any], output_path: Path, dry_run: bool = False) -> bool:
    """Écrit le manifeste (indentation 2, newline final). Retourne True si le fichier a changé."""
    output_path = Path(output_path)
    try:
        content = dump_package_manifest(manifest_data)
    except TypeError as e:
        logger.critical(f"Données manifeste non sérialisables JSON: {e}")
        raise ManifestError(f"Manifeste non sérialisable pour {output_path}: {e}") from e
    try:
        return write_text_if_changed(output_path, content, dry_run=dry_run)
    except OSError as e:
        logger.critical(f"Erreur critique sauvegarde manifeste vers {output_path}: {e}")
        raise ManifestError(f"Écriture impossible de {output_path}: {e}") from e
