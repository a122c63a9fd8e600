#!/usr/bin/env python3
"""
Point d'entrée principal de l'outil de maintenance des paquets.

Deux passes séquentielles sur les sous-dossiers du répertoire des paquets :
1. normalisation du manifeste package.json de chaque paquet ;
2. régénération du README de chaque preset (préfixe PRESET_PREFIX).
La première erreur fatale interrompt le run (code de sortie 1).
"""
import sys
from pathlib import Path
import argparse
import logging
from typing import List

import global_config
from lib import utils as shared_utils
from lib.utils import MaintenanceError
from manifest import normalizer
from readme import preset_docs
from update_packages import cli as update_cli

# --- Logger pour ce module ---
logger = logging.getLogger(__name__)
# -----------------------------


class PackagesDirError(MaintenanceError):
    """Répertoire des paquets absent ou illisible."""


def discover_packages(packages_dir: Path) -> List[Path]:
    """Sous-dossiers du répertoire des paquets, triés par nom."""
    packages_dir = Path(packages_dir)
    if not packages_dir.is_dir():
        logger.error(f"Répertoire des paquets introuvable: {packages_dir}")
        raise PackagesDirError(f"Répertoire des paquets introuvable: {packages_dir}")
    try:
        packages = sorted(p for p in packages_dir.glob("*") if p.is_dir())
    except OSError as e:
        raise PackagesDirError(f"Lecture de {packages_dir} impossible: {e}") from e
    logger.info(f"{len(packages)} paquet(s) trouvé(s) dans {packages_dir}")
    return packages


def is_preset(package_dir: Path, prefix: str = global_config.PRESET_PREFIX) -> bool:
    return Path(package_dir).name.startswith(prefix)


def run_update_workflow(args: argparse.Namespace) -> bool:
    """
    Workflow principal.
    1. Détermine et liste le répertoire des paquets.
    2. Normalise tous les manifestes.
    3. Régénère les README des presets (sauf --skip-readmes).
    Les erreurs fatales (MaintenanceError) remontent à l'appelant.
    """
    packages_dir = args.packages_dir or global_config.get_validated_packages_dir()
    if not packages_dir:
        raise PackagesDirError(f"Répertoire des paquets non valide: {global_config.PACKAGES_DIR}")
    packages = discover_packages(packages_dir)

    shared_utils.print_stage_header("Étape 1: Normalisation des manifestes")
    manifests_changed = 0
    for package_dir in packages:
        if normalizer.update_package(package_dir, dry_run=args.dry_run):
            manifests_changed += 1
    logger.info(f"Manifestes: {manifests_changed} modifié(s), {len(packages) - manifests_changed} inchangé(s).")

    if args.skip_readmes:
        logger.info("Régénération des README ignorée (--skip-readmes).")
        return True

    presets = [p for p in packages if is_preset(p)]
    shared_utils.print_stage_header("Étape 2: README des presets")
    if not presets:
        logger.warning(f"Aucun preset (préfixe '{global_config.PRESET_PREFIX}') dans {packages_dir}.")
    readmes_changed = 0
    for package_dir in presets:
        if preset_docs.update_preset(package_dir, packages_dir=packages_dir, dry_run=args.dry_run):
            readmes_changed += 1
    logger.info(f"README: {readmes_changed} modifié(s), {len(presets) - readmes_changed} inchangé(s).")
    return True


# --- Fonction Principale ---
def update_packages_main(argv=None):
    """Fonction principale de l'outil de maintenance des paquets."""
    args = update_cli.parse_arguments(argv)
    if not args:
        sys.exit(1) # Erreur déjà gérée par argparse

    # --- Configurer le logging TRES TOT ---
    shared_utils.setup_logging(debug_mode=args.debug, log_file=args.log_file)
    # ----------------------------------
    if args.debug:
        global_config.print_config_summary()

    logger.info(f"Lancement de l'outil de maintenance (Dry-run: {args.dry_run}, Debug: {args.debug})")

    try:
        workflow_successful = run_update_workflow(args)
    except MaintenanceError as e:
        logger.critical(f"Arrêt sur erreur fatale: {e}")
        workflow_successful = False
    except Exception as e:
        logger.critical(f"Erreur inattendue pendant la mise à jour des paquets: {e}", exc_info=True)
        workflow_successful = False

    # --- Analyse Finale et Code de Sortie ---
    if not workflow_successful:
        final_message = "Mise à jour des paquets A ÉCHOUÉ (voir logs pour détails)."
        logger.info(final_message)
        print(f"\nERREUR: {final_message}", file=sys.stderr)
        sys.exit(1)

    final_message = "Mise à jour des paquets terminée. SUCCÈS COMPLET."
    logger.info(final_message)
    print(f"\nINFO: {final_message}")
    sys.exit(0)

# --- Exécution ---
if __name__ == "__main__":
    update_packages_main()
