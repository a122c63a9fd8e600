import argparse
from pathlib import Path
import sys
import traceback # Pour logguer les erreurs de parsing imprévues

import global_config


def parse_arguments(argv=None) -> argparse.Namespace | None:
    """
    Parse et valide les arguments de la ligne de commande de l'outil de maintenance.
    Retourne None si le programme doit se terminer (--help, erreur de parsing).
    """
    parser = argparse.ArgumentParser(
        prog="update-packages",
        description="Normalise les manifestes package.json de chaque paquet du monorepo "
                    "et régénère le README des presets à partir de leurs plugins.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemples d'utilisation:
  Mise à jour complète (manifestes + README des presets):
    update-packages

  Répertoire des paquets explicite:
    update-packages --packages-dir /chemin/vers/monorepo/packages

  Voir ce qui changerait sans rien écrire:
    update-packages --dry-run --debug
"""
    )

    parser.add_argument(
        "--packages-dir",
        default=None,
        metavar="DIR_PATH",
        help="Répertoire contenant un sous-dossier par paquet. "
             f"Si non fourni, utilise PACKAGES_DIR de global_config.py (Défaut: {global_config.PACKAGES_DIR})."
    )
    parser.add_argument(
        "--skip-readmes",
        action="store_true",
        help="Normalise uniquement les manifestes, sans régénérer les README des presets."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="N'écrit aucun fichier ; indique seulement les fichiers qui seraient réécrits."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Active les logs de débogage détaillés."
    )
    parser.add_argument(
        "--log-file",
        default=None,
        metavar="FILE_PATH",
        help="Fichier de log additionnel (niveau DEBUG)."
    )

    try:
        args = parser.parse_args(argv)
        if args.packages_dir:
            args.packages_dir = Path(args.packages_dir).resolve()
            if not args.packages_dir.is_dir():
                parser.error(f"Le répertoire des paquets '{args.packages_dir}' n'existe pas.")
    except SystemExit: # Gérer --help ou les erreurs de parsing d'argparse (parser.error)
        return None
    except Exception as e:
        # Utiliser print ici car le logger global n'est pas encore configuré
        print(f"\nErreur imprévue lors du parsing des arguments: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return None

    return args
