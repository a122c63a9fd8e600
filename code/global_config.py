# global_config.py
# Configuration Globale de l'outil de maintenance des paquets
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# --- Chemins Essentiels ---
PROJECT_ROOT_DIR = Path(__file__).resolve().parent
WORKING_DIR = Path.cwd()

# --- Chargement du fichier .env (Fallback) ---
# Le .env du dépôt maintenu (répertoire courant) est prioritaire sur celui de l'outil.
# override=False : les variables déjà présentes dans l'environnement système gagnent.
DOTENV_PATHS = [WORKING_DIR / ".env", PROJECT_ROOT_DIR.parent / ".env"]
dotenv_loaded_from = None
for _dotenv_path in DOTENV_PATHS:
    if _dotenv_path.is_file() and load_dotenv(dotenv_path=_dotenv_path, override=False):
        dotenv_loaded_from = _dotenv_path
        break
# ------------------------------------------------

# --- Arborescence des paquets ---
DEFAULT_PACKAGES_DIR = "packages"
PACKAGES_DIR_STR = os.getenv("PACKAGES_DIR", DEFAULT_PACKAGES_DIR)
PACKAGES_DIR = WORKING_DIR / PACKAGES_DIR_STR

MANIFEST_FILENAME = "package.json"
README_FILENAME = "README.md"

# --- Métadonnées canoniques du projet ---
PROJECT_HOMEPAGE = os.getenv("PROJECT_HOMEPAGE", "https://github.com/ben-eb/cssnano").rstrip("/")
NODE_ENGINE_RANGE = os.getenv("NODE_ENGINE_RANGE", ">=4")

# --- Presets ---
PRESET_PREFIX = os.getenv("PRESET_PREFIX", "cssnano-preset-")
PRESET_ENTRY_MODULE = os.getenv("PRESET_ENTRY_MODULE", "index.py")
PRESET_FACTORY_NAME = os.getenv("PRESET_FACTORY_NAME", "preset")
PLUGIN_NAME_ATTRIBUTE = os.getenv("PLUGIN_NAME_ATTRIBUTE", "postcss_plugin")


def print_config_summary():
    """Affiche la configuration effective (appelé par les points d'entrée, pas à l'import)."""
    print("\n--- Global Config Loaded ---")
    if dotenv_loaded_from:
        print(f"Fichier .env            : {dotenv_loaded_from}")
    else:
        print("Fichier .env            : non trouvé (variables d'environnement système uniquement)")
    print(f"Packages Dir            : {PACKAGES_DIR}")
    if not PACKAGES_DIR.is_dir():
        print("!! ATTENTION: Le répertoire des paquets N'EXISTE PAS.")
        if PACKAGES_DIR_STR == DEFAULT_PACKAGES_DIR:
            print(f"   Utilisation du défaut '{DEFAULT_PACKAGES_DIR}'. Lancez l'outil depuis la racine du monorepo ou configurez PACKAGES_DIR.")
        else:
            print(f"   Vérifiez le chemin '{PACKAGES_DIR_STR}' défini via env var ou .env.")
    print(f"Project Homepage        : {PROJECT_HOMEPAGE}")
    print(f"Node Engine Range       : {NODE_ENGINE_RANGE}")
    print(f"Preset Prefix           : {PRESET_PREFIX}")
    print(f"Preset Entry / Factory  : {PRESET_ENTRY_MODULE} / {PRESET_FACTORY_NAME}")
    print("----------------------------\n")


# Fonction utilitaire pour obtenir le répertoire des paquets validé
def get_validated_packages_dir():
    """Retourne le répertoire des paquets résolu s'il est valide, sinon None."""
    if not PACKAGES_DIR.is_dir():
        print(f"Erreur critique: Le répertoire des paquets configuré n'est pas un répertoire valide: {PACKAGES_DIR}", file=sys.stderr)
        return None
    return PACKAGES_DIR.resolve()
