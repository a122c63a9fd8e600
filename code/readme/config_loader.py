import copy
from pathlib import Path
import logging
from typing import Dict, Any, Optional
import yaml

logger = logging.getLogger(__name__)

# Chemin vers le fichier de configuration, relatif à ce fichier
CONFIG_FILE_PATH = Path(__file__).resolve().parent / "config.yaml"

DEFAULT_README_CONFIG: Dict[str, Any] = {
    "sections": {
        "table_of_contents": "Table of Contents",
        "plugins": "Plugins",
        "install": "Install",
        "contributors": "Contributors",
        "license": "License",
    },
    "sentences": {
        "default_configuration": "This plugin is loaded with its default configuration.",
        "custom_configuration": "This plugin is loaded with the following configuration:",
    },
    "options_code_lang": "python",
    "install": {
        "registry_label": "npm",
        "registry_url": "https://npmjs.org/package/{name}",
        "intro": "With {link} do:",
        "command": "npm install {name} --save",
    },
    "contributors": {
        "file": "CONTRIBUTORS.md",
        "url": "{homepage}/blob/master/{file}",
        "sentence": "See {link}.",
    },
    "toc_max_depth": 6,
    # Lignes vides supplémentaires autour des titres, par niveau
    "heading_gap": {
        2: {"before": 2, "after": 1},
    },
}

_config_cache: Optional[Dict[str, Any]] = None


def _merge_config(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_readme_config(config_path: Path) -> Dict[str, Any]:
    """Charge un fichier YAML et le fusionne sur la configuration par défaut (sans cache)."""
    if not config_path.is_file():
        logger.warning(
            f"Fichier de configuration README introuvable à '{config_path}'. "
            f"Utilisation de la configuration par défaut."
        )
        return copy.deepcopy(DEFAULT_README_CONFIG)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_from_file = yaml.safe_load(f)
    except yaml.YAMLError as e_yaml:
        logger.error(
            f"Erreur lors du parsing YAML de la configuration README depuis '{config_path}': {e_yaml}. "
            f"Utilisation de la configuration par défaut."
        )
        return copy.deepcopy(DEFAULT_README_CONFIG)

    if config_from_file is None:
        return copy.deepcopy(DEFAULT_README_CONFIG)
    if not isinstance(config_from_file, dict):
        logger.error(
            f"Le contenu du fichier YAML '{config_path}' n'est pas un dictionnaire valide. "
            "Utilisation de la configuration par défaut."
        )
        return copy.deepcopy(DEFAULT_README_CONFIG)

    config = _merge_config(DEFAULT_README_CONFIG, config_from_file)
    logger.debug(f"Configuration README effective: {config}")
    return config


def get_readme_config() -> Dict[str, Any]:
    """Charge et retourne la configuration de rendu des README, avec mise en cache."""
    global _config_cache
    if _config_cache is not None:
        return _config_cache
    _config_cache = load_readme_config(CONFIG_FILE_PATH)
    logger.info(f"Configuration README chargée depuis '{CONFIG_FILE_PATH}'.")
    return _config_cache
