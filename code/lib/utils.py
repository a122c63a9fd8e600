# code/lib/utils.py

import logging
import sys
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class MaintenanceError(Exception):
    """Erreur fatale de l'outil de maintenance : le run complet doit s'arrêter."""


def setup_logging(debug_mode: bool = False,
                  log_file: Optional[Union[str, Path]] = None):
    """
    Configure le logger racine : console stderr (INFO, DEBUG avec --debug)
    et, si demandé, un fichier de log en DEBUG. Les handlers d'un appel
    précédent sont retirés, ceux qui écrivent dans un fichier sont fermés.
    """
    console_level = logging.DEBUG if debug_mode else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root_logger.setLevel(logging.DEBUG if log_file else console_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_status = 'Non activé'
    if log_file:
        log_path = Path(log_file).resolve()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        except OSError as e:
            logger.error(f"Impossible configurer logging fichier vers {log_file}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            file_status = f"DEBUG ({log_path})"

    logger.debug(f"Logging configuré. Console >= {logging.getLevelName(console_level)}, Fichier: {file_status}")


def print_stage_header(title: str):
    logger.info(f"--- {title} ---")


def write_text_if_changed(path: Path, content: str,
                          dry_run: bool = False) -> bool:
    """
    Écrit `content` (UTF-8) dans `path` de manière synchrone si le contenu diffère.

    La comparaison se fait sur les octets : un fichier existant dans un autre
    encodage est simplement considéré comme modifié et réécrit.

    Returns:
        True si le fichier a changé (ou aurait changé en dry-run), False sinon.

    Raises:
        OSError: lecture ou écriture impossible. L'appelant décide de la fatalité.
    """
    encoded = content.encode('utf-8')
    if path.is_file() and path.read_bytes() == encoded:
        logger.debug(f"Inchangé: {path}")
        return False
    if dry_run:
        logger.info(f"[dry-run] Serait réécrit: {path}")
        return True
    path.write_bytes(encoded)
    logger.info(f"Réécrit: {path}")
    return True
