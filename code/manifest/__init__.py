# code/manifest/__init__.py
"""
Package de lecture, normalisation et écriture des manifestes `package.json`.

Modules principaux :
- manifest_io.py: Lecture/écriture des manifestes (erreurs fatales, lookup optionnel).
- normalizer.py: Règles de normalisation (métadonnées canoniques, plages semver).
"""
