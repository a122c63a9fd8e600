# code/update_packages/__init__.py
"""
Outil de maintenance du monorepo : normalisation des manifestes et README des presets.

Modules principaux :
- main.py: Point d'entrée et orchestration des deux passes.
- cli.py: Interface en ligne de commande.
"""
