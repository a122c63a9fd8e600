# code/readme/__init__.py
"""
Package de génération des README des presets.

Modules principaux :
- config_loader.py: Libellés et options de rendu (config.yaml).
- preset_loader.py: Chargement de la factory du preset et introspection des plugins.
- doc_tree.py: Construction de l'arbre de document.
- preset_docs.py: Sections par plugin, assemblage et écriture du README.
- transforms.py: Sections Install, Contributors, License et table des matières.
- renderer.py: Sérialisation Markdown via les macros Jinja2 de templates/.
"""
